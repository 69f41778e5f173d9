"""
VaultStore — Load, create and save the encrypted vault file.

Provides the public API for the vault file:
- ``exists()`` — is there a vault at the configured path
- ``create(password)`` — new vault with a fresh salt and no secrets
- ``load(password)`` — decrypt and return ``(SecretsData, salt)``
- ``save(data, password, salt)`` — re-encrypt under a fresh nonce and
  atomically replace the file
- ``unlock(password)`` — factory for an ``UnlockedVault`` session

Security Note:
    Never log passwords, keys or secret values. Only log paths, versions
    and counts. A failed save leaves the previous file untouched; a load
    never writes.
"""
import os
import logging
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..conf import LOGGER_NAME, VAULT_FILE_MODE
from ..data import SecretsData
from ..exceptions import (
    VaultAlreadyExists,
    VaultIOError,
    VaultNotFound,
)
from .config import VaultConfig, locate_vault
from .crypto import (
    CURRENT_VERSION,
    SALT_SIZE,
    decrypt,
    derive_key,
    encrypt,
    generate_salt,
    params_for_version,
)
from .envelope import Envelope

logger = logging.getLogger(LOGGER_NAME)


class VaultStore:
    """Encrypted vault bound to one file path.

    The key is re-derived from the password on every load and save;
    nothing derived from the password is kept on the store.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        config: Optional[VaultConfig] = None,
    ):
        if path is not None:
            self._path = Path(path)
        elif config is not None:
            self._path = Path(config.vault_path)
        else:
            self._path = locate_vault()

    @classmethod
    def from_config(cls, config: VaultConfig) -> "VaultStore":
        return cls(config=config)

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"<VaultStore path={str(self._path)!r}>"

    # ------------------------------------------------------------------
    # Filesystem helpers
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        """Check whether a vault file is present.

        Raises:
            VaultIOError: On filesystem errors other than "not found".
        """
        try:
            self._path.stat()
        except FileNotFoundError:
            return False
        except OSError as err:
            raise VaultIOError(
                f"failed to check vault file {self._path}: {err}"
            ) from err
        return True

    def _read(self) -> bytes:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            raise VaultNotFound() from None
        except OSError as err:
            raise VaultIOError(
                f"failed to read vault file {self._path}: {err}"
            ) from err

    def _write_atomic(self, payload: bytes, exclusive: bool = False) -> None:
        """Write ``payload`` to the vault path all-or-nothing.

        A symlinked vault path is followed, so the link survives and its
        target receives the update. The bytes go to a temporary file next to
        that target (mode 0600), are fsynced, then moved into place. With
        ``exclusive`` the final step is a hard link, which fails instead of
        replacing an existing file.
        """
        try:
            target = self._path.resolve()
            directory = target.parent
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=directory,
            )
        except (OSError, RuntimeError) as err:
            # RuntimeError: symlink loop on older interpreters
            raise VaultIOError(
                f"failed to write vault file {self._path}: {err}"
            ) from err
        tmp_path = Path(tmp_name)
        try:
            try:
                with os.fdopen(fd, "wb") as fh:
                    os.fchmod(fh.fileno(), VAULT_FILE_MODE)
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                if exclusive:
                    os.link(tmp_path, target)
                else:
                    os.replace(tmp_path, target)
            except FileExistsError:
                raise VaultAlreadyExists() from None
            except OSError as err:
                raise VaultIOError(
                    f"failed to write vault file {self._path}: {err}"
                ) from err
        finally:
            # after a replace the temp name no longer exists
            tmp_path.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def _seal(self, data: SecretsData, password: str, salt: bytes) -> bytes:
        plaintext = data.encode()
        key = derive_key(password, salt, params_for_version(CURRENT_VERSION))
        nonce, ciphertext = encrypt(plaintext, key)
        del key, plaintext
        envelope = Envelope(
            version=CURRENT_VERSION,
            salt=salt,
            nonce=nonce,
            ciphertext=ciphertext,
        )
        return envelope.encode()

    def create(self, password: str) -> bytes:
        """Create a new empty vault.

        Args:
            password: Master password for the new vault.

        Returns:
            The freshly generated salt.

        Raises:
            VaultAlreadyExists: If a vault file is already present.
        """
        if self.exists():
            raise VaultAlreadyExists()
        salt = generate_salt()
        payload = self._seal(SecretsData(), password, salt)
        self._write_atomic(payload, exclusive=True)
        logger.info("Vault created at %s", self._path)
        return salt

    def load(self, password: str) -> tuple[SecretsData, bytes]:
        """Read, verify and decrypt the vault.

        Args:
            password: Master password.

        Returns:
            Tuple of (secrets, salt). The salt is needed to save again.

        Raises:
            VaultNotFound: If no vault file exists.
            EnvelopeCorrupt: If the file is not a valid envelope.
            AuthenticationFailed: Wrong password or corrupted ciphertext.
        """
        envelope = Envelope.decode(self._read())
        key = derive_key(
            password, envelope.salt, params_for_version(envelope.version),
        )
        plaintext = decrypt(envelope.ciphertext, envelope.nonce, key)
        del key
        data = SecretsData.decode(plaintext)
        logger.debug(
            "Vault loaded from %s: %d secret(s)", self._path, len(data),
        )
        return data, envelope.salt

    def save(self, data: SecretsData, password: str, salt: bytes) -> None:
        """Encrypt ``data`` under a fresh nonce and replace the vault file.

        Args:
            data: Secrets to persist.
            password: Master password.
            salt: Salt of this vault (from ``create`` or ``load``).

        Raises:
            ValueError: If ``salt`` is not a vault salt.
            SerializationError: If ``data`` holds non-string values.
            VaultIOError: If the file cannot be written.
        """
        if len(salt) != SALT_SIZE:
            raise ValueError(
                f"salt must be {SALT_SIZE} bytes, got {len(salt)}"
            )
        payload = self._seal(data, password, salt)
        self._write_atomic(payload)
        data.is_changed = False
        logger.debug("Vault saved to %s: %d secret(s)", self._path, len(data))

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    def unlock(self, password: str) -> "UnlockedVault":
        """Load the vault and return an unlocked session over it."""
        data, salt = self.load(password)
        return UnlockedVault(self, data, salt, password)


class UnlockedVault:
    """Decrypted secrets plus what is needed to save them again.

    Lives for a single operation; drop it as soon as the operation is done.
    """

    def __init__(
        self,
        store: VaultStore,
        data: SecretsData,
        salt: bytes,
        password: str,
    ):
        self._store = store
        self._data = data
        self._salt = salt
        self._password = password

    def __repr__(self) -> str:
        return f"<UnlockedVault path={str(self._store.path)!r} secrets={len(self._data)}>"

    @property
    def data(self) -> SecretsData:
        return self._data

    @property
    def salt(self) -> bytes:
        return self._salt

    def get(self, key: str) -> str:
        """Return a secret value.

        Raises:
            SecretNotFound: If the key is not present.
        """
        return self._data[key]

    def set(self, key: str, value: str) -> bool:
        """Add or update a secret.

        Returns:
            True if an existing secret was updated, False if it was added.
        """
        updating = key in self._data
        self._data[key] = value
        return updating

    def delete(self, key: str) -> None:
        """Remove a secret.

        Raises:
            SecretNotFound: If the key is not present.
        """
        del self._data[key]

    def keys(self) -> list[str]:
        return self._data.keys_sorted()

    def save(self) -> None:
        """Persist pending changes. No-op when nothing changed."""
        if not self._data.is_changed:
            return
        self._store.save(self._data, self._password, self._salt)
