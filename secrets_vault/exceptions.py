"""
Vault Errors — typed failures raised by the cipher core and the vault store.

Every failure derives from ``VaultError`` so the command layer can turn any
of them into a single ``Error: <message>`` line and a non-zero exit status.
The core modules raise and never recover.
"""


class VaultError(Exception):
    """Base class for all vault failures."""

    default_message = "vault operation failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


class EnvironmentUnavailable(VaultError):
    """The home directory (vault location) could not be resolved."""

    default_message = "cannot determine the home directory"


class VaultIOError(VaultError):
    """A filesystem read or write on the vault failed."""

    default_message = "vault file I/O failed"


class EnvelopeCorrupt(VaultError):
    """The vault file is not a well-formed envelope."""

    default_message = "vault file is unreadable (corrupt envelope)"


class AuthenticationFailed(VaultError):
    """Decryption did not verify.

    Raised for a wrong password *and* for tampered or corrupted ciphertext;
    the two cases are indistinguishable.
    """

    default_message = "failed to decrypt vault (wrong password?)"


class VaultAlreadyExists(VaultError):
    default_message = "vault already exists"


class VaultNotFound(VaultError):
    default_message = "vault does not exist"


class RandomnessUnavailable(VaultError):
    default_message = "secure random number generator is unavailable"


class SerializationError(VaultError):
    default_message = "failed to serialize secrets"


class SecretNotFound(VaultError, KeyError):
    """A named secret is not present in the vault."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"secret '{key}' not found")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.message
