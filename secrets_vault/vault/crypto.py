"""
Vault Crypto Core — Password key derivation and authenticated encryption.

- Key derivation: Argon2id(password, salt) → 32-byte key, cost pinned per
  envelope version.
- Encryption: AES-256-GCM, fresh random 96-bit nonce per call, 128-bit tag
  appended to the ciphertext, no associated data.

Security Note:
    Never log passwords, keys, plaintext or ciphertext values.
    This module never touches the filesystem.
"""
import os
import logging
from typing import NamedTuple

from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..conf import LOGGER_NAME
from ..exceptions import AuthenticationFailed, RandomnessUnavailable

logger = logging.getLogger(LOGGER_NAME)

SALT_SIZE = 16   # 128-bit salt
NONCE_SIZE = 12  # 96-bit nonce
KEY_LENGTH = 32  # AES-256
TAG_SIZE = 16    # GCM tag

CURRENT_VERSION = 1


class KdfParams(NamedTuple):
    """Argon2id cost parameters."""
    time_cost: int
    memory_cost: int  # KiB
    parallelism: int
    key_length: int = KEY_LENGTH


# One parameter set per envelope version; never change an existing entry.
KDF_PARAMS: dict[int, KdfParams] = {
    1: KdfParams(time_cost=1, memory_cost=64 * 1024, parallelism=4),
}


# ---------------------------------------------------------------------------
# Randomness
# ---------------------------------------------------------------------------

def random_bytes(size: int) -> bytes:
    """Return ``size`` bytes from the operating system CSPRNG.

    Raises:
        RandomnessUnavailable: If the OS cannot supply entropy.
    """
    try:
        return os.urandom(size)
    except (NotImplementedError, OSError) as err:
        raise RandomnessUnavailable(
            f"failed to read {size} random bytes: {err}"
        ) from err


def generate_salt() -> bytes:
    """Generate a random 16-byte key derivation salt."""
    return random_bytes(SALT_SIZE)


def generate_nonce() -> bytes:
    """Generate a random 12-byte AES-GCM nonce."""
    return random_bytes(NONCE_SIZE)


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(
    password: str,
    salt: bytes,
    params: KdfParams = KDF_PARAMS[CURRENT_VERSION],
) -> bytes:
    """Derive a 32-byte encryption key from a password using Argon2id.

    Deterministic: the same password, salt and parameters always yield
    the same key. Blocks for the full (intentionally slow) derivation.

    Args:
        password: Master password.
        salt: Random salt stored alongside the ciphertext.
        params: Argon2id cost parameters.

    Returns:
        Derived key bytes (``params.key_length`` long).
    """
    return hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=params.time_cost,
        memory_cost=params.memory_cost,
        parallelism=params.parallelism,
        hash_len=params.key_length,
        type=Type.ID,
    )


def params_for_version(version: int) -> KdfParams:
    """Return the KDF parameter set pinned to an envelope version.

    Raises:
        KeyError: If the version is unknown.
    """
    return KDF_PARAMS[version]


# ---------------------------------------------------------------------------
# Authenticated encryption
# ---------------------------------------------------------------------------

def encrypt(plaintext: bytes, key: bytes) -> tuple[bytes, bytes]:
    """Encrypt plaintext with AES-256-GCM under a fresh random nonce.

    Args:
        plaintext: Data to encrypt.
        key: 32-byte key from ``derive_key``.

    Returns:
        ``(nonce, ciphertext)`` where ciphertext carries the 16-byte tag.
    """
    nonce = generate_nonce()
    ct = AESGCM(key).encrypt(nonce, plaintext, None)
    return nonce, ct


def decrypt(ciphertext: bytes, nonce: bytes, key: bytes) -> bytes:
    """Decrypt and verify AES-256-GCM ciphertext.

    Args:
        ciphertext: Encrypted payload with the tag appended.
        nonce: Nonce used at encryption time.
        key: 32-byte key from ``derive_key``.

    Returns:
        Decrypted plaintext bytes.

    Raises:
        AuthenticationFailed: On any verification failure. A wrong key and
            tampered data produce the same error.
    """
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except (InvalidTag, ValueError):
        logger.debug("AEAD verification failed")
        # Cause suppressed: no detail about why verification failed.
        raise AuthenticationFailed() from None
