"""Secrets Vault.

Password-protected key/value store for secrets, kept in a single
Argon2id + AES-256-GCM encrypted file.
"""
from .version import __version__
from .data import SecretsData
from .exceptions import (
    VaultError,
    EnvironmentUnavailable,
    VaultIOError,
    EnvelopeCorrupt,
    AuthenticationFailed,
    VaultAlreadyExists,
    VaultNotFound,
    RandomnessUnavailable,
    SerializationError,
    SecretNotFound,
)
from .vault import VaultStore, UnlockedVault, VaultConfig

__all__ = (
    "__version__",
    "SecretsData",
    "VaultStore",
    "UnlockedVault",
    "VaultConfig",
    "VaultError",
    "EnvironmentUnavailable",
    "VaultIOError",
    "EnvelopeCorrupt",
    "AuthenticationFailed",
    "VaultAlreadyExists",
    "VaultNotFound",
    "RandomnessUnavailable",
    "SerializationError",
    "SecretNotFound",
)
