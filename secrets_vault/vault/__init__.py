"""Vault — password-protected secrets persisted as one encrypted file.

Security Note (Threat Model):
    Secrets, the master password and the derived key live in process memory
    for the duration of one operation. A memory dump of the process during
    that window could expose them. Concurrent processes writing the same
    vault file are not arbitrated: the last atomic rename wins.
"""

from .store import VaultStore, UnlockedVault
from .envelope import Envelope
from .config import VaultConfig, locate_vault
from .crypto import derive_key, encrypt, decrypt, generate_salt, generate_nonce

__all__ = [
    "VaultStore",
    "UnlockedVault",
    "Envelope",
    "VaultConfig",
    "locate_vault",
    "derive_key",
    "encrypt",
    "decrypt",
    "generate_salt",
    "generate_nonce",
]
