"""
Vault Configuration — Vault location and validated settings.

Reads settings from environment variables:
    SECRETS_VAULT_PATH = <path to the vault file>   (default: ~/.secrets-vault.json)
    SECRETS_VAULT_MIN_PASSWORD = <integer>          (default: 8)
    SECRETS_VAULT_LOG_LEVEL = <logging level name>  (default: WARNING)

Security Note:
    Never log key material or passwords. Only log paths and versions.
"""
import os
import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from ..conf import (
    VAULT_FILENAME,
    VAULT_PATH_ENV,
    MIN_PASSWORD_ENV,
    LOG_LEVEL_ENV,
    DEFAULT_MIN_PASSWORD_LENGTH,
    DEFAULT_LOG_LEVEL,
    LOGGER_NAME,
)
from ..exceptions import EnvironmentUnavailable

logger = logging.getLogger(LOGGER_NAME)


def locate_vault() -> Path:
    """Resolve the vault file path.

    ``SECRETS_VAULT_PATH`` wins when set; otherwise the fixed filename in the
    user's home directory is used.

    Returns:
        Absolute path of the vault file (which may not exist yet).

    Raises:
        EnvironmentUnavailable: If the home directory cannot be determined.
    """
    override = os.environ.get(VAULT_PATH_ENV)
    if override:
        return Path(override).expanduser().absolute()
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as err:
        raise EnvironmentUnavailable(
            f"failed to get home directory: {err}"
        ) from err
    return home / VAULT_FILENAME


def get_min_password_length() -> int:
    """Read the minimum master password length from the environment.

    Raises:
        ValueError: If the value is not a valid integer.
    """
    raw = os.environ.get(MIN_PASSWORD_ENV)
    if raw is None:
        return DEFAULT_MIN_PASSWORD_LENGTH
    return int(raw)


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    vault_path: Path
    min_password_length: int = Field(default=DEFAULT_MIN_PASSWORD_LENGTH, ge=1)
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is a known logging level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Returns:
            Populated VaultConfig instance.
        """
        vault_path = locate_vault()
        logger.debug("Vault location resolved to %s", vault_path)
        return cls(
            vault_path=vault_path,
            min_password_length=get_min_password_length(),
            log_level=os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
        )
