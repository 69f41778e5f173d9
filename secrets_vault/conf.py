"""Secrets Vault constants and environment variable names."""

VAULT_FILENAME = ".secrets-vault.json"

# Environment overrides
VAULT_PATH_ENV = "SECRETS_VAULT_PATH"
MIN_PASSWORD_ENV = "SECRETS_VAULT_MIN_PASSWORD"
LOG_LEVEL_ENV = "SECRETS_VAULT_LOG_LEVEL"

DEFAULT_MIN_PASSWORD_LENGTH = 8
DEFAULT_LOG_LEVEL = "WARNING"

# Owner read/write only
VAULT_FILE_MODE = 0o600

LOGGER_NAME = "secrets_vault.vault"
