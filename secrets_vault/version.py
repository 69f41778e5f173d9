"""Secrets Vault Meta information.
   Secrets Vault keeps a password-protected set of named secrets
   in a single encrypted file.
"""
__title__ = 'secrets_vault'
__description__ = (
   'Secrets Vault keeps a password-protected set of named secrets '
   'in a single encrypted file.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2026 Secrets Vault Authors'
__author__ = 'Secrets Vault Authors'
__author_email__ = 'maintainers@secrets-vault.dev'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/secrets-vault/secrets-vault'
