import pytest

from secrets_vault.conf import LOG_LEVEL_ENV, MIN_PASSWORD_ENV, VAULT_PATH_ENV
from secrets_vault.vault.store import VaultStore


PASSWORD = "longpassword1"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Never let the developer's environment leak into a test."""
    for name in (VAULT_PATH_ENV, MIN_PASSWORD_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def vault_path(tmp_path):
    return tmp_path / ".secrets-vault.json"


@pytest.fixture
def store(vault_path):
    """A store pointing at a vault file that does not exist yet."""
    return VaultStore(vault_path)


@pytest.fixture
def created_store(store):
    """A store with an empty vault created under PASSWORD."""
    store.create(PASSWORD)
    return store


@pytest.fixture
def password():
    return PASSWORD
