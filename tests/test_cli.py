"""
Tests for the ``secrets`` command line front end.

Prompts are replaced by a scripted answer list; the vault lives in tmp_path.
"""
import logging

import pytest

from secrets_vault import cli
from secrets_vault.cli import main
from secrets_vault.conf import LOG_LEVEL_ENV, MIN_PASSWORD_ENV, VAULT_PATH_ENV


PASSWORD = "longpassword1"


class Prompter:
    """Answers prompts in order and records what was asked."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked = []

    def __call__(self, label: str) -> str:
        self.asked.append(label)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture(autouse=True)
def vault_env(clean_env, monkeypatch, vault_path):
    monkeypatch.setenv(VAULT_PATH_ENV, str(vault_path))


@pytest.fixture
def run(capsys):
    def _run(argv, *answers):
        code = main(argv, prompt=Prompter(*answers))
        out, err = capsys.readouterr()
        return code, out, err
    return _run


@pytest.fixture
def initialized(run):
    code, _, _ = run(["init"], PASSWORD, PASSWORD)
    assert code == 0


class TestHelp:
    """Tests for usage output."""

    def test_help_command(self, run):
        code, out, _ = run(["help"])
        assert code == 0
        assert "secrets init" in out
        assert "secrets delete <key>" in out

    def test_no_command(self, run):
        code, _, err = run([])
        assert code == 1
        assert "Usage:" in err

    def test_unknown_command(self, run):
        with pytest.raises(SystemExit) as exc:
            run(["frobnicate"])
        assert exc.value.code != 0

    @pytest.mark.parametrize("command", ["set", "get", "delete"])
    def test_missing_key(self, run, command):
        with pytest.raises(SystemExit) as exc:
            run([command])
        assert exc.value.code != 0


class TestInit:
    """Tests for ``secrets init``."""

    def test_creates_vault(self, run, vault_path):
        code, out, _ = run(["init"], PASSWORD, PASSWORD)
        assert code == 0
        assert "Vault created successfully" in out
        assert vault_path.exists()

    def test_already_exists(self, run, initialized, vault_path):
        before = vault_path.read_bytes()
        code, _, err = run(["init"], PASSWORD, PASSWORD)
        assert code == 1
        assert "vault already exists" in err
        assert str(vault_path) in err
        assert vault_path.read_bytes() == before

    def test_short_password(self, run, vault_path):
        code, _, err = run(["init"], "short", "short")
        assert code == 1
        assert "at least 8 characters" in err
        assert not vault_path.exists()

    def test_min_password_from_env(self, run, monkeypatch, vault_path):
        monkeypatch.setenv(MIN_PASSWORD_ENV, "20")
        code, _, err = run(["init"], PASSWORD, PASSWORD)
        assert code == 1
        assert "at least 20 characters" in err

    def test_mismatch(self, run, vault_path):
        code, _, err = run(["init"], PASSWORD, PASSWORD + "x")
        assert code == 1
        assert "passwords do not match" in err
        assert not vault_path.exists()

    def test_prompt_closed(self, run, vault_path):
        code, _, err = run(["init"])
        assert code == 1
        assert err.startswith("Error:")
        assert not vault_path.exists()


class TestSecretsCommands:
    """Tests for set/get/list/delete."""

    def test_requires_vault(self, run):
        for argv in (["list"], ["get", "k"], ["set", "k"], ["delete", "k"]):
            code, _, err = run(argv, PASSWORD, "value")
            assert code == 1
            assert "Run 'secrets init' first" in err

    def test_set_and_get(self, run, initialized):
        code, out, _ = run(["set", "api_key"], PASSWORD, "xyz123")
        assert code == 0
        assert "Secret 'api_key' added" in out
        code, out, _ = run(["get", "api_key"], PASSWORD)
        assert code == 0
        assert out == "xyz123\n"

    def test_set_update(self, run, initialized):
        run(["set", "api_key"], PASSWORD, "one")
        code, out, _ = run(["set", "api_key"], PASSWORD, "two")
        assert code == 0
        assert "Secret 'api_key' updated" in out
        _, out, _ = run(["get", "api_key"], PASSWORD)
        assert out == "two\n"

    def test_get_missing(self, run, initialized):
        code, _, err = run(["get", "nope"], PASSWORD)
        assert code == 1
        assert "secret 'nope' not found" in err

    def test_list_empty(self, run, initialized):
        code, out, _ = run(["list"], PASSWORD)
        assert code == 0
        assert out == "No secrets stored\n"

    def test_list_sorted(self, run, initialized):
        for key in ("b", "a", "c"):
            run(["set", key], PASSWORD, key)
        code, out, _ = run(["list"], PASSWORD)
        assert code == 0
        assert out.splitlines() == ["a", "b", "c"]

    def test_delete(self, run, initialized):
        run(["set", "api_key"], PASSWORD, "xyz123")
        code, out, _ = run(["delete", "api_key"], PASSWORD)
        assert code == 0
        assert "Secret 'api_key' deleted" in out
        _, out, _ = run(["list"], PASSWORD)
        assert out == "No secrets stored\n"

    def test_delete_missing_leaves_file(self, run, initialized, vault_path):
        before = vault_path.read_bytes()
        code, _, err = run(["delete", "nope"], PASSWORD)
        assert code == 1
        assert "secret 'nope' not found" in err
        assert vault_path.read_bytes() == before

    def test_wrong_password(self, run, initialized, vault_path):
        before = vault_path.read_bytes()
        code, _, err = run(["set", "k"], "wrong-pw", "v")
        assert code == 1
        assert "wrong password?" in err
        assert vault_path.read_bytes() == before

    def test_password_never_printed(self, run, initialized):
        _, out, err = run(["set", "k"], PASSWORD, "hidden-value")
        assert PASSWORD not in out + err
        assert "hidden-value" not in out + err


class TestConfiguration:
    """Tests for environment configuration and logging flags."""

    def test_invalid_min_password(self, run, monkeypatch, vault_path):
        monkeypatch.setenv(MIN_PASSWORD_ENV, "abc")
        code, _, err = run(["init"], PASSWORD, PASSWORD)
        assert code == 1
        assert err.startswith("Error: invalid configuration")
        assert not vault_path.exists()

    def test_invalid_log_level(self, run, monkeypatch, vault_path):
        monkeypatch.setenv(LOG_LEVEL_ENV, "LOUD")
        code, _, err = run(["list"], PASSWORD)
        assert code == 1
        assert "Error: invalid configuration" in err

    @pytest.mark.parametrize("flag,level", [
        (None, "WARNING"),
        ("-v", logging.DEBUG),
        ("--verbose", logging.DEBUG),
    ])
    def test_verbose_flag(self, run, monkeypatch, initialized, flag, level):
        calls = []
        monkeypatch.setattr(
            cli.logging, "basicConfig", lambda **kwargs: calls.append(kwargs),
        )
        argv = ([flag] if flag else []) + ["list"]
        code, out, _ = run(argv, PASSWORD)
        assert code == 0
        assert out == "No secrets stored\n"
        assert calls[0]["level"] == level
