"""
Command line front end: ``secrets <command>``.

Maps user commands to VaultStore operations, prompting for the master
password (and secret values) without echo. Every ``VaultError`` is reported
as ``Error: <message>`` on stderr with exit status 1.
"""
import sys
import getpass
import logging
import argparse
from typing import Callable, Optional

from .exceptions import VaultAlreadyExists, VaultError, VaultNotFound
from .vault.config import VaultConfig
from .vault.store import VaultStore

logger = logging.getLogger(__name__)

PromptFunc = Callable[[str], str]

USAGE = """\
secrets - A secure secrets manager

Usage:
  secrets init          Create a new vault
  secrets set <key>     Add or update a secret
  secrets get <key>     Retrieve a secret
  secrets list          List all secret keys
  secrets delete <key>  Remove a secret
  secrets help          Show this help message
"""


class CommandError(VaultError):
    """A user-facing failure raised by the command layer itself."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secrets",
        usage="secrets [-v] <command> [<key>]",
        description=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log debug information to stderr",
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>")
    commands.add_parser("init", help="Create a new vault")
    for name, text in (
        ("set", "Add or update a secret"),
        ("get", "Retrieve a secret"),
        ("delete", "Remove a secret"),
    ):
        sub = commands.add_parser(name, help=text)
        sub.add_argument("key")
    commands.add_parser("list", help="List all secret keys")
    commands.add_parser("help", help="Show this help message")
    return parser


def setup_logging(config: VaultConfig, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else config.log_level
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class Commands:
    """Command handlers bound to one vault store."""

    def __init__(
        self,
        store: VaultStore,
        prompt: PromptFunc = getpass.getpass,
        min_password_length: int = 8,
        out=None,
    ):
        self.store = store
        self.prompt = prompt
        self.min_password_length = min_password_length
        self.out = out or sys.stdout

    def _echo(self, message: str) -> None:
        print(message, file=self.out)

    def _ask(self, label: str) -> str:
        try:
            return self.prompt(label)
        except EOFError:
            raise CommandError(f"failed to read input for '{label.strip(': ')}'") from None

    def _require_vault(self) -> None:
        if not self.store.exists():
            raise VaultNotFound("vault does not exist\nRun 'secrets init' first")

    def _unlock(self):
        self._require_vault()
        password = self._ask("Enter master password: ")
        return self.store.unlock(password)

    def init(self) -> None:
        if self.store.exists():
            raise VaultAlreadyExists(
                "vault already exists\n"
                f"Delete {self.store.path} to create a new vault"
            )
        password = self._ask("Enter master password: ")
        if len(password) < self.min_password_length:
            raise CommandError(
                f"password must be at least {self.min_password_length} characters"
            )
        confirm = self._ask("Confirm master password: ")
        if password != confirm:
            raise CommandError("passwords do not match")
        self.store.create(password)
        self._echo("Vault created successfully")

    def set(self, key: str) -> None:
        vault = self._unlock()
        value = self._ask("Enter secret value: ")
        updating = vault.set(key, value)
        vault.save()
        if updating:
            self._echo(f"Secret '{key}' updated")
        else:
            self._echo(f"Secret '{key}' added")

    def get(self, key: str) -> None:
        vault = self._unlock()
        self._echo(vault.get(key))

    def list(self) -> None:
        vault = self._unlock()
        keys = vault.keys()
        if not keys:
            self._echo("No secrets stored")
            return
        for key in keys:
            self._echo(key)

    def delete(self, key: str) -> None:
        vault = self._unlock()
        vault.delete(key)
        vault.save()
        self._echo(f"Secret '{key}' deleted")


def main(
    argv: Optional[list] = None,
    prompt: PromptFunc = getpass.getpass,
    store: Optional[VaultStore] = None,
) -> int:
    """Run one ``secrets`` command and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "help":
        print(USAGE, end="")
        return 0
    if args.command is None:
        print(USAGE, end="", file=sys.stderr)
        return 1

    try:
        config = VaultConfig.from_env()
    except VaultError as err:
        print(f"Error: {err.message}", file=sys.stderr)
        return 1
    except ValueError as err:
        print(f"Error: invalid configuration: {err}", file=sys.stderr)
        return 1
    setup_logging(config, args.verbose)

    commands = Commands(
        store or VaultStore.from_config(config),
        prompt=prompt,
        min_password_length=config.min_password_length,
    )
    logger.debug("Running command %s", args.command)
    try:
        if args.command == "init":
            commands.init()
        elif args.command == "list":
            commands.list()
        else:
            getattr(commands, args.command)(args.key)
    except VaultError as err:
        print(f"Error: {err.message}", file=sys.stderr)
        return 1
    return 0


__all__ = ("main", "build_parser", "Commands")
