"""
Main entry point for the passvault command-line tool.

    passvault                      list every entry
    passvault -r RESOURCE          print the password stored for RESOURCE
    passvault -p PASSWORD          print the resource that owns PASSWORD
    passvault -r RESOURCE -p PASSWORD
                                   store PASSWORD for RESOURCE
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from . import config
from .errors import VaultError
from .keygate import KeyGate
from .resolver import ConflictResolver
from .storage import UpsertResult, VaultStore

logger = logging.getLogger(__name__)


def _prompt_secret(prompt: str) -> str:
    try:
        return getpass.getpass(prompt)
    except EOFError:
        return ""


def _prompt_answer(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=config.APP_NAME, description=config.APP_DESCRIPTION)
    parser.add_argument("-r", "--resource", help="resource name to look up or store")
    parser.add_argument("-p", "--password", help="password to look up or store")
    parser.add_argument("-v", "--verbose", action="store_true", help="trace each step to stdout")
    parser.add_argument("--home", help=f"configuration root (default: ${config.CONFIG_ROOT_ENV} or ~/{config.CONFIG_DIR_NAME})")
    parser.add_argument("--version", action="version", version=f"{config.APP_NAME} {config.APP_VERSION}")
    return parser


class VaultApp:
    """One invocation: unlock, then list, look up or store."""

    def __init__(self, args: argparse.Namespace, key_source=None, confirm=None):
        self.args = args
        self.root = config.get_config_root(args.home)
        self.key_source = key_source or _prompt_secret
        self.confirm = confirm or _prompt_answer

    def run(self) -> int:
        logger.debug(f"Using configuration root {self.root}")
        session = KeyGate(self.root).ensure_unlocked(self.key_source)
        store = VaultStore(session)

        resource, password = self.args.resource, self.args.password
        if resource is not None and password is not None:
            resolver = ConflictResolver(session, store, confirm=self.confirm)
            result = store.upsert(resource, password, resolver)
            if result is UpsertResult.CANCELLED:
                print("Cancelled, vault left unchanged.")
            return config.EXIT_OK

        if resource is not None:
            return self._print_or_not_found(store.lookup_by_resource(resource))

        if password is not None:
            return self._print_or_not_found(store.lookup_by_secret(password))

        entries = store.list_all()
        if not entries:
            logger.info("Vault is empty")
        for entry in entries:
            print(entry.to_line())
        return config.EXIT_OK

    @staticmethod
    def _print_or_not_found(value: Optional[str]) -> int:
        if value is None:
            logger.debug("No matching entry")
            print("No matching entry.", file=sys.stderr)
            return config.EXIT_NOT_FOUND
        print(value)
        return config.EXIT_OK


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=config.LOG_FORMAT, stream=sys.stdout, force=True)
    else:
        logging.basicConfig(level=logging.WARNING, format=config.LOG_FORMAT, stream=sys.stderr, force=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    app = VaultApp(args)
    try:
        return app.run()
    except (VaultError, OSError) as e:
        logger.error(str(e))
        return config.EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
