"""
Interactive confirmation for writes that target an existing resource.
"""

import enum
import logging
from typing import Callable

from . import config
from .errors import VaultLocked
from .storage import VaultEntry, VaultStore

logger = logging.getLogger(__name__)


class Resolution(enum.Enum):
    OVERWRITTEN = "overwritten"
    CANCELLED = "cancelled"


class ConflictResolver:
    """Asks the user before replacing the secret of an existing entry."""

    def __init__(self, session, store: VaultStore, confirm: Callable[[str], str] = input,
                 output: Callable[[str], None] = print):
        if not session.unlocked:
            raise VaultLocked()
        self.session = session
        self.store = store
        self.confirm = confirm
        self.output = output

    def resolve(self, existing: VaultEntry, new_secret: str) -> Resolution:
        """
        Present the existing entry and replace its secret only on an
        explicit yes. Any other answer, including an empty one, cancels.
        """
        masked = VaultEntry(existing.resource, config.PASSWORD_HIDDEN_TEXT).to_line()
        self.output(f"An entry for '{existing.resource}' already exists: {masked}")
        answer = self.confirm(config.PROMPT_OVERWRITE)

        if answer.strip().lower() not in config.AFFIRMATIVE_ANSWERS:
            logger.debug(f"Overwrite of '{existing.resource}' cancelled")
            return Resolution.CANCELLED

        self.store.replace_secret(existing.resource, new_secret)
        return Resolution.OVERWRITTEN
