"""
Master key lifecycle: first-run bootstrap and per-invocation verification.

The key is stored as raw text in an owner-only file. It gates access to the
vault but does not encrypt it; see the package docstring for the threat model.
"""

import enum
import logging
import os
from dataclasses import dataclass
from typing import Callable

from cryptography.hazmat.primitives import constant_time

from . import config
from . import policy
from .errors import KeyFileError, KeyRejected
from .utils import ensure_config_root, set_owner_only, write_owner_only

logger = logging.getLogger(__name__)

InputSource = Callable[[str], str]


class GateState(enum.Enum):
    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZED = "INITIALIZED"


@dataclass
class Session:
    """Result of passing the key gate. Stores and resolvers require one."""
    root: str
    key_path: str
    vault_path: str
    unlocked: bool = False


class KeyGate:
    """Bootstraps or verifies the master key for one invocation."""

    def __init__(self, root: str):
        """
        Args:
            root: Configuration root holding the key and vault files
        """
        self.root = root
        self.key_path = os.path.join(root, config.KEY_FILE)
        self.vault_path = os.path.join(root, config.VAULT_FILE)

    @property
    def state(self) -> GateState:
        if os.path.exists(self.key_path):
            return GateState.INITIALIZED
        return GateState.UNINITIALIZED

    def ensure_unlocked(self, input_source: InputSource) -> Session:
        """
        Prompt for the master key and return an unlocked session.

        On the first run the entered key becomes the master key once it
        passes the password policy. Afterwards the entry must match the
        stored key exactly.

        Args:
            input_source: Called with a prompt, returns the entered key
        Returns:
            An unlocked Session
        Raises:
            PolicyViolation: A new key does not satisfy the policy
            InvalidField: A new key contains a line break
            KeyRejected: The entered key does not match
            KeyFileError: The stored key file is empty
        """
        state = self.state
        logger.debug(f"Key gate state: {state.value}")

        if state is GateState.UNINITIALIZED:
            candidate = input_source(config.PROMPT_NEW_KEY)
            policy.validate(candidate, config.POLICY_LABEL_KEY)
            policy.reject_line_breaks(candidate, config.POLICY_LABEL_KEY)
            ensure_config_root(self.root, self.vault_path)
            write_owner_only(self.key_path, candidate + "\n")
            logger.info(f"Master key created at {self.key_path}")
        else:
            stored = self._read_key()
            entered = input_source(config.PROMPT_KEY)
            if not constant_time.bytes_eq(entered.encode('utf-8'), stored):
                logger.debug("Master key mismatch")
                raise KeyRejected()
            ensure_config_root(self.root, self.vault_path)
            if not set_owner_only(self.key_path, config.FILE_MODE):
                logger.warning(f"Failed to re-apply secure permissions to {self.key_path}")
            logger.debug("Master key accepted")

        return Session(
            root=self.root,
            key_path=self.key_path,
            vault_path=self.vault_path,
            unlocked=True,
        )

    def _read_key(self) -> bytes:
        with open(self.key_path, 'rb') as f:
            stored = f.read()
        # Only the terminating newline belongs to the file format
        if stored.endswith(b"\n"):
            stored = stored[:-1]
        if not stored:
            raise KeyFileError(self.key_path, "master key file is empty")
        return stored
