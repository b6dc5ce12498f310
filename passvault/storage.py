"""
Storage of resource/secret entries in the line-oriented vault file.

The ordered list of entries is the source of truth; two dictionaries index
it by resource and by secret so both lookups are exact-field matches.
No cross-process locking is performed: concurrent invocations race on the
file and the last writer wins.
"""

import enum
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from . import config
from . import policy
from .errors import (
    ResourceConflict,
    SecretCollision,
    UnknownResource,
    VaultFormatError,
    VaultLocked,
)
from .utils import write_owner_only

logger = logging.getLogger(__name__)


@dataclass
class VaultEntry:
    """Represents a single resource/secret pair."""
    resource: str
    secret: str

    def to_line(self) -> str:
        """Serialize to one vault line (without the newline)."""
        return f"{self.resource}{config.FIELD_DELIMITER}{self.secret}"

    @classmethod
    def from_line(cls, line: str) -> Optional['VaultEntry']:
        """Parse a vault line. Returns None if it carries no delimiter."""
        resource, sep, secret = line.partition(config.FIELD_DELIMITER)
        if not sep:
            return None
        return cls(resource=resource, secret=secret)


class UpsertResult(enum.Enum):
    WRITTEN = "written"
    OVERWRITTEN = "overwritten"
    CANCELLED = "cancelled"


class VaultStore:
    """Manages persistence and lookup of vault entries."""

    def __init__(self, session):
        """
        Initialize the store and load the vault file.
        Args:
            session: Session returned by KeyGate.ensure_unlocked
        Raises:
            VaultLocked: If the session has not passed the key gate
            VaultFormatError: If a line of the vault cannot be parsed
        """
        if not session.unlocked:
            raise VaultLocked()
        self.session = session
        self.filepath = session.vault_path
        self._entries: List[VaultEntry] = []
        self._by_resource: Dict[str, int] = {}
        self._by_secret: Dict[str, int] = {}
        self._load()

    def _load(self) -> None:
        entries = []
        if os.path.exists(self.filepath):
            with open(self.filepath, 'rb') as f:
                for line_no, raw in enumerate(f, start=1):
                    try:
                        line = raw.decode('utf-8').rstrip("\r\n")
                    except UnicodeDecodeError:
                        raise VaultFormatError(self.filepath, line_no, "invalid UTF-8") from None
                    if not line.strip():
                        continue
                    entry = VaultEntry.from_line(line)
                    if entry is None:
                        raise VaultFormatError(self.filepath, line_no, "missing delimiter")
                    entries.append(entry)
        self._entries = entries
        self._reindex()
        logger.debug(f"Loaded {len(self._entries)} entries from {self.filepath}")

    def _reindex(self) -> None:
        # First occurrence wins if a damaged file repeats a field
        self._by_resource = {}
        self._by_secret = {}
        for i, entry in enumerate(self._entries):
            self._by_resource.setdefault(entry.resource, i)
            self._by_secret.setdefault(entry.secret, i)

    def _save(self) -> None:
        """Write all entries to the vault file."""
        content = "".join(entry.to_line() + "\n" for entry in self._entries)
        write_owner_only(self.filepath, content)
        logger.debug(f"Wrote {len(self._entries)} entries to {self.filepath}")

    def lookup_by_resource(self, resource: str) -> Optional[str]:
        """Return the secret stored for `resource`, or None."""
        logger.debug(f"Looking up resource '{resource}'")
        index = self._by_resource.get(resource)
        if index is None:
            return None
        return self._entries[index].secret

    def lookup_by_secret(self, secret: str) -> Optional[str]:
        """Return the resource that owns `secret`, or None."""
        logger.debug("Looking up resource by password")
        index = self._by_secret.get(secret)
        if index is None:
            return None
        return self._entries[index].resource

    def get_entry(self, resource: str) -> Optional[VaultEntry]:
        index = self._by_resource.get(resource)
        if index is None:
            return None
        return self._entries[index]

    def list_all(self) -> List[VaultEntry]:
        """Get all entries in file order."""
        return list(self._entries)

    def upsert(self, resource: str, secret: str, resolver=None) -> UpsertResult:
        """
        Store a secret for a resource.

        Nothing is written unless every check passes. An existing resource
        is only replaced through the resolver, which asks for confirmation.

        Args:
            resource: Resource name
            secret: Secret to store, must satisfy the password policy
            resolver: ConflictResolver consulted when the resource exists
        Returns:
            WRITTEN for a new entry, OVERWRITTEN or CANCELLED after a conflict
        Raises:
            InvalidField: A value cannot be represented in the vault file
            PolicyViolation: The secret does not satisfy the policy
            SecretCollision: Another resource already uses the secret
            ResourceConflict: The resource exists and no resolver was given
        """
        policy.validate_field(resource, config.POLICY_LABEL_RESOURCE)
        policy.validate_field(secret, config.POLICY_LABEL_PASSWORD)
        policy.validate(secret, config.POLICY_LABEL_PASSWORD)

        owner = self.lookup_by_secret(secret)
        if owner is not None and owner != resource:
            logger.debug(f"Password for '{resource}' collides with an existing entry")
            raise SecretCollision(resource, owner)

        existing = self.get_entry(resource)
        if existing is not None:
            logger.debug(f"Resource '{resource}' already exists, deferring to resolver")
            if resolver is None:
                raise ResourceConflict(resource)
            resolution = resolver.resolve(existing, secret)
            return UpsertResult(resolution.value)

        self._entries.append(VaultEntry(resource=resource, secret=secret))
        self._reindex()
        self._save()
        logger.info(f"Stored new entry for '{resource}'")
        return UpsertResult.WRITTEN

    def replace_secret(self, resource: str, secret: str) -> None:
        """
        Replace the secret of an existing entry, keeping its position.
        Callers are expected to have confirmed the overwrite.
        """
        index = self._by_resource.get(resource)
        if index is None:
            raise UnknownResource(resource)
        owner = self.lookup_by_secret(secret)
        if owner is not None and owner != resource:
            raise SecretCollision(resource, owner)
        self._entries[index] = VaultEntry(resource=resource, secret=secret)
        self._reindex()
        self._save()
        logger.info(f"Replaced entry for '{resource}'")
