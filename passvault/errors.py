"""
Exceptions raised by the vault core.

Every fatal condition derives from VaultError so the command-line front end
can report it and abort the invocation in one place.
"""

from typing import Optional


class VaultError(Exception):
    """Base class for all vault failures."""


class PolicyViolation(VaultError):
    """A candidate secret failed one of the password policy rules."""

    def __init__(self, rule, label: str):
        self.rule = rule
        self.label = label
        super().__init__(rule.describe(label))


class InvalidField(VaultError):
    """A resource or secret cannot be stored in the line format."""

    def __init__(self, label: str, reason: str):
        self.label = label
        self.reason = reason
        super().__init__(f"{label} {reason}")


class KeyRejected(VaultError):
    """The supplied master key does not match the stored one."""

    def __init__(self, message: str = "master key rejected"):
        super().__init__(message)


class SecretCollision(VaultError):
    """The secret is already stored under a different resource."""

    def __init__(self, resource: str, owner: str):
        self.resource = resource
        self.owner = owner
        super().__init__(
            f"cannot store password for '{resource}': it is already used by another resource"
        )


class ResourceConflict(VaultError):
    """The resource exists and no resolver was supplied to confirm an overwrite."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"resource '{resource}' already exists")


class VaultLocked(VaultError):
    def __init__(self):
        super().__init__("Vault is locked")


class VaultFormatError(VaultError):
    """A line of the vault file cannot be parsed."""

    def __init__(self, path: str, line_no: int, detail: Optional[str] = None):
        self.path = path
        self.line_no = line_no
        message = f"{path}:{line_no}: malformed vault entry"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnknownResource(VaultError):
    """An operation that requires an existing entry found none."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"no entry for resource '{resource}'")


class KeyFileError(VaultError):
    """The stored master key is missing its content."""

    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"{path}: {detail}")
