"""
Password policy shared by the master key and every stored secret.
"""

import enum
import logging
import string
from typing import Optional

from . import config
from .errors import InvalidField, PolicyViolation

logger = logging.getLogger(__name__)


class PolicyRule(enum.Enum):
    """Complexity rules, declared in the order they are checked."""

    LENGTH = f"must be at least {config.PASSWORD_MIN_LENGTH} characters long"
    LOWERCASE = "must contain at least one lowercase letter"
    UPPERCASE = "must contain at least one uppercase letter"
    DIGIT = "must contain at least one digit"
    SPECIAL = f"must contain at least one special character ({' '.join(config.SPECIAL_CHARACTERS)})"

    def describe(self, label: str) -> str:
        return f"{label} {self.value}"

    def is_satisfied_by(self, candidate: str) -> bool:
        if self is PolicyRule.LENGTH:
            return len(candidate) >= config.PASSWORD_MIN_LENGTH
        if self is PolicyRule.LOWERCASE:
            return any(ch in string.ascii_lowercase for ch in candidate)
        if self is PolicyRule.UPPERCASE:
            return any(ch in string.ascii_uppercase for ch in candidate)
        if self is PolicyRule.DIGIT:
            return any(ch in string.digits for ch in candidate)
        return any(ch in config.SPECIAL_CHARACTERS for ch in candidate)


def check(candidate: str) -> Optional[PolicyRule]:
    """Return the first rule the candidate fails, or None if it passes all of them."""
    for rule in PolicyRule:
        if not rule.is_satisfied_by(candidate):
            return rule
    return None


def validate(candidate: str, label: str) -> None:
    """
    Validate a candidate secret against the policy.
    Args:
        candidate: The secret to check
        label: What the secret is ("key", "password"), used in the message
    Raises:
        PolicyViolation: On the first failing rule
    """
    rule = check(candidate)
    if rule is not None:
        logger.debug(f"Policy check for {label} failed: {rule.name}")
        raise PolicyViolation(rule, label)
    logger.debug(f"Policy check for {label} passed")


def reject_line_breaks(value: str, label: str) -> None:
    if "\n" in value or "\r" in value:
        raise InvalidField(label, "must not contain line breaks")


def validate_field(value: str, label: str) -> None:
    """Reject values that would make a vault line ambiguous."""
    if not value:
        raise InvalidField(label, "must not be empty")
    if config.FIELD_DELIMITER.strip() in value:
        raise InvalidField(label, f"must not contain '{config.FIELD_DELIMITER.strip()}'")
    reject_line_breaks(value, label)
