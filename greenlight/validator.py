"""
Validation accumulator and helper predicates.
"""

import re
from typing import Dict, Iterable, Pattern

EMAIL_RX: Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class Validator:
    """
    Collects validation errors keyed by field.

    Only the first message recorded for a key is kept. Create one per
    request; instances are not meant to be shared.
    """

    def __init__(self):
        self.errors: Dict[str, str] = {}

    def valid(self) -> bool:
        """True when no errors have been recorded."""
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        """Record message under key unless key already has one."""
        if key not in self.errors:
            self.errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        """Record message under key if ok is false."""
        if not ok:
            self.add_error(key, message)


def permitted_value(value: str, *permitted: str) -> bool:
    """Check whether value is one of the permitted values."""
    return value in permitted


def matches(value: str, rx: Pattern[str]) -> bool:
    """Check whether the whole of value matches the compiled pattern."""
    return rx.fullmatch(value) is not None


def unique(values: Iterable[str]) -> bool:
    """Check that every value occurs once."""
    values = list(values)
    return len(set(values)) == len(values)
