"""Password strength policy.

A password is strong when it has at least six characters, one ASCII
uppercase letter and one ASCII digit.  The three facets are exposed
separately so that a form can show per-rule feedback while the user types.
"""

from __future__ import annotations

import re
from typing import NamedTuple

MIN_LENGTH = 6

_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")


def has_length(password: str) -> bool:
    return len(password) >= MIN_LENGTH


def has_upper(password: str) -> bool:
    return _UPPER.search(password) is not None


def has_digit(password: str) -> bool:
    return _DIGIT.search(password) is not None


def is_strong(password: str) -> bool:
    return has_length(password) and has_upper(password) and has_digit(password)


class PasswordStrength(NamedTuple):
    has_length: bool
    has_upper: bool
    has_digit: bool

    @property
    def is_strong(self) -> bool:
        return self.has_length and self.has_upper and self.has_digit


def check_password(password: str) -> PasswordStrength:
    """Evaluate every facet of the policy for *password*."""
    return PasswordStrength(
        has_length=has_length(password),
        has_upper=has_upper(password),
        has_digit=has_digit(password),
    )
