"""
Input checks shared by account and query inputs.

The same rules the registration form applies: an email needs a local part, an `@` and a
dotted domain ending in a 2+ letter TLD; a password needs 8+ characters mixing upper and
lower case letters, digits and a symbol.
"""

from __future__ import annotations

import re

MINIMUM_PASSWORD_LENGTH = 8

_EMAIL_RE = re.compile(r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]+@[A-Za-z]+(?:\.[A-Za-z]+)*\.[A-Za-z]{2,}")
_PASSWORD_SYMBOLS = set("!@#$%^&*()_+=`~")


def is_blank(text: str | None) -> bool:
    """True for None, "" and whitespace-only input."""
    return text is None or not text.strip()


def is_valid_email(email: str) -> bool:
    return _EMAIL_RE.fullmatch(email) is not None


def is_valid_password(password: str) -> bool:
    return (
        len(password) >= MINIMUM_PASSWORD_LENGTH
        and any(c in _PASSWORD_SYMBOLS for c in password)
        and any(c.isdigit() for c in password)
        and any("a" <= c <= "z" for c in password)
        and any("A" <= c <= "Z" for c in password)
    )
