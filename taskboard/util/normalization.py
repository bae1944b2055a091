from __future__ import annotations

from typing import Any

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_email = TypeAdapter(EmailStr)

NAME_MIN_LEN = 2
NAME_MAX_LEN = 40
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 64
LABEL_MIN_LEN = 1
LABEL_MAX_LEN = 140


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: Any) -> bool:
    if not isinstance(email, str):
        return False
    try:
        _email.validate_python(email)
    except PydanticValidationError:
        return False
    return True


def clean_text(value: Any, *, min_len: int, max_len: int) -> str | None:
    """Trim a string and check its length.

    Returns the trimmed value, or None if it is not a string or out of range.
    """
    if not isinstance(value, str):
        return None
    s = value.strip()
    if len(s) < min_len or len(s) > max_len:
        return None
    return s


def clean_name(value: Any) -> str | None:
    """Check the display name length as typed, then trim it.

    Returns None for non-strings, out-of-range lengths and blank names.
    """
    if not isinstance(value, str):
        return None
    if len(value) < NAME_MIN_LEN or len(value) > NAME_MAX_LEN:
        return None
    return value.strip() or None


def is_valid_password(password: Any) -> bool:
    # Passwords are checked as typed; surrounding whitespace is significant.
    if not isinstance(password, str):
        return False
    return PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN
