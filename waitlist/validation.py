"""Email validation shared by the server and the form client."""

import re

from waitlist.errors import BadFormatError, EmptyOrWrongTypeError

# Deliberately loose: something@something.something, no whitespace
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def validate_email(value: object) -> str:
    """
    Validate a submitted email and return it lowercased.

    Args:
        value: Raw ``email`` value from the request body

    Returns:
        The email, case-folded but otherwise as submitted

    Raises:
        EmptyOrWrongTypeError: value is missing, not a string, or blank
        BadFormatError: value does not match the email pattern
    """
    if not isinstance(value, str) or not value.strip():
        raise EmptyOrWrongTypeError()

    if not EMAIL_PATTERN.fullmatch(value):
        raise BadFormatError()

    return value.lower()


def is_valid_email(value: object) -> bool:
    """Boolean form of the pattern check, used before sending a request."""
    return isinstance(value, str) and bool(value) and bool(EMAIL_PATTERN.fullmatch(value))


def mask_email(email: str) -> str:
    """Mask the local part of an email for logging: ``f***@bar.com``."""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"
