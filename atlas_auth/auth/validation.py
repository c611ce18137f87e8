"""Format predicates for auth form fields.

Used on both sides of the wire: the REST endpoints reject invalid input
before touching storage, and the form layer runs the same checks before
sending anything.
"""

import re

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(normalize_email(email)) is not None


def is_valid_username(username: str) -> bool:
    return len(username.strip()) >= MIN_USERNAME_LENGTH


def is_valid_password(password: str) -> bool:
    return len(password.strip()) >= MIN_PASSWORD_LENGTH


def is_valid_name(name: str) -> bool:
    return len(name.strip()) > 0


def normalize_email(email: str) -> str:
    """Email as stored and looked up: surrounding whitespace removed."""
    return email.strip()
