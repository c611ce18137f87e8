"""Credential sign-in and registration.

Expected failures (unknown user, wrong password, taken username/email) are
returned as values; only infrastructure failures raise.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlmodel import Session

from atlas_auth.auth.messages import (
    EMAIL_MESSAGE,
    PASSWORD_MESSAGE,
    REGISTRATION_MESSAGE,
    USERNAME_MESSAGE,
)
from atlas_auth.auth.schemas import RegisterRequest
from atlas_auth.auth.validation import (
    is_valid_email,
    is_valid_password,
    is_valid_username,
)
from atlas_auth.core.exceptions import BadRequestError, ConflictError, MissingFieldsError
from atlas_auth.core.security import hash_password, verify_password
from atlas_auth.user import repository
from atlas_auth.user.models import User
from atlas_auth.user.schemas import UserRead

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Who signed in. Never carries the password hash."""

    id: uuid.UUID
    username: str
    email: str
    name: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedIdentity":
        return cls(id=user.id, username=user.username, email=user.email, name=user.name)

    def to_read(self) -> UserRead:
        return UserRead(id=self.id, username=self.username, email=self.email, name=self.name)


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a registration attempt."""

    identity: AuthenticatedIdentity | None = None
    error: str | None = None
    field: str | None = None

    @property
    def ok(self) -> bool:
        return self.identity is not None


def verify_credentials(
    session: Session,
    *,
    email: str | None,
    username: str | None,
    password: str | None,
) -> AuthenticatedIdentity | None:
    """Check a username-or-email + password pair.

    Returns None for every failure: no password given, no such user, a
    Google-only account (no password hash), or a wrong password.
    """
    if not password:
        return None

    user = repository.find_user_by_email_or_username(session, email, username)
    if user is None or user.password_hash is None:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return AuthenticatedIdentity.from_user(user)


def validate_registration(payload: RegisterRequest) -> None:
    """Reject incomplete or malformed registrations before storage is touched.

    Raises:
        MissingFieldsError: one of the four fields is absent or empty
        BadRequestError: email, password or username fails its format rule
    """
    missing = {
        "username": not payload.username,
        "password": not payload.password,
        "email": not payload.email,
        "name": not payload.name,
    }
    if any(missing.values()):
        raise MissingFieldsError(REGISTRATION_MESSAGE.MISSING_FIELDS, missing=missing)

    if not is_valid_email(payload.email or ""):
        raise BadRequestError(EMAIL_MESSAGE.INVALID_FORMAT)
    if not is_valid_password(payload.password or ""):
        raise BadRequestError(PASSWORD_MESSAGE.MIN_LENGTH)
    if not is_valid_username(payload.username or ""):
        raise BadRequestError(USERNAME_MESSAGE.MIN_LENGTH)


def register_new_user(
    session: Session,
    *,
    username: str,
    password: str,
    name: str,
    email: str,
) -> RegistrationResult:
    """Create a password account if username and email are both free."""
    if repository.find_user_by_username(session, username) is not None:
        return RegistrationResult(
            error=USERNAME_MESSAGE.ALREADY_REGISTERED, field="username"
        )

    if repository.find_user_by_email(session, email) is not None:
        return RegistrationResult(error=EMAIL_MESSAGE.ALREADY_REGISTERED, field="email")

    try:
        user = repository.create_user(
            session,
            username=username,
            email=email,
            name=name,
            password_hash=hash_password(password),
        )
    except ConflictError as e:
        # Another request created the same username/email after our checks.
        return RegistrationResult(error=e.message, field=e.field)

    logger.info("Registered new user", extra={"user_id": str(user.id)})
    return RegistrationResult(identity=AuthenticatedIdentity.from_user(user))
