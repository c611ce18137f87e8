"""Token-based password reset.

A user record moves from no token, to an issued token with an expiry, and
back to no token once the token is consumed. Expired tokens are never
cleaned up eagerly; they simply stop matching.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

from sqlmodel import Session

from atlas_auth.auth.exceptions import InvalidResetTokenError
from atlas_auth.auth.messages import (
    FORGOT_PASSWORD_MESSAGE,
    PASSWORD_MESSAGE,
    RESET_PASSWORD_MESSAGE,
)
from atlas_auth.auth.validation import is_valid_password
from atlas_auth.core.exceptions import BadRequestError
from atlas_auth.core.mixins import utc_now
from atlas_auth.core.security import generate_reset_token, hash_password
from atlas_auth.user import repository

logger = logging.getLogger(__name__)

DEFAULT_RESET_TOKEN_TTL = timedelta(hours=1)

SendResetEmail = Callable[[str, str], None]


@dataclass(frozen=True)
class ResetResult:
    """Outcome of a forgot-password request."""

    message: str
    ok: bool = True


def initiate_reset(
    session: Session,
    email: str,
    *,
    send_email: SendResetEmail,
    ttl: timedelta = DEFAULT_RESET_TOKEN_TTL,
) -> ResetResult:
    """Issue a reset token for ``email`` and mail it.

    Unknown emails get the same answer as known ones. Accounts created
    through Google have no password to reset and are told so.

    ``send_email`` is called with ``(to_email, token)`` after the token is
    stored; its failures propagate.
    """
    user = repository.find_user_by_email(session, email)
    if user is None:
        logger.debug("Password reset requested for unknown email")
        return ResetResult(FORGOT_PASSWORD_MESSAGE.SUCCESS)

    if user.is_oauth_only:
        return ResetResult(FORGOT_PASSWORD_MESSAGE.NO_PASSWORD, ok=False)

    token = generate_reset_token()
    repository.set_reset_token(session, user, token=token, expires=utc_now() + ttl)
    send_email(user.email, token)

    logger.info("Password reset token issued", extra={"user_id": str(user.id)})
    return ResetResult(FORGOT_PASSWORD_MESSAGE.SUCCESS)


def validate_reset(token: str | None, password: str | None) -> None:
    """Reject incomplete reset requests before storage is touched.

    Raises:
        BadRequestError: token or password missing, or password too short
    """
    if not token or not password:
        raise BadRequestError(RESET_PASSWORD_MESSAGE.PASSWORD_AND_TOKEN_REQUIRED)
    if not is_valid_password(password):
        raise BadRequestError(PASSWORD_MESSAGE.MIN_LENGTH)


def reset_password(session: Session, token: str, new_password: str) -> None:
    """Set a new password using a live reset token.

    Raises:
        InvalidResetTokenError: no user holds the token, it expired, or it
            was already used
    """
    consumed = repository.consume_reset_token(
        session,
        token=token,
        password_hash=hash_password(new_password),
        now=utc_now(),
    )
    if not consumed:
        raise InvalidResetTokenError()
    logger.info("Password reset completed")
