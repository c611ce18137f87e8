"""Data access for the users table.

Callers pass the ``Session`` for every call so the request controls the
transaction boundary. Uniqueness of username, email and google_id is
enforced by the table's unique constraints; ``create_user`` translates a
constraint violation into the matching conflict error. Emails are
normalized with ``normalize_email`` on every read and write.
"""

import logging
from datetime import datetime

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from atlas_auth.auth.validation import normalize_email
from atlas_auth.core.exceptions import ConflictError
from atlas_auth.user.exceptions import EmailExistsError, UsernameExistsError
from atlas_auth.user.models import User

logger = logging.getLogger(__name__)


def find_user_by_email(session: Session, email: str) -> User | None:
    return session.exec(
        select(User).where(User.email == normalize_email(email))
    ).first()


def find_user_by_username(session: Session, username: str) -> User | None:
    return session.exec(select(User).where(User.username == username)).first()


def find_user_by_email_or_username(
    session: Session, email: str | None, username: str | None
) -> User | None:
    """Find a user matching either identifier.

    Empty identifiers are ignored, so a missing email never matches
    on its own.
    """
    conditions = []
    if email and email.strip():
        conditions.append(User.email == normalize_email(email))
    if username:
        conditions.append(User.username == username)
    if not conditions:
        return None
    return session.exec(select(User).where(or_(*conditions))).first()


# Names a unique violation can carry, per column: the SQLite column
# reference, the index names and the PostgreSQL default constraint name.
_UNIQUE_MARKERS = {
    field: (f"users.{field}", f"ix_users_{field}", f"users_{field}_key")
    for field in ("username", "email", "google_id")
}


def _violated_field(error: IntegrityError) -> str | None:
    """Column behind a unique violation, from the constraint name.

    Only the constraint name or the first line of the driver message is
    inspected; PostgreSQL's DETAIL line echoes the offending value.
    """
    diag = getattr(error.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    lines = str(error.orig).splitlines()
    detail = (constraint or (lines[0] if lines else "")).lower()
    for field, markers in _UNIQUE_MARKERS.items():
        if any(marker in detail for marker in markers):
            return field
    return None


def _conflict_from_integrity_error(
    session: Session, error: IntegrityError, *, username: str, email: str
) -> ConflictError:
    """Work out which unique constraint an insert violated."""
    field = _violated_field(error)
    if field == "username":
        return UsernameExistsError()
    if field == "email":
        return EmailExistsError()
    if field == "google_id":
        return ConflictError("Account is already linked", field="google_id")

    # Driver message without column names: ask the table instead.
    if find_user_by_username(session, username) is not None:
        return UsernameExistsError()
    if find_user_by_email(session, email) is not None:
        return EmailExistsError()
    return ConflictError()


def create_user(
    session: Session,
    *,
    username: str,
    email: str,
    name: str | None = None,
    password_hash: str | None = None,
    google_id: str | None = None,
) -> User:
    """Insert a new user.

    Raises:
        UsernameExistsError: username is taken (including lost races)
        EmailExistsError: email is taken (including lost races)
    """
    email = normalize_email(email)
    user = User(
        username=username,
        email=email,
        name=name,
        password_hash=password_hash,
        google_id=google_id,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        conflict = _conflict_from_integrity_error(
            session, e, username=username, email=email
        )
        logger.info(
            "User insert rejected by unique constraint",
            extra={"field": conflict.field},
        )
        raise conflict from e
    session.refresh(user)
    return user


def set_reset_token(
    session: Session, user: User, *, token: str, expires: datetime
) -> None:
    user.reset_password_token = token
    user.reset_password_expires = expires
    session.add(user)
    session.commit()


def consume_reset_token(
    session: Session, *, token: str, password_hash: str, now: datetime
) -> bool:
    """Replace the password of the user holding a live token.

    The token check and the write happen in one conditional UPDATE, so a
    token authorizes at most one password change. Returns False when no
    user holds the token or it has expired.
    """
    result = session.execute(
        update(User)
        .where(User.reset_password_token == token)
        .where(User.reset_password_expires > now)
        .values(
            password_hash=password_hash,
            reset_password_token=None,
            reset_password_expires=None,
        )
        .execution_options(synchronize_session=False)
    )
    session.commit()
    return result.rowcount == 1
