"""Find-or-create for users arriving through Google sign-in."""

import logging

from sqlmodel import Session

from atlas_auth.core.exceptions import ConflictError
from atlas_auth.user import repository
from atlas_auth.user.models import User

logger = logging.getLogger(__name__)

FALLBACK_USERNAME = "user"
MAX_USERNAME_ATTEMPTS = 1000


def derive_username(email: str) -> str:
    """Username candidate from the email local-part."""
    local_part = email.split("@", 1)[0].strip()
    return local_part or FALLBACK_USERNAME


def _next_free_username(session: Session, base: str, start: int = 0) -> tuple[str, int]:
    counter = start
    candidate = base if counter == 0 else f"{base}{counter}"
    while repository.find_user_by_username(session, candidate) is not None:
        counter += 1
        candidate = f"{base}{counter}"
    return candidate, counter


def find_or_create_from_provider(
    session: Session,
    *,
    email: str,
    name: str | None,
    external_id: str,
) -> User:
    """Return the user for a verified provider identity, creating one if needed.

    An existing user with the same email is returned unchanged, whatever
    way it was created. New users get no password hash and a username taken
    from the email local-part, suffixed 1, 2, ... until it is free.

    Raises:
        ConflictError: the username space is exhausted or the external id
            is already linked to another email
    """
    existing = repository.find_user_by_email(session, email)
    if existing is not None:
        return existing

    base = derive_username(email)
    counter = 0
    for _ in range(MAX_USERNAME_ATTEMPTS):
        username, counter = _next_free_username(session, base, counter)
        try:
            user = repository.create_user(
                session,
                username=username,
                email=email,
                name=name,
                google_id=external_id,
            )
        except ConflictError as e:
            if e.field == "email":
                # Created concurrently by another sign-in for the same email.
                raced = repository.find_user_by_email(session, email)
                if raced is not None:
                    return raced
            if e.field != "username":
                raise
            counter += 1
            continue

        logger.info("Created user from Google sign-in", extra={"user_id": str(user.id)})
        return user

    raise ConflictError("Could not find a free username")
