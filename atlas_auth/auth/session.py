"""Signed-cookie sessions.

The session cookie is managed by Starlette's ``SessionMiddleware``; this
module decides what goes into it. Only the public identity is stored:
never the password hash or a reset token.
"""

import logging
from typing import Any

from fastapi import Request
from sqlmodel import Session

from atlas_auth.auth.service import AuthenticatedIdentity
from atlas_auth.user import repository
from atlas_auth.user.schemas import UserRead

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


def safe_callback_url(callback_url: str | None, default: str = "/") -> str:
    """Accept only same-site absolute paths as post sign-in destinations."""
    if not callback_url:
        return default
    if not callback_url.startswith("/") or callback_url.startswith("//"):
        return default
    if "\\" in callback_url:
        return default
    return callback_url


def _to_session_payload(identity: AuthenticatedIdentity) -> dict[str, Any]:
    return {
        "id": str(identity.id),
        "email": identity.email,
        "name": identity.name,
        "username": identity.username,
    }


def sign_in(request: Request, identity: AuthenticatedIdentity) -> None:
    """Start a session for ``identity``, replacing any previous one."""
    request.session.clear()
    request.session[SESSION_USER_KEY] = _to_session_payload(identity)
    logger.info("Session started", extra={"user_id": str(identity.id)})


def read_session_user(request: Request) -> dict[str, Any] | None:
    data = request.session.get(SESSION_USER_KEY)
    return data if isinstance(data, dict) else None


def refresh_session_user(request: Request, session: Session) -> UserRead | None:
    """Return the signed-in user, refreshed from storage.

    Username and id are re-read by email on every call so renames show up
    without signing in again. A session whose user no longer exists keeps
    its stored values.
    """
    data = read_session_user(request)
    if data is None or not data.get("email"):
        return None

    user = repository.find_user_by_email(session, data["email"])
    if user is not None:
        data = {**data, "id": str(user.id), "username": user.username}
        request.session[SESSION_USER_KEY] = data

    return UserRead.model_validate(data)


def sign_out(request: Request) -> None:
    request.session.clear()
