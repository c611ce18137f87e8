"""User domain schemas.

Security notes:
- password_hash, google_id and reset token fields are internal-only
- UserRead contains only fields safe for API responses and sessions
"""

import uuid

from sqlmodel import SQLModel


class UserRead(SQLModel):
    """Authenticated identity as exposed to clients."""

    id: uuid.UUID
    username: str
    email: str
    name: str | None = None
