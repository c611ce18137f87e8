"""User domain models.

SQLModel table definition for User.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from atlas_auth.core.mixins import TimestampMixin


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    Note: password_hash, google_id and the reset token fields are
    internal-only and must never be exposed in API responses.

    An account has a password_hash unless it was created by Google sign-in,
    in which case google_id is set instead.
    """

    __tablename__: str = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    username: str = Field(index=True, unique=True, max_length=100)
    email: str = Field(index=True, unique=True, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    password_hash: str | None = Field(default=None, max_length=255)
    # NULLs never collide, so only OAuth users take part in this constraint.
    google_id: str | None = Field(default=None, unique=True, max_length=255)
    reset_password_token: str | None = Field(default=None, index=True, max_length=128)
    reset_password_expires: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    @property
    def is_oauth_only(self) -> bool:
        return self.password_hash is None
