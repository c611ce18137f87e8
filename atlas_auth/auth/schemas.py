"""Auth domain schemas.

Request and response schemas for authentication operations.

Request fields are optional on purpose: presence, format and length rules
are checked by the endpoints so that every violation yields a specific
400 message instead of a generic schema error.
"""

from pydantic import BaseModel

from atlas_auth.user.schemas import UserRead


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    username: str | None = None
    password: str | None = None
    name: str | None = None
    email: str | None = None


class RegisterResponse(BaseModel):
    """Response schema for a created account."""

    message: str
    user: UserRead


class ForgotPasswordRequest(BaseModel):
    """Request schema for starting a password reset."""

    email: str | None = None


class ResetPasswordRequest(BaseModel):
    """Request schema for consuming a reset token."""

    token: str | None = None
    password: str | None = None


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class CredentialsSignInRequest(BaseModel):
    """Request schema for username-or-email + password sign-in.

    Clients send ``email`` when the identifier looks like an email and
    ``username`` otherwise.
    """

    username: str | None = None
    email: str | None = None
    password: str | None = None
    callback_url: str | None = None


class GoogleSignInRequest(BaseModel):
    """Request schema for Google sign-in with a provider ID token."""

    id_token: str
    callback_url: str | None = None


class SignInResponse(BaseModel):
    """Response schema for a successful sign-in."""

    ok: bool = True
    url: str
    user: UserRead


class SessionResponse(BaseModel):
    """Current session; ``user`` is absent when signed out."""

    user: UserRead | None = None
