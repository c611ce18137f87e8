"""Auth domain exceptions.

Authentication, reset-token and identity provider errors.
"""

from typing import Any

from atlas_auth.auth.messages import (
    LOGIN_MESSAGE,
    RESET_PASSWORD_MESSAGE,
    ProviderErrorCode,
    map_provider_error,
)
from atlas_auth.core.exceptions import (
    AppException,
    AuthenticationError,
    ValidationError,
)


class InvalidCredentialsError(AuthenticationError):
    """Raised when a credential sign-in fails.

    The message never says whether the identifier or the password was wrong.
    """

    error_type = "invalid_credentials"

    def __init__(self, message: str = LOGIN_MESSAGE.INVALID_CREDENTIALS):
        super().__init__(message)


class InvalidResetTokenError(ValidationError):
    """Raised for unknown, expired or already used reset tokens."""

    error_type = "invalid_reset_token"

    def __init__(self, message: str = RESET_PASSWORD_MESSAGE.EXPIRED_TOKEN):
        super().__init__(message)


class PasswordNotSetError(ValidationError):
    """Raised when a password operation targets a Google-only account."""

    error_type = "password_not_set"

    def __init__(self, message: str):
        super().__init__(message)


class ProviderSignInError(AppException):
    """Raised when Google sign-in cannot be completed.

    ``code`` is one of ``ProviderErrorCode``; the message is the matching
    friendly text so clients can show it directly.
    """

    status_code = 401
    error_type = "provider_error"

    def __init__(self, code: str = ProviderErrorCode.OAUTH_CALLBACK):
        self.code = code
        super().__init__(map_provider_error(code))

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["code"] = self.code
        return payload


class ProviderAccessDeniedError(ProviderSignInError):
    """Raised when the provider identity verified but linking was refused."""

    status_code = 403

    def __init__(self) -> None:
        super().__init__(ProviderErrorCode.ACCESS_DENIED)
