"""User domain exceptions.

Conflicts raised when a username or email is already taken.
"""

from atlas_auth.auth.messages import EMAIL_MESSAGE, USERNAME_MESSAGE
from atlas_auth.core.exceptions import ConflictError


class UsernameExistsError(ConflictError):
    """Raised when the requested username belongs to another account."""

    error_type = "username_exists"

    def __init__(self, message: str = USERNAME_MESSAGE.ALREADY_REGISTERED):
        super().__init__(message, field="username")


class EmailExistsError(ConflictError):
    """Raised when attempting to register with an existing email."""

    error_type = "email_exists"

    def __init__(self, message: str = EMAIL_MESSAGE.ALREADY_REGISTERED):
        super().__init__(message, field="email")
