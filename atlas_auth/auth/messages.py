"""User-facing message catalog.

Shared by the REST endpoints, the auth page and the form layer so every
outcome is worded the same way wherever it surfaces.
"""


class LOGIN_MESSAGE:
    INVALID_CREDENTIALS = "Invalid username/email or password. Please try again."
    USERNAME_OR_EMAIL_REQUIRED = "Username or email is required"
    SUCCESS = "Signed in successfully!"
    FAILURE = "Sign-in failed. Please try again."


class REGISTRATION_MESSAGE:
    SUCCESS = "Account created successfully! Please sign in."
    FAILURE = "Registration failed. Please try again."
    USER_SUCCESS = "User registered successfully"
    MISSING_FIELDS = "Missing required fields"


class FORGOT_PASSWORD_MESSAGE:
    SUCCESS = "If your email is registered, a reset link has been sent."
    FAILURE = "Failed to send reset email"
    FAILURE_LATER = "Failed to send reset email. Please try again later."
    NO_PASSWORD = (
        "This account does not have a password set. Please use Google sign-in."
    )
    EMAIL_REQUIRED = "Please enter your email address."


class RESET_PASSWORD_MESSAGE:
    SUCCESS = "Password reset successfully! Redirecting to login..."
    COMPLETED = "Password reset successfully"
    FAILURE = "Failed to reset password"
    FAILURE_LATER = "Failed to reset password. Please try again later."
    INVALID_TOKEN = "Invalid reset token."
    EXPIRED_TOKEN = "Password reset token has expired or is invalid"
    PASSWORD_AND_TOKEN_REQUIRED = "Both password and token are required"


class SESSION_MESSAGE:
    SIGNED_OUT = "Signed out successfully"


class EMAIL_MESSAGE:
    REQUIRED = "Email is required"
    INVALID_FORMAT = "Invalid email format"
    ALREADY_REGISTERED = "Email is already registered"


class PASSWORD_MESSAGE:
    REQUIRED = "Password is required"
    MIN_LENGTH = "Password must be at least 6 characters"
    DO_NOT_MATCH = "Passwords do not match"


class USERNAME_MESSAGE:
    REQUIRED = "Username is required"
    MIN_LENGTH = "Username must be at least 3 characters"
    ALREADY_REGISTERED = "Username is already taken"


class NAME_MESSAGE:
    REQUIRED = "Name is required"


class GOOGLE_MESSAGE:
    SIGN_IN_SUCCESS = "Google sign-in successful!"
    SIGN_UP_SUCCESS = "Google sign-up successful!"
    SIGN_IN_FAILURE = (
        "Unable to connect to Google. Please check your connection and try again."
    )
    SIGN_UP_FAILURE = "Google sign-up failed. Please try again."


class ProviderErrorCode:
    """Error codes reported back by the Google sign-in flow."""

    OAUTH_CALLBACK = "OAuthCallback"
    OAUTH_ACCOUNT_NOT_LINKED = "OAuthAccountNotLinked"
    ACCESS_DENIED = "AccessDenied"
    VERIFICATION = "Verification"


PROVIDER_ERROR_MESSAGES: dict[str, str] = {
    ProviderErrorCode.OAUTH_CALLBACK: (
        "Google sign-in was cancelled or failed. Please try again."
    ),
    ProviderErrorCode.OAUTH_ACCOUNT_NOT_LINKED: (
        "This email is already registered with a different sign-in method."
    ),
    ProviderErrorCode.ACCESS_DENIED: (
        "Access denied. Please grant permission to continue."
    ),
    ProviderErrorCode.VERIFICATION: (
        "Unable to verify your Google account. Please try again."
    ),
}

PROVIDER_ERROR_FALLBACK = (
    "Google sign-in failed. Please try again or use email registration."
)


def map_provider_error(code: str | None) -> str:
    """Translate a provider error code into a friendly message."""
    return PROVIDER_ERROR_MESSAGES.get(code or "", PROVIDER_ERROR_FALLBACK)
