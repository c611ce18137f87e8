"""Firebase Authentication adapter for Google sign-in.

The browser completes the Google popup through Firebase and posts the
resulting ID token; this module verifies it with the Firebase Admin SDK
and hands back the identity the linking service needs.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Protocol

from firebase_admin import auth as firebase_admin_auth
from firebase_admin.exceptions import FirebaseError

from atlas_auth.auth.exceptions import ProviderSignInError
from atlas_auth.auth.messages import ProviderErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderIdentity:
    """Verified identity asserted by the provider."""

    external_id: str
    email: str
    name: str | None = None


class FirebaseAuthServiceProtocol(Protocol):
    """Protocol for provider token verification.

    Routers depend on this protocol, so tests can swap in a fake.
    """

    def verify_id_token(self, id_token: str) -> ProviderIdentity:
        """Verify a provider ID token and return the identity it asserts."""
        ...


class FirebaseAuthService:
    """Verifies Google sign-in ID tokens issued through Firebase."""

    def __init__(self, check_revoked: bool = False):
        self._check_revoked = check_revoked

    @staticmethod
    def _extract_identity(decoded: dict[str, Any]) -> ProviderIdentity:
        """Pull uid, email and display name out of decoded claims.

        Raises:
            ProviderSignInError: uid or email missing (code Verification)
        """
        uid = decoded.get("uid") or decoded.get("sub")
        email = decoded.get("email")
        if not uid or not email:
            raise ProviderSignInError(ProviderErrorCode.VERIFICATION)
        return ProviderIdentity(external_id=uid, email=email, name=decoded.get("name"))

    def verify_id_token(self, id_token: str) -> ProviderIdentity:
        """Verify ID token and return the provider identity.

        Args:
            id_token: Firebase ID token from the Google sign-in popup

        Returns:
            ProviderIdentity with uid, email and display name

        Raises:
            ProviderSignInError: Verification for bad, expired, revoked or
                incomplete tokens; OAuthCallback when Firebase itself fails
        """
        try:
            decoded = firebase_admin_auth.verify_id_token(
                id_token, check_revoked=self._check_revoked
            )
        except (
            ValueError,
            firebase_admin_auth.InvalidIdTokenError,
            firebase_admin_auth.UserDisabledError,
        ) as e:
            logger.info("Rejected provider ID token", extra={"error_type": type(e).__name__})
            raise ProviderSignInError(ProviderErrorCode.VERIFICATION) from e
        except FirebaseError as e:
            logger.warning(
                "Provider token verification failed",
                extra={"error_type": type(e).__name__},
            )
            raise ProviderSignInError(ProviderErrorCode.OAUTH_CALLBACK) from e
        return self._extract_identity(decoded)


@lru_cache
def get_firebase_auth_service() -> FirebaseAuthService:
    """Get cached Firebase Auth Service instance.

    The service is cached for the application lifetime since
    its configuration doesn't change at runtime.
    """
    return FirebaseAuthService()
