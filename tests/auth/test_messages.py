"""Tests for the provider error table."""

import pytest

from atlas_auth.auth.messages import (
    PROVIDER_ERROR_FALLBACK,
    ProviderErrorCode,
    map_provider_error,
)


@pytest.mark.parametrize(
    ("code", "message"),
    [
        (
            ProviderErrorCode.OAUTH_CALLBACK,
            "Google sign-in was cancelled or failed. Please try again.",
        ),
        (
            ProviderErrorCode.OAUTH_ACCOUNT_NOT_LINKED,
            "This email is already registered with a different sign-in method.",
        ),
        (
            ProviderErrorCode.ACCESS_DENIED,
            "Access denied. Please grant permission to continue.",
        ),
        (
            ProviderErrorCode.VERIFICATION,
            "Unable to verify your Google account. Please try again.",
        ),
    ],
)
def test_map_provider_error_known_codes(code: str, message: str):
    """Test each known provider code has its own message."""
    assert map_provider_error(code) == message


@pytest.mark.parametrize("code", ["Configuration", "", None])
def test_map_provider_error_fallback(code: str | None):
    """Test unknown or missing codes get the generic message."""
    assert map_provider_error(code) == PROVIDER_ERROR_FALLBACK
    assert PROVIDER_ERROR_FALLBACK == (
        "Google sign-in failed. Please try again or use email registration."
    )
