"""Tests for atlas_auth/core/firebase.py - Firebase initialization."""

from unittest.mock import patch

from atlas_auth.core.firebase import init_firebase
from atlas_auth.core.settings import Settings


def _settings(**overrides) -> Settings:
    return Settings(
        database_url="sqlite://", session_secret_key="test-secret-key", **overrides
    )


def test_init_firebase_already_initialized():
    """Test init_firebase() does nothing if Firebase already initialized."""
    with (
        patch("atlas_auth.core.firebase.get_app") as mock_get_app,
        patch("atlas_auth.core.firebase.initialize_app") as mock_init,
    ):
        # get_app() succeeds, meaning Firebase is already initialized
        mock_get_app.return_value = "mock_app"

        init_firebase(_settings())

        mock_get_app.assert_called_once()
        mock_init.assert_not_called()


def test_init_firebase_not_initialized():
    """Test init_firebase() initializes Firebase if not already initialized."""
    with (
        patch("atlas_auth.core.firebase.get_app") as mock_get_app,
        patch("atlas_auth.core.firebase.initialize_app") as mock_init,
    ):
        # get_app() raises ValueError, meaning Firebase is not initialized
        mock_get_app.side_effect = ValueError("Firebase app not initialized")

        init_firebase(_settings())

        mock_get_app.assert_called_once()
        mock_init.assert_called_once_with(options=None)


def test_init_firebase_with_project_id():
    """Test FIREBASE_PROJECT_ID is passed to the Admin SDK."""
    with (
        patch("atlas_auth.core.firebase.get_app", side_effect=ValueError()),
        patch("atlas_auth.core.firebase.initialize_app") as mock_init,
    ):
        init_firebase(_settings(firebase_project_id="atlas-travel"))

        mock_init.assert_called_once_with(options={"projectId": "atlas-travel"})
