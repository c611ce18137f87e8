"""Tests for credential sign-in and registration."""

from unittest.mock import patch

import pytest
from sqlmodel import Session, select

from atlas_auth.auth.schemas import RegisterRequest
from atlas_auth.auth.service import (
    AuthenticatedIdentity,
    register_new_user,
    validate_registration,
    verify_credentials,
)
from atlas_auth.core.exceptions import BadRequestError, MissingFieldsError
from atlas_auth.core.security import verify_password
from atlas_auth.user.exceptions import EmailExistsError
from atlas_auth.user.models import User

# --- verify_credentials ---


def test_verify_credentials_by_username(session: Session, test_user: User):
    """Test a correct username/password pair returns the identity."""
    identity = verify_credentials(
        session, email=None, username="traveler", password="secret123"
    )

    assert identity == AuthenticatedIdentity.from_user(test_user)


def test_verify_credentials_by_email(session: Session, test_user: User):
    """Test a correct email/password pair returns the identity."""
    identity = verify_credentials(
        session, email="traveler@example.com", username=None, password="secret123"
    )

    assert identity is not None
    assert identity.username == "traveler"


def test_verify_credentials_wrong_password(session: Session, test_user: User):
    """Test a wrong password returns None."""
    assert (
        verify_credentials(session, email=None, username="traveler", password="nope123")
        is None
    )


def test_verify_credentials_unknown_user(session: Session, test_user: User):
    """Test an unknown identifier returns None."""
    assert (
        verify_credentials(session, email=None, username="nobody", password="secret123")
        is None
    )


def test_verify_credentials_missing_password(session: Session, test_user: User):
    """Test an empty password never matches."""
    assert verify_credentials(session, email=None, username="traveler", password="") is None
    assert (
        verify_credentials(session, email=None, username="traveler", password=None)
        is None
    )


def test_verify_credentials_no_identifier(session: Session, test_user: User):
    """Test neither email nor username matches nothing."""
    assert verify_credentials(session, email="", username=None, password="secret123") is None


def test_verify_credentials_google_only_account(session: Session, google_user: User):
    """Test an account without a password can never sign in with one."""
    assert (
        verify_credentials(
            session, email="explorer@example.com", username=None, password="anything1"
        )
        is None
    )


def test_identity_never_exposes_hash(test_user: User):
    """Test the identity carries only public fields."""
    identity = AuthenticatedIdentity.from_user(test_user)

    assert set(identity.to_read().model_dump()) == {"id", "username", "email", "name"}


# --- validate_registration ---


def test_validate_registration_missing_fields():
    """Test missing fields are reported per field."""
    with pytest.raises(MissingFieldsError) as exc_info:
        validate_registration(RegisterRequest(username="ada", email=""))

    assert exc_info.value.missing == {
        "username": False,
        "password": True,
        "email": True,
        "name": True,
    }
    assert exc_info.value.message == "Missing required fields"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        (
            {"username": "ada", "password": "secret123", "name": "Ada", "email": "ada"},
            "Invalid email format",
        ),
        (
            {"username": "ada", "password": "12345", "name": "Ada", "email": "a@b.io"},
            "Password must be at least 6 characters",
        ),
        (
            {"username": "ad", "password": "secret123", "name": "Ada", "email": "a@b.io"},
            "Username must be at least 3 characters",
        ),
    ],
)
def test_validate_registration_format_errors(payload: dict, message: str):
    """Test format violations raise a request error with a specific message."""
    with pytest.raises(BadRequestError) as exc_info:
        validate_registration(RegisterRequest(**payload))

    assert exc_info.value.message == message


def test_validate_registration_accepts_valid_payload():
    """Test a complete payload passes."""
    validate_registration(
        RegisterRequest(
            username="ada", password="secret123", name="Ada", email="ada@example.com"
        )
    )


# --- register_new_user ---


def test_register_new_user_creates_hashed_account(session: Session):
    """Test registration stores a bcrypt hash and returns the identity."""
    result = register_new_user(
        session,
        username="ada",
        password="secret123",
        name="Ada Lovelace",
        email="ada@example.com",
    )

    assert result.ok
    assert result.identity is not None
    assert result.identity.username == "ada"

    user = session.exec(select(User).where(User.username == "ada")).one()
    assert user.password_hash is not None
    assert user.password_hash.startswith("$2b$10$")
    assert verify_password("secret123", user.password_hash)
    assert user.google_id is None


def test_register_duplicate_username(session: Session, test_user: User):
    """Test a taken username is reported on the username field."""
    result = register_new_user(
        session,
        username="traveler",
        password="secret123",
        name="Other",
        email="other@example.com",
    )

    assert not result.ok
    assert result.field == "username"
    assert result.error == "Username is already taken"


def test_register_duplicate_email(session: Session, test_user: User):
    """Test a taken email is reported on the email field."""
    result = register_new_user(
        session,
        username="someone",
        password="secret123",
        name="Other",
        email="traveler@example.com",
    )

    assert not result.ok
    assert result.field == "email"
    assert result.error == "Email is already registered"


def test_register_username_checked_before_email(session: Session, test_user: User):
    """Test the username conflict wins when both are taken."""
    result = register_new_user(
        session,
        username="traveler",
        password="secret123",
        name="Twin",
        email="traveler@example.com",
    )

    assert result.field == "username"


def test_register_lost_race_is_a_conflict(session: Session):
    """Test an insert rejected by the unique constraint becomes a conflict."""
    with patch(
        "atlas_auth.auth.service.repository.create_user",
        side_effect=EmailExistsError(),
    ):
        result = register_new_user(
            session,
            username="racer",
            password="secret123",
            name="Racer",
            email="racer@example.com",
        )

    assert not result.ok
    assert result.field == "email"
