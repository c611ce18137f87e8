import inspect
import os
from unittest.mock import MagicMock

# Required settings must exist before the app module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV_NAME", "test")
os.environ.pop("RESEND_API_KEY", None)

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from atlas_auth.auth.provider import (  # noqa: E402
    FirebaseAuthService,
    ProviderIdentity,
    get_firebase_auth_service,
)
from atlas_auth.core.security import hash_password  # noqa: E402
from atlas_auth.core.settings import Settings, get_settings  # noqa: E402
from atlas_auth.db.engine import get_session  # noqa: E402
from atlas_auth.main import app  # noqa: E402
from atlas_auth.user.models import User  # noqa: E402

TEST_PASSWORD = "secret123"


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


def create_user(
    session: Session,
    *,
    username: str,
    email: str,
    password: str | None = TEST_PASSWORD,
    name: str | None = "Test Traveler",
    google_id: str | None = None,
) -> User:
    """Insert a user directly. Low bcrypt cost keeps the suite fast."""
    user = User(
        username=username,
        email=email,
        name=name,
        password_hash=hash_password(password, rounds=4) if password else None,
        google_id=google_id,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="test_user")
def test_user_fixture(session: Session):
    """A password account."""
    return create_user(session, username="traveler", email="traveler@example.com")


@pytest.fixture(name="google_user")
def google_user_fixture(session: Session):
    """An account created through Google sign-in (no password)."""
    return create_user(
        session,
        username="explorer",
        email="explorer@example.com",
        password=None,
        google_id="google-uid-789",
    )


@pytest.fixture(name="mock_firebase_auth")
def mock_firebase_auth_fixture():
    """Create a mock FirebaseAuthService."""
    mock_service = MagicMock(spec=FirebaseAuthService)
    mock_service.verify_id_token.return_value = ProviderIdentity(
        external_id="google-uid-123",
        email="newcomer@example.com",
        name="New Comer",
    )
    return mock_service


@pytest.fixture(name="mock_settings")
def mock_settings_fixture():
    """Create mock settings."""
    return Settings(
        env_name="test",
        database_url="sqlite://",
        session_secret_key="test-secret-key",
        client_url="http://testserver",
        auth_landing_path="/",
    )


@pytest.fixture(name="client")
def client_fixture(
    session: Session,
    mock_firebase_auth: MagicMock,
    mock_settings: Settings,
):
    """Create a test client with overridden dependencies."""

    def get_session_override():
        return session

    def get_firebase_auth_override():
        return mock_firebase_auth

    def get_settings_override():
        return mock_settings

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_firebase_auth_service] = get_firebase_auth_override
    app.dependency_overrides[get_settings] = get_settings_override

    client = TestClient(app, raise_server_exceptions=False)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    """Factory for extra users: ``make_user(username=..., email=...)``."""

    def _make_user(**kwargs) -> User:
        return create_user(session, **kwargs)

    return _make_user
