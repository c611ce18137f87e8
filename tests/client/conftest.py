import httpx
import pytest
from fastapi.testclient import TestClient

from atlas_auth.client.api import AuthApiClient
from atlas_auth.main import app


@pytest.fixture(name="api")
def api_fixture(client: TestClient):
    """AuthApiClient talking to the app in-process.

    Depends on ``client`` so the dependency overrides are in place.
    """
    transport = httpx.ASGITransport(app=app)
    return AuthApiClient.create("http://testserver", transport=transport)
