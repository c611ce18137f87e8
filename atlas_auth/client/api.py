"""Async client for the auth REST endpoints.

Every call returns an ``ApiResult`` instead of raising on non-2xx
responses, so forms can branch on the status code. Transport failures
(``httpx.HTTPError``) still raise.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx

from atlas_auth.core.constants import Routes
from atlas_auth.core.http import create_http_client


@dataclass(frozen=True)
class ApiResult:
    ok: bool
    status_code: int
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def error(self) -> str | None:
        return self.data.get("error")

    @property
    def message(self) -> str | None:
        return self.data.get("message")


class AuthApiClient:
    """Client for ``/api/auth``.

    The underlying ``httpx.AsyncClient`` keeps cookies, so a successful
    sign-in is visible to later ``get_session`` calls.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self._http = http_client

    @classmethod
    def create(
        cls, base_url: str, transport: httpx.AsyncBaseTransport | None = None
    ) -> "AuthApiClient":
        return cls(create_http_client(base_url=base_url, transport=transport))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AuthApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @staticmethod
    def _to_result(response: httpx.Response) -> ApiResult:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        return ApiResult(ok=response.is_success, status_code=response.status_code, data=data)

    async def _post(self, path: str, payload: dict[str, Any]) -> ApiResult:
        response = await self._http.post(f"{Routes.AUTH.prefix}{path}", json=payload)
        return self._to_result(response)

    async def register(
        self, *, username: str, password: str, name: str, email: str
    ) -> ApiResult:
        return await self._post(
            "/register",
            {"username": username, "password": password, "name": name, "email": email},
        )

    async def forgot_password(self, email: str) -> ApiResult:
        return await self._post("/forgot_password", {"email": email})

    async def reset_password(self, token: str, password: str) -> ApiResult:
        return await self._post("/reset_password", {"token": token, "password": password})

    async def sign_in_with_credentials(
        self,
        *,
        password: str,
        email: str | None = None,
        username: str | None = None,
        callback_url: str | None = None,
    ) -> ApiResult:
        payload: dict[str, Any] = {"password": password, "callback_url": callback_url}
        if email is not None:
            payload["email"] = email
        if username is not None:
            payload["username"] = username
        return await self._post("/callback/credentials", payload)

    async def sign_in_with_google(
        self, id_token: str, callback_url: str | None = None
    ) -> ApiResult:
        return await self._post(
            "/callback/google", {"id_token": id_token, "callback_url": callback_url}
        )

    async def get_session(self) -> ApiResult:
        response = await self._http.get(f"{Routes.AUTH.prefix}/session")
        return self._to_result(response)

    async def sign_out(self) -> ApiResult:
        return await self._post("/signout", {})
