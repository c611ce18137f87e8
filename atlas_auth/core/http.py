"""httpx client factory used by the auth API client.

Clients talk JSON to ``/api/auth`` and keep cookies between calls, which is
what carries the session after a sign-in.
"""

import httpx

USER_AGENT = "atlas-auth-client"

# Seconds. A slow bcrypt check on the server counts against the read timeout.
DEFAULT_TIMEOUT = httpx.Timeout(connect=5.0, read=10.0, write=10.0, pool=5.0)
DEFAULT_LIMITS = httpx.Limits(max_connections=20, max_keepalive_connections=10)


def create_http_client(
    base_url: str = "",
    *,
    timeout: httpx.Timeout = DEFAULT_TIMEOUT,
    limits: httpx.Limits = DEFAULT_LIMITS,
    transport: httpx.AsyncBaseTransport | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Create an async client for the auth API.

    Args:
        base_url: Origin of the API (empty string for none)
        timeout: Connect/read/write/pool timeouts
        limits: Connection pool limits
        transport: Custom transport, e.g. ``httpx.ASGITransport`` to talk
            to an in-process app
        headers: Extra headers sent with every request

    Returns:
        Configured httpx.AsyncClient instance
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        limits=limits,
        transport=transport,
        headers={
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            **(headers or {}),
        },
    )
