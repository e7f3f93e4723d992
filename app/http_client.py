"""Shared HTTP client construction — connection pooling for outbound requests.

Every outbound client in the project is built here so that limits and
timeouts stay consistent. Per-request timeout overrides still work:
    resp = await client.get(url, timeout=15)

Usage:
    from app.http_client import build_client
    client = build_client(base_url=settings.api_base_url)
    ...
    await close_client(client)
"""

import httpx

_LIMITS = httpx.Limits(
    max_connections=50,
    max_keepalive_connections=20,
    keepalive_expiry=30,
)


def build_client(
    base_url: str = "",
    headers: dict | None = None,
    timeout: float = 30,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create a pooled AsyncClient. `transport` lets tests plug in MockTransport."""
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        timeout=timeout,
        limits=_LIMITS,
        follow_redirects=False,
        transport=transport,
    )


async def close_client(client: httpx.AsyncClient) -> None:
    """Shut down a client; tolerates an already-closed event loop."""
    try:
        await client.aclose()
    except RuntimeError:
        pass
