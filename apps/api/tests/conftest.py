import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest
import pytest_asyncio


def _configure_path() -> None:
    src_path = Path(__file__).resolve().parents[1] / "src"
    if src_path.exists():
        sys.path.insert(0, str(src_path))


_configure_path()

from loyalty_gateway.api.dependencies.clients import get_app_settings, get_http_client  # noqa: E402
from loyalty_gateway.app import create_app  # noqa: E402
from loyalty_gateway.core.settings import Settings  # noqa: E402

RIVO_HOST = "developer-api.rivo.io"
RIVO_PREFIX = "/merchant_api/v1"
SHOPIFY_HOST = "test-store.myshopify.com"
RESEND_HOST = "api.resend.com"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Routes outbound requests by (method, host, path) and records them."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str, str], Responder] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        host: str,
        path: str,
        *,
        json: Any = None,
        status_code: int = 200,
        responder: Responder | None = None,
    ) -> None:
        if responder is None:
            def responder(request: httpx.Request, _json=json, _status=status_code) -> httpx.Response:
                return httpx.Response(_status, json=_json)
        self.routes[(method.upper(), host, path)] = responder

    def rivo(self, method: str, endpoint: str, **kwargs: Any) -> None:
        self.add(method, RIVO_HOST, f"{RIVO_PREFIX}/{endpoint}", **kwargs)

    def calls_to(self, host: str, path: str | None = None) -> List[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.url.host == host and (path is None or request.url.path == path)
        ]

    def rivo_calls(self, endpoint: str | None = None) -> List[httpx.Request]:
        return self.calls_to(RIVO_HOST, None if endpoint is None else f"{RIVO_PREFIX}/{endpoint}")

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.host, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"error": f"no fake route for {request.method} {request.url}"})
        return responder(request)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        rivo_api_key="rivo-test-key",
        shopify_store="test-store.myshopify.com",
        shopify_access_token="shpat_test",
        resend_api_key="re_test",
        resend_from="rewards@example.com",
        email_from_name="Wingstop",
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def http_client(upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handle))
    try:
        yield client
    finally:
        await client.aclose()


@pytest_asyncio.fixture
async def api_client(settings, http_client):
    app = create_app()
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: http_client

    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
