"""Tests for SecurityHeadersMiddleware."""

import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from core.middleware import SecurityHeadersMiddleware


def _make_app() -> FastAPI:
    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/ping")
    async def ping():
        return PlainTextResponse("pong")

    @app.get("/docs")
    async def docs():
        return PlainTextResponse("swagger")

    app.add_middleware(SecurityHeadersMiddleware)
    return app


@pytest.fixture
async def client():
    transport = ASGITransport(app=_make_app())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.unit
class TestSecurityHeadersMiddleware:
    async def test_adds_headers(self, client: AsyncClient):
        response = await client.get("/ping")

        assert response.text == "pong"
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "no-referrer"
        assert "default-src 'none'" in response.headers["content-security-policy"]

    async def test_docs_skip_csp(self, client: AsyncClient):
        response = await client.get("/docs")

        assert "content-security-policy" not in response.headers
        assert response.headers["x-frame-options"] == "DENY"
