import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from vortex_auth.api.middleware.security_headers import SecurityHeadersMiddleware


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)

    @app.get("/ping")
    async def ping():
        return PlainTextResponse(
            "pong", headers={"Server": "uvicorn", "X-Powered-By": "python"}
        )

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database went away")

    return app


@pytest.mark.asyncio
async def test_headers_on_plain_http():
    transport = ASGITransport(app=build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/ping")

    headers = response.headers
    assert headers["X-Frame-Options"] == "DENY"
    assert headers["X-Content-Type-Options"] == "nosniff"
    assert headers["X-XSS-Protection"] == "1; mode=block"
    assert headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert headers["Permissions-Policy"] == "camera=(), microphone=(), geolocation=(), payment=()"
    assert headers["Content-Security-Policy"].startswith("default-src 'self'; script-src")
    assert "frame-ancestors 'none'" in headers["Content-Security-Policy"]
    assert "Strict-Transport-Security" not in headers
    assert "Server" not in headers
    assert "X-Powered-By" not in headers


@pytest.mark.asyncio
async def test_hsts_behind_tls_proxy():
    transport = ASGITransport(app=build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/ping", headers={"X-Forwarded-Proto": "https"})

    assert response.headers["Strict-Transport-Security"] == (
        "max-age=31536000; includeSubDomains; preload"
    )


@pytest.mark.asyncio
async def test_hsts_on_https():
    transport = ASGITransport(app=build_app())
    async with AsyncClient(transport=transport, base_url="https://test") as client:
        response = await client.get("/ping")

    assert "Strict-Transport-Security" in response.headers


@pytest.mark.asyncio
async def test_headers_on_unhandled_error():
    transport = ASGITransport(app=build_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "code": "INTERNAL_ERROR",
    }
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "Content-Security-Policy" in response.headers
