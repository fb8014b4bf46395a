import asyncio

from fastapi.testclient import TestClient

from conftest import make_settings
from app.main import create_app


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json()["status"] == "healthy"
    assert client.get("/api/health/db").json() == {"status": "healthy", "database": "connected"}


def test_unknown_route_uses_error_shape(client: TestClient) -> None:
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"status": "fail", "message": "Can't find /api/nothing-here on this server!"}


def test_unexpected_error_is_hidden_outside_debug() -> None:
    app = create_app(make_settings())

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Something went wrong!"}


def test_unexpected_error_includes_stack_in_debug() -> None:
    app = create_app(make_settings(debug=True))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    body = response.json()
    assert response.status_code == 500
    assert body["status"] == "error"
    assert body["message"] == "kaboom"
    assert body["error"] == "RuntimeError"
    assert any("kaboom" in line for line in body["stack"])


def test_slow_request_times_out() -> None:
    app = create_app(make_settings(request_timeout_seconds=0.05))

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(1)
        return {"done": True}

    with TestClient(app) as client:
        response = client.get("/slow")

    assert response.status_code == 408
    assert response.json() == {"status": "fail", "message": "Request timeout"}


def test_apps_with_different_settings_are_isolated() -> None:
    first = create_app(make_settings())
    second = create_app(make_settings())

    assert first.state.token_issuer.secret_key != second.state.token_issuer.secret_key
    assert first.state.engine is not second.state.engine
