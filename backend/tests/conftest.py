import secrets
import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from app.config import Settings
from app.main import create_app
from app.models.recipe import Recipe
from app.models.user import User, UserRole

PASSWORD = "secret123"


def make_settings(**overrides) -> Settings:
    values = {
        "secret_key": secrets.token_hex(32),
        "database_url": "sqlite+aiosqlite://",
        "db_create_all": True,
        "rate_limit_enabled": False,
        "redis_url": "",
        "log_dir": "",
        "debug": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture()
def client(app: FastAPI):
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def signup(client: TestClient, username: str, email: str | None = None, password: str = PASSWORD) -> dict:
    response = client.post(
        "/api/auth/signup",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def set_role(client: TestClient, user_id: str, role: UserRole) -> None:
    """Roles are never granted through the API, so tests write them directly."""
    async def _update():
        async with client.app.state.session_factory() as session:
            user = await session.get(User, uuid.UUID(user_id))
            user.role = role
            await session.commit()

    client.portal.call(_update)


def delete_user(client: TestClient, user_id: str) -> None:
    async def _delete():
        async with client.app.state.session_factory() as session:
            user = await session.get(User, uuid.UUID(user_id))
            await session.delete(user)
            await session.commit()

    client.portal.call(_delete)


def count_rows(client: TestClient, model) -> int:
    async def _count():
        async with client.app.state.session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))

    return client.portal.call(_count)


def count_users(client: TestClient) -> int:
    return count_rows(client, User)


def count_recipes(client: TestClient) -> int:
    return count_rows(client, Recipe)


def recipe_payload(**overrides) -> dict:
    payload = {
        "title": "Tomato Soup",
        "description": "A simple weeknight soup",
        "ingredients": ["tomatoes", "onion", "stock"],
        "steps": ["Chop everything", "Simmer for 20 minutes", "Blend"],
        "cooking_time": 30,
        "category": "Dinner",
    }
    payload.update(overrides)
    return payload


def create_recipe(client: TestClient, token: str, **overrides) -> dict:
    response = client.post("/api/recipes", json=recipe_payload(**overrides), headers=bearer(token))
    assert response.status_code == 201, response.text
    return response.json()
