"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from asoniped_backend.api import create_api
from asoniped_backend.api.services import AuthService
from asoniped_backend.database import (
    BaseSchema,
    DatabaseService,
    get_database,
    get_session,
)
from asoniped_backend.settings import get_settings

RegisterUser = Callable[..., dict[str, Any]]


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("AUTH_SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def database() -> Iterator[DatabaseService]:
    """Fresh in-memory database with every table created."""
    service = DatabaseService("sqlite://")
    BaseSchema.metadata.create_all(service.engine)
    yield service
    service.dispose()


@pytest.fixture
def db_session(database: DatabaseService) -> Iterator[Session]:
    with database.session() as session:
        yield session


@pytest.fixture
def app(database: DatabaseService) -> Iterator[FastAPI]:
    application = create_api()

    def override_session() -> Iterator[Session]:
        with database.session() as session:
            yield session

    application.dependency_overrides[get_session] = override_session
    application.dependency_overrides[get_database] = lambda: database
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_user(client: TestClient) -> RegisterUser:
    """Register an account and return its JSON plus ready-made auth headers."""

    def _register(
        username: str = "maria",
        *,
        email: str | None = None,
        password: str = "secret123",
        full_name: str = "Maria Lopez",
        phone: str = "88881234",
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "username": username,
            "email": email or f"{username.lower()}@example.com",
            "password": password,
            "full_name": full_name,
            "phone": phone,
        }
        response = client.post("/users/register", json=payload)
        assert response.status_code == 201, response.text
        data = response.json()
        token = data["token"]["access_token"]
        return {"user": data["user"], "headers": {"Authorization": f"Bearer {token}"}}

    return _register


@pytest.fixture
def user(register_user: RegisterUser) -> dict[str, Any]:
    return register_user("maria")


@pytest.fixture
def admin(client: TestClient, database: DatabaseService) -> dict[str, Any]:
    """Seed an administrator account and sign it in."""
    with database.session() as session:
        AuthService().create_user(
            session=session,
            username="admin",
            email="admin@example.com",
            password="secret123",
            full_name="Ana Administradora",
            phone="88881234",
            roles=["admin", "user"],
        )

    response = client.post(
        "/users/login", json={"username": "admin", "password": "secret123"}
    )
    assert response.status_code == 200, response.text
    data = response.json()
    token = data["token"]["access_token"]
    return {"user": data["user"], "headers": {"Authorization": f"Bearer {token}"}}
