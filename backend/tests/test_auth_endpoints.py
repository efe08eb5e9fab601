from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest
from fastapi.testclient import TestClient

from asoniped_backend.api import create_api
from asoniped_backend.database import get_session
from asoniped_backend.database.schemas import RoleSchema, UserSchema

if TYPE_CHECKING:
    from collections.abc import Generator, Iterator


class FakeUserRepository:
    """In-memory repository used to mock database operations."""

    def __init__(
        self, session: Any
    ) -> None:  # pragma: no cover - session unused in fake repo
        self._session = session

    _store: dict[int, UserSchema] = {}  # noqa: RUF012
    _roles: dict[str, RoleSchema] = {}  # noqa: RUF012

    @classmethod
    def reset(cls) -> None:
        cls._store = {}
        cls._roles = {}

    def get_by_id(self, user_id: int) -> UserSchema | None:
        return type(self)._store.get(user_id)

    def get_by_username(self, username: str) -> UserSchema | None:
        return next(
            (user for user in type(self)._store.values() if user.username == username),
            None,
        )

    def get_by_email(self, email: str) -> UserSchema | None:
        return next(
            (
                user
                for user in type(self)._store.values()
                if user.email.lower() == email.lower()
            ),
            None,
        )

    def get_by_login(self, identifier: str) -> UserSchema | None:
        return self.get_by_username(identifier) or self.get_by_email(identifier)

    def ensure_role(self, name: str) -> RoleSchema:
        roles = type(self)._roles
        if name not in roles:
            roles[name] = RoleSchema(id=len(roles) + 1, name=name)
        return roles[name]

    def add(self, user: UserSchema) -> UserSchema:
        if user.id is None:
            user.id = len(type(self)._store) + 1
        if getattr(user, "created_at", None) is None:
            timestamp = datetime.now(UTC)
            user.created_at = timestamp
            user.updated_at = timestamp
        type(self)._store[user.id] = user
        return user


@pytest.fixture(autouse=True)
def reset_repo() -> Iterator[None]:
    FakeUserRepository.reset()
    yield
    FakeUserRepository.reset()


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    monkeypatch.setattr(
        "asoniped_backend.api.services.auth.UserRepository", FakeUserRepository
    )
    monkeypatch.setattr(
        "asoniped_backend.api.dependencies.UserRepository", FakeUserRepository
    )

    app = create_api()

    def override_session() -> Generator[None, None, None]:
        yield None

    app.dependency_overrides[get_session] = override_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "username": "carlos",
        "email": "carlos@example.com",
        "password": "Password123",
        "full_name": "Carlos Mora",
        "phone": "88887777",
    }
    payload.update(overrides)
    return payload


def test_register_user_success(client: TestClient) -> None:
    payload = _payload()
    response = client.post("/users/register", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["token"]["token_type"] == "bearer"  # noqa: S105
    assert data["user"]["username"] == payload["username"]
    assert data["user"]["roles"] == ["user"]
    assert "access_token" in data["token"]
    assert "password" not in data["user"]


def test_register_user_username_conflict(client: TestClient) -> None:
    assert client.post("/users/register", json=_payload()).status_code == 201

    response = client.post(
        "/users/register", json=_payload(email="other@example.com")
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Username already exists"


def test_register_user_email_conflict(client: TestClient) -> None:
    assert client.post("/users/register", json=_payload()).status_code == 201

    response = client.post(
        "/users/register", json=_payload(username="otro", email="CARLOS@example.com")
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already exists"


@pytest.mark.parametrize(
    "overrides",
    [
        {"username": "carlos1"},
        {"username": "averyverylongname"},
        {"email": "not-an-email"},
        {"email": "pablo@.example..com"},
        {"email": "pablo@example"},
        {"full_name": "Carlos"},
        {"phone": "1234"},
        {"password": "short"},
        {"password": "has spaces 1"},
    ],
)
def test_register_user_rejects_invalid_fields(
    client: TestClient, overrides: dict[str, str]
) -> None:
    response = client.post("/users/register", json=_payload(**overrides))

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request"


def test_register_user_missing_field(client: TestClient) -> None:
    payload = _payload()
    del payload["email"]

    response = client.post("/users/register", json=payload)

    assert response.status_code == 400


def test_login_user_success(client: TestClient) -> None:
    register_payload = _payload()
    assert client.post("/users/register", json=register_payload).status_code == 201

    response = client.post(
        "/users/login",
        json={"username": "carlos", "password": register_payload["password"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token"]["token_type"] == "bearer"  # noqa: S105
    assert data["user"]["username"] == register_payload["username"]


def test_login_with_email(client: TestClient) -> None:
    assert client.post("/users/register", json=_payload()).status_code == 201

    response = client.post(
        "/users/login",
        json={"username": "carlos@example.com", "password": "Password123"},
    )

    assert response.status_code == 200


def test_login_user_invalid_credentials(client: TestClient) -> None:
    payload = {
        "username": "Unknown",
        "password": "Password123",
    }
    response = client.post("/users/login", json=payload)

    assert response.status_code == 401


def test_login_user_wrong_password(client: TestClient) -> None:
    assert client.post("/users/register", json=_payload()).status_code == 201

    response = client.post(
        "/users/login", json={"username": "carlos", "password": "Wrong123"}
    )

    assert response.status_code == 401


def test_profile_requires_token(client: TestClient) -> None:
    assert client.get("/users/profile").status_code == 401


def test_profile_rejects_malformed_token(client: TestClient) -> None:
    response = client.get(
        "/users/profile", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401


def test_profile_returns_current_user(client: TestClient) -> None:
    token = client.post("/users/register", json=_payload()).json()["token"]

    response = client.get(
        "/users/profile",
        headers={"Authorization": f"Bearer {token['access_token']}"},
    )

    assert response.status_code == 200
    assert response.json()["email"] == "carlos@example.com"
