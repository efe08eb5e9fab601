"""Authentication domain logic."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Tuple

import jwt
from sqlalchemy.orm import Session

from asoniped_backend.api.services.errors import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from asoniped_backend.database import UserRepository, UserSchema
from asoniped_backend.settings import BackendSettings, get_settings
from asoniped_backend.shared import RoleName, UserStatus

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


@dataclass(slots=True)
class TokenPayload:
    """Represents encoded token metadata."""

    sub: str
    exp: datetime
    roles: list[str] = field(default_factory=list)


class AuthService:
    """Handles password hashing, token generation and account sign-up."""

    def __init__(
        self,
        *,
        secret_key: str | None = None,
        algorithm: str = "HS256",
        access_token_ttl_minutes: int | None = None,
        settings: BackendSettings | None = None,
    ) -> None:
        config = settings or get_settings()
        self._secret_key = secret_key or config.auth_secret_key
        self._algorithm = algorithm
        self._access_token_ttl = timedelta(
            minutes=access_token_ttl_minutes or config.access_token_ttl_minutes
        )

    def hash_password(self, password: str) -> str:
        """Hash a password using PBKDF2 with a random salt."""

        salt = secrets.token_bytes(16)
        digest = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS
        )
        return f"{base64.b64encode(salt).decode()}:{base64.b64encode(digest).decode()}"

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Validate a password against a stored PBKDF2 hash."""

        try:
            salt_b64, hash_b64 = password_hash.split(":", 1)
        except ValueError:
            return False
        salt = base64.b64decode(salt_b64.encode())
        expected = base64.b64decode(hash_b64.encode())
        actual = hashlib.pbkdf2_hmac(
            "sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS
        )
        return hmac.compare_digest(actual, expected)

    def create_access_token(self, subject: str, roles: Iterable[str] = ()) -> str:
        expires_at = datetime.now(tz=timezone.utc) + self._access_token_ttl
        payload = {"sub": subject, "exp": expires_at, "roles": list(roles)}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> TokenPayload:
        data = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        return TokenPayload(
            sub=data["sub"],
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
            roles=list(data.get("roles", [])),
        )

    def issue_token(self, user: UserSchema) -> str:
        """Return a bearer token for ``user`` carrying its role names."""
        return self.create_access_token(str(user.id), user.role_names)

    def create_user(
        self,
        *,
        session: Session,
        username: str,
        email: str,
        password: str,
        full_name: str,
        phone: str | None = None,
        roles: Iterable[str] | None = None,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> UserSchema:
        """Persist a new account with its roles (``user`` when none given)."""
        repository = UserRepository(session)
        if repository.get_by_username(username) is not None:
            raise UserAlreadyExistsError("Username already exists")
        if repository.get_by_email(email) is not None:
            raise UserAlreadyExistsError("Email already exists")

        role_names = list(roles) if roles else [RoleName.USER.value]
        user = UserSchema(
            username=username,
            email=email,
            password_hash=self.hash_password(password),
            full_name=full_name,
            phone=phone,
            status=status,
            roles=[repository.ensure_role(name) for name in dict.fromkeys(role_names)],
        )
        user = repository.add(user)
        logger.info("Created user %s with roles %s", user.id, user.role_names)
        return user

    def register_user(
        self,
        *,
        session: Session,
        username: str,
        email: str,
        password: str,
        full_name: str,
        phone: str | None = None,
    ) -> Tuple[UserSchema, str]:
        user = self.create_user(
            session=session,
            username=username,
            email=email,
            password=password,
            full_name=full_name,
            phone=phone,
        )
        return user, self.issue_token(user)

    def authenticate_user(
        self, *, session: Session, login: str, password: str
    ) -> Tuple[UserSchema, str]:
        """Check credentials given as username or e-mail."""
        repository = UserRepository(session)
        user = repository.get_by_login(login)
        if user is None or not self.verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")
        if user.status != UserStatus.ACTIVE:
            raise InvalidCredentialsError("Account is inactive")
        return user, self.issue_token(user)
