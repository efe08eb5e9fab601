"""Account management for the profile and administration endpoints."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from asoniped_backend.api.services.auth import AuthService
from asoniped_backend.api.services.errors import (
    InvalidCredentialsError,
    NotFoundError,
    UserAlreadyExistsError,
)
from asoniped_backend.database import UserRepository, UserSchema
from asoniped_backend.shared import UserStatus

logger = logging.getLogger(__name__)


class UserService:
    """Reads and updates accounts on behalf of their owner or an admin."""

    def __init__(self, session: Session, auth_service: AuthService) -> None:
        self._repository = UserRepository(session)
        self._auth = auth_service

    def get(self, user_id: int) -> UserSchema:
        user = self._repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_users(
        self,
        *,
        page: int,
        limit: int,
        search: str | None,
        status: UserStatus | None,
        role: str | None,
        sort: str,
        order: str,
    ) -> tuple[list[UserSchema], int]:
        return self._repository.list_page(
            page=page,
            limit=limit,
            search=search,
            status=status,
            role=role,
            sort=sort,
            order=order,
        )

    def list_eligible_for_handover(self) -> list[UserSchema]:
        return self._repository.list_eligible_for_handover()

    def update_profile(
        self,
        user: UserSchema,
        *,
        full_name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        status: UserStatus | None = None,
        roles: Iterable[str] | None = None,
    ) -> UserSchema:
        """Apply the given fields; ``None`` leaves a field unchanged."""
        if email is not None and email.lower() != user.email.lower():
            owner = self._repository.get_by_email(email)
            if owner is not None and owner.id != user.id:
                raise UserAlreadyExistsError("Email already exists")
            user.email = email
        if full_name is not None:
            user.full_name = full_name
        if phone is not None:
            user.phone = phone
        if status is not None:
            user.status = status
        if roles is not None:
            user.roles = [
                self._repository.ensure_role(name) for name in dict.fromkeys(roles)
            ]
        return self._repository.save(user)

    def change_password(
        self, user: UserSchema, *, current_password: str, new_password: str
    ) -> None:
        if not self._auth.verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")
        user.password_hash = self._auth.hash_password(new_password)
        self._repository.save(user)
        logger.info("User %s changed their password", user.id)

    def delete(self, user_id: int) -> bool:
        deleted = self._repository.delete(user_id)
        if deleted:
            logger.info("Deleted user %s", user_id)
        return deleted

    def assign_role(self, user_id: int, role_name: str) -> UserSchema:
        user = self.get(user_id)
        role = self._repository.ensure_role(role_name)
        if role not in user.roles:
            user.roles.append(role)
        return self._repository.save(user)

    def remove_role(self, user_id: int, role_name: str) -> UserSchema:
        user = self.get(user_id)
        role = self._repository.get_role(role_name)
        if role is None:
            raise NotFoundError("Role not found")
        if role in user.roles:
            user.roles.remove(role)
        return self._repository.save(user)
