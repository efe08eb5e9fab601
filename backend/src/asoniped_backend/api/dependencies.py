"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from asoniped_backend.api.services import (
    AuthService,
    DonationService,
    RecordService,
    TicketRooms,
    TicketService,
    UserService,
    VolunteerService,
    is_admin,
)
from asoniped_backend.database import (
    DatabaseService,
    UserRepository,
    UserSchema,
    get_database,
    get_session,
)
from asoniped_backend.database.dependencies import SettingsDep
from asoniped_backend.shared import UserStatus

_security = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_session)]
DatabaseDep = Annotated[DatabaseService, Depends(get_database)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(_security)]


def get_auth_service(settings: SettingsDep) -> AuthService:
    """Return an :class:`AuthService` bound to the current settings."""

    return AuthService(settings=settings)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def resolve_user(
    token: str, session: Session, auth_service: AuthService
) -> UserSchema:
    try:
        payload = auth_service.decode_access_token(token)
    except jwt.PyJWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        ) from exc

    try:
        user_id = int(payload.sub)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject"
        ) from exc

    user = UserRepository(session).get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found"
        )
    if user.status != UserStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is inactive"
        )
    return user


def get_current_user(
    credentials: CredentialsDep,
    session: SessionDep,
    auth_service: AuthServiceDep,
) -> UserSchema:
    """Resolve the authenticated user from a bearer token."""

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing credentials"
        )
    return resolve_user(credentials.credentials, session, auth_service)


def get_optional_user(
    credentials: CredentialsDep,
    session: SessionDep,
    auth_service: AuthServiceDep,
) -> UserSchema | None:
    """Resolve the caller when a token is sent; anonymous callers get ``None``."""

    if credentials is None:
        return None
    return resolve_user(credentials.credentials, session, auth_service)


CurrentUser = Annotated[UserSchema, Depends(get_current_user)]
OptionalUser = Annotated[UserSchema | None, Depends(get_optional_user)]


def require_admin(user: CurrentUser) -> UserSchema:
    """Allow only callers holding the ``admin`` role."""

    if not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required"
        )
    return user


AdminUser = Annotated[UserSchema, Depends(require_admin)]


def get_ticket_rooms(connection: HTTPConnection) -> TicketRooms:
    """Return the rooms registry owned by the running application."""

    return connection.app.state.ticket_rooms


TicketRoomsDep = Annotated[TicketRooms, Depends(get_ticket_rooms)]


def get_user_service(
    session: SessionDep, auth_service: AuthServiceDep
) -> UserService:
    return UserService(session, auth_service)


def get_donation_service(session: SessionDep) -> DonationService:
    return DonationService(session)


def get_ticket_service(session: SessionDep) -> TicketService:
    return TicketService(session)


def get_record_service(session: SessionDep) -> RecordService:
    return RecordService(session)


def get_volunteer_service(session: SessionDep) -> VolunteerService:
    return VolunteerService(session)


__all__ = [
    "AdminUser",
    "AuthServiceDep",
    "CurrentUser",
    "DatabaseDep",
    "OptionalUser",
    "SessionDep",
    "TicketRoomsDep",
    "get_auth_service",
    "get_current_user",
    "get_donation_service",
    "get_optional_user",
    "get_record_service",
    "get_ticket_rooms",
    "get_ticket_service",
    "get_user_service",
    "get_volunteer_service",
    "require_admin",
    "resolve_user",
]
