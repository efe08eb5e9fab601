"""Account, authentication and role endpoints."""

from __future__ import annotations

import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from asoniped_backend.api.dependencies import (
    AdminUser,
    AuthServiceDep,
    CurrentUser,
    SessionDep,
    get_user_service,
)
from asoniped_backend.api.errors import http_error
from asoniped_backend.api.models import (
    AdminUserCreateRequest,
    AdminUserUpdateRequest,
    AuthTokenResponse,
    ChangePasswordRequest,
    MessageResponse,
    ProfileUpdateRequest,
    RoleAssignmentRequest,
    UserListResponse,
    UserLoginRequest,
    UserLoginResponse,
    UserRegisterRequest,
    UserRegisterResponse,
    UserResponse,
)
from asoniped_backend.api.services import (
    InvalidCredentialsError,
    ServiceError,
    UserAlreadyExistsError,
    UserService,
)
from asoniped_backend.shared import UserStatus

router = APIRouter(prefix="/users", tags=["users"])

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.post(
    "/register",
    response_model=UserRegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_user(
    payload: UserRegisterRequest,
    session: SessionDep,
    auth_service: AuthServiceDep,
) -> UserRegisterResponse:
    """Register a new user and issue an access token."""

    try:
        user, token = auth_service.register_user(
            session=session,
            username=payload.username,
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
            phone=payload.phone,
        )
    except UserAlreadyExistsError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=exc.detail
        ) from exc

    user_model = UserResponse.model_validate(user, from_attributes=True)
    token_model = AuthTokenResponse(access_token=token)
    return UserRegisterResponse(user=user_model, token=token_model)


@router.post("/login", response_model=UserLoginResponse)
def login_user(
    payload: UserLoginRequest,
    session: SessionDep,
    auth_service: AuthServiceDep,
) -> UserLoginResponse:
    """Authenticate with a username or e-mail and password."""

    try:
        user, token = auth_service.authenticate_user(
            session=session, login=payload.username, password=payload.password
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.detail
        ) from exc

    user_model = UserResponse.model_validate(user, from_attributes=True)
    token_model = AuthTokenResponse(access_token=token)
    return UserLoginResponse(user=user_model, token=token_model)


@router.get("/profile", response_model=UserResponse)
def get_profile(user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(user, from_attributes=True)


@router.put("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    user: CurrentUser,
    service: UserServiceDep,
) -> UserResponse:
    try:
        updated = service.update_profile(user, **payload.model_dump())
    except ServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(updated, from_attributes=True)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    user: CurrentUser,
    service: UserServiceDep,
) -> MessageResponse:
    """Replace the password after checking the current one."""

    try:
        service.change_password(
            user,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Password updated")


@router.get("", response_model=UserListResponse)
def list_users(
    _: AdminUser,
    service: UserServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    search: str | None = None,
    user_status: Annotated[UserStatus | None, Query(alias="status")] = None,
    role: str | None = None,
    sort: str = "created_at",
    order: Annotated[str, Query(pattern="^(asc|desc|ASC|DESC)$")] = "desc",
) -> UserListResponse:
    users, total = service.list_users(
        page=page,
        limit=limit,
        search=search,
        status=user_status,
        role=role,
        sort=sort,
        order=order,
    )
    return UserListResponse(
        users=[
            UserResponse.model_validate(user, from_attributes=True) for user in users
        ],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.get("/eligible-for-handover", response_model=list[UserResponse])
def list_eligible_for_handover(
    _: AdminUser, service: UserServiceDep
) -> list[UserResponse]:
    """Active non-admin accounts that could receive an admin-created record."""

    return [
        UserResponse.model_validate(user, from_attributes=True)
        for user in service.list_eligible_for_handover()
    ]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: AdminUserCreateRequest,
    _: AdminUser,
    session: SessionDep,
    auth_service: AuthServiceDep,
) -> UserResponse:
    try:
        user = auth_service.create_user(
            session=session,
            username=payload.username,
            email=payload.email,
            password=payload.password,
            full_name=payload.full_name,
            phone=payload.phone,
            roles=payload.roles,
            status=payload.status,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("/assign-role", response_model=UserResponse)
def assign_role(
    payload: RoleAssignmentRequest,
    _: AdminUser,
    service: UserServiceDep,
) -> UserResponse:
    try:
        user = service.assign_role(payload.user_id, payload.role)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user, from_attributes=True)


@router.post("/remove-role", response_model=UserResponse)
def remove_role(
    payload: RoleAssignmentRequest,
    _: AdminUser,
    service: UserServiceDep,
) -> UserResponse:
    try:
        user = service.remove_role(payload.user_id, payload.role)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user, from_attributes=True)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, _: AdminUser, service: UserServiceDep) -> UserResponse:
    try:
        user = service.get(user_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user, from_attributes=True)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: AdminUserUpdateRequest,
    _: AdminUser,
    service: UserServiceDep,
) -> UserResponse:
    try:
        user = service.update_profile(service.get(user_id), **payload.model_dump())
    except ServiceError as exc:
        raise http_error(exc) from exc
    return UserResponse.model_validate(user, from_attributes=True)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int, _: AdminUser, service: UserServiceDep
) -> MessageResponse:
    """Delete an account; unknown ids are accepted."""

    service.delete(user_id)
    return MessageResponse(message="User deleted")
