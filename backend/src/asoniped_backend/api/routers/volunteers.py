"""Volunteer options, applications and registrations."""

from __future__ import annotations

import math
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from asoniped_backend.api.dependencies import (
    AdminUser,
    CurrentUser,
    OptionalUser,
    get_volunteer_service,
)
from asoniped_backend.api.errors import http_error
from asoniped_backend.api.models import (
    AvailableSpotsResponse,
    CancelRegistrationRequest,
    EnrollmentResponse,
    EnrollResponse,
    MessageResponse,
    RegistrationRequest,
    RegistrationResponse,
    RegistrationResultResponse,
    VolunteerCreateRequest,
    VolunteerListResponse,
    VolunteerOptionRequest,
    VolunteerOptionResponse,
    VolunteerResponse,
    VolunteerUpdateRequest,
)
from asoniped_backend.api.services import (
    OptionAvailability,
    ServiceError,
    VolunteerService,
)
from asoniped_backend.shared import VolunteerStatus

options_router = APIRouter(prefix="/volunteer-options", tags=["volunteer-options"])
volunteers_router = APIRouter(prefix="/volunteers", tags=["volunteers"])
registrations_router = APIRouter(
    prefix="/volunteer-registrations", tags=["volunteer-registrations"]
)

VolunteerServiceDep = Annotated[VolunteerService, Depends(get_volunteer_service)]


def _option_response(availability: OptionAvailability) -> VolunteerOptionResponse:
    fields = VolunteerOptionRequest.model_validate(availability.option).model_dump()
    return VolunteerOptionResponse(
        **fields,
        id=availability.option.id,
        registered_count=availability.registered_count,
        available_spots=availability.available_spots,
        is_registered=availability.is_registered,
    )


def _spots(availability: OptionAvailability) -> AvailableSpotsResponse:
    return AvailableSpotsResponse(
        volunteer_option_id=availability.option.id,
        total_spots=availability.total_spots,
        registered_count=availability.registered_count,
        available_spots=availability.available_spots,
    )


# Options


@options_router.get("", response_model=list[VolunteerOptionResponse])
def list_options(
    user: OptionalUser, service: VolunteerServiceDep
) -> list[VolunteerOptionResponse]:
    """List options; ``is_registered`` is filled for signed-in callers."""

    return [_option_response(item) for item in service.list_options(user)]


@options_router.post(
    "", response_model=VolunteerOptionResponse, status_code=status.HTTP_201_CREATED
)
def create_option(
    payload: VolunteerOptionRequest, _: AdminUser, service: VolunteerServiceDep
) -> VolunteerOptionResponse:
    option = service.create_option(payload.model_dump())
    return _option_response(service.availability(option.id))


@options_router.put("/{option_id}", response_model=VolunteerOptionResponse)
def update_option(
    option_id: int,
    payload: VolunteerOptionRequest,
    _: AdminUser,
    service: VolunteerServiceDep,
) -> VolunteerOptionResponse:
    try:
        service.update_option(option_id, payload.model_dump())
        availability = service.availability(option_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _option_response(availability)


@options_router.delete("/{option_id}", response_model=MessageResponse)
def delete_option(
    option_id: int, _: AdminUser, service: VolunteerServiceDep
) -> MessageResponse:
    service.delete_option(option_id)
    return MessageResponse(message="Volunteer option deleted")


# Applications


@volunteers_router.get("", response_model=VolunteerListResponse)
def list_volunteers(
    _: AdminUser,
    service: VolunteerServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    volunteer_status: Annotated[VolunteerStatus | None, Query(alias="status")] = None,
    name: str | None = None,
) -> VolunteerListResponse:
    volunteers, total = service.list_volunteers(
        page=page, limit=limit, status=volunteer_status, name=name
    )
    return VolunteerListResponse(
        volunteers=[VolunteerResponse.model_validate(item) for item in volunteers],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@volunteers_router.get("/me", response_model=list[EnrollmentResponse])
def my_enrollments(
    user: CurrentUser, service: VolunteerServiceDep
) -> list[EnrollmentResponse]:
    return [
        EnrollmentResponse.model_validate(item) for item in service.enrollments(user)
    ]


@volunteers_router.post("/enroll/{option_id}", response_model=EnrollResponse)
def enroll(
    option_id: int, user: CurrentUser, service: VolunteerServiceDep
) -> EnrollResponse:
    """File an application for an option using the account's data."""

    try:
        volunteer, created = service.enroll(user, option_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    message = "Enrollment created" if created else "Already enrolled"
    return EnrollResponse(message=message, volunteer_id=volunteer.id, created=created)


@volunteers_router.get("/{volunteer_id}", response_model=VolunteerResponse)
def get_volunteer(
    volunteer_id: int, _: AdminUser, service: VolunteerServiceDep
) -> VolunteerResponse:
    try:
        volunteer = service.get_volunteer(volunteer_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return VolunteerResponse.model_validate(volunteer)


@volunteers_router.post(
    "", response_model=VolunteerResponse, status_code=status.HTTP_201_CREATED
)
def create_volunteer(
    payload: VolunteerCreateRequest, service: VolunteerServiceDep
) -> VolunteerResponse:
    try:
        volunteer = service.create_volunteer(payload.model_dump())
    except ServiceError as exc:
        raise http_error(exc) from exc
    return VolunteerResponse.model_validate(volunteer)


@volunteers_router.put("/{volunteer_id}", response_model=VolunteerResponse)
def update_volunteer(
    volunteer_id: int,
    payload: VolunteerUpdateRequest,
    _: AdminUser,
    service: VolunteerServiceDep,
) -> VolunteerResponse:
    try:
        volunteer = service.update_volunteer(
            volunteer_id, payload.model_dump(exclude_unset=True)
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return VolunteerResponse.model_validate(volunteer)


@volunteers_router.delete("/{volunteer_id}", response_model=MessageResponse)
def delete_volunteer(
    volunteer_id: int, _: AdminUser, service: VolunteerServiceDep
) -> MessageResponse:
    service.delete_volunteer(volunteer_id)
    return MessageResponse(message="Volunteer deleted")


# Registrations


@registrations_router.post("/register", response_model=RegistrationResultResponse)
def register(
    payload: RegistrationRequest, user: CurrentUser, service: VolunteerServiceDep
) -> RegistrationResultResponse:
    try:
        availability = service.register(
            user, payload.volunteer_option_id, notes=payload.notes
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return RegistrationResultResponse(
        message="Registered successfully", **_spots(availability).model_dump()
    )


@registrations_router.post("/cancel", response_model=RegistrationResultResponse)
def cancel(
    payload: CancelRegistrationRequest,
    user: CurrentUser,
    service: VolunteerServiceDep,
) -> RegistrationResultResponse:
    try:
        availability = service.cancel(user, payload.volunteer_option_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return RegistrationResultResponse(
        message="Registration cancelled", **_spots(availability).model_dump()
    )


@registrations_router.get(
    "/my-registrations", response_model=list[RegistrationResponse]
)
def my_registrations(
    user: CurrentUser, service: VolunteerServiceDep
) -> list[RegistrationResponse]:
    return [
        RegistrationResponse.model_validate(item)
        for item in service.user_registrations(user)
    ]


@registrations_router.get(
    "/available-spots/{option_id}", response_model=AvailableSpotsResponse
)
def available_spots(
    option_id: int, _: CurrentUser, service: VolunteerServiceDep
) -> AvailableSpotsResponse:
    try:
        availability = service.availability(option_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _spots(availability)


@registrations_router.get(
    "/volunteer-option/{option_id}", response_model=list[RegistrationResponse]
)
def option_registrations(
    option_id: int, _: AdminUser, service: VolunteerServiceDep
) -> list[RegistrationResponse]:
    try:
        registrations = service.option_registrations(option_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return [RegistrationResponse.model_validate(item) for item in registrations]
