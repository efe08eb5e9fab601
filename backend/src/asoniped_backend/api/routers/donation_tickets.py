"""Endpoints for tickets opened by signed-in donors."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from asoniped_backend.api.dependencies import (
    AdminUser,
    CurrentUser,
    get_ticket_service,
)
from asoniped_backend.api.errors import http_error
from asoniped_backend.api.models import (
    DonationTicketCreateRequest,
    DonationTicketResponse,
    TicketUpdateRequest,
)
from asoniped_backend.api.services import ServiceError, TicketService
from asoniped_backend.shared import TicketStatus

router = APIRouter(prefix="/donation-tickets", tags=["donation-tickets"])

TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]


def _response(ticket) -> DonationTicketResponse:
    return DonationTicketResponse.model_validate(ticket, from_attributes=True)


@router.post(
    "", response_model=DonationTicketResponse, status_code=status.HTTP_201_CREATED
)
def create_ticket(
    payload: DonationTicketCreateRequest,
    user: CurrentUser,
    service: TicketServiceDep,
) -> DonationTicketResponse:
    try:
        ticket = service.create_donation_ticket(payload.donation_id, user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.get("", response_model=list[DonationTicketResponse])
def list_tickets(
    _: AdminUser, service: TicketServiceDep
) -> list[DonationTicketResponse]:
    return [_response(ticket) for ticket in service.list_donation_tickets()]


@router.get("/my-tickets", response_model=list[DonationTicketResponse])
def list_my_tickets(
    user: CurrentUser, service: TicketServiceDep
) -> list[DonationTicketResponse]:
    return [_response(ticket) for ticket in service.list_user_tickets(user.id)]


@router.get("/user/{user_id}", response_model=list[DonationTicketResponse])
def list_user_tickets(
    user_id: int, _: AdminUser, service: TicketServiceDep
) -> list[DonationTicketResponse]:
    return [_response(ticket) for ticket in service.list_user_tickets(user_id)]


@router.get("/{ticket_id}", response_model=DonationTicketResponse)
def get_ticket(
    ticket_id: int, user: CurrentUser, service: TicketServiceDep
) -> DonationTicketResponse:
    """Return a ticket to its owner or to an admin."""

    try:
        ticket = service.get_donation_ticket(ticket_id, user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.put("/{ticket_id}", response_model=DonationTicketResponse)
def update_ticket(
    ticket_id: int,
    payload: TicketUpdateRequest,
    _: AdminUser,
    service: TicketServiceDep,
) -> DonationTicketResponse:
    try:
        ticket = service.update_donation_ticket(
            ticket_id,
            status=payload.status,
            assigned_admin_id=payload.assigned_admin_id,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.patch("/{ticket_id}/close", response_model=DonationTicketResponse)
def close_ticket(
    ticket_id: int, _: AdminUser, service: TicketServiceDep
) -> DonationTicketResponse:
    try:
        ticket = service.set_donation_ticket_status(ticket_id, TicketStatus.CLOSED)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.patch("/{ticket_id}/archive", response_model=DonationTicketResponse)
def archive_ticket(
    ticket_id: int, _: AdminUser, service: TicketServiceDep
) -> DonationTicketResponse:
    try:
        ticket = service.set_donation_ticket_status(ticket_id, TicketStatus.ARCHIVED)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)
