"""Tickets followed through a public code instead of an account."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status

from asoniped_backend.api.dependencies import (
    AdminUser,
    OptionalUser,
    TicketRoomsDep,
    get_ticket_service,
)
from asoniped_backend.api.errors import http_error
from asoniped_backend.api.models import (
    AnonymousMessageCreateRequest,
    AnonymousMessageResponse,
    AnonymousTicketCreateRequest,
    AnonymousTicketResponse,
    TicketUpdateRequest,
)
from asoniped_backend.api.models.rooms import AnonymousMessageReceivedEvent
from asoniped_backend.api.services import (
    ServiceError,
    TicketService,
    anonymous_ticket_room,
    is_admin,
)
from asoniped_backend.shared import SenderType, TicketStatus

router = APIRouter(prefix="/anonymous-tickets", tags=["anonymous-tickets"])

TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]


def _response(ticket) -> AnonymousTicketResponse:
    return AnonymousTicketResponse.model_validate(ticket, from_attributes=True)


@router.post(
    "", response_model=AnonymousTicketResponse, status_code=status.HTTP_201_CREATED
)
def create_ticket(
    payload: AnonymousTicketCreateRequest, service: TicketServiceDep
) -> AnonymousTicketResponse:
    try:
        ticket = service.create_anonymous_ticket(
            payload.donation_id, payload.session_id
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.get("", response_model=list[AnonymousTicketResponse])
def list_tickets(
    _: AdminUser, service: TicketServiceDep
) -> list[AnonymousTicketResponse]:
    return [_response(ticket) for ticket in service.list_anonymous_tickets()]


@router.get("/id/{ticket_id}", response_model=AnonymousTicketResponse)
def get_ticket_by_id(
    ticket_id: int, _: AdminUser, service: TicketServiceDep
) -> AnonymousTicketResponse:
    try:
        ticket = service.get_anonymous_ticket_by_id(ticket_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.get("/{code}", response_model=AnonymousTicketResponse)
def get_ticket(code: str, service: TicketServiceDep) -> AnonymousTicketResponse:
    """Look a ticket up by its public code."""

    try:
        ticket = service.get_anonymous_ticket(code)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.get("/{code}/messages", response_model=list[AnonymousMessageResponse])
def list_messages(
    code: str, service: TicketServiceDep
) -> list[AnonymousMessageResponse]:
    try:
        messages = service.list_anonymous_messages(code)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return [
        AnonymousMessageResponse.model_validate(message, from_attributes=True)
        for message in messages
    ]


@router.post(
    "/{code}/messages",
    response_model=AnonymousMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def post_message(
    code: str,
    payload: AnonymousMessageCreateRequest,
    user: OptionalUser,
    service: TicketServiceDep,
    rooms: TicketRoomsDep,
    background_tasks: BackgroundTasks,
) -> AnonymousMessageResponse:
    """Add a message; replies sent with an admin token are marked as such."""

    sender = SenderType.USER
    if user is not None and is_admin(user):
        sender = SenderType.ADMIN
    try:
        message = service.post_anonymous_message(
            code, message=payload.message, sender_type=sender
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    response = AnonymousMessageResponse.model_validate(message, from_attributes=True)
    public_code = message.ticket.ticket_id
    background_tasks.add_task(
        rooms.broadcast,
        anonymous_ticket_room(public_code),
        AnonymousMessageReceivedEvent(ticket_id=public_code, message=response),
    )
    return response


@router.put("/{ticket_id}", response_model=AnonymousTicketResponse)
def update_ticket(
    ticket_id: int,
    payload: TicketUpdateRequest,
    _: AdminUser,
    service: TicketServiceDep,
) -> AnonymousTicketResponse:
    try:
        ticket = service.update_anonymous_ticket(
            ticket_id,
            status=payload.status,
            assigned_admin_id=payload.assigned_admin_id,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.patch("/{ticket_id}/close", response_model=AnonymousTicketResponse)
def close_ticket(
    ticket_id: int, _: AdminUser, service: TicketServiceDep
) -> AnonymousTicketResponse:
    try:
        ticket = service.update_anonymous_ticket(ticket_id, status=TicketStatus.CLOSED)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)


@router.patch("/{ticket_id}/archive", response_model=AnonymousTicketResponse)
def archive_ticket(
    ticket_id: int, _: AdminUser, service: TicketServiceDep
) -> AnonymousTicketResponse:
    try:
        ticket = service.update_anonymous_ticket(
            ticket_id, status=TicketStatus.ARCHIVED
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _response(ticket)
