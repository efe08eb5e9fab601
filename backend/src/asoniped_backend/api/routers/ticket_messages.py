"""Messages exchanged on tickets of any module."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status

from asoniped_backend.api.dependencies import (
    AdminUser,
    CurrentUser,
    TicketRoomsDep,
    get_ticket_service,
)
from asoniped_backend.api.errors import http_error
from asoniped_backend.api.models import (
    MessageResponse,
    TicketMessageCreateRequest,
    TicketMessageResponse,
)
from asoniped_backend.api.models.rooms import MessageReceivedEvent
from asoniped_backend.api.services import ServiceError, TicketService, ticket_room
from asoniped_backend.shared import ModuleType

router = APIRouter(prefix="/ticket-messages", tags=["ticket-messages"])

TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]


def _response(message) -> TicketMessageResponse:
    return TicketMessageResponse.model_validate(message, from_attributes=True)


@router.post(
    "", response_model=TicketMessageResponse, status_code=status.HTTP_201_CREATED
)
def post_message(
    payload: TicketMessageCreateRequest,
    user: CurrentUser,
    service: TicketServiceDep,
    rooms: TicketRoomsDep,
    background_tasks: BackgroundTasks,
) -> TicketMessageResponse:
    """Store a message and push it to the ticket's room once the reply is sent."""

    try:
        message = service.post_message(
            module_type=payload.module_type,
            module_id=payload.module_id,
            sender=user,
            message=payload.message,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    response = _response(message)
    if payload.module_type == ModuleType.DONATIONS:
        background_tasks.add_task(
            rooms.broadcast,
            ticket_room(payload.module_id),
            MessageReceivedEvent(ticket_id=payload.module_id, message=response),
        )
    return response


@router.get("", response_model=list[TicketMessageResponse])
def list_messages(
    _: AdminUser, service: TicketServiceDep
) -> list[TicketMessageResponse]:
    return [_response(message) for message in service.list_messages()]


@router.get("/ticket/{ticket_id}", response_model=list[TicketMessageResponse])
def list_ticket_messages(
    ticket_id: int,
    user: CurrentUser,
    service: TicketServiceDep,
    module_type: ModuleType = ModuleType.DONATIONS,
) -> list[TicketMessageResponse]:
    """Return the conversation of one ticket, oldest first."""

    try:
        if module_type == ModuleType.DONATIONS:
            service.get_donation_ticket(ticket_id, user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return [
        _response(message)
        for message in service.list_ticket_messages(module_type, ticket_id)
    ]


@router.delete("/{message_id}", response_model=MessageResponse)
def delete_message(
    message_id: int, _: AdminUser, service: TicketServiceDep
) -> MessageResponse:
    service.delete_message(message_id)
    return MessageResponse(message="Message deleted")
