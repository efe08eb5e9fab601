"""Pydantic models for the ticket rooms WebSocket contract."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from asoniped_backend.api.models.ticket import (
    AnonymousMessageResponse,
    TicketMessageResponse,
)


class JoinTicketRoomRequest(BaseModel):
    """Follow the conversation of a donation ticket the caller may read."""

    type: Literal["join_ticket_room"]
    ticket_id: int


class LeaveTicketRoomRequest(BaseModel):
    type: Literal["leave_ticket_room"]
    ticket_id: int


class JoinAnonymousTicketRoomRequest(BaseModel):
    """Follow an anonymous ticket; knowing its public code is enough."""

    type: Literal["join_anonymous_ticket_room"]
    ticket_id: str = Field(min_length=1, max_length=32)


class LeaveAnonymousTicketRoomRequest(BaseModel):
    type: Literal["leave_anonymous_ticket_room"]
    ticket_id: str = Field(min_length=1, max_length=32)


InboundRoomMessage = Annotated[
    JoinTicketRoomRequest
    | LeaveTicketRoomRequest
    | JoinAnonymousTicketRoomRequest
    | LeaveAnonymousTicketRoomRequest,
    Field(discriminator="type"),
]


class RoomJoinedResponse(BaseModel):
    type: Literal["room_joined"] = "room_joined"
    room: str


class RoomLeftResponse(BaseModel):
    type: Literal["room_left"] = "room_left"
    room: str


class MessageReceivedEvent(BaseModel):
    """Pushed to a donation ticket room when a message is posted."""

    type: Literal["message_received"] = "message_received"
    ticket_id: int
    message: TicketMessageResponse


class AnonymousMessageReceivedEvent(BaseModel):
    """Pushed to an anonymous ticket room when a message is posted."""

    type: Literal["anonymous_message_received"] = "anonymous_message_received"
    ticket_id: str
    message: AnonymousMessageResponse


class RoomErrorResponse(BaseModel):
    type: Literal["error"] = "error"
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "AnonymousMessageReceivedEvent",
    "InboundRoomMessage",
    "JoinAnonymousTicketRoomRequest",
    "JoinTicketRoomRequest",
    "LeaveAnonymousTicketRoomRequest",
    "LeaveTicketRoomRequest",
    "MessageReceivedEvent",
    "RoomErrorResponse",
    "RoomJoinedResponse",
    "RoomLeftResponse",
]
