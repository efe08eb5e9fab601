"""WebSocket endpoint streaming new ticket messages to the rooms a client joined."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, TypeAdapter, ValidationError

from asoniped_backend.api.dependencies import (
    AuthServiceDep,
    DatabaseDep,
    TicketRoomsDep,
    resolve_user,
)
from asoniped_backend.api.models.rooms import (
    InboundRoomMessage,
    JoinAnonymousTicketRoomRequest,
    JoinTicketRoomRequest,
    LeaveAnonymousTicketRoomRequest,
    LeaveTicketRoomRequest,
    RoomErrorResponse,
    RoomJoinedResponse,
    RoomLeftResponse,
)
from asoniped_backend.api.services import (
    AuthService,
    NotFoundError,
    ServiceError,
    TicketService,
    anonymous_ticket_room,
    ticket_room,
)
from asoniped_backend.database import DatabaseService, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ticket-rooms"])

INBOUND_ROOM_MESSAGE_ADAPTER = TypeAdapter(InboundRoomMessage)


def _authenticate(db: DatabaseService, auth_service: AuthService, token: str) -> int:
    with db.session() as session:
        return resolve_user(token, session, auth_service).id


def _donation_ticket_room(db: DatabaseService, ticket_id: int, user_id: int) -> str:
    """Return the room of a ticket the user owns, or any ticket for an admin."""
    with db.session() as session:
        user = UserRepository(session).get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        TicketService(session).get_donation_ticket(ticket_id, user)
    return ticket_room(ticket_id)


def _anonymous_room(db: DatabaseService, code: str) -> str:
    with db.session() as session:
        ticket = TicketService(session).get_anonymous_ticket(code)
        return anonymous_ticket_room(ticket.ticket_id)


@router.websocket("/ws/tickets")
async def ticket_rooms_socket(  # noqa: C901
    websocket: WebSocket,
    db: DatabaseDep,
    auth_service: AuthServiceDep,
    rooms: TicketRoomsDep,
) -> None:
    """Let clients join ticket rooms and receive the messages posted to them.

    A ``token`` query parameter identifies the caller; donation ticket rooms
    need it, anonymous ticket rooms only need the public code.
    """
    token = websocket.query_params.get("token")
    user_id: int | None = None
    if token is not None:
        try:
            user_id = await run_in_threadpool(_authenticate, db, auth_service, token)
        except HTTPException as exc:
            await websocket.close(
                code=status.WS_1008_POLICY_VIOLATION, reason=exc.detail
            )
            return

    await websocket.accept()

    send_lock = asyncio.Lock()

    async def send(model: BaseModel) -> None:
        async with send_lock:
            await websocket.send_json(model.model_dump(mode="json"))

    anonymous_rooms: dict[str, str] = {}

    try:
        while True:
            try:
                data = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            try:
                message = INBOUND_ROOM_MESSAGE_ADAPTER.validate_json(data)
            except ValidationError as exc:
                await send(
                    RoomErrorResponse(
                        message="Invalid payload",
                        detail={
                            "errors": exc.errors(
                                include_url=False, include_context=False
                            )
                        },
                    )
                )
                continue

            if isinstance(message, JoinTicketRoomRequest):
                if user_id is None:
                    await send(RoomErrorResponse(message="Authentication required"))
                    continue
                try:
                    room = await run_in_threadpool(
                        _donation_ticket_room, db, message.ticket_id, user_id
                    )
                except ServiceError as exc:
                    await send(RoomErrorResponse(message=exc.detail))
                    continue
                rooms.join(room, send)
                await send(RoomJoinedResponse(room=room))
            elif isinstance(message, LeaveTicketRoomRequest):
                room = ticket_room(message.ticket_id)
                rooms.leave(room, send)
                await send(RoomLeftResponse(room=room))
            elif isinstance(message, JoinAnonymousTicketRoomRequest):
                try:
                    room = await run_in_threadpool(
                        _anonymous_room, db, message.ticket_id
                    )
                except ServiceError as exc:
                    await send(RoomErrorResponse(message=exc.detail))
                    continue
                anonymous_rooms[message.ticket_id.upper()] = room
                rooms.join(room, send)
                await send(RoomJoinedResponse(room=room))
            elif isinstance(message, LeaveAnonymousTicketRoomRequest):
                room = anonymous_rooms.pop(
                    message.ticket_id.upper(),
                    anonymous_ticket_room(message.ticket_id),
                )
                rooms.leave(room, send)
                await send(RoomLeftResponse(room=room))
    finally:
        rooms.leave_all(send)
        logger.debug("Ticket room socket closed")
