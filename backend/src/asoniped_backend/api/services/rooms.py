"""In-process rooms that push new ticket messages to connected sockets."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Awaitable, Callable

from fastapi import WebSocketDisconnect
from pydantic import BaseModel

logger = logging.getLogger(__name__)

RoomSender = Callable[[BaseModel], Awaitable[None]]


def ticket_room(ticket_id: int) -> str:
    return f"ticket_{ticket_id}"


def anonymous_ticket_room(code: str) -> str:
    return f"anonymous_ticket_{code}"


class TicketRooms:
    """Tracks which sockets follow which ticket conversation.

    Every call runs on the event loop, so membership changes need no lock.
    """

    def __init__(self) -> None:
        self._members: dict[str, list[RoomSender]] = {}

    def join(self, room: str, sender: RoomSender) -> None:
        members = self._members.setdefault(room, [])
        if sender not in members:
            members.append(sender)

    def leave(self, room: str, sender: RoomSender) -> None:
        members = self._members.get(room)
        if members is None:
            return
        with contextlib.suppress(ValueError):
            members.remove(sender)
        if not members:
            del self._members[room]

    def leave_all(self, sender: RoomSender) -> None:
        """Detach ``sender`` from every room it joined."""
        for room in list(self._members):
            self.leave(room, sender)

    def member_count(self, room: str) -> int:
        return len(self._members.get(room, ()))

    async def broadcast(self, room: str, event: BaseModel) -> None:
        """Send ``event`` to every socket in ``room``; closed sockets are dropped."""
        for sender in list(self._members.get(room, ())):
            try:
                await sender(event)
            except (OSError, RuntimeError, WebSocketDisconnect) as exc:
                logger.warning("Dropping socket from %s: %s", room, exc)
                self.leave(room, sender)
