"""Integration tests for the ticket rooms WebSocket API."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.websockets import WebSocketDisconnect

from asoniped_backend.api.models.rooms import RoomLeftResponse
from asoniped_backend.api.services import TicketRooms

RegisterUser = Callable[..., dict[str, Any]]

DONATION = {
    "name": "Juan Perez",
    "email": "juan@example.com",
    "phone": "88889999",
    "subject": "Ayuda con terapia fisica",
    "message": "Buscamos apoyo para sesiones de terapia.",
    "privacy_accepted": True,
    "communication_accepted": True,
}


@pytest.fixture
def user_ticket(client: TestClient, user: dict[str, Any]) -> int:
    response = client.post("/donations", json=DONATION, headers=user["headers"])
    return response.json()["ticket_id"]


@pytest.fixture
def anonymous_code(client: TestClient) -> str:
    return client.post("/donations", json=DONATION).json()["anonymous_ticket_id"]


def _token(account: dict[str, Any]) -> str:
    return account["headers"]["Authorization"].removeprefix("Bearer ")


def test_ticket_room_receives_posted_messages(
    client: TestClient,
    user: dict[str, Any],
    admin: dict[str, Any],
    user_ticket: int,
) -> None:
    with client.websocket_connect(f"/ws/tickets?token={_token(user)}") as websocket:
        websocket.send_json({"type": "join_ticket_room", "ticket_id": user_ticket})
        joined = websocket.receive_json()
        assert joined == {"type": "room_joined", "room": f"ticket_{user_ticket}"}

        posted = client.post(
            "/ticket-messages",
            json={"module_id": user_ticket, "message": "Le escribimos pronto"},
            headers=admin["headers"],
        )
        assert posted.status_code == 201

        event = websocket.receive_json()
        assert event["type"] == "message_received"
        assert event["ticket_id"] == user_ticket
        assert event["message"]["id"] == posted.json()["id"]
        assert event["message"]["message"] == "Le escribimos pronto"
        assert event["message"]["sender_id"] == admin["user"]["id"]


def test_anonymous_room_follows_public_code(
    client: TestClient, admin: dict[str, Any], anonymous_code: str
) -> None:
    with client.websocket_connect("/ws/tickets") as websocket:
        websocket.send_json(
            {"type": "join_anonymous_ticket_room", "ticket_id": anonymous_code.lower()}
        )
        joined = websocket.receive_json()
        assert joined["room"] == f"anonymous_ticket_{anonymous_code}"

        client.post(
            f"/anonymous-tickets/{anonymous_code}/messages",
            json={"message": "Hola, sigo esperando"},
        )
        from_donor = websocket.receive_json()

        client.post(
            f"/anonymous-tickets/{anonymous_code}/messages",
            json={"message": "Ya le respondemos"},
            headers=admin["headers"],
        )
        from_admin = websocket.receive_json()

    assert from_donor["type"] == "anonymous_message_received"
    assert from_donor["ticket_id"] == anonymous_code
    assert from_donor["message"]["sender_type"] == "user"
    assert from_admin["message"]["sender_type"] == "admin"
    assert from_admin["message"]["message"] == "Ya le respondemos"


def test_join_ticket_room_checks_access(
    client: TestClient,
    register_user: RegisterUser,
    user_ticket: int,
) -> None:
    stranger = register_user("pedro")

    with client.websocket_connect("/ws/tickets") as websocket:
        websocket.send_json({"type": "join_ticket_room", "ticket_id": user_ticket})
        anonymous = websocket.receive_json()

    path = f"/ws/tickets?token={_token(stranger)}"
    with client.websocket_connect(path) as websocket:
        websocket.send_json({"type": "join_ticket_room", "ticket_id": user_ticket})
        foreign = websocket.receive_json()
        websocket.send_json({"type": "join_ticket_room", "ticket_id": 999})
        missing = websocket.receive_json()
        websocket.send_json({"type": "join_anonymous_ticket_room", "ticket_id": "TX"})
        unknown_code = websocket.receive_json()

    assert anonymous == {
        "type": "error",
        "message": "Authentication required",
        "detail": {},
    }
    assert foreign["message"] == "Access denied"
    assert missing["message"] == "Ticket not found"
    assert unknown_code["message"] == "Ticket not found"


def test_leave_ticket_room(
    app: FastAPI, client: TestClient, user: dict[str, Any], user_ticket: int
) -> None:
    rooms: TicketRooms = app.state.ticket_rooms
    room = f"ticket_{user_ticket}"

    with client.websocket_connect(f"/ws/tickets?token={_token(user)}") as websocket:
        websocket.send_json({"type": "join_ticket_room", "ticket_id": user_ticket})
        websocket.receive_json()
        assert rooms.member_count(room) == 1

        websocket.send_json({"type": "leave_ticket_room", "ticket_id": user_ticket})
        left = websocket.receive_json()

        assert left == {"type": "room_left", "room": room}
        assert rooms.member_count(room) == 0


def test_invalid_payload_is_reported(client: TestClient) -> None:
    with client.websocket_connect("/ws/tickets") as websocket:
        websocket.send_text("not json")
        garbled = websocket.receive_json()
        websocket.send_json({"type": "shout", "ticket_id": 1})
        unknown = websocket.receive_json()

    assert garbled["type"] == "error"
    assert garbled["message"] == "Invalid payload"
    assert unknown["message"] == "Invalid payload"
    assert unknown["detail"]["errors"]


def test_invalid_token_closes_socket(client: TestClient) -> None:
    with (
        pytest.raises(WebSocketDisconnect) as exc_info,
        client.websocket_connect("/ws/tickets?token=not-a-token"),
    ):
        pass

    assert exc_info.value.code == 1008


def test_broadcast_drops_closed_sockets() -> None:
    rooms = TicketRooms()
    received: list[BaseModel] = []

    async def listener(event: BaseModel) -> None:
        received.append(event)

    async def closed(event: BaseModel) -> None:
        msg = "Cannot call send once a close message has been sent."
        raise RuntimeError(msg)

    rooms.join("ticket_1", listener)
    rooms.join("ticket_1", closed)
    event = RoomLeftResponse(room="ticket_1")

    asyncio.run(rooms.broadcast("ticket_1", event))

    assert received == [event]
    assert rooms.member_count("ticket_1") == 1
