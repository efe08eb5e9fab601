from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient


def donation_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "name": "Juan Perez",
        "email": "juan@example.com",
        "phone": "88889999",
        "subject": "Necesito una silla de ruedas",
        "message": "Mi hijo necesita una silla de ruedas nueva.",
        "privacy_accepted": True,
        "communication_accepted": True,
    }
    payload.update(overrides)
    return payload


def test_create_donation_without_account_opens_anonymous_ticket(
    client: TestClient,
) -> None:
    response = client.post("/donations", json=donation_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["ticket_id"] is None
    code = data["anonymous_ticket_id"]
    assert code.startswith("T")
    assert code == code.upper()
    assert data["session_id"].startswith("session_")

    messages = client.get(f"/anonymous-tickets/{code}/messages").json()
    assert len(messages) == 1
    assert messages[0]["sender_type"] == "user"
    assert messages[0]["message"].startswith(
        "New help request: Necesito una silla de ruedas"
    )


def test_create_donation_signed_in_opens_ticket(
    client: TestClient, user: dict[str, Any]
) -> None:
    response = client.post(
        "/donations", json=donation_payload(), headers=user["headers"]
    )

    assert response.status_code == 201
    data = response.json()
    assert data["anonymous_ticket_id"] is None
    ticket_id = data["ticket_id"]

    mine = client.get("/donation-tickets/my-tickets", headers=user["headers"])
    assert [ticket["id"] for ticket in mine.json()] == [ticket_id]

    messages = client.get(
        f"/ticket-messages/ticket/{ticket_id}", headers=user["headers"]
    ).json()
    assert len(messages) == 1
    assert messages[0]["sender_id"] == user["user"]["id"]


def test_anonymous_flag_wins_over_account(
    client: TestClient, user: dict[str, Any]
) -> None:
    response = client.post(
        "/donations",
        json=donation_payload(name=None, email=None, phone=None, is_anonymous=True),
        headers=user["headers"],
    )

    assert response.status_code == 201
    assert response.json()["anonymous_ticket_id"] is not None
    donation = client.get(f"/donations/{response.json()['donation_id']}").json()
    assert donation["name"] is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "Juan"},
        {"email": "juan-at-example"},
        {"email": "juan@.example..com"},
        {"phone": "12345"},
        {"phone": None},
        {"subject": "short"},
        {"message": "too short"},
        {"privacy_accepted": False},
        {"communication_accepted": False},
    ],
)
def test_create_donation_rejects_invalid_payload(
    client: TestClient, overrides: dict[str, Any]
) -> None:
    response = client.post("/donations", json=donation_payload(**overrides))

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request"


def test_create_donation_missing_fields(client: TestClient) -> None:
    assert client.post("/donations", json={}).status_code == 400


def test_get_donation(client: TestClient) -> None:
    donation_id = client.post("/donations", json=donation_payload()).json()[
        "donation_id"
    ]

    response = client.get(f"/donations/{donation_id}")

    assert response.status_code == 200
    assert response.json()["email"] == "juan@example.com"
    assert [item["id"] for item in client.get("/donations").json()] == [donation_id]


def test_get_donation_not_found(client: TestClient) -> None:
    assert client.get("/donations/999").status_code == 404


def test_get_donation_non_numeric_id(client: TestClient) -> None:
    response = client.get("/donations/abc")

    assert response.status_code == 400


def test_delete_donation(client: TestClient, admin: dict[str, Any]) -> None:
    donation_id = client.post("/donations", json=donation_payload()).json()[
        "donation_id"
    ]

    response = client.delete(f"/donations/{donation_id}", headers=admin["headers"])
    assert response.status_code == 200
    assert client.get(f"/donations/{donation_id}").status_code == 404

    again = client.delete(f"/donations/{donation_id}", headers=admin["headers"])
    assert again.status_code == 200


def test_delete_donation_requires_admin(
    client: TestClient, user: dict[str, Any]
) -> None:
    assert client.delete("/donations/1", headers=user["headers"]).status_code == 403
    assert client.delete("/donations/1").status_code == 401
