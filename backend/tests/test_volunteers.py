from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient

RegisterUser = Callable[..., dict[str, Any]]

OPTION = {
    "title": "Apoyo en terapias acuaticas",
    "description": "Acompanar a los beneficiarios durante la sesion en piscina.",
    "date": "Sabados",
    "location": "Piscina municipal",
    "skills": "Natacion basica",
    "hour": "09:00",
    "spots": 2,
}


@pytest.fixture
def option_id(client: TestClient, admin: dict[str, Any]) -> int:
    response = client.post("/volunteer-options", json=OPTION, headers=admin["headers"])
    assert response.status_code == 201
    return response.json()["id"]


def register(
    client: TestClient, headers: dict[str, str], option_id: int
) -> Any:
    return client.post(
        "/volunteer-registrations/register",
        json={"volunteer_option_id": option_id},
        headers=headers,
    )


def test_list_options_is_public(client: TestClient, option_id: int) -> None:
    response = client.get("/volunteer-options")

    assert response.status_code == 200
    [option] = response.json()
    assert option["id"] == option_id
    assert option["registered_count"] == 0
    assert option["available_spots"] == 2
    assert option["is_registered"] is False


def test_option_management_requires_admin(
    client: TestClient, user: dict[str, Any]
) -> None:
    assert (
        client.post("/volunteer-options", json=OPTION, headers=user["headers"])
        .status_code
        == 403
    )
    assert client.post("/volunteer-options", json=OPTION).status_code == 401


def test_create_option_rejects_negative_spots(
    client: TestClient, admin: dict[str, Any]
) -> None:
    response = client.post(
        "/volunteer-options", json={**OPTION, "spots": -1}, headers=admin["headers"]
    )

    assert response.status_code == 400


def test_update_and_delete_option(
    client: TestClient, admin: dict[str, Any], option_id: int
) -> None:
    updated = client.put(
        f"/volunteer-options/{option_id}",
        json={**OPTION, "spots": 5, "location": "Gimnasio"},
        headers=admin["headers"],
    )
    assert updated.json()["location"] == "Gimnasio"
    assert updated.json()["available_spots"] == 5

    deleted = client.delete(
        f"/volunteer-options/{option_id}", headers=admin["headers"]
    )
    assert deleted.status_code == 200
    assert client.get("/volunteer-options").json() == []

    missing = client.put(
        f"/volunteer-options/{option_id}", json=OPTION, headers=admin["headers"]
    )
    assert missing.status_code == 404


def test_register_and_cancel(
    client: TestClient, user: dict[str, Any], option_id: int
) -> None:
    registered = register(client, user["headers"], option_id)

    assert registered.status_code == 200
    assert registered.json() == {
        "volunteer_option_id": option_id,
        "total_spots": 2,
        "registered_count": 1,
        "available_spots": 1,
        "message": "Registered successfully",
    }
    [option] = client.get("/volunteer-options", headers=user["headers"]).json()
    assert option["is_registered"] is True

    mine = client.get(
        "/volunteer-registrations/my-registrations", headers=user["headers"]
    ).json()
    assert [(item["volunteer_option_id"], item["status"]) for item in mine] == [
        (option_id, "registered")
    ]

    cancelled = client.post(
        "/volunteer-registrations/cancel",
        json={"volunteer_option_id": option_id},
        headers=user["headers"],
    )
    assert cancelled.json()["registered_count"] == 0
    assert cancelled.json()["message"] == "Registration cancelled"

    again = register(client, user["headers"], option_id)
    assert again.status_code == 200
    mine = client.get(
        "/volunteer-registrations/my-registrations", headers=user["headers"]
    ).json()
    assert len(mine) == 1
    assert mine[0]["cancellation_date"] is None


def test_register_twice_is_conflict(
    client: TestClient, user: dict[str, Any], option_id: int
) -> None:
    register(client, user["headers"], option_id)

    response = register(client, user["headers"], option_id)

    assert response.status_code == 409


def test_register_when_full(
    client: TestClient, register_user: RegisterUser, option_id: int
) -> None:
    for name in ("pedro", "lucia"):
        headers = register_user(name)["headers"]
        assert register(client, headers, option_id).status_code == 200

    late = register_user("sofia")
    response = register(client, late["headers"], option_id)

    assert response.status_code == 409
    spots = client.get(
        f"/volunteer-registrations/available-spots/{option_id}",
        headers=late["headers"],
    ).json()
    assert spots["available_spots"] == 0
    assert spots["registered_count"] == 2


def test_register_missing_option(client: TestClient, user: dict[str, Any]) -> None:
    assert register(client, user["headers"], 999).status_code == 404


def test_cancel_without_registration(
    client: TestClient, user: dict[str, Any], option_id: int
) -> None:
    response = client.post(
        "/volunteer-registrations/cancel",
        json={"volunteer_option_id": option_id},
        headers=user["headers"],
    )

    assert response.status_code == 400


def test_registration_files_application(
    client: TestClient, user: dict[str, Any], option_id: int
) -> None:
    register(client, user["headers"], option_id)

    enrollments = client.get("/volunteers/me", headers=user["headers"]).json()

    assert len(enrollments) == 1
    assert enrollments[0]["volunteer_option_id"] == option_id
    assert enrollments[0]["status"] == "pending"
    assert enrollments[0]["option"]["title"] == OPTION["title"]


def test_enroll_is_idempotent(
    client: TestClient, user: dict[str, Any], option_id: int
) -> None:
    first = client.post(f"/volunteers/enroll/{option_id}", headers=user["headers"])
    second = client.post(f"/volunteers/enroll/{option_id}", headers=user["headers"])

    assert first.json()["created"] is True
    assert first.json()["message"] == "Enrollment created"
    assert second.json() == {
        "message": "Already enrolled",
        "volunteer_id": first.json()["volunteer_id"],
        "created": False,
    }


def test_option_registrations_for_admin(
    client: TestClient,
    user: dict[str, Any],
    admin: dict[str, Any],
    option_id: int,
) -> None:
    register(client, user["headers"], option_id)

    response = client.get(
        f"/volunteer-registrations/volunteer-option/{option_id}",
        headers=admin["headers"],
    )

    assert [item["user_id"] for item in response.json()] == [user["user"]["id"]]
    assert (
        client.get(
            f"/volunteer-registrations/volunteer-option/{option_id}",
            headers=user["headers"],
        ).status_code
        == 403
    )


def test_public_application_and_admin_review(
    client: TestClient, admin: dict[str, Any], option_id: int
) -> None:
    created = client.post(
        "/volunteers",
        json={
            "first_name": "Carlos",
            "last_name": "Solis",
            "email": "carlos@example.com",
            "phone": "70001122",
            "motivation": "Quiero ayudar los fines de semana.",
            "volunteer_option_id": option_id,
        },
    )
    assert created.status_code == 201
    volunteer_id = created.json()["id"]
    assert created.json()["status"] == "pending"

    approved = client.put(
        f"/volunteers/{volunteer_id}",
        json={"status": "approved"},
        headers=admin["headers"],
    )
    assert approved.json()["status"] == "approved"

    listing = client.get(
        "/volunteers", params={"status": "approved"}, headers=admin["headers"]
    ).json()
    assert listing["total"] == 1
    by_name = client.get(
        "/volunteers", params={"name": "solis"}, headers=admin["headers"]
    ).json()
    assert [item["id"] for item in by_name["volunteers"]] == [volunteer_id]

    assert (
        client.delete(f"/volunteers/{volunteer_id}", headers=admin["headers"])
        .status_code
        == 200
    )
    assert (
        client.get(f"/volunteers/{volunteer_id}", headers=admin["headers"])
        .status_code
        == 404
    )


def test_application_for_missing_option(client: TestClient) -> None:
    response = client.post(
        "/volunteers",
        json={
            "first_name": "Carlos",
            "last_name": "Solis",
            "email": "carlos@example.com",
            "volunteer_option_id": 999,
        },
    )

    assert response.status_code == 404


def test_application_rejects_malformed_email(client: TestClient) -> None:
    response = client.post(
        "/volunteers",
        json={
            "first_name": "Carlos",
            "last_name": "Solis",
            "email": "carlos@.example..com",
        },
    )

    assert response.status_code == 400


def test_update_application_requires_fields(
    client: TestClient, admin: dict[str, Any]
) -> None:
    volunteer_id = client.post(
        "/volunteers",
        json={"first_name": "Ana", "last_name": "Mora", "email": "ana@example.com"},
    ).json()["id"]

    response = client.put(
        f"/volunteers/{volunteer_id}", json={}, headers=admin["headers"]
    )

    assert response.status_code == 400
