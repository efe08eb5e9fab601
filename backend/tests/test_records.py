from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from asoniped_backend.api.services import RecordService, ValidationFailedError

RegisterUser = Callable[..., dict[str, Any]]


def personal_data(**overrides: Any) -> dict[str, Any]:
    data = {
        "full_name": "Daniel Rojas Mena",
        "cedula": "1-2345-6789",
        "gender": "male",
        "birth_date": "2012-04-18",
        "province": "San Jose",
        "canton": "Escazu",
        "district": "San Rafael",
        "mother_name": "Laura Mena",
    }
    data.update(overrides)
    return data


PHASE3_FORM = {
    "complete_personal_data": {
        "full_name": "Daniel Rojas Mena",
        "cedula": "1-2345-6789",
        "age": 12,
        "province": "San Jose",
        "canton": "Escazu",
        "district": "San Rafael",
        "email": "familia@example.com",
    },
    "family_information": {
        "mother_name": "Laura Mena",
        "family_members": [{"name": "Sofia Rojas", "age": 9, "relationship": "sister"}],
    },
    "disability_data": {
        "disability_type": "fisica",
        "medical_diagnosis": "Paralisis cerebral",
        "permanent_limitations": [
            {"limitation": "moverse_caminar", "degree": "severa"},
        ],
        "biomechanical_benefits": [{"type": "silla_ruedas"}],
    },
    "socioeconomic_data": {
        "housing_type": "casa_propia",
        "available_services": ["agua", "luz"],
    },
    "registration_requirements": {"birth_certificate_doc": True},
    "documents": [
        {"document_type": "cedula", "file_name": "cedula.pdf", "file_size": 1024}
    ],
}


def create_record(
    client: TestClient, headers: dict[str, str] | None = None, **overrides: Any
) -> dict[str, Any]:
    response = client.post(
        "/records",
        json={"personal_data": personal_data(**overrides)},
        headers=headers or {},
    )
    assert response.status_code == 201, response.text
    return response.json()


def act(
    client: TestClient,
    record_id: int,
    action: str,
    headers: dict[str, str],
    body: dict[str, Any] | None = None,
) -> Any:
    return client.post(f"/records/{record_id}/{action}", json=body, headers=headers)


@pytest.fixture
def pending_record(client: TestClient, user: dict[str, Any]) -> dict[str, Any]:
    return create_record(client, user["headers"])


@pytest.fixture
def approved_record(
    client: TestClient, admin: dict[str, Any], pending_record: dict[str, Any]
) -> dict[str, Any]:
    response = act(client, pending_record["id"], "approve-phase1", admin["headers"])
    assert response.status_code == 200
    return response.json()


def test_create_record_with_personal_data_is_pending(
    client: TestClient, user: dict[str, Any]
) -> None:
    record = create_record(client, user["headers"])

    assert record["phase"] == "phase1"
    assert record["status"] == "pending"
    assert record["created_by"] == user["user"]["id"]
    assert record["admin_created"] is False
    assert record["personal_data"]["cedula"] == "1-2345-6789"
    assert re.fullmatch(r"EXP-\d{4}-0001", record["record_number"])


def test_record_numbers_are_sequential(client: TestClient) -> None:
    first = create_record(client)
    second = create_record(client, cedula="2-0000-1111")

    year = first["record_number"].split("-")[1]
    assert second["record_number"] == f"EXP-{year}-0002"


def test_create_draft_then_submit(
    client: TestClient, user: dict[str, Any], admin: dict[str, Any]
) -> None:
    draft = client.post("/records", json={}, headers=user["headers"]).json()
    assert draft["status"] == "draft"
    assert draft["personal_data"] is None

    without_data = client.post(
        f"/records/{draft['id']}/submit", headers=user["headers"]
    )
    assert without_data.status_code == 400

    filled = client.put(
        f"/records/{draft['id']}", json=personal_data(), headers=admin["headers"]
    )
    assert filled.status_code == 200

    submitted = client.post(f"/records/{draft['id']}/submit", headers=user["headers"])
    assert submitted.status_code == 200
    assert submitted.json()["status"] == "pending"

    again = client.post(f"/records/{draft['id']}/submit", headers=user["headers"])
    assert again.status_code == 409


def test_duplicate_cedula_is_conflict(client: TestClient) -> None:
    create_record(client)

    response = client.post("/records", json={"personal_data": personal_data()})

    assert response.status_code == 409


def test_create_record_requires_name_and_cedula(client: TestClient) -> None:
    response = client.post(
        "/records", json={"personal_data": {"full_name": "Solo Nombre"}}
    )

    assert response.status_code == 400


def test_admin_created_record_is_flagged(
    client: TestClient, admin: dict[str, Any]
) -> None:
    record = create_record(client, admin["headers"])

    assert record["admin_created"] is True


def test_check_cedula(client: TestClient) -> None:
    record = create_record(client)

    taken = client.get("/records/check-cedula/1-2345-6789").json()
    free = client.get("/records/check-cedula/9-9999-9999").json()
    own = client.get(
        "/records/check-cedula/1-2345-6789",
        params={"exclude_record_id": record["id"]},
    ).json()

    assert taken == {"exists": True}
    assert free == {"exists": False}
    assert own == {"exists": False}


def test_search_by_cedula(client: TestClient, admin: dict[str, Any]) -> None:
    record = create_record(client)

    found = client.get("/records/search/cedula/1-2345-6789", headers=admin["headers"])
    missing = client.get("/records/search/cedula/0-0000-0000", headers=admin["headers"])

    assert found.json()["id"] == record["id"]
    assert missing.status_code == 404


def test_get_record_access(
    client: TestClient,
    register_user: RegisterUser,
    admin: dict[str, Any],
    pending_record: dict[str, Any],
    user: dict[str, Any],
) -> None:
    record_id = pending_record["id"]
    stranger = register_user("pedro")

    def status_for(headers: dict[str, str]) -> int:
        return client.get(f"/records/{record_id}", headers=headers).status_code

    assert status_for(user["headers"]) == 200
    assert status_for(admin["headers"]) == 200
    assert status_for(stranger["headers"]) == 403
    assert client.get("/records/999", headers=admin["headers"]).status_code == 404
    assert client.get("/records/abc", headers=admin["headers"]).status_code == 400


def test_full_workflow(
    client: TestClient,
    user: dict[str, Any],
    admin: dict[str, Any],
    approved_record: dict[str, Any],
) -> None:
    record_id = approved_record["id"]
    assert (approved_record["phase"], approved_record["status"]) == (
        "phase2",
        "approved",
    )

    submitted = client.put(
        f"/records/{record_id}/phase3", json=PHASE3_FORM, headers=user["headers"]
    )
    assert submitted.status_code == 200, submitted.text
    detail = submitted.json()
    assert (detail["phase"], detail["status"]) == ("phase3", "pending")
    assert detail["complete_personal_data"]["age"] == 12
    assert detail["family_information"]["family_members"][0]["name"] == "Sofia Rojas"
    assert detail["disability_data"]["permanent_limitations"][0]["degree"] == "severa"
    assert detail["disability_data"]["biomechanical_benefits"][0]["type"] == (
        "silla_ruedas"
    )
    assert detail["socioeconomic_data"]["available_services"] == ["agua", "luz"]
    assert detail["registration_requirements"]["birth_certificate_doc"] is True
    assert detail["enrollment_form"] is None
    assert [doc["file_name"] for doc in detail["documents"]] == ["cedula.pdf"]

    requested = act(
        client,
        record_id,
        "request-phase3-modification",
        admin["headers"],
        {
            "comment": "Falta el dictamen medico",
            "sections_to_modify": ["disability_data"],
            "documents_to_replace": ["dictamen_medico"],
        },
    )
    assert requested.json()["status"] == "needs_modification"
    note = requested.json()["notes"][0]
    assert note["type"] == "modification"
    assert note["modification_type"] == "phase3_modification"
    assert note["status"] == "pending"
    assert note["sections_to_modify"] == ["disability_data"]
    assert note["documents_to_replace"] == ["dictamen_medico"]

    corrected = client.put(
        f"/records/{record_id}/phase3",
        json={"disability_data": {"medical_diagnosis": "PC espastica"}},
        headers=user["headers"],
    )
    assert corrected.status_code == 200
    body = corrected.json()
    assert (body["phase"], body["status"]) == ("phase3", "pending")
    assert body["disability_data"]["medical_diagnosis"] == "PC espastica"
    assert body["notes"][0]["status"] == "resolved"
    assert body["notes"][0]["resolved_by"] == user["user"]["id"]

    completed = act(client, record_id, "approve", admin["headers"])
    assert (completed.json()["phase"], completed.json()["status"]) == (
        "completed",
        "active",
    )

    locations = client.get(
        "/records/analytics/geographic", headers=admin["headers"]
    ).json()
    assert [(row["id"], row["province"]) for row in locations] == [
        (record_id, "San Jose")
    ]


def test_phase1_modification_and_resubmit(
    client: TestClient,
    user: dict[str, Any],
    admin: dict[str, Any],
    pending_record: dict[str, Any],
) -> None:
    record_id = pending_record["id"]

    requested = act(
        client,
        record_id,
        "request-phase1-modification",
        admin["headers"],
        {"comment": "Revise la fecha de nacimiento"},
    )
    assert requested.json()["status"] == "needs_modification"
    assert requested.json()["notes"][0]["modification_type"] == "phase1_modification"

    resubmitted = client.put(
        f"/records/{record_id}/phase1",
        json=personal_data(birth_date="2012-05-18"),
        headers=user["headers"],
    )
    assert resubmitted.status_code == 200
    body = resubmitted.json()
    assert body["status"] == "pending"
    assert body["personal_data"]["birth_date"] == "2012-05-18"
    assert body["notes"][0]["status"] == "resolved"


def test_phase1_resubmit_only_after_modification_request(
    client: TestClient, user: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    response = client.put(
        f"/records/{pending_record['id']}/phase1",
        json=personal_data(),
        headers=user["headers"],
    )

    assert response.status_code == 409


def test_reject_phase1(
    client: TestClient, admin: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    response = act(
        client,
        pending_record["id"],
        "reject-phase1",
        admin["headers"],
        {"comment": "No cumple requisitos"},
    )

    assert (response.json()["phase"], response.json()["status"]) == (
        "phase1",
        "rejected",
    )
    assert response.json()["notes"][0]["type"] == "activity"


@pytest.mark.parametrize("action", ["approve", "reject", "request-phase3-modification"])
def test_phase3_actions_rejected_in_phase1(
    client: TestClient,
    admin: dict[str, Any],
    pending_record: dict[str, Any],
    action: str,
) -> None:
    response = act(client, pending_record["id"], action, admin["headers"])

    assert response.status_code == 409
    record = client.get(
        f"/records/{pending_record['id']}", headers=admin["headers"]
    ).json()
    assert (record["phase"], record["status"]) == ("phase1", "pending")


def test_second_approval_is_conflict(
    client: TestClient, admin: dict[str, Any], approved_record: dict[str, Any]
) -> None:
    response = act(client, approved_record["id"], "approve-phase1", admin["headers"])

    assert response.status_code == 409


def test_phase3_requires_phase1_approval(
    client: TestClient, user: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    response = client.put(
        f"/records/{pending_record['id']}/phase3",
        json=PHASE3_FORM,
        headers=user["headers"],
    )

    assert response.status_code == 409
    detail = client.get(
        f"/records/{pending_record['id']}", headers=user["headers"]
    ).json()
    assert detail["complete_personal_data"] is None
    assert detail["documents"] == []


def test_action_on_missing_record(client: TestClient, admin: dict[str, Any]) -> None:
    assert act(client, 999, "approve-phase1", admin["headers"]).status_code == 404


@pytest.mark.parametrize("action", ["fly", "phase1-resubmit", "complete-phase3"])
def test_unknown_or_non_admin_action(
    client: TestClient,
    admin: dict[str, Any],
    pending_record: dict[str, Any],
    action: str,
) -> None:
    response = act(client, pending_record["id"], action, admin["headers"])

    assert response.status_code == 404


def test_actions_require_admin(
    client: TestClient, user: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    response = act(client, pending_record["id"], "approve-phase1", user["headers"])

    assert response.status_code == 403


def test_list_records_filters(
    client: TestClient, user: dict[str, Any], admin: dict[str, Any]
) -> None:
    create_record(client, user["headers"])
    create_record(
        client, admin["headers"], cedula="2-2222-2222", full_name="Elena Chaves"
    )
    client.post("/records", json={}, headers=user["headers"])

    def listing(**params: Any) -> dict[str, Any]:
        response = client.get("/records", params=params, headers=admin["headers"])
        assert response.status_code == 200
        return response.json()

    everything = listing()
    assert everything["total"] == 3
    assert everything["total_pages"] == 1

    assert listing(status="draft")["total"] == 1
    assert listing(phase="phase1")["total"] == 3
    assert listing(creator="admin")["total"] == 1
    assert listing(creator="user")["total"] == 2
    assert [item["personal_data"]["full_name"] for item in listing(
        search="chaves"
    )["records"]] == ["Elena Chaves"]
    assert listing(search="2-2222")["total"] == 1

    paged = listing(page=2, limit=2)
    assert len(paged["records"]) == 1
    assert paged["total_pages"] == 2


def test_list_records_rejects_bad_filters(
    client: TestClient, admin: dict[str, Any]
) -> None:
    assert (
        client.get(
            "/records", params={"status": "bogus"}, headers=admin["headers"]
        ).status_code
        == 400
    )
    assert (
        client.get(
            "/records", params={"creator": "robot"}, headers=admin["headers"]
        ).status_code
        == 400
    )


def test_stats(
    client: TestClient, admin: dict[str, Any], approved_record: dict[str, Any]
) -> None:
    client.post("/records", json={})

    stats = client.get("/records/stats", headers=admin["headers"]).json()

    assert stats["total"] == 2
    assert stats["this_month"] == 2
    assert stats["by_status"]["approved"] == 1
    assert stats["by_status"]["draft"] == 1
    assert stats["by_status"]["rejected"] == 0
    assert stats["by_phase"]["phase2"] == 1
    assert stats["by_phase"]["phase1"] == 1


def test_set_status(
    client: TestClient, admin: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    record_id = pending_record["id"]

    response = client.patch(
        f"/records/{record_id}/status",
        json={"status": "inactive"},
        headers=admin["headers"],
    )
    invalid = client.patch(
        f"/records/{record_id}/status",
        json={"status": "bogus"},
        headers=admin["headers"],
    )
    missing = client.patch(
        "/records/999/status", json={"status": "active"}, headers=admin["headers"]
    )

    assert response.json()["status"] == "inactive"
    assert invalid.status_code == 400
    assert missing.status_code == 404


def test_update_personal_data_checks_cedula(
    client: TestClient, admin: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    other = create_record(client, cedula="3-3333-3333")

    conflict = client.put(
        f"/records/{other['id']}",
        json={"cedula": "1-2345-6789"},
        headers=admin["headers"],
    )
    partial = client.put(
        f"/records/{other['id']}",
        json={"phone": "22223333"},
        headers=admin["headers"],
    )

    assert conflict.status_code == 409
    assert partial.json()["personal_data"]["phone"] == "22223333"
    assert partial.json()["personal_data"]["cedula"] == "3-3333-3333"


@pytest.mark.parametrize("field", ["full_name", "cedula"])
def test_update_personal_data_rejects_null_required_field(
    client: TestClient,
    admin: dict[str, Any],
    pending_record: dict[str, Any],
    field: str,
) -> None:
    url = f"/records/{pending_record['id']}"

    response = client.put(url, json={field: None}, headers=admin["headers"])

    assert response.status_code == 400
    current = client.get(url, headers=admin["headers"]).json()["personal_data"]
    assert current[field] == personal_data()[field]


def test_record_service_refuses_to_clear_full_name(db_session: Session) -> None:
    service = RecordService(db_session)
    record = service.create(
        personal_data={"full_name": "Daniel Rojas Mena", "cedula": "1-2345-6789"},
        user=None,
    )

    with pytest.raises(ValidationFailedError):
        service.update_personal_data(record.id, {"full_name": None})

    assert record.personal_data.full_name == "Daniel Rojas Mena"


def test_delete_record(
    client: TestClient, admin: dict[str, Any], approved_record: dict[str, Any]
) -> None:
    record_id = approved_record["id"]

    first = client.delete(f"/records/{record_id}", headers=admin["headers"])
    second = client.delete(f"/records/{record_id}", headers=admin["headers"])

    assert first.status_code == 200
    assert second.status_code == 200
    gone = client.get(f"/records/{record_id}", headers=admin["headers"])
    assert gone.status_code == 404
    assert client.get("/records/check-cedula/1-2345-6789").json() == {"exists": False}


def test_handover_and_my_record(
    client: TestClient, register_user: RegisterUser, admin: dict[str, Any]
) -> None:
    beneficiary = register_user("lucia", full_name="Lucia Vargas")
    assert (
        client.get("/records/me", headers=beneficiary["headers"]).status_code == 404
    )
    record = create_record(client, admin["headers"])

    response = client.post(
        f"/records/{record['id']}/handover",
        json={"user_id": beneficiary["user"]["id"]},
        headers=admin["headers"],
    )

    assert response.status_code == 200
    assert response.json()["handed_over_to_user"] is True
    assert response.json()["handed_over_by"] == admin["user"]["id"]
    mine = client.get("/records/me", headers=beneficiary["headers"])
    assert mine.json()["id"] == record["id"]


def test_handover_requires_admin_created_record(
    client: TestClient,
    user: dict[str, Any],
    admin: dict[str, Any],
    pending_record: dict[str, Any],
) -> None:
    response = client.post(
        f"/records/{pending_record['id']}/handover",
        json={"user_id": user["user"]["id"]},
        headers=admin["headers"],
    )

    assert response.status_code == 400


def test_users_eligible_for_handover(
    client: TestClient,
    register_user: RegisterUser,
    admin: dict[str, Any],
    pending_record: dict[str, Any],
) -> None:
    sofia = register_user("sofia", full_name="Sofia Mora")
    lucia = register_user("lucia", full_name="Lucia Vargas")
    pedro = register_user("pedro", full_name="Pedro Solano")
    client.put(
        f"/users/{pedro['user']['id']}",
        json={"status": "inactive"},
        headers=admin["headers"],
    )

    def eligible() -> list[str]:
        response = client.get("/users/eligible-for-handover", headers=admin["headers"])
        assert response.status_code == 200
        return [item["username"] for item in response.json()]

    assert eligible() == ["lucia", "sofia"]

    record = create_record(client, admin["headers"], cedula="4-4444-4444")
    client.post(
        f"/records/{record['id']}/handover",
        json={"user_id": lucia["user"]["id"]},
        headers=admin["headers"],
    )

    assert eligible() == ["sofia"]
    forbidden = client.get("/users/eligible-for-handover", headers=sofia["headers"])
    assert forbidden.status_code == 403


def test_notes_crud(
    client: TestClient, admin: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    record_id = pending_record["id"]

    created = client.post(
        f"/records/{record_id}/notes",
        json={"note": "Llamar a la madre"},
        headers=admin["headers"],
    )
    assert created.status_code == 201
    note_id = created.json()["id"]

    updated = client.put(
        f"/records/{record_id}/notes/{note_id}",
        json={"note": "Madre contactada", "status": "resolved"},
        headers=admin["headers"],
    )
    assert updated.json()["note"] == "Madre contactada"

    notes = client.get(f"/records/{record_id}/notes", headers=admin["headers"]).json()
    assert [item["id"] for item in notes] == [note_id]

    deleted = client.delete(
        f"/records/{record_id}/notes/{note_id}", headers=admin["headers"]
    )
    assert deleted.status_code == 200
    missing = client.delete(
        f"/records/{record_id}/notes/{note_id}", headers=admin["headers"]
    )
    assert missing.status_code == 404


def test_resolving_note_records_resolver(
    client: TestClient, admin: dict[str, Any], pending_record: dict[str, Any]
) -> None:
    record_id = pending_record["id"]
    requested = act(
        client, record_id, "request-phase1-modification", admin["headers"]
    ).json()
    note_id = requested["notes"][0]["id"]

    response = client.put(
        f"/records/{record_id}/notes/{note_id}",
        json={"status": "resolved"},
        headers=admin["headers"],
    )

    assert response.json()["status"] == "resolved"
    assert response.json()["resolved_by"] == admin["user"]["id"]
    assert response.json()["resolved_at"] is not None


def test_documents(
    client: TestClient,
    register_user: RegisterUser,
    user: dict[str, Any],
    pending_record: dict[str, Any],
) -> None:
    record_id = pending_record["id"]
    stranger = register_user("pedro")

    created = client.post(
        f"/records/{record_id}/documents",
        json={"document_type": "dictamen", "file_name": "dictamen.pdf"},
        headers=user["headers"],
    )
    assert created.status_code == 201
    assert created.json()["uploaded_by"] == user["user"]["id"]
    document_id = created.json()["id"]

    listed = client.get(f"/records/{record_id}/documents", headers=user["headers"])
    assert [doc["id"] for doc in listed.json()] == [document_id]

    forbidden = client.delete(
        f"/records/{record_id}/documents/{document_id}", headers=stranger["headers"]
    )
    assert forbidden.status_code == 403

    deleted = client.delete(
        f"/records/{record_id}/documents/{document_id}", headers=user["headers"]
    )
    assert deleted.status_code == 200
    assert client.get(
        f"/records/{record_id}/documents", headers=user["headers"]
    ).json() == []
