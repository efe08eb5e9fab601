"""Beneficiary record endpoints and the phase workflow actions."""

from __future__ import annotations

import math
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from asoniped_backend.api.dependencies import (
    AdminUser,
    CurrentUser,
    OptionalUser,
    get_record_service,
)
from asoniped_backend.api.errors import http_error
from asoniped_backend.api.models import (
    CedulaCheckResponse,
    DocumentInput,
    GeographicEntry,
    HandoverRequest,
    MessageResponse,
    NoteCreateRequest,
    NoteUpdateRequest,
    PersonalDataInput,
    PersonalDataPatch,
    Phase3Request,
    RecordActionRequest,
    RecordCreateRequest,
    RecordDetailResponse,
    RecordDocumentResponse,
    RecordListResponse,
    RecordNoteResponse,
    RecordResponse,
    RecordStatsResponse,
    RecordStatusRequest,
)
from asoniped_backend.api.services import RecordService, ServiceError
from asoniped_backend.shared import RecordPhase, RecordStatus
from asoniped_backend.workflow import ADMIN_ACTIONS, RecordAction

router = APIRouter(prefix="/records", tags=["records"])

RecordServiceDep = Annotated[RecordService, Depends(get_record_service)]


def _detail(record) -> RecordDetailResponse:
    return RecordDetailResponse.model_validate(record, from_attributes=True)


@router.post(
    "", response_model=RecordDetailResponse, status_code=status.HTTP_201_CREATED
)
def create_record(
    payload: RecordCreateRequest,
    user: OptionalUser,
    service: RecordServiceDep,
) -> RecordDetailResponse:
    """Open a phase 1 record, pending review when personal data is sent."""

    personal_data = (
        payload.personal_data.model_dump() if payload.personal_data else None
    )
    try:
        record = service.create(personal_data=personal_data, user=user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.get("", response_model=RecordListResponse)
def list_records(
    _: AdminUser,
    service: RecordServiceDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    record_status: Annotated[RecordStatus | None, Query(alias="status")] = None,
    phase: RecordPhase | None = None,
    search: str | None = None,
    creator: Annotated[str | None, Query(pattern="^(admin|user)$")] = None,
) -> RecordListResponse:
    records, total = service.list_records(
        page=page,
        limit=limit,
        status=record_status,
        phase=phase,
        search=search,
        creator=creator,
    )
    return RecordListResponse(
        records=[
            RecordResponse.model_validate(record, from_attributes=True)
            for record in records
        ],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.get("/stats", response_model=RecordStatsResponse)
def record_stats(_: AdminUser, service: RecordServiceDep) -> RecordStatsResponse:
    return RecordStatsResponse(**service.stats())


@router.get("/analytics/geographic", response_model=list[GeographicEntry])
def geographic_distribution(
    _: AdminUser, service: RecordServiceDep
) -> list[GeographicEntry]:
    """Location of every active record."""

    return [GeographicEntry(**row) for row in service.geographic()]


@router.get("/me", response_model=RecordDetailResponse)
def my_record(user: CurrentUser, service: RecordServiceDep) -> RecordDetailResponse:
    try:
        record = service.get_latest_for_user(user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.get("/search/cedula/{cedula}", response_model=RecordDetailResponse)
def search_by_cedula(
    cedula: str, _: AdminUser, service: RecordServiceDep
) -> RecordDetailResponse:
    try:
        record = service.get_by_cedula(cedula)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.get("/check-cedula/{cedula}", response_model=CedulaCheckResponse)
def check_cedula(
    cedula: str,
    service: RecordServiceDep,
    exclude_record_id: int | None = None,
) -> CedulaCheckResponse:
    return CedulaCheckResponse(
        exists=service.cedula_exists(cedula, exclude_record_id)
    )


@router.get("/{record_id}", response_model=RecordDetailResponse)
def get_record(
    record_id: int, user: CurrentUser, service: RecordServiceDep
) -> RecordDetailResponse:
    try:
        record = service.get_for_user(record_id, user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.put("/{record_id}", response_model=RecordDetailResponse)
def update_record(
    record_id: int,
    payload: PersonalDataPatch,
    _: AdminUser,
    service: RecordServiceDep,
) -> RecordDetailResponse:
    try:
        record = service.update_personal_data(
            record_id, payload.model_dump(exclude_unset=True)
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_record(
    record_id: int, _: AdminUser, service: RecordServiceDep
) -> MessageResponse:
    service.delete(record_id)
    return MessageResponse(message="Record deleted")


@router.patch("/{record_id}/status", response_model=RecordResponse)
def set_record_status(
    record_id: int,
    payload: RecordStatusRequest,
    _: AdminUser,
    service: RecordServiceDep,
) -> RecordResponse:
    try:
        record = service.set_status(record_id, payload.status)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return RecordResponse.model_validate(record, from_attributes=True)


@router.post("/{record_id}/handover", response_model=RecordResponse)
def handover_record(
    record_id: int,
    payload: HandoverRequest,
    admin: AdminUser,
    service: RecordServiceDep,
) -> RecordResponse:
    try:
        record = service.handover(record_id, user_id=payload.user_id, admin=admin)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return RecordResponse.model_validate(record, from_attributes=True)


@router.post("/{record_id}/submit", response_model=RecordDetailResponse)
def submit_record(
    record_id: int, user: CurrentUser, service: RecordServiceDep
) -> RecordDetailResponse:
    try:
        record = service.submit(record_id, user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.put("/{record_id}/phase1", response_model=RecordDetailResponse)
def resubmit_phase1(
    record_id: int,
    payload: PersonalDataInput,
    user: CurrentUser,
    service: RecordServiceDep,
) -> RecordDetailResponse:
    """Send corrected personal data after a modification request."""

    try:
        record = service.resubmit_phase1(record_id, user, payload.model_dump())
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.put("/{record_id}/phase3", response_model=RecordDetailResponse)
def submit_phase3(
    record_id: int,
    payload: Phase3Request,
    user: CurrentUser,
    service: RecordServiceDep,
) -> RecordDetailResponse:
    """Store the complete intake form of an approved or returned record."""

    try:
        record = service.submit_phase3(record_id, user, payload.sections())
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)


@router.get("/{record_id}/notes", response_model=list[RecordNoteResponse])
def list_notes(
    record_id: int, _: AdminUser, service: RecordServiceDep
) -> list[RecordNoteResponse]:
    try:
        notes = service.list_notes(record_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return [RecordNoteResponse.model_validate(note) for note in notes]


@router.post(
    "/{record_id}/notes",
    response_model=RecordNoteResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_note(
    record_id: int,
    payload: NoteCreateRequest,
    admin: AdminUser,
    service: RecordServiceDep,
) -> RecordNoteResponse:
    try:
        note = service.add_note(
            record_id, note=payload.note, note_type=payload.type, author=admin
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return RecordNoteResponse.model_validate(note)


@router.put("/{record_id}/notes/{note_id}", response_model=RecordNoteResponse)
def update_note(
    record_id: int,
    note_id: int,
    payload: NoteUpdateRequest,
    admin: AdminUser,
    service: RecordServiceDep,
) -> RecordNoteResponse:
    try:
        note = service.update_note(
            record_id,
            note_id,
            note=payload.note,
            status=payload.status,
            resolver=admin,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return RecordNoteResponse.model_validate(note)


@router.delete("/{record_id}/notes/{note_id}", response_model=MessageResponse)
def delete_note(
    record_id: int, note_id: int, _: AdminUser, service: RecordServiceDep
) -> MessageResponse:
    try:
        service.delete_note(record_id, note_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Note deleted")


@router.get("/{record_id}/documents", response_model=list[RecordDocumentResponse])
def list_documents(
    record_id: int, user: CurrentUser, service: RecordServiceDep
) -> list[RecordDocumentResponse]:
    try:
        documents = service.list_documents(record_id, user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return [RecordDocumentResponse.model_validate(doc) for doc in documents]


@router.post(
    "/{record_id}/documents",
    response_model=RecordDocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_document(
    record_id: int,
    payload: DocumentInput,
    user: CurrentUser,
    service: RecordServiceDep,
) -> RecordDocumentResponse:
    try:
        document = service.add_document(record_id, user, payload.model_dump())
    except ServiceError as exc:
        raise http_error(exc) from exc
    return RecordDocumentResponse.model_validate(document)


@router.delete(
    "/{record_id}/documents/{document_id}", response_model=MessageResponse
)
def delete_document(
    record_id: int,
    document_id: int,
    user: CurrentUser,
    service: RecordServiceDep,
) -> MessageResponse:
    try:
        service.delete_document(record_id, document_id, user)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Document deleted")


@router.post("/{record_id}/{action}", response_model=RecordDetailResponse)
def apply_action(
    record_id: int,
    action: str,
    admin: AdminUser,
    service: RecordServiceDep,
    payload: RecordActionRequest | None = None,
) -> RecordDetailResponse:
    """Run an administrative phase transition such as ``approve-phase1``."""

    try:
        record_action = RecordAction(action)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Unknown action"
        ) from exc
    if record_action not in ADMIN_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Unknown action"
        )

    payload = payload or RecordActionRequest()
    try:
        record = service.apply_action(
            record_id,
            record_action,
            actor=admin,
            comment=payload.comment,
            sections_to_modify=payload.sections_to_modify,
            documents_to_replace=payload.documents_to_replace,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc
    return _detail(record)
