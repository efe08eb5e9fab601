"""Beneficiary record intake and phase workflow."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from asoniped_backend.api.services.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from asoniped_backend.api.services.ticket import is_admin
from asoniped_backend.database import (
    RecordRepository,
    RecordSchema,
    UserRepository,
    UserSchema,
)
from asoniped_backend.database.schemas import (
    BiomechanicalBenefitSchema,
    CompletePersonalDataSchema,
    DisabilityDataSchema,
    EnrollmentFormSchema,
    FamilyInformationSchema,
    PermanentLimitationSchema,
    PersonalDataSchema,
    RecordDocumentSchema,
    RecordNoteSchema,
    RegistrationRequirementsSchema,
    SocioeconomicDataSchema,
)
from asoniped_backend.shared import (
    ModificationType,
    NoteStatus,
    NoteType,
    RecordPhase,
    RecordStatus,
)
from asoniped_backend.workflow import (
    MODIFICATION_ACTIONS,
    RecordAction,
    get_transition,
    phase3_action_for,
)

logger = logging.getLogger(__name__)

# One-to-one phase 3 sections stored as plain column sets.
PHASE3_SECTIONS: dict[str, type] = {
    "complete_personal_data": CompletePersonalDataSchema,
    "family_information": FamilyInformationSchema,
    "socioeconomic_data": SocioeconomicDataSchema,
    "registration_requirements": RegistrationRequirementsSchema,
    "enrollment_form": EnrollmentFormSchema,
}

_REQUIRED_PERSONAL = ("full_name", "cedula")

_MODIFICATION_TYPES = {
    RecordAction.REQUEST_PHASE1_MODIFICATION: ModificationType.PHASE1,
    RecordAction.REQUEST_PHASE3_MODIFICATION: ModificationType.PHASE3,
}


def _assign(target: Any, values: dict[str, Any]) -> None:
    for key, value in values.items():
        setattr(target, key, value)


class RecordService:
    """Creates records, moves them through the phases and edits their sections."""

    def __init__(self, session: Session) -> None:
        self._repository = RecordRepository(session)
        self._users = UserRepository(session)

    # Lookup

    def get(self, record_id: int) -> RecordSchema:
        record = self._repository.get_by_id(record_id)
        if record is None:
            raise NotFoundError("Record not found")
        return record

    def get_for_user(self, record_id: int, user: UserSchema) -> RecordSchema:
        """Return the record if ``user`` owns it or is an admin."""
        record = self.get(record_id)
        if is_admin(user) or user.id in (record.created_by, record.handed_over_to):
            return record
        raise PermissionDeniedError("Access denied")

    def get_latest_for_user(self, user: UserSchema) -> RecordSchema:
        record = self._repository.latest_for_user(user.id)
        if record is None:
            raise NotFoundError("No record found for this user")
        return record

    def get_by_cedula(self, cedula: str) -> RecordSchema:
        record = self._repository.get_by_cedula(cedula)
        if record is None:
            raise NotFoundError("Record not found")
        return record

    def cedula_exists(self, cedula: str, exclude_record_id: int | None = None) -> bool:
        return self._repository.cedula_exists(cedula, exclude_record_id)

    def list_records(
        self,
        *,
        page: int,
        limit: int,
        status: RecordStatus | None = None,
        phase: RecordPhase | None = None,
        search: str | None = None,
        creator: str | None = None,
    ) -> tuple[list[RecordSchema], int]:
        admin_created = {"admin": True, "user": False}.get(creator or "")
        return self._repository.list_page(
            page=page,
            limit=limit,
            status=status,
            phase=phase,
            search=search,
            admin_created=admin_created,
        )

    def stats(self) -> dict[str, Any]:
        by_status = dict.fromkeys((status.value for status in RecordStatus), 0)
        by_status.update(self._repository.count_by(RecordSchema.status))
        by_phase = dict.fromkeys((phase.value for phase in RecordPhase), 0)
        by_phase.update(self._repository.count_by(RecordSchema.phase))
        return {
            "total": self._repository.count_all(),
            "this_month": self._repository.count_created_in_month(
                datetime.now(tz=timezone.utc)
            ),
            "by_status": by_status,
            "by_phase": by_phase,
        }

    def geographic(self) -> list[dict[str, Any]]:
        keys = ("id", "record_number", "province", "canton", "district", "created_at")
        return [dict(zip(keys, row)) for row in self._repository.geographic_rows()]

    # Creation and plain edits

    def _check_cedula(self, cedula: str, record_id: int | None = None) -> None:
        if self._repository.cedula_exists(cedula, record_id):
            raise ConflictError("A record with this cedula already exists")

    def create(
        self,
        *,
        personal_data: dict[str, Any] | None,
        user: UserSchema | None,
    ) -> RecordSchema:
        """Open a phase 1 record; it is pending once personal data is given."""
        if personal_data:
            self._check_cedula(personal_data["cedula"])
        record = RecordSchema(
            record_number=self._repository.next_record_number(
                datetime.now(tz=timezone.utc).year
            ),
            phase=RecordPhase.PHASE1,
            status=RecordStatus.PENDING if personal_data else RecordStatus.DRAFT,
            created_by=user.id if user is not None else None,
            admin_created=user is not None and is_admin(user),
        )
        if personal_data:
            record.personal_data = PersonalDataSchema(**personal_data)
        record = self._repository.add(record)
        logger.info("Created record %s (%s)", record.record_number, record.status)
        return record

    def update_personal_data(
        self, record_id: int, personal_data: dict[str, Any]
    ) -> RecordSchema:
        """Replace phase 1 personal data, creating it when missing."""
        record = self.get(record_id)
        if any(personal_data.get(name, "") is None for name in _REQUIRED_PERSONAL):
            raise ValidationFailedError("full_name and cedula cannot be empty")
        if "cedula" in personal_data:
            self._check_cedula(personal_data["cedula"], record.id)
        if record.personal_data is None:
            if any(name not in personal_data for name in _REQUIRED_PERSONAL):
                raise ValidationFailedError("full_name and cedula are required")
            record.personal_data = PersonalDataSchema(**personal_data)
        else:
            _assign(record.personal_data, personal_data)
        return self._repository.save(record)

    def delete(self, record_id: int) -> bool:
        deleted = self._repository.delete(record_id)
        if deleted:
            logger.info("Deleted record %s", record_id)
        return deleted

    def set_status(self, record_id: int, status: RecordStatus) -> RecordSchema:
        if self._repository.set_status(record_id, status) == 0:
            raise NotFoundError("Record not found")
        logger.info("Record %s status set to %s", record_id, status)
        return self.get(record_id)

    def handover(
        self, record_id: int, *, user_id: int, admin: UserSchema
    ) -> RecordSchema:
        """Give an admin-created record to the beneficiary's account."""
        record = self.get(record_id)
        if not record.admin_created:
            raise ValidationFailedError(
                "Only records created by an admin can be handed over"
            )
        if self._users.get_by_id(user_id) is None:
            raise NotFoundError("User not found")
        record.handed_over_to_user = True
        record.handed_over_to = user_id
        record.handed_over_by = admin.id
        record.handed_over_at = datetime.now(tz=timezone.utc)
        logger.info("Record %s handed over to user %s", record_id, user_id)
        return self._repository.save(record)

    # Workflow

    def _transition(self, record_id: int, action: RecordAction) -> None:
        """Apply ``action`` as one conditional update.

        Zero updated rows means the record is missing or not in a state the
        action accepts.
        """
        if self._repository.apply_transition(record_id, get_transition(action)) == 0:
            record = self.get(record_id)
            msg = (
                f"Cannot {action.value} a record in "
                f"{record.phase.value}/{record.status.value}"
            )
            raise InvalidTransitionError(msg)
        logger.info("Record %s: %s", record_id, action.value)

    def apply_action(
        self,
        record_id: int,
        action: RecordAction,
        *,
        actor: UserSchema,
        comment: str | None = None,
        sections_to_modify: list[str] | None = None,
        documents_to_replace: list[str] | None = None,
    ) -> RecordSchema:
        """Run an administrative transition, storing modification requests."""
        self._transition(record_id, action)
        if action in MODIFICATION_ACTIONS:
            self._repository.add_note(
                RecordNoteSchema(
                    record_id=record_id,
                    note=comment or "Modification requested",
                    type=NoteType.MODIFICATION,
                    modification_type=_MODIFICATION_TYPES[action],
                    admin_comment=comment,
                    sections_to_modify=sections_to_modify or [],
                    documents_to_replace=documents_to_replace or [],
                    status=NoteStatus.PENDING,
                    created_by=actor.id,
                )
            )
        elif comment:
            self._repository.add_note(
                RecordNoteSchema(
                    record_id=record_id,
                    note=comment,
                    type=NoteType.ACTIVITY,
                    created_by=actor.id,
                )
            )
        return self._repository.save(self.get(record_id))

    def submit(self, record_id: int, user: UserSchema) -> RecordSchema:
        record = self.get_for_user(record_id, user)
        if record.personal_data is None:
            raise ValidationFailedError("Personal data is required before submitting")
        self._transition(record_id, RecordAction.SUBMIT)
        return self._repository.save(record)

    def resubmit_phase1(
        self, record_id: int, user: UserSchema, personal_data: dict[str, Any]
    ) -> RecordSchema:
        """Answer a phase 1 modification request with corrected data."""
        record = self.get_for_user(record_id, user)
        if "cedula" in personal_data:
            self._check_cedula(personal_data["cedula"], record.id)
        self._transition(record_id, RecordAction.PHASE1_RESUBMIT)
        if record.personal_data is None:
            record.personal_data = PersonalDataSchema(**personal_data)
        else:
            _assign(record.personal_data, personal_data)
        self._repository.resolve_pending_modifications(record_id, user.id)
        return self._repository.save(record)

    def submit_phase3(
        self,
        record_id: int,
        user: UserSchema,
        sections: dict[str, Any],
    ) -> RecordSchema:
        """Store the phase 3 form; first submission or answer to a request.

        The state change happens first, so nothing is written when the
        record is not waiting for phase 3 data.
        """
        record = self.get_for_user(record_id, user)
        action = phase3_action_for(record.phase, record.status)
        self._transition(record_id, action)

        for name, schema in PHASE3_SECTIONS.items():
            values = sections.get(name)
            if values is None:
                continue
            current = getattr(record, name)
            if current is None:
                setattr(record, name, schema(**values))
            else:
                _assign(current, values)

        disability = sections.get("disability_data")
        if disability is not None:
            self._store_disability_data(record, disability)

        for document in sections.get("documents") or []:
            record.documents.append(
                RecordDocumentSchema(**document, uploaded_by=user.id)
            )

        if action == RecordAction.PHASE3_RESUBMIT:
            self._repository.resolve_pending_modifications(record_id, user.id)
        return self._repository.save(record)

    @staticmethod
    def _store_disability_data(record: RecordSchema, values: dict[str, Any]) -> None:
        values = dict(values)
        limitations = values.pop("permanent_limitations", None)
        benefits = values.pop("biomechanical_benefits", None)
        if record.disability_data is None:
            record.disability_data = DisabilityDataSchema()
        data = record.disability_data
        _assign(data, values)
        if limitations is not None:
            data.permanent_limitations = [
                PermanentLimitationSchema(**item) for item in limitations
            ]
        if benefits is not None:
            data.biomechanical_benefits = [
                BiomechanicalBenefitSchema(**item) for item in benefits
            ]

    # Notes

    def list_notes(self, record_id: int) -> list[RecordNoteSchema]:
        self.get(record_id)
        return self._repository.list_notes(record_id)

    def add_note(
        self,
        record_id: int,
        *,
        note: str,
        note_type: NoteType,
        author: UserSchema,
    ) -> RecordNoteSchema:
        self.get(record_id)
        return self._repository.add_note(
            RecordNoteSchema(
                record_id=record_id,
                note=note,
                type=note_type,
                created_by=author.id,
            )
        )

    def update_note(
        self,
        record_id: int,
        note_id: int,
        *,
        note: str | None = None,
        status: NoteStatus | None = None,
        resolver: UserSchema,
    ) -> RecordNoteSchema:
        entry = self._repository.get_note(record_id, note_id)
        if entry is None:
            raise NotFoundError("Note not found")
        if note is not None:
            entry.note = note
        if status is not None and status != entry.status:
            entry.status = status
            if status == NoteStatus.RESOLVED:
                entry.resolved_at = datetime.now(tz=timezone.utc)
                entry.resolved_by = resolver.id
        return self._repository.save_note(entry)

    def delete_note(self, record_id: int, note_id: int) -> None:
        entry = self._repository.get_note(record_id, note_id)
        if entry is None:
            raise NotFoundError("Note not found")
        self._repository.delete_note(entry)

    # Documents

    def list_documents(
        self, record_id: int, user: UserSchema
    ) -> list[RecordDocumentSchema]:
        self.get_for_user(record_id, user)
        return self._repository.list_documents(record_id)

    def add_document(
        self, record_id: int, user: UserSchema, metadata: dict[str, Any]
    ) -> RecordDocumentSchema:
        self.get_for_user(record_id, user)
        return self._repository.add_document(
            RecordDocumentSchema(record_id=record_id, uploaded_by=user.id, **metadata)
        )

    def delete_document(
        self, record_id: int, document_id: int, user: UserSchema
    ) -> None:
        self.get_for_user(record_id, user)
        document = self._repository.get_document(record_id, document_id)
        if document is None:
            raise NotFoundError("Document not found")
        self._repository.delete_document(document)
