"""Repository helpers for beneficiary records and their sub-resources."""

import re
from datetime import datetime, timezone

from sqlalchemy import extract, func, or_, select, update
from sqlalchemy.orm import Session

from asoniped_backend.database.schemas import (
    CompletePersonalDataSchema,
    PersonalDataSchema,
    RecordDocumentSchema,
    RecordNoteSchema,
    RecordSchema,
)
from asoniped_backend.shared import NoteStatus, NoteType, RecordPhase, RecordStatus
from asoniped_backend.workflow import Transition

RECORD_NUMBER_PATTERN = re.compile(r"^EXP-(\d{4})-(\d{4,})$")


class RecordRepository:
    """Encapsulates persistence operations for :class:`RecordSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, record_id: int) -> RecordSchema | None:
        """Return record entity by its ID."""
        return self._session.get(RecordSchema, record_id)

    def add(self, record: RecordSchema) -> RecordSchema:
        """Add new record to database."""
        self._session.add(record)
        self._session.flush()
        self._session.refresh(record)
        return record

    def save(self, record: RecordSchema) -> RecordSchema:
        """Flush pending changes of a persisted record and reload it."""
        self._session.flush()
        self._session.refresh(record)
        return record

    def delete(self, record_id: int) -> bool:
        """Delete a record with every section, note and document."""
        record = self.get_by_id(record_id)
        if record is None:
            return False
        self._session.delete(record)
        self._session.flush()
        return True

    def next_record_number(self, year: int) -> str:
        """Return the next ``EXP-YYYY-NNNN`` number for ``year``."""
        stmt = select(RecordSchema.record_number).where(
            RecordSchema.record_number.like(f"EXP-{year}-%")
        )
        highest = 0
        for number in self._session.scalars(stmt):
            match = RECORD_NUMBER_PATTERN.match(number)
            if match is not None:
                highest = max(highest, int(match.group(2)))
        return f"EXP-{year}-{highest + 1:04d}"

    def apply_transition(self, record_id: int, transition: Transition) -> int:
        """Move the record along ``transition`` if it is in an allowed state.

        The check and the write are one statement; the return value is the
        number of updated rows (0 or 1).
        """
        stmt = (
            update(RecordSchema)
            .where(
                RecordSchema.id == record_id,
                RecordSchema.phase == transition.phase,
                RecordSchema.status.in_(sorted(transition.from_statuses)),
            )
            .values(
                phase=transition.to_phase,
                status=transition.to_status,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session="fetch")
        )
        return self._session.execute(stmt).rowcount

    def set_status(self, record_id: int, status: RecordStatus) -> int:
        stmt = (
            update(RecordSchema)
            .where(RecordSchema.id == record_id)
            .values(status=status, updated_at=func.now())
            .execution_options(synchronize_session="fetch")
        )
        return self._session.execute(stmt).rowcount

    def list_page(
        self,
        *,
        page: int,
        limit: int,
        status: RecordStatus | None = None,
        phase: RecordPhase | None = None,
        search: str | None = None,
        admin_created: bool | None = None,
    ) -> tuple[list[RecordSchema], int]:
        """Return one page of records and the total matching count."""
        stmt = select(RecordSchema).outerjoin(
            PersonalDataSchema, PersonalDataSchema.record_id == RecordSchema.id
        )
        if status is not None:
            stmt = stmt.where(RecordSchema.status == status)
        if phase is not None:
            stmt = stmt.where(RecordSchema.phase == phase)
        if admin_created is not None:
            stmt = stmt.where(RecordSchema.admin_created == admin_created)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    RecordSchema.record_number.ilike(pattern),
                    PersonalDataSchema.full_name.ilike(pattern),
                    PersonalDataSchema.cedula.ilike(pattern),
                )
            )

        total = self._session.scalar(
            select(func.count()).select_from(stmt.subquery())
        )
        stmt = (
            stmt.order_by(RecordSchema.created_at.desc(), RecordSchema.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(self._session.scalars(stmt).unique()), total or 0

    def count_by(self, column) -> dict[str, int]:
        """Return ``{value: count}`` grouped by a record column."""
        stmt = select(column, func.count()).group_by(column)
        return {str(value): count for value, count in self._session.execute(stmt)}

    def count_all(self) -> int:
        return self._session.scalar(select(func.count(RecordSchema.id))) or 0

    def count_created_in_month(self, moment: datetime) -> int:
        stmt = select(func.count(RecordSchema.id)).where(
            extract("year", RecordSchema.created_at) == moment.year,
            extract("month", RecordSchema.created_at) == moment.month,
        )
        return self._session.scalar(stmt) or 0

    def geographic_rows(self) -> list[tuple]:
        """Return the location of every active record, newest first."""
        stmt = (
            select(
                RecordSchema.id,
                RecordSchema.record_number,
                func.coalesce(
                    PersonalDataSchema.province, CompletePersonalDataSchema.province
                ),
                func.coalesce(
                    PersonalDataSchema.canton, CompletePersonalDataSchema.canton
                ),
                func.coalesce(
                    PersonalDataSchema.district, CompletePersonalDataSchema.district
                ),
                RecordSchema.created_at,
            )
            .outerjoin(
                PersonalDataSchema, PersonalDataSchema.record_id == RecordSchema.id
            )
            .outerjoin(
                CompletePersonalDataSchema,
                CompletePersonalDataSchema.record_id == RecordSchema.id,
            )
            .where(RecordSchema.status == RecordStatus.ACTIVE)
            .order_by(RecordSchema.created_at.desc(), RecordSchema.id.desc())
        )
        return [tuple(row) for row in self._session.execute(stmt)]

    def latest_for_user(self, user_id: int) -> RecordSchema | None:
        """Return the newest record created by or handed over to the user."""
        stmt = (
            select(RecordSchema)
            .where(
                or_(
                    RecordSchema.created_by == user_id,
                    RecordSchema.handed_over_to == user_id,
                )
            )
            .order_by(RecordSchema.created_at.desc(), RecordSchema.id.desc())
            .limit(1)
        )
        return self._session.scalars(stmt).unique().first()

    def get_by_cedula(self, cedula: str) -> RecordSchema | None:
        stmt = (
            select(RecordSchema)
            .join(PersonalDataSchema, PersonalDataSchema.record_id == RecordSchema.id)
            .where(PersonalDataSchema.cedula == cedula)
        )
        return self._session.scalars(stmt).unique().first()

    def cedula_exists(
        self, cedula: str, exclude_record_id: int | None = None
    ) -> bool:
        """Return whether another record already uses ``cedula``."""
        stmt = select(PersonalDataSchema.id).where(PersonalDataSchema.cedula == cedula)
        if exclude_record_id is not None:
            stmt = stmt.where(PersonalDataSchema.record_id != exclude_record_id)
        return self._session.scalar(stmt.limit(1)) is not None

    def add_note(self, note: RecordNoteSchema) -> RecordNoteSchema:
        self._session.add(note)
        self._session.flush()
        self._session.refresh(note)
        return note

    def get_note(self, record_id: int, note_id: int) -> RecordNoteSchema | None:
        stmt = select(RecordNoteSchema).where(
            RecordNoteSchema.id == note_id, RecordNoteSchema.record_id == record_id
        )
        return self._session.scalar(stmt)

    def list_notes(self, record_id: int) -> list[RecordNoteSchema]:
        stmt = (
            select(RecordNoteSchema)
            .where(RecordNoteSchema.record_id == record_id)
            .order_by(RecordNoteSchema.id.desc())
        )
        return list(self._session.scalars(stmt))

    def save_note(self, note: RecordNoteSchema) -> RecordNoteSchema:
        self._session.flush()
        self._session.refresh(note)
        return note

    def delete_note(self, note: RecordNoteSchema) -> None:
        self._session.delete(note)
        self._session.flush()

    def resolve_pending_modifications(
        self, record_id: int, resolved_by: int | None
    ) -> int:
        """Mark open modification requests of a record as resolved."""
        stmt = (
            update(RecordNoteSchema)
            .where(
                RecordNoteSchema.record_id == record_id,
                RecordNoteSchema.type == NoteType.MODIFICATION,
                RecordNoteSchema.status == NoteStatus.PENDING,
            )
            .values(
                status=NoteStatus.RESOLVED,
                resolved_at=datetime.now(tz=timezone.utc),
                resolved_by=resolved_by,
            )
            .execution_options(synchronize_session="fetch")
        )
        return self._session.execute(stmt).rowcount

    def add_document(self, document: RecordDocumentSchema) -> RecordDocumentSchema:
        self._session.add(document)
        self._session.flush()
        self._session.refresh(document)
        return document

    def get_document(
        self, record_id: int, document_id: int
    ) -> RecordDocumentSchema | None:
        stmt = select(RecordDocumentSchema).where(
            RecordDocumentSchema.id == document_id,
            RecordDocumentSchema.record_id == record_id,
        )
        return self._session.scalar(stmt)

    def list_documents(self, record_id: int) -> list[RecordDocumentSchema]:
        stmt = (
            select(RecordDocumentSchema)
            .where(RecordDocumentSchema.record_id == record_id)
            .order_by(RecordDocumentSchema.id.desc())
        )
        return list(self._session.scalars(stmt))

    def delete_document(self, document: RecordDocumentSchema) -> None:
        self._session.delete(document)
        self._session.flush()
