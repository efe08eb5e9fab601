"""Beneficiary record database schemas.

A record owns one row per intake section. Phase 1 only collects
:class:`PersonalDataSchema`; phase 3 adds the remaining sections.
"""

from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asoniped_backend.database.base import BaseSchema, TimestampMixin, string_enum
from asoniped_backend.database.schemas.user import UserSchema
from asoniped_backend.shared import (
    ModificationType,
    NoteStatus,
    NoteType,
    RecordPhase,
    RecordStatus,
)


def _record_fk() -> Mapped[int]:
    return mapped_column(
        ForeignKey("records.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )


class RecordSchema(TimestampMixin, BaseSchema):
    """Case file of a beneficiary."""

    __tablename__ = "records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_number: Mapped[str] = mapped_column(
        String(16), unique=True, nullable=False, index=True
    )
    phase: Mapped[RecordPhase] = mapped_column(
        string_enum(RecordPhase, "record_phase"),
        nullable=False,
        default=RecordPhase.PHASE1,
        index=True,
    )
    status: Mapped[RecordStatus] = mapped_column(
        string_enum(RecordStatus, "record_status"),
        nullable=False,
        default=RecordStatus.DRAFT,
        index=True,
    )
    created_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    admin_created: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    handed_over_to_user: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    handed_over_to: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    handed_over_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    handed_over_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )

    creator: Mapped[UserSchema | None] = relationship(foreign_keys=[created_by])
    personal_data: Mapped[Optional["PersonalDataSchema"]] = relationship(
        back_populates="record", cascade="all, delete-orphan", lazy="joined"
    )
    complete_personal_data: Mapped[Optional["CompletePersonalDataSchema"]] = (
        relationship(cascade="all, delete-orphan")
    )
    family_information: Mapped[Optional["FamilyInformationSchema"]] = relationship(
        cascade="all, delete-orphan"
    )
    disability_data: Mapped[Optional["DisabilityDataSchema"]] = relationship(
        cascade="all, delete-orphan"
    )
    socioeconomic_data: Mapped[Optional["SocioeconomicDataSchema"]] = relationship(
        cascade="all, delete-orphan"
    )
    registration_requirements: Mapped[Optional["RegistrationRequirementsSchema"]] = (
        relationship(cascade="all, delete-orphan")
    )
    enrollment_form: Mapped[Optional["EnrollmentFormSchema"]] = relationship(
        cascade="all, delete-orphan"
    )
    documents: Mapped[list["RecordDocumentSchema"]] = relationship(
        cascade="all, delete-orphan",
        order_by="RecordDocumentSchema.uploaded_at.desc()",
    )
    notes: Mapped[list["RecordNoteSchema"]] = relationship(
        cascade="all, delete-orphan",
        order_by="RecordNoteSchema.id.desc()",
    )


class PersonalDataSchema(TimestampMixin, BaseSchema):
    """Phase 1 identification of the beneficiary and their parents."""

    __tablename__ = "personal_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = _record_fk()
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    pcd_name: Mapped[str | None] = mapped_column(String(255))
    cedula: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False, index=True
    )
    gender: Mapped[str | None] = mapped_column(String(16))
    birth_date: Mapped[date | None] = mapped_column(Date)
    birth_place: Mapped[str | None] = mapped_column(String(255))
    address: Mapped[str | None] = mapped_column(Text)
    province: Mapped[str | None] = mapped_column(String(64))
    canton: Mapped[str | None] = mapped_column(String(64))
    district: Mapped[str | None] = mapped_column(String(64))
    phone: Mapped[str | None] = mapped_column(String(32))
    mother_name: Mapped[str | None] = mapped_column(String(255))
    mother_cedula: Mapped[str | None] = mapped_column(String(32))
    mother_phone: Mapped[str | None] = mapped_column(String(32))
    father_name: Mapped[str | None] = mapped_column(String(255))
    father_cedula: Mapped[str | None] = mapped_column(String(32))
    father_phone: Mapped[str | None] = mapped_column(String(32))
    legal_guardian_name: Mapped[str | None] = mapped_column(String(255))
    legal_guardian_cedula: Mapped[str | None] = mapped_column(String(32))
    legal_guardian_phone: Mapped[str | None] = mapped_column(String(32))

    record: Mapped[RecordSchema] = relationship(back_populates="personal_data")


class CompletePersonalDataSchema(TimestampMixin, BaseSchema):
    """Phase 3 extended identification and contact details."""

    __tablename__ = "complete_personal_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = _record_fk()
    registration_date: Mapped[date | None] = mapped_column(Date)
    full_name: Mapped[str | None] = mapped_column(String(255))
    pcd_name: Mapped[str | None] = mapped_column(String(255))
    cedula: Mapped[str | None] = mapped_column(String(32), index=True)
    gender: Mapped[str | None] = mapped_column(String(16))
    birth_date: Mapped[date | None] = mapped_column(Date)
    age: Mapped[int | None] = mapped_column(Integer)
    birth_place: Mapped[str | None] = mapped_column(String(255))
    exact_address: Mapped[str | None] = mapped_column(Text)
    province: Mapped[str | None] = mapped_column(String(64))
    canton: Mapped[str | None] = mapped_column(String(64))
    district: Mapped[str | None] = mapped_column(String(64))
    primary_phone: Mapped[str | None] = mapped_column(String(32))
    secondary_phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(255))


class FamilyInformationSchema(TimestampMixin, BaseSchema):
    """Parents, responsible person and other household members."""

    __tablename__ = "family_information"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = _record_fk()
    mother_name: Mapped[str | None] = mapped_column(String(255))
    mother_cedula: Mapped[str | None] = mapped_column(String(32))
    mother_occupation: Mapped[str | None] = mapped_column(String(255))
    mother_phone: Mapped[str | None] = mapped_column(String(32))
    father_name: Mapped[str | None] = mapped_column(String(255))
    father_cedula: Mapped[str | None] = mapped_column(String(32))
    father_occupation: Mapped[str | None] = mapped_column(String(255))
    father_phone: Mapped[str | None] = mapped_column(String(32))
    responsible_person: Mapped[str | None] = mapped_column(String(255))
    responsible_address: Mapped[str | None] = mapped_column(Text)
    responsible_cedula: Mapped[str | None] = mapped_column(String(32))
    responsible_occupation: Mapped[str | None] = mapped_column(String(255))
    responsible_phone: Mapped[str | None] = mapped_column(String(32))
    family_members: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )


class DisabilityDataSchema(BaseSchema):
    """Disability classification with its limitations and support devices."""

    __tablename__ = "disability_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = _record_fk()
    disability_type: Mapped[str | None] = mapped_column(String(32))
    medical_diagnosis: Mapped[str | None] = mapped_column(Text)
    insurance_type: Mapped[str | None] = mapped_column(String(32))
    disability_origin: Mapped[str | None] = mapped_column(String(32))
    disability_certificate: Mapped[str | None] = mapped_column(String(16))
    conapdis_registration: Mapped[str | None] = mapped_column(String(16))
    observations: Mapped[str | None] = mapped_column(Text)

    permanent_limitations: Mapped[list["PermanentLimitationSchema"]] = relationship(
        cascade="all, delete-orphan", lazy="selectin"
    )
    biomechanical_benefits: Mapped[list["BiomechanicalBenefitSchema"]] = (
        relationship(cascade="all, delete-orphan", lazy="selectin")
    )


class PermanentLimitationSchema(BaseSchema):
    """Functional limitation with its severity."""

    __tablename__ = "permanent_limitations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    disability_data_id: Mapped[int] = mapped_column(
        ForeignKey("disability_data.id", ondelete="CASCADE"), nullable=False
    )
    limitation: Mapped[str] = mapped_column(String(64), nullable=False)
    degree: Mapped[str] = mapped_column(String(32), nullable=False)
    observations: Mapped[str | None] = mapped_column(Text)


class BiomechanicalBenefitSchema(BaseSchema):
    """Support device used by the beneficiary."""

    __tablename__ = "biomechanical_benefits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    disability_data_id: Mapped[int] = mapped_column(
        ForeignKey("disability_data.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    other_description: Mapped[str | None] = mapped_column(String(255))


class SocioeconomicDataSchema(TimestampMixin, BaseSchema):
    """Household income, housing and services."""

    __tablename__ = "socioeconomic_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = _record_fk()
    housing_type: Mapped[str | None] = mapped_column(String(64))
    available_services: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    family_income: Mapped[str | None] = mapped_column(String(64))
    working_family_members: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )


class RegistrationRequirementsSchema(TimestampMixin, BaseSchema):
    """Checklist of documents delivered for the registration."""

    __tablename__ = "registration_requirements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = _record_fk()
    medical_diagnosis_doc: Mapped[bool] = mapped_column(Boolean, default=False)
    birth_certificate_doc: Mapped[bool] = mapped_column(Boolean, default=False)
    family_cedulas_doc: Mapped[bool] = mapped_column(Boolean, default=False)
    passport_photo_doc: Mapped[bool] = mapped_column(Boolean, default=False)
    pension_certificate_doc: Mapped[bool] = mapped_column(Boolean, default=False)
    study_certificate_doc: Mapped[bool] = mapped_column(Boolean, default=False)
    bank_account_info: Mapped[str | None] = mapped_column(String(255))
    affiliation_fee_paid: Mapped[bool] = mapped_column(Boolean, default=False)


class EnrollmentFormSchema(TimestampMixin, BaseSchema):
    """Enrollment slip signed by the applicant."""

    __tablename__ = "enrollment_form"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = _record_fk()
    enrollment_date: Mapped[date | None] = mapped_column(Date)
    applicant_full_name: Mapped[str | None] = mapped_column(String(255))
    applicant_cedula: Mapped[str | None] = mapped_column(String(32))
    blood_type: Mapped[str | None] = mapped_column(String(8))
    medical_conditions: Mapped[str | None] = mapped_column(Text)


class RecordDocumentSchema(BaseSchema):
    """Metadata of a document attached to a record."""

    __tablename__ = "record_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = mapped_column(
        ForeignKey("records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_type: Mapped[str] = mapped_column(String(64), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str | None] = mapped_column(String(255))
    file_path: Mapped[str | None] = mapped_column(String(512))
    file_size: Mapped[int | None] = mapped_column(Integer)
    uploaded_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class RecordNoteSchema(BaseSchema):
    """Activity log entry or modification request on a record."""

    __tablename__ = "record_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    record_id: Mapped[int] = mapped_column(
        ForeignKey("records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    note: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NoteType] = mapped_column(
        string_enum(NoteType, "record_note_type"),
        nullable=False,
        default=NoteType.NOTE,
    )
    modification_type: Mapped[ModificationType | None] = mapped_column(
        string_enum(ModificationType, "record_modification_type")
    )
    admin_comment: Mapped[str | None] = mapped_column(Text)
    sections_to_modify: Mapped[list[str] | None] = mapped_column(JSON)
    documents_to_replace: Mapped[list[str] | None] = mapped_column(JSON)
    status: Mapped[NoteStatus] = mapped_column(
        string_enum(NoteStatus, "record_note_status"),
        nullable=False,
        default=NoteStatus.RESOLVED,
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    resolved_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    created_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
