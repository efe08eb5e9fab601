"""Pydantic models for beneficiary records."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from asoniped_backend.api.models.common import CEDULA_PATTERN
from asoniped_backend.shared import (
    ModificationType,
    NoteStatus,
    NoteType,
    RecordPhase,
    RecordStatus,
)


class _PersonalDataFields(BaseModel):
    pcd_name: str | None = Field(default=None, max_length=255)
    gender: str | None = Field(default=None, max_length=16)
    birth_date: date | None = None
    birth_place: str | None = Field(default=None, max_length=255)
    address: str | None = None
    province: str | None = Field(default=None, max_length=64)
    canton: str | None = Field(default=None, max_length=64)
    district: str | None = Field(default=None, max_length=64)
    phone: str | None = Field(default=None, max_length=32)
    mother_name: str | None = Field(default=None, max_length=255)
    mother_cedula: str | None = Field(default=None, max_length=32)
    mother_phone: str | None = Field(default=None, max_length=32)
    father_name: str | None = Field(default=None, max_length=255)
    father_cedula: str | None = Field(default=None, max_length=32)
    father_phone: str | None = Field(default=None, max_length=32)
    legal_guardian_name: str | None = Field(default=None, max_length=255)
    legal_guardian_cedula: str | None = Field(default=None, max_length=32)
    legal_guardian_phone: str | None = Field(default=None, max_length=32)


class PersonalDataInput(_PersonalDataFields):
    """Phase 1 personal data; name and cedula are mandatory."""

    full_name: str = Field(min_length=1, max_length=255)
    cedula: str = Field(pattern=CEDULA_PATTERN)


class PersonalDataPatch(_PersonalDataFields):
    """Partial personal data edit made by an administrator."""

    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    cedula: str | None = Field(default=None, pattern=CEDULA_PATTERN)

    @model_validator(mode="after")
    def check_required_not_cleared(self) -> PersonalDataPatch:
        for name in ("full_name", "cedula"):
            if name in self.model_fields_set and getattr(self, name) is None:
                msg = f"{name} cannot be null"
                raise ValueError(msg)
        return self


class PersonalDataResponse(PersonalDataInput):
    model_config = ConfigDict(from_attributes=True)

    id: int


class RecordCreateRequest(BaseModel):
    personal_data: PersonalDataInput | None = None


class CompletePersonalDataInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    registration_date: date | None = None
    full_name: str | None = Field(default=None, max_length=255)
    pcd_name: str | None = Field(default=None, max_length=255)
    cedula: str | None = Field(default=None, max_length=32)
    gender: str | None = Field(default=None, max_length=16)
    birth_date: date | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    birth_place: str | None = Field(default=None, max_length=255)
    exact_address: str | None = None
    province: str | None = Field(default=None, max_length=64)
    canton: str | None = Field(default=None, max_length=64)
    district: str | None = Field(default=None, max_length=64)
    primary_phone: str | None = Field(default=None, max_length=32)
    secondary_phone: str | None = Field(default=None, max_length=32)
    email: EmailStr | None = None


class FamilyMember(BaseModel):
    name: str = Field(min_length=1)
    age: int | None = Field(default=None, ge=0)
    relationship: str | None = None
    occupation: str | None = None
    marital_status: str | None = None


class FamilyInformationInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    mother_name: str | None = None
    mother_cedula: str | None = None
    mother_occupation: str | None = None
    mother_phone: str | None = None
    father_name: str | None = None
    father_cedula: str | None = None
    father_occupation: str | None = None
    father_phone: str | None = None
    responsible_person: str | None = None
    responsible_address: str | None = None
    responsible_cedula: str | None = None
    responsible_occupation: str | None = None
    responsible_phone: str | None = None
    family_members: list[FamilyMember] = Field(default_factory=list)


class PermanentLimitationInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    limitation: str = Field(min_length=1, max_length=64)
    degree: str = Field(min_length=1, max_length=32)
    observations: str | None = None


class BiomechanicalBenefitInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str = Field(min_length=1, max_length=32)
    other_description: str | None = Field(default=None, max_length=255)


class DisabilityDataInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    disability_type: str | None = Field(default=None, max_length=32)
    medical_diagnosis: str | None = None
    insurance_type: str | None = Field(default=None, max_length=32)
    disability_origin: str | None = Field(default=None, max_length=32)
    disability_certificate: str | None = Field(default=None, max_length=16)
    conapdis_registration: str | None = Field(default=None, max_length=16)
    observations: str | None = None
    permanent_limitations: list[PermanentLimitationInput] = Field(default_factory=list)
    biomechanical_benefits: list[BiomechanicalBenefitInput] = Field(
        default_factory=list
    )


class WorkingFamilyMember(BaseModel):
    name: str = Field(min_length=1)
    work_type: str | None = None
    work_place: str | None = None
    work_phone: str | None = None


class SocioeconomicDataInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    housing_type: str | None = Field(default=None, max_length=64)
    available_services: list[str] = Field(default_factory=list)
    family_income: str | None = Field(default=None, max_length=64)
    working_family_members: list[WorkingFamilyMember] = Field(default_factory=list)


class RegistrationRequirementsInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    medical_diagnosis_doc: bool = False
    birth_certificate_doc: bool = False
    family_cedulas_doc: bool = False
    passport_photo_doc: bool = False
    pension_certificate_doc: bool = False
    study_certificate_doc: bool = False
    bank_account_info: str | None = Field(default=None, max_length=255)
    affiliation_fee_paid: bool = False


class EnrollmentFormInput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_date: date | None = None
    applicant_full_name: str | None = Field(default=None, max_length=255)
    applicant_cedula: str | None = Field(default=None, max_length=32)
    blood_type: str | None = Field(default=None, max_length=8)
    medical_conditions: str | None = None


class DocumentInput(BaseModel):
    """Metadata of a stored document; the file itself lives elsewhere."""

    document_type: str = Field(min_length=1, max_length=64)
    file_name: str = Field(min_length=1, max_length=255)
    original_name: str | None = Field(default=None, max_length=255)
    file_path: str | None = Field(default=None, max_length=512)
    file_size: int | None = Field(default=None, ge=0)


class Phase3Request(BaseModel):
    """Complete intake form; omitted sections are left untouched."""

    complete_personal_data: CompletePersonalDataInput | None = None
    family_information: FamilyInformationInput | None = None
    disability_data: DisabilityDataInput | None = None
    socioeconomic_data: SocioeconomicDataInput | None = None
    registration_requirements: RegistrationRequirementsInput | None = None
    enrollment_form: EnrollmentFormInput | None = None
    documents: list[DocumentInput] = Field(default_factory=list)

    def sections(self) -> dict[str, Any]:
        """Return the sections and fields that were sent, as dictionaries."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class RecordActionRequest(BaseModel):
    """Optional admin comment attached to a workflow action."""

    comment: str | None = None
    sections_to_modify: list[str] | None = None
    documents_to_replace: list[str] | None = None


class RecordStatusRequest(BaseModel):
    status: RecordStatus


class HandoverRequest(BaseModel):
    user_id: int


class NoteCreateRequest(BaseModel):
    note: str = Field(min_length=1)
    type: NoteType = NoteType.NOTE


class NoteUpdateRequest(BaseModel):
    note: str | None = Field(default=None, min_length=1)
    status: NoteStatus | None = None


class RecordNoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    record_id: int
    note: str
    type: NoteType
    modification_type: ModificationType | None = None
    admin_comment: str | None = None
    sections_to_modify: list[str] | None = None
    documents_to_replace: list[str] | None = None
    status: NoteStatus
    resolved_at: datetime | None = None
    resolved_by: int | None = None
    created_by: int | None = None
    created_at: datetime


class RecordDocumentResponse(DocumentInput):
    model_config = ConfigDict(from_attributes=True)

    id: int
    record_id: int
    uploaded_by: int | None = None
    uploaded_at: datetime


class RecordResponse(BaseModel):
    """Record header with its phase 1 personal data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    record_number: str
    phase: RecordPhase
    status: RecordStatus
    created_by: int | None = None
    admin_created: bool
    handed_over_to_user: bool
    handed_over_to: int | None = None
    handed_over_at: datetime | None = None
    handed_over_by: int | None = None
    created_at: datetime
    updated_at: datetime
    personal_data: PersonalDataResponse | None = None


class RecordDetailResponse(RecordResponse):
    """Record with every section, document and note."""

    complete_personal_data: CompletePersonalDataInput | None = None
    family_information: FamilyInformationInput | None = None
    disability_data: DisabilityDataInput | None = None
    socioeconomic_data: SocioeconomicDataInput | None = None
    registration_requirements: RegistrationRequirementsInput | None = None
    enrollment_form: EnrollmentFormInput | None = None
    documents: list[RecordDocumentResponse] = Field(default_factory=list)
    notes: list[RecordNoteResponse] = Field(default_factory=list)


class RecordListResponse(BaseModel):
    records: list[RecordResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class RecordStatsResponse(BaseModel):
    total: int
    this_month: int
    by_status: dict[str, int]
    by_phase: dict[str, int]


class GeographicEntry(BaseModel):
    id: int
    record_number: str
    province: str | None = None
    canton: str | None = None
    district: str | None = None
    created_at: datetime


class CedulaCheckResponse(BaseModel):
    exists: bool
