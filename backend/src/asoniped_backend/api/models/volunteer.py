"""Pydantic models for volunteer options, applications and registrations."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from asoniped_backend.api.models.common import PHONE_PATTERN
from asoniped_backend.shared import RegistrationStatus, VolunteerStatus


class VolunteerOptionRequest(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    image_url: str | None = Field(default=None, max_length=512)
    date: str = Field(min_length=1, max_length=64)
    location: str = Field(min_length=1, max_length=255)
    skills: str | None = None
    tools: str | None = None
    hour: str | None = Field(default=None, max_length=32)
    spots: int = Field(ge=0)


class VolunteerOptionResponse(VolunteerOptionRequest):
    """Option with its occupancy as seen by the caller."""

    id: int
    registered_count: int = 0
    available_spots: int = 0
    is_registered: bool = False


class AvailableSpotsResponse(BaseModel):
    volunteer_option_id: int
    total_spots: int
    registered_count: int
    available_spots: int


class VolunteerCreateRequest(BaseModel):
    """Public volunteer application."""

    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    email: EmailStr
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    age: str | None = Field(default=None, max_length=16)
    availability_days: str | None = Field(default=None, max_length=255)
    availability_time_slots: str | None = Field(default=None, max_length=255)
    interests: str | None = None
    skills: str | None = None
    motivation: str | None = None
    volunteer_option_id: int | None = None


class VolunteerUpdateRequest(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=128)
    last_name: str | None = Field(default=None, min_length=1, max_length=128)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    status: VolunteerStatus | None = None
    volunteer_option_id: int | None = None


class VolunteerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    age: str | None = None
    availability_days: str | None = None
    availability_time_slots: str | None = None
    interests: str | None = None
    skills: str | None = None
    motivation: str | None = None
    status: VolunteerStatus
    submission_date: datetime
    volunteer_option_id: int | None = None


class VolunteerListResponse(BaseModel):
    volunteers: list[VolunteerResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class EnrollmentResponse(BaseModel):
    """Application of the caller with the option it targets."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    status: VolunteerStatus
    submission_date: datetime
    volunteer_option_id: int | None = None
    option: VolunteerOptionRequest | None = None


class EnrollResponse(BaseModel):
    message: str
    volunteer_id: int
    created: bool


class RegistrationRequest(BaseModel):
    volunteer_option_id: int
    notes: str | None = None


class CancelRegistrationRequest(BaseModel):
    volunteer_option_id: int


class RegistrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    volunteer_option_id: int
    status: RegistrationStatus
    registration_date: datetime
    cancellation_date: datetime | None = None
    notes: str | None = None


class RegistrationResultResponse(AvailableSpotsResponse):
    message: str
