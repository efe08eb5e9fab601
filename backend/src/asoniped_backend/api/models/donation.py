"""Pydantic models for donation requests."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from asoniped_backend.api.models.common import (
    PHONE_PATTERN,
    require_two_words,
)


class DonationCreateRequest(BaseModel):
    """Help or donation request submitted from the public form."""

    name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    subject: str = Field(min_length=10, max_length=255)
    message: str = Field(min_length=10)
    privacy_accepted: bool
    communication_accepted: bool
    is_anonymous: bool = False

    @model_validator(mode="after")
    def check_contact_and_consent(self) -> DonationCreateRequest:
        if not self.privacy_accepted or not self.communication_accepted:
            msg = "privacy and communication terms must be accepted"
            raise ValueError(msg)
        if self.is_anonymous:
            return self
        if not self.name or not self.email or not self.phone:
            msg = "name, email and phone are required unless the request is anonymous"
            raise ValueError(msg)
        self.name = require_two_words(self.name)
        return self


class DonationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    subject: str
    message: str
    privacy_accepted: bool
    communication_accepted: bool
    created_at: datetime


class DonationCreatedResponse(BaseModel):
    """Donation id with the ticket opened for it."""

    message: str
    donation_id: int
    ticket_id: int | None = None
    anonymous_ticket_id: str | None = None
    session_id: str | None = None
