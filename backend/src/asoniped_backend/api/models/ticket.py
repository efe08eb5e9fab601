"""Pydantic models for tickets and their messages."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from asoniped_backend.api.models.donation import DonationResponse
from asoniped_backend.shared import ModuleType, SenderType, TicketStatus


class DonationTicketCreateRequest(BaseModel):
    donation_id: int


class TicketUpdateRequest(BaseModel):
    """Admin change of status or assignee; at least one field is required."""

    status: TicketStatus | None = None
    assigned_admin_id: int | None = None


class DonationTicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    donation_id: int
    user_id: int | None = None
    status: TicketStatus
    assigned_admin_id: int | None = None
    created_at: datetime
    closed_at: datetime | None = None
    archived_at: datetime | None = None
    donation: DonationResponse | None = None


class TicketMessageCreateRequest(BaseModel):
    module_type: ModuleType = ModuleType.DONATIONS
    module_id: int
    message: str = Field(min_length=1)


class TicketMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    module_type: ModuleType
    module_id: int
    sender_id: int | None = None
    message: str
    timestamp: datetime


class AnonymousTicketCreateRequest(BaseModel):
    donation_id: int
    session_id: str | None = Field(default=None, max_length=64)


class AnonymousMessageCreateRequest(BaseModel):
    message: str = Field(min_length=1)


class AnonymousMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_type: SenderType
    message: str
    timestamp: datetime


class AnonymousTicketResponse(BaseModel):
    """Anonymous ticket; ``ticket_id`` is the public lookup code."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    ticket_id: str
    donation_id: int
    session_id: str | None = None
    status: TicketStatus
    assigned_admin_id: int | None = None
    created_at: datetime
    closed_at: datetime | None = None
    archived_at: datetime | None = None
    donation: DonationResponse | None = None
