"""Shared enumerations and cross-cutting helpers for the backend."""

from asoniped_backend.shared.enums import (
    ModificationType,
    ModuleType,
    NoteStatus,
    NoteType,
    RecordPhase,
    RecordStatus,
    RegistrationStatus,
    RoleName,
    SenderType,
    TicketStatus,
    UserStatus,
    VolunteerStatus,
)

__all__ = [
    "ModificationType",
    "ModuleType",
    "NoteStatus",
    "NoteType",
    "RecordPhase",
    "RecordStatus",
    "RegistrationStatus",
    "RoleName",
    "SenderType",
    "TicketStatus",
    "UserStatus",
    "VolunteerStatus",
]
