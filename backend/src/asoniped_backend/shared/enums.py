"""Shared enumerations used across the backend."""

from enum import StrEnum


class UserStatus(StrEnum):
    """Lifecycle of an account."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class RoleName(StrEnum):
    """Built-in role names."""

    ADMIN = "admin"
    USER = "user"


class RecordPhase(StrEnum):
    """Intake phase a beneficiary record is currently in."""

    PHASE1 = "phase1"
    PHASE2 = "phase2"
    PHASE3 = "phase3"
    PHASE4 = "phase4"
    COMPLETED = "completed"


class RecordStatus(StrEnum):
    """Review status attached to the current phase of a record."""

    DRAFT = "draft"
    PENDING = "pending"
    NEEDS_MODIFICATION = "needs_modification"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    INACTIVE = "inactive"


class NoteStatus(StrEnum):
    """Resolution state of a record note."""

    PENDING = "pending"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class NoteType(StrEnum):
    """Kinds of notes attached to a record."""

    NOTE = "note"
    ACTIVITY = "activity"
    MODIFICATION = "modification"


class ModificationType(StrEnum):
    """Which part of the intake a modification request targets."""

    PHASE1 = "phase1_modification"
    PHASE3 = "phase3_modification"
    GENERAL = "general"


class TicketStatus(StrEnum):
    """Conversation state of a donation ticket."""

    OPEN = "open"
    CLOSED = "closed"
    ARCHIVED = "archived"


class SenderType(StrEnum):
    """Author of a message on an anonymous ticket."""

    USER = "user"
    ADMIN = "admin"


class ModuleType(StrEnum):
    """Modules that ticket messages can be attached to."""

    DONATIONS = "donations"
    RECORDS = "records"
    VOLUNTEERS = "volunteers"
    WORKSHOPS = "workshops"


class VolunteerStatus(StrEnum):
    """Review state of a volunteer application."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RegistrationStatus(StrEnum):
    """State of a user's registration to a volunteer option."""

    REGISTERED = "registered"
    CANCELLED = "cancelled"
