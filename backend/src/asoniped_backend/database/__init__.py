"""Database connectivity helpers, schemas and repositories."""

from asoniped_backend.database.base import BaseSchema
from asoniped_backend.database.dependencies import (
    dispose_databases,
    get_database,
    get_session,
)
from asoniped_backend.database.repositories import (
    AnonymousTicketRepository,
    DonationRepository,
    DonationTicketRepository,
    RecordRepository,
    TicketMessageRepository,
    UserRepository,
    VolunteerOptionRepository,
    VolunteerRegistrationRepository,
    VolunteerRepository,
)
from asoniped_backend.database.schemas import (
    AnonymousTicketMessageSchema,
    AnonymousTicketSchema,
    DonationSchema,
    DonationTicketSchema,
    RecordSchema,
    RoleSchema,
    TicketMessageSchema,
    UserSchema,
    VolunteerOptionSchema,
    VolunteerRegistrationSchema,
    VolunteerSchema,
)
from asoniped_backend.database.service import DatabaseService
from asoniped_backend.settings import BackendSettings, get_settings

__all__ = [
    "AnonymousTicketMessageSchema",
    "AnonymousTicketRepository",
    "AnonymousTicketSchema",
    "BackendSettings",
    "BaseSchema",
    "DatabaseService",
    "DonationRepository",
    "DonationSchema",
    "DonationTicketRepository",
    "DonationTicketSchema",
    "RecordRepository",
    "RecordSchema",
    "RoleSchema",
    "TicketMessageRepository",
    "TicketMessageSchema",
    "UserRepository",
    "UserSchema",
    "VolunteerOptionRepository",
    "VolunteerOptionSchema",
    "VolunteerRegistrationRepository",
    "VolunteerRegistrationSchema",
    "VolunteerRepository",
    "VolunteerSchema",
    "dispose_databases",
    "get_database",
    "get_session",
    "get_settings",
]
