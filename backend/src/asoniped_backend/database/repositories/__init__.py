"""Repositories issuing SQL for each aggregate."""

from asoniped_backend.database.repositories.donation import DonationRepository
from asoniped_backend.database.repositories.record import RecordRepository
from asoniped_backend.database.repositories.ticket import (
    AnonymousTicketRepository,
    DonationTicketRepository,
    TicketMessageRepository,
)
from asoniped_backend.database.repositories.user import UserRepository
from asoniped_backend.database.repositories.volunteer import (
    VolunteerOptionRepository,
    VolunteerRegistrationRepository,
    VolunteerRepository,
)

__all__ = [
    "AnonymousTicketRepository",
    "DonationRepository",
    "DonationTicketRepository",
    "RecordRepository",
    "TicketMessageRepository",
    "UserRepository",
    "VolunteerOptionRepository",
    "VolunteerRegistrationRepository",
    "VolunteerRepository",
]
