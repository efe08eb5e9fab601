"""Service layer for API-specific business logic."""

from asoniped_backend.api.services.auth import AuthService, TokenPayload
from asoniped_backend.api.services.donation import DonationReceipt, DonationService
from asoniped_backend.api.services.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    UserAlreadyExistsError,
    ValidationFailedError,
)
from asoniped_backend.api.services.record import RecordService
from asoniped_backend.api.services.rooms import (
    TicketRooms,
    anonymous_ticket_room,
    ticket_room,
)
from asoniped_backend.api.services.ticket import TicketService, is_admin
from asoniped_backend.api.services.user import UserService
from asoniped_backend.api.services.volunteer import OptionAvailability, VolunteerService

__all__ = [
    "AuthService",
    "ConflictError",
    "DonationReceipt",
    "DonationService",
    "InvalidCredentialsError",
    "InvalidTransitionError",
    "NotFoundError",
    "OptionAvailability",
    "PermissionDeniedError",
    "RecordService",
    "ServiceError",
    "TicketRooms",
    "TicketService",
    "TokenPayload",
    "UserAlreadyExistsError",
    "UserService",
    "ValidationFailedError",
    "VolunteerService",
    "anonymous_ticket_room",
    "is_admin",
    "ticket_room",
]
