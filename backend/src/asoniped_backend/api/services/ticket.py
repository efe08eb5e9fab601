"""Ticket lifecycle and messaging logic."""

from __future__ import annotations

import logging
import secrets
import string
import time
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from asoniped_backend.api.services.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from asoniped_backend.database import (
    AnonymousTicketMessageSchema,
    AnonymousTicketRepository,
    AnonymousTicketSchema,
    DonationRepository,
    DonationSchema,
    DonationTicketRepository,
    DonationTicketSchema,
    TicketMessageRepository,
    TicketMessageSchema,
    UserRepository,
    UserSchema,
)
from asoniped_backend.shared import ModuleType, RoleName, SenderType, TicketStatus

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_uppercase
_CODE_ATTEMPTS = 5


def _to_base36(value: int) -> str:
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def generate_ticket_code() -> str:
    """Return a public ticket code: ``T``, base36 milliseconds, random suffix."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
    return f"T{_to_base36(time.time_ns() // 1_000_000)}{suffix}"


def generate_session_id() -> str:
    return f"session_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


def initial_help_message(donation: DonationSchema) -> str:
    return f"New help request: {donation.subject}\n\nMessage: {donation.message}"


def is_admin(user: UserSchema) -> bool:
    return RoleName.ADMIN.value in user.role_names


def _apply_status(ticket, status: TicketStatus) -> None:
    """Set ``status`` and keep the closing/archiving timestamps consistent."""
    now = datetime.now(tz=timezone.utc)
    ticket.status = status
    if status == TicketStatus.OPEN:
        ticket.closed_at = None
        ticket.archived_at = None
    elif status == TicketStatus.CLOSED:
        ticket.closed_at = now
        ticket.archived_at = None
    elif status == TicketStatus.ARCHIVED:
        ticket.archived_at = now


class TicketService:
    """Creates tickets for donations and manages their conversations."""

    def __init__(self, session: Session) -> None:
        self._donations = DonationRepository(session)
        self._tickets = DonationTicketRepository(session)
        self._messages = TicketMessageRepository(session)
        self._anonymous = AnonymousTicketRepository(session)
        self._users = UserRepository(session)

    def _assignee(self, user_id: int) -> UserSchema:
        """Return the administrator a ticket may be assigned to."""
        user = self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("Assigned admin not found")
        if not is_admin(user):
            raise ValidationFailedError("Assigned user is not an admin")
        return user

    # Donation tickets

    def open_donation_ticket(
        self, donation: DonationSchema, user: UserSchema
    ) -> DonationTicketSchema:
        """Open a ticket for ``donation`` seeded with the request text."""
        ticket = self._tickets.add(
            DonationTicketSchema(donation_id=donation.id, user_id=user.id)
        )
        self._messages.add(
            TicketMessageSchema(
                module_type=ModuleType.DONATIONS,
                module_id=ticket.id,
                sender_id=user.id,
                message=initial_help_message(donation),
            )
        )
        return ticket

    def create_donation_ticket(
        self, donation_id: int, user: UserSchema
    ) -> DonationTicketSchema:
        donation = self._donations.get_by_id(donation_id)
        if donation is None:
            raise NotFoundError("Donation not found")
        return self._tickets.add(
            DonationTicketSchema(donation_id=donation.id, user_id=user.id)
        )

    def get_donation_ticket(
        self, ticket_id: int, user: UserSchema
    ) -> DonationTicketSchema:
        ticket = self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        if ticket.user_id != user.id and not is_admin(user):
            raise PermissionDeniedError("Access denied")
        return ticket

    def list_donation_tickets(self) -> list[DonationTicketSchema]:
        return self._tickets.list_all()

    def list_user_tickets(self, user_id: int) -> list[DonationTicketSchema]:
        return self._tickets.list_by_user(user_id)

    def update_donation_ticket(
        self,
        ticket_id: int,
        *,
        status: TicketStatus | None = None,
        assigned_admin_id: int | None = None,
    ) -> DonationTicketSchema:
        if status is None and assigned_admin_id is None:
            raise ValidationFailedError("No fields to update")
        ticket = self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        if status is not None:
            _apply_status(ticket, status)
        if assigned_admin_id is not None:
            ticket.assigned_admin_id = self._assignee(assigned_admin_id).id
        return self._tickets.save(ticket)

    def set_donation_ticket_status(
        self, ticket_id: int, status: TicketStatus
    ) -> DonationTicketSchema:
        return self.update_donation_ticket(ticket_id, status=status)

    # Ticket messages

    def post_message(
        self,
        *,
        module_type: ModuleType,
        module_id: int,
        sender: UserSchema,
        message: str,
    ) -> TicketMessageSchema:
        if module_type == ModuleType.DONATIONS:
            self.get_donation_ticket(module_id, sender)
        return self._messages.add(
            TicketMessageSchema(
                module_type=module_type,
                module_id=module_id,
                sender_id=sender.id,
                message=message,
            )
        )

    def list_messages(self) -> list[TicketMessageSchema]:
        return self._messages.list_all()

    def list_ticket_messages(
        self, module_type: ModuleType, module_id: int
    ) -> list[TicketMessageSchema]:
        return self._messages.list_for_module(module_type, module_id)

    def delete_message(self, message_id: int) -> bool:
        return self._messages.delete(message_id)

    # Anonymous tickets

    def _unique_code(self) -> str:
        for _ in range(_CODE_ATTEMPTS):
            code = generate_ticket_code()
            if not self._anonymous.code_exists(code):
                return code
        msg = "Could not allocate a unique ticket code"
        raise RuntimeError(msg)

    def open_anonymous_ticket(
        self, donation: DonationSchema, session_id: str | None = None
    ) -> AnonymousTicketSchema:
        """Open a public ticket for ``donation`` seeded with the request text."""
        ticket = self._anonymous.add(
            AnonymousTicketSchema(
                ticket_id=self._unique_code(),
                donation_id=donation.id,
                session_id=session_id or generate_session_id(),
            )
        )
        self._anonymous.add_message(
            AnonymousTicketMessageSchema(
                ticket_id=ticket.id,
                sender_type=SenderType.USER,
                message=initial_help_message(donation),
            )
        )
        logger.info("Opened anonymous ticket %s", ticket.ticket_id)
        return ticket

    def create_anonymous_ticket(
        self, donation_id: int, session_id: str | None = None
    ) -> AnonymousTicketSchema:
        donation = self._donations.get_by_id(donation_id)
        if donation is None:
            raise NotFoundError("Donation not found")
        return self.open_anonymous_ticket(donation, session_id)

    def get_anonymous_ticket(self, code: str) -> AnonymousTicketSchema:
        ticket = self._anonymous.get_by_code(code)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    def get_anonymous_ticket_by_id(self, ticket_id: int) -> AnonymousTicketSchema:
        ticket = self._anonymous.get_by_id(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    def list_anonymous_tickets(self) -> list[AnonymousTicketSchema]:
        return self._anonymous.list_all()

    def list_anonymous_messages(self, code: str) -> list[AnonymousTicketMessageSchema]:
        ticket = self.get_anonymous_ticket(code)
        return self._anonymous.list_messages(ticket.id)

    def post_anonymous_message(
        self, code: str, *, message: str, sender_type: SenderType
    ) -> AnonymousTicketMessageSchema:
        ticket = self.get_anonymous_ticket(code)
        if ticket.status != TicketStatus.OPEN:
            raise ValidationFailedError("Ticket is not open")
        return self._anonymous.add_message(
            AnonymousTicketMessageSchema(
                ticket_id=ticket.id, sender_type=sender_type, message=message
            )
        )

    def update_anonymous_ticket(
        self,
        ticket_id: int,
        *,
        status: TicketStatus | None = None,
        assigned_admin_id: int | None = None,
    ) -> AnonymousTicketSchema:
        if status is None and assigned_admin_id is None:
            raise ValidationFailedError("No fields to update")
        ticket = self.get_anonymous_ticket_by_id(ticket_id)
        if status is not None:
            _apply_status(ticket, status)
        if assigned_admin_id is not None:
            ticket.assigned_admin_id = self._assignee(assigned_admin_id).id
        return self._anonymous.save(ticket)
