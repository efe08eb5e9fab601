"""Donation request intake."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from asoniped_backend.api.services.errors import NotFoundError
from asoniped_backend.api.services.ticket import TicketService
from asoniped_backend.database import (
    AnonymousTicketSchema,
    DonationRepository,
    DonationSchema,
    DonationTicketSchema,
    UserSchema,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DonationReceipt:
    """Donation together with the ticket opened for it."""

    donation: DonationSchema
    ticket: DonationTicketSchema | None = None
    anonymous_ticket: AnonymousTicketSchema | None = None


class DonationService:
    """Stores donation requests and opens the matching ticket."""

    def __init__(self, session: Session) -> None:
        self._repository = DonationRepository(session)
        self._tickets = TicketService(session)

    def list_donations(self) -> list[DonationSchema]:
        return self._repository.list_all()

    def get(self, donation_id: int) -> DonationSchema:
        donation = self._repository.get_by_id(donation_id)
        if donation is None:
            raise NotFoundError("Donation not found")
        return donation

    def create(
        self,
        *,
        name: str | None,
        email: str | None,
        phone: str | None,
        subject: str,
        message: str,
        privacy_accepted: bool,
        communication_accepted: bool,
        is_anonymous: bool,
        user: UserSchema | None,
    ) -> DonationReceipt:
        """Store the request; signed-in callers get a regular ticket.

        Anonymous requests, and requests made without an account, get a
        public ticket code instead.
        """
        donation = self._repository.add(
            DonationSchema(
                name=None if is_anonymous else name,
                email=None if is_anonymous else email,
                phone=None if is_anonymous else phone,
                subject=subject,
                message=message,
                privacy_accepted=privacy_accepted,
                communication_accepted=communication_accepted,
            )
        )
        if user is not None and not is_anonymous:
            ticket = self._tickets.open_donation_ticket(donation, user)
            logger.info("Donation %s opened ticket %s", donation.id, ticket.id)
            return DonationReceipt(donation=donation, ticket=ticket)

        anonymous_ticket = self._tickets.open_anonymous_ticket(donation)
        return DonationReceipt(donation=donation, anonymous_ticket=anonymous_ticket)

    def delete(self, donation_id: int) -> bool:
        deleted = self._repository.delete(donation_id)
        if deleted:
            logger.info("Deleted donation %s", donation_id)
        return deleted
