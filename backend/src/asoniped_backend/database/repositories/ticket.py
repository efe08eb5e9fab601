"""Repository helpers for donation tickets, anonymous tickets and messages."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from asoniped_backend.database.schemas import (
    AnonymousTicketMessageSchema,
    AnonymousTicketSchema,
    DonationTicketSchema,
    TicketMessageSchema,
)
from asoniped_backend.shared import ModuleType


class DonationTicketRepository:
    """Persistence operations for :class:`DonationTicketSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, ticket_id: int) -> DonationTicketSchema | None:
        return self._session.get(DonationTicketSchema, ticket_id)

    def list_all(self) -> list[DonationTicketSchema]:
        stmt = select(DonationTicketSchema).order_by(DonationTicketSchema.id.desc())
        return list(self._session.scalars(stmt))

    def list_by_user(self, user_id: int) -> list[DonationTicketSchema]:
        stmt = (
            select(DonationTicketSchema)
            .where(DonationTicketSchema.user_id == user_id)
            .order_by(DonationTicketSchema.id.desc())
        )
        return list(self._session.scalars(stmt))

    def add(self, ticket: DonationTicketSchema) -> DonationTicketSchema:
        self._session.add(ticket)
        self._session.flush()
        self._session.refresh(ticket)
        return ticket

    def save(self, ticket: DonationTicketSchema) -> DonationTicketSchema:
        self._session.flush()
        self._session.refresh(ticket)
        return ticket


class TicketMessageRepository:
    """Persistence operations for :class:`TicketMessageSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, message_id: int) -> TicketMessageSchema | None:
        return self._session.get(TicketMessageSchema, message_id)

    def list_all(self) -> list[TicketMessageSchema]:
        stmt = select(TicketMessageSchema).order_by(TicketMessageSchema.id.desc())
        return list(self._session.scalars(stmt))

    def list_for_module(
        self, module_type: ModuleType, module_id: int
    ) -> list[TicketMessageSchema]:
        """Return the conversation of one ticket in chronological order."""
        stmt = (
            select(TicketMessageSchema)
            .where(
                TicketMessageSchema.module_type == module_type,
                TicketMessageSchema.module_id == module_id,
            )
            .order_by(TicketMessageSchema.id)
        )
        return list(self._session.scalars(stmt))

    def add(self, message: TicketMessageSchema) -> TicketMessageSchema:
        self._session.add(message)
        self._session.flush()
        self._session.refresh(message)
        return message

    def delete(self, message_id: int) -> bool:
        message = self.get_by_id(message_id)
        if message is None:
            return False
        self._session.delete(message)
        self._session.flush()
        return True


class AnonymousTicketRepository:
    """Persistence operations for :class:`AnonymousTicketSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, ticket_id: int) -> AnonymousTicketSchema | None:
        return self._session.get(AnonymousTicketSchema, ticket_id)

    def get_by_code(self, code: str) -> AnonymousTicketSchema | None:
        """Return the ticket identified by its public code."""
        stmt = select(AnonymousTicketSchema).where(
            AnonymousTicketSchema.ticket_id == code.upper()
        )
        return self._session.scalar(stmt)

    def code_exists(self, code: str) -> bool:
        return self.get_by_code(code) is not None

    def list_all(self) -> list[AnonymousTicketSchema]:
        stmt = select(AnonymousTicketSchema).order_by(AnonymousTicketSchema.id.desc())
        return list(self._session.scalars(stmt))

    def add(self, ticket: AnonymousTicketSchema) -> AnonymousTicketSchema:
        self._session.add(ticket)
        self._session.flush()
        self._session.refresh(ticket)
        return ticket

    def save(self, ticket: AnonymousTicketSchema) -> AnonymousTicketSchema:
        self._session.flush()
        self._session.refresh(ticket)
        return ticket

    def add_message(
        self, message: AnonymousTicketMessageSchema
    ) -> AnonymousTicketMessageSchema:
        self._session.add(message)
        self._session.flush()
        self._session.refresh(message)
        return message

    def list_messages(self, ticket_id: int) -> list[AnonymousTicketMessageSchema]:
        stmt = (
            select(AnonymousTicketMessageSchema)
            .where(AnonymousTicketMessageSchema.ticket_id == ticket_id)
            .order_by(AnonymousTicketMessageSchema.id)
        )
        return list(self._session.scalars(stmt))
