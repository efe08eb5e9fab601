"""Ticket and message database schemas."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asoniped_backend.database.base import BaseSchema, string_enum
from asoniped_backend.database.schemas.donation import DonationSchema
from asoniped_backend.database.schemas.user import UserSchema
from asoniped_backend.shared import ModuleType, SenderType, TicketStatus


class _TicketColumns:
    """Status bookkeeping shared by authenticated and anonymous tickets."""

    status: Mapped[TicketStatus] = mapped_column(
        string_enum(TicketStatus, "ticket_status"),
        nullable=False,
        default=TicketStatus.OPEN,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    assigned_admin_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )


class DonationTicketSchema(_TicketColumns, BaseSchema):
    """Conversation thread opened by an authenticated user for a donation."""

    __tablename__ = "donation_tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    donation_id: Mapped[int] = mapped_column(
        ForeignKey("donations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True
    )

    donation: Mapped[DonationSchema] = relationship(lazy="joined")
    user: Mapped[UserSchema | None] = relationship(foreign_keys=[user_id])
    assigned_admin: Mapped[UserSchema | None] = relationship(
        foreign_keys="DonationTicketSchema.assigned_admin_id"
    )


class TicketMessageSchema(BaseSchema):
    """Message posted on a ticket of any module."""

    __tablename__ = "ticket_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    module_type: Mapped[ModuleType] = mapped_column(
        string_enum(ModuleType, "ticket_module_type"), nullable=False
    )
    module_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    sender_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    sender: Mapped[UserSchema | None] = relationship(lazy="joined")


class AnonymousTicketSchema(_TicketColumns, BaseSchema):
    """Ticket for a donation submitted without an account."""

    __tablename__ = "anonymous_tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False, index=True
    )
    donation_id: Mapped[int] = mapped_column(
        ForeignKey("donations.id", ondelete="CASCADE"), nullable=False
    )
    session_id: Mapped[str | None] = mapped_column(String(64))

    donation: Mapped[DonationSchema] = relationship(lazy="joined")
    assigned_admin: Mapped[UserSchema | None] = relationship()
    messages: Mapped[list["AnonymousTicketMessageSchema"]] = relationship(
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="AnonymousTicketMessageSchema.id",
    )


class AnonymousTicketMessageSchema(BaseSchema):
    """Message exchanged on an anonymous ticket."""

    __tablename__ = "anonymous_ticket_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(
        ForeignKey("anonymous_tickets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_type: Mapped[SenderType] = mapped_column(
        string_enum(SenderType, "ticket_sender_type"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    ticket: Mapped[AnonymousTicketSchema] = relationship(back_populates="messages")
