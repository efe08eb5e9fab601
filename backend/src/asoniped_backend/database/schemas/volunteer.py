"""Volunteer option, application and registration schemas."""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asoniped_backend.database.base import BaseSchema, TimestampMixin, string_enum
from asoniped_backend.shared import RegistrationStatus, VolunteerStatus


class VolunteerOptionSchema(BaseSchema):
    """Volunteering opportunity with a fixed number of spots."""

    __tablename__ = "volunteer_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(512))
    date: Mapped[str] = mapped_column(String(64), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    skills: Mapped[str | None] = mapped_column(Text)
    tools: Mapped[str | None] = mapped_column(Text)
    hour: Mapped[str | None] = mapped_column(String(32))
    spots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class VolunteerSchema(BaseSchema):
    """Volunteer application submitted through the public form."""

    __tablename__ = "volunteers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(32))
    age: Mapped[str | None] = mapped_column(String(16))
    availability_days: Mapped[str | None] = mapped_column(String(255))
    availability_time_slots: Mapped[str | None] = mapped_column(String(255))
    interests: Mapped[str | None] = mapped_column(Text)
    skills: Mapped[str | None] = mapped_column(Text)
    motivation: Mapped[str | None] = mapped_column(Text)
    status: Mapped[VolunteerStatus] = mapped_column(
        string_enum(VolunteerStatus, "volunteer_status"),
        nullable=False,
        default=VolunteerStatus.PENDING,
    )
    submission_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    volunteer_option_id: Mapped[int | None] = mapped_column(
        ForeignKey("volunteer_options.id", ondelete="SET NULL")
    )

    option: Mapped[VolunteerOptionSchema | None] = relationship(lazy="joined")


class VolunteerRegistrationSchema(TimestampMixin, BaseSchema):
    """Account holder's sign-up for a volunteer option."""

    __tablename__ = "volunteer_registrations"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "volunteer_option_id", name="uq_volunteer_registration"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    volunteer_option_id: Mapped[int] = mapped_column(
        ForeignKey("volunteer_options.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[RegistrationStatus] = mapped_column(
        string_enum(RegistrationStatus, "volunteer_registration_status"),
        nullable=False,
        default=RegistrationStatus.REGISTERED,
    )
    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    cancellation_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )
    notes: Mapped[str | None] = mapped_column(Text)

    option: Mapped[VolunteerOptionSchema] = relationship(lazy="joined")
