"""Volunteer options, applications and sign-ups."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from asoniped_backend.api.services.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)
from asoniped_backend.database import (
    UserSchema,
    VolunteerOptionRepository,
    VolunteerOptionSchema,
    VolunteerRegistrationRepository,
    VolunteerRegistrationSchema,
    VolunteerRepository,
    VolunteerSchema,
)
from asoniped_backend.shared import RegistrationStatus, VolunteerStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OptionAvailability:
    """Volunteer option with its live occupancy."""

    option: VolunteerOptionSchema
    registered_count: int
    is_registered: bool = False

    @property
    def total_spots(self) -> int:
        return self.option.spots

    @property
    def available_spots(self) -> int:
        return max(self.option.spots - self.registered_count, 0)


class VolunteerService:
    """Coordinates the three volunteer repositories."""

    def __init__(self, session: Session) -> None:
        self._options = VolunteerOptionRepository(session)
        self._volunteers = VolunteerRepository(session)
        self._registrations = VolunteerRegistrationRepository(session)

    # Options

    def get_option(self, option_id: int) -> VolunteerOptionSchema:
        option = self._options.get_by_id(option_id)
        if option is None:
            raise NotFoundError("Volunteer option not found")
        return option

    def list_options(self, user: UserSchema | None = None) -> list[OptionAvailability]:
        counts = self._options.registered_counts()
        mine = (
            self._registrations.registered_option_ids(user.id)
            if user is not None
            else set()
        )
        return [
            OptionAvailability(
                option=option,
                registered_count=counts.get(option.id, 0),
                is_registered=option.id in mine,
            )
            for option in self._options.list_all()
        ]

    def availability(self, option_id: int) -> OptionAvailability:
        option = self.get_option(option_id)
        return OptionAvailability(
            option=option,
            registered_count=self._options.registered_count(option_id),
        )

    def create_option(self, values: dict[str, Any]) -> VolunteerOptionSchema:
        option = self._options.add(VolunteerOptionSchema(**values))
        logger.info("Created volunteer option %s", option.id)
        return option

    def update_option(
        self, option_id: int, values: dict[str, Any]
    ) -> VolunteerOptionSchema:
        option = self.get_option(option_id)
        for key, value in values.items():
            setattr(option, key, value)
        return self._options.save(option)

    def delete_option(self, option_id: int) -> bool:
        deleted = self._options.delete(option_id)
        if deleted:
            logger.info("Deleted volunteer option %s", option_id)
        return deleted

    # Applications

    def get_volunteer(self, volunteer_id: int) -> VolunteerSchema:
        volunteer = self._volunteers.get_by_id(volunteer_id)
        if volunteer is None:
            raise NotFoundError("Volunteer not found")
        return volunteer

    def list_volunteers(
        self,
        *,
        page: int,
        limit: int,
        status: VolunteerStatus | None = None,
        name: str | None = None,
    ) -> tuple[list[VolunteerSchema], int]:
        return self._volunteers.list_page(
            page=page, limit=limit, status=status, name=name
        )

    def create_volunteer(self, values: dict[str, Any]) -> VolunteerSchema:
        option_id = values.get("volunteer_option_id")
        if option_id is not None:
            self.get_option(option_id)
        return self._volunteers.add(VolunteerSchema(**values))

    def update_volunteer(
        self, volunteer_id: int, values: dict[str, Any]
    ) -> VolunteerSchema:
        if not values:
            raise ValidationFailedError("No fields to update")
        volunteer = self.get_volunteer(volunteer_id)
        if values.get("volunteer_option_id") is not None:
            self.get_option(values["volunteer_option_id"])
        for key, value in values.items():
            setattr(volunteer, key, value)
        return self._volunteers.save(volunteer)

    def delete_volunteer(self, volunteer_id: int) -> bool:
        return self._volunteers.delete(volunteer_id)

    def enrollments(self, user: UserSchema) -> list[VolunteerSchema]:
        """Return the applications filed with the caller's e-mail."""
        return self._volunteers.list_by_email(user.email)

    def enroll(self, user: UserSchema, option_id: int) -> tuple[VolunteerSchema, bool]:
        """File an application from account data; reuse an existing one.

        Returns the application and whether it was created now.
        """
        self.get_option(option_id)
        existing = self._volunteers.find_by_email_and_option(user.email, option_id)
        if existing is not None:
            return existing, False
        first_name, _, last_name = user.full_name.strip().partition(" ")
        volunteer = self._volunteers.add(
            VolunteerSchema(
                first_name=first_name or user.username,
                last_name=last_name.strip(),
                email=user.email,
                phone=user.phone,
                status=VolunteerStatus.PENDING,
                volunteer_option_id=option_id,
            )
        )
        return volunteer, True

    # Registrations

    def register(
        self, user: UserSchema, option_id: int, notes: str | None = None
    ) -> OptionAvailability:
        """Reserve a spot; a cancelled registration is reactivated."""
        availability = self.availability(option_id)
        registration = self._registrations.get(user.id, option_id)
        if (
            registration is not None
            and registration.status == RegistrationStatus.REGISTERED
        ):
            raise ConflictError("User is already registered for this volunteer option")
        if availability.available_spots <= 0:
            raise ConflictError("No available spots for this volunteer option")

        if registration is None:
            self._registrations.add(
                VolunteerRegistrationSchema(
                    user_id=user.id, volunteer_option_id=option_id, notes=notes
                )
            )
        else:
            registration.status = RegistrationStatus.REGISTERED
            registration.registration_date = datetime.now(tz=timezone.utc)
            registration.cancellation_date = None
            registration.notes = notes
            self._registrations.save(registration)

        self.enroll(user, option_id)
        logger.info("User %s registered for option %s", user.id, option_id)
        return self.availability(option_id)

    def cancel(self, user: UserSchema, option_id: int) -> OptionAvailability:
        registration = self._registrations.get(user.id, option_id)
        if (
            registration is None
            or registration.status != RegistrationStatus.REGISTERED
        ):
            raise ValidationFailedError(
                "User is not registered for this volunteer option"
            )
        registration.status = RegistrationStatus.CANCELLED
        registration.cancellation_date = datetime.now(tz=timezone.utc)
        self._registrations.save(registration)
        logger.info("User %s cancelled option %s", user.id, option_id)
        return self.availability(option_id)

    def user_registrations(
        self, user: UserSchema
    ) -> list[VolunteerRegistrationSchema]:
        return self._registrations.list_by_user(user.id)

    def option_registrations(
        self, option_id: int
    ) -> list[VolunteerRegistrationSchema]:
        self.get_option(option_id)
        return self._registrations.list_by_option(option_id)
