"""Repository helpers for volunteer options, applications and registrations."""

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from asoniped_backend.database.schemas import (
    VolunteerOptionSchema,
    VolunteerRegistrationSchema,
    VolunteerSchema,
)
from asoniped_backend.shared import RegistrationStatus, VolunteerStatus


class VolunteerOptionRepository:
    """Persistence operations for :class:`VolunteerOptionSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, option_id: int) -> VolunteerOptionSchema | None:
        return self._session.get(VolunteerOptionSchema, option_id)

    def list_all(self) -> list[VolunteerOptionSchema]:
        stmt = select(VolunteerOptionSchema).order_by(VolunteerOptionSchema.id.desc())
        return list(self._session.scalars(stmt))

    def registered_counts(self) -> dict[int, int]:
        """Return active registrations per option id."""
        stmt = (
            select(VolunteerRegistrationSchema.volunteer_option_id, func.count())
            .where(VolunteerRegistrationSchema.status == RegistrationStatus.REGISTERED)
            .group_by(VolunteerRegistrationSchema.volunteer_option_id)
        )
        return {option_id: count for option_id, count in self._session.execute(stmt)}

    def registered_count(self, option_id: int) -> int:
        stmt = select(func.count(VolunteerRegistrationSchema.id)).where(
            VolunteerRegistrationSchema.volunteer_option_id == option_id,
            VolunteerRegistrationSchema.status == RegistrationStatus.REGISTERED,
        )
        return self._session.scalar(stmt) or 0

    def add(self, option: VolunteerOptionSchema) -> VolunteerOptionSchema:
        self._session.add(option)
        self._session.flush()
        self._session.refresh(option)
        return option

    def save(self, option: VolunteerOptionSchema) -> VolunteerOptionSchema:
        self._session.flush()
        self._session.refresh(option)
        return option

    def delete(self, option_id: int) -> bool:
        """Delete an option, detaching the applications that point at it."""
        option = self.get_by_id(option_id)
        if option is None:
            return False
        applications = select(VolunteerSchema).where(
            VolunteerSchema.volunteer_option_id == option_id
        )
        for volunteer in self._session.scalars(applications):
            volunteer.volunteer_option_id = None
        registrations = select(VolunteerRegistrationSchema).where(
            VolunteerRegistrationSchema.volunteer_option_id == option_id
        )
        for registration in self._session.scalars(registrations):
            self._session.delete(registration)
        self._session.delete(option)
        self._session.flush()
        return True


class VolunteerRepository:
    """Persistence operations for :class:`VolunteerSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, volunteer_id: int) -> VolunteerSchema | None:
        return self._session.get(VolunteerSchema, volunteer_id)

    def list_page(
        self,
        *,
        page: int,
        limit: int,
        status: VolunteerStatus | None = None,
        name: str | None = None,
    ) -> tuple[list[VolunteerSchema], int]:
        """Return one page of applications and the total matching count."""
        stmt = select(VolunteerSchema)
        if status is not None:
            stmt = stmt.where(VolunteerSchema.status == status)
        if name:
            pattern = f"%{name}%"
            stmt = stmt.where(
                or_(
                    VolunteerSchema.first_name.ilike(pattern),
                    VolunteerSchema.last_name.ilike(pattern),
                )
            )
        total = self._session.scalar(
            select(func.count()).select_from(stmt.subquery())
        )
        stmt = (
            stmt.order_by(VolunteerSchema.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(self._session.scalars(stmt)), total or 0

    def find_by_email_and_option(
        self, email: str, option_id: int
    ) -> VolunteerSchema | None:
        stmt = select(VolunteerSchema).where(
            func.lower(VolunteerSchema.email) == email.lower(),
            VolunteerSchema.volunteer_option_id == option_id,
        )
        return self._session.scalars(stmt.limit(1)).first()

    def list_by_email(self, email: str) -> list[VolunteerSchema]:
        stmt = (
            select(VolunteerSchema)
            .where(func.lower(VolunteerSchema.email) == email.lower())
            .order_by(VolunteerSchema.submission_date.desc(), VolunteerSchema.id.desc())
        )
        return list(self._session.scalars(stmt))

    def add(self, volunteer: VolunteerSchema) -> VolunteerSchema:
        self._session.add(volunteer)
        self._session.flush()
        self._session.refresh(volunteer)
        return volunteer

    def save(self, volunteer: VolunteerSchema) -> VolunteerSchema:
        self._session.flush()
        self._session.refresh(volunteer)
        return volunteer

    def delete(self, volunteer_id: int) -> bool:
        volunteer = self.get_by_id(volunteer_id)
        if volunteer is None:
            return False
        self._session.delete(volunteer)
        self._session.flush()
        return True


class VolunteerRegistrationRepository:
    """Persistence operations for :class:`VolunteerRegistrationSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int, option_id: int) -> VolunteerRegistrationSchema | None:
        """Return the registration of a user for an option, in any status."""
        stmt = select(VolunteerRegistrationSchema).where(
            VolunteerRegistrationSchema.user_id == user_id,
            VolunteerRegistrationSchema.volunteer_option_id == option_id,
        )
        return self._session.scalar(stmt)

    def list_by_user(self, user_id: int) -> list[VolunteerRegistrationSchema]:
        stmt = (
            select(VolunteerRegistrationSchema)
            .where(VolunteerRegistrationSchema.user_id == user_id)
            .order_by(
                VolunteerRegistrationSchema.registration_date.desc(),
                VolunteerRegistrationSchema.id.desc(),
            )
        )
        return list(self._session.scalars(stmt))

    def list_by_option(self, option_id: int) -> list[VolunteerRegistrationSchema]:
        stmt = (
            select(VolunteerRegistrationSchema)
            .where(VolunteerRegistrationSchema.volunteer_option_id == option_id)
            .order_by(VolunteerRegistrationSchema.id)
        )
        return list(self._session.scalars(stmt))

    def registered_option_ids(self, user_id: int) -> set[int]:
        stmt = select(VolunteerRegistrationSchema.volunteer_option_id).where(
            VolunteerRegistrationSchema.user_id == user_id,
            VolunteerRegistrationSchema.status == RegistrationStatus.REGISTERED,
        )
        return set(self._session.scalars(stmt))

    def add(
        self, registration: VolunteerRegistrationSchema
    ) -> VolunteerRegistrationSchema:
        self._session.add(registration)
        self._session.flush()
        self._session.refresh(registration)
        return registration

    def save(
        self, registration: VolunteerRegistrationSchema
    ) -> VolunteerRegistrationSchema:
        self._session.flush()
        self._session.refresh(registration)
        return registration
