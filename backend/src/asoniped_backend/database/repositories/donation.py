"""Repository helpers for donation requests."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from asoniped_backend.database.schemas import DonationSchema


class DonationRepository:
    """Encapsulates persistence operations for :class:`DonationSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, donation_id: int) -> DonationSchema | None:
        return self._session.get(DonationSchema, donation_id)

    def list_all(self) -> list[DonationSchema]:
        """Return every donation, newest first."""
        stmt = select(DonationSchema).order_by(DonationSchema.id.desc())
        return list(self._session.scalars(stmt))

    def add(self, donation: DonationSchema) -> DonationSchema:
        self._session.add(donation)
        self._session.flush()
        self._session.refresh(donation)
        return donation

    def delete(self, donation_id: int) -> bool:
        """Delete a donation; return whether a row was removed."""
        donation = self.get_by_id(donation_id)
        if donation is None:
            return False
        self._session.delete(donation)
        self._session.flush()
        return True
