"""Repository helpers for working with users and roles."""

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from asoniped_backend.database.schemas import RecordSchema, RoleSchema, UserSchema
from asoniped_backend.shared import RoleName, UserStatus

_SORTABLE_COLUMNS = {
    "id": UserSchema.id,
    "username": UserSchema.username,
    "email": UserSchema.email,
    "full_name": UserSchema.full_name,
    "created_at": UserSchema.created_at,
}


class UserRepository:
    """Encapsulates persistence operations for :class:`UserSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, user_id: int) -> UserSchema | None:
        """Return user entity by user's ID."""
        return self._session.get(UserSchema, user_id)

    def get_by_username(self, username: str) -> UserSchema | None:
        """Return user entity by user's username."""
        stmt = select(UserSchema).where(UserSchema.username == username)
        return self._session.scalar(stmt)

    def get_by_email(self, email: str) -> UserSchema | None:
        """Return user entity by user's e-mail."""
        stmt = select(UserSchema).where(func.lower(UserSchema.email) == email.lower())
        return self._session.scalar(stmt)

    def get_by_login(self, identifier: str) -> UserSchema | None:
        """Return the user whose username or e-mail matches ``identifier``."""
        stmt = select(UserSchema).where(
            or_(
                UserSchema.username == identifier,
                func.lower(UserSchema.email) == identifier.lower(),
            )
        )
        return self._session.scalar(stmt)

    def add(self, user: UserSchema) -> UserSchema:
        """Add new user to database."""
        self._session.add(user)
        self._session.flush()
        self._session.refresh(user)
        return user

    def save(self, user: UserSchema) -> UserSchema:
        """Flush pending changes of an already persisted user."""
        self._session.flush()
        self._session.refresh(user)
        return user

    def list_page(
        self,
        *,
        page: int,
        limit: int,
        search: str | None = None,
        status: UserStatus | None = None,
        role: str | None = None,
        sort: str = "created_at",
        order: str = "desc",
    ) -> tuple[list[UserSchema], int]:
        """Return one page of users and the total matching count."""
        stmt = select(UserSchema)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    UserSchema.username.ilike(pattern),
                    UserSchema.email.ilike(pattern),
                    UserSchema.full_name.ilike(pattern),
                )
            )
        if status is not None:
            stmt = stmt.where(UserSchema.status == status)
        if role:
            stmt = stmt.where(UserSchema.roles.any(RoleSchema.name == role))

        total = self._session.scalar(
            select(func.count()).select_from(stmt.subquery())
        )
        column = _SORTABLE_COLUMNS.get(sort, UserSchema.created_at)
        ordering = column.asc() if order.lower() == "asc" else column.desc()
        stmt = stmt.order_by(ordering, UserSchema.id).offset((page - 1) * limit)
        users = list(self._session.scalars(stmt.limit(limit)))
        return users, total or 0

    def list_eligible_for_handover(self) -> list[UserSchema]:
        """Return active non-admin users with no record of their own yet."""
        has_record = (
            select(RecordSchema.id)
            .where(
                or_(
                    RecordSchema.created_by == UserSchema.id,
                    and_(
                        RecordSchema.handed_over_to_user.is_(True),
                        RecordSchema.handed_over_to == UserSchema.id,
                    ),
                )
            )
            .exists()
        )
        stmt = (
            select(UserSchema)
            .where(
                UserSchema.status == UserStatus.ACTIVE,
                ~UserSchema.roles.any(RoleSchema.name == RoleName.ADMIN.value),
                ~has_record,
            )
            .order_by(
                UserSchema.full_name.is_(None),
                UserSchema.full_name,
                UserSchema.username,
            )
        )
        return list(self._session.scalars(stmt))

    def delete(self, user_id: int) -> bool:
        """Delete a user; return whether a row was removed."""
        user = self.get_by_id(user_id)
        if user is None:
            return False
        self._session.delete(user)
        self._session.flush()
        return True

    def get_role(self, name: str) -> RoleSchema | None:
        """Return a role by its name."""
        return self._session.scalar(select(RoleSchema).where(RoleSchema.name == name))

    def ensure_role(self, name: str) -> RoleSchema:
        """Return the role called ``name``, creating it on first use."""
        role = self.get_role(name)
        if role is None:
            role = RoleSchema(name=name)
            self._session.add(role)
            self._session.flush()
        return role
