"""User and role database schemas."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asoniped_backend.database.base import BaseSchema, TimestampMixin, string_enum
from asoniped_backend.shared import UserStatus

user_role_assignments = Table(
    "user_role_assignments",
    BaseSchema.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("user_roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class RoleSchema(BaseSchema):
    """Named permission group assignable to users."""

    __tablename__ = "user_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(255))


class UserSchema(TimestampMixin, BaseSchema):
    """SQLAlchemy model for application users."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32))
    status: Mapped[UserStatus] = mapped_column(
        string_enum(UserStatus, "user_status"),
        nullable=False,
        default=UserStatus.ACTIVE,
    )

    roles: Mapped[list[RoleSchema]] = relationship(
        secondary=user_role_assignments, lazy="selectin"
    )

    @property
    def role_names(self) -> list[str]:
        """Names of the roles granted to the user."""
        return sorted(role.name for role in self.roles)
