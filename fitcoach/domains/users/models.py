"""User models for the FitCoach platform."""
import enum
import uuid

from sqlalchemy import Boolean, Enum, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fitcoach.config.database import Base
from fitcoach.core.models import TimestampMixin, UUIDMixin


class UserRole(str, enum.Enum):
    """Platform roles."""

    TRAINER = "trainer"
    CLIENT = "client"


class User(Base, UUIDMixin, TimestampMixin):
    """User model representing a trainer or a client."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Set on client rows only. A trainer's client set is every user pointing
    # here, so the two directions of the link cannot drift apart.
    trainer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )

    @property
    def is_trainer(self) -> bool:
        return self.role == UserRole.TRAINER

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"
