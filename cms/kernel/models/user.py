"""
User model for identity management.
"""

import uuid
from enum import Enum

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cms.kernel.models.base import Base, TimestampMixin, generate_uuid


class UserRole(str, Enum):
    """User roles in the system."""
    ADMIN = "admin"
    EDITOR = "editor"
    CONTENT_MANAGER = "content_manager"
    HR = "hr"
    HR_MANAGER = "hr_manager"
    VIEWER = "viewer"

    @classmethod
    def parse(cls, value) -> "UserRole":
        """
        Coerce a stored or claimed role into the enum.

        Anything unrecognised becomes VIEWER, which holds no capabilities.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.VIEWER


class User(Base, TimestampMixin):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        String(20),
        default=UserRole.EDITOR,
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
