"""
Global key/value site settings.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, func, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cms.kernel.models.base import Base, TimestampMixin, generate_uuid


class SettingCategory(str, Enum):
    """Grouping shown on the settings screen. Informational only: keys are globally unique."""
    GENERAL = "general"
    COMPANY = "company"
    SEO = "seo"
    FEATURES = "features"


class SiteSetting(Base, TimestampMixin):
    """One settings row, pre-seeded and afterwards only updated in batches."""

    __tablename__ = "site_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )
    value: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default="",
    )
    category: Mapped[SettingCategory] = mapped_column(
        String(50),
        default=SettingCategory.GENERAL,
        nullable=False,
        index=True,
    )
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<SiteSetting {self.key}>"
