"""
Append-only audit log.

Every successful status change and settings batch writes exactly one row
here inside the same unit of work as the change itself.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, func, Index, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cms.kernel.models.base import Base, generate_uuid


class AuditAction(str, Enum):
    """Action labels written to the audit log."""

    BLOG_POST_STATUS_CHANGED = "blog_post.status_changed"
    JOB_LISTING_STATUS_CHANGED = "job_listing.status_changed"
    PROJECT_STATUS_CHANGED = "project.status_changed"
    SETTINGS_BATCH_UPDATED = "settings.batch_updated"


class AuditLog(Base):
    """
    Immutable audit record.

    This table is append-only - no updates or deletes are issued by the core.
    """

    __tablename__ = "audit_log"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )

    # Actor
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    action: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    # Resource reference (resource_id is empty for batch records)
    resource_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    resource_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(),
        nullable=True,
    )

    # Structured detail, shape determined by action
    details: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
    )
    user_agent: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_audit_log_resource", "resource_type", "resource_id"),
        Index("ix_audit_log_user_time", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} {self.resource_type}:{self.resource_id}>"
