"""
Kernel Data Models

Core SQLAlchemy models: users, publishable content, audit log and site settings.
"""

from cms.kernel.models.base import Base, TimestampMixin, generate_uuid, utcnow
from cms.kernel.models.user import User, UserRole
from cms.kernel.models.content import (
    ContentKind,
    BlogPost,
    BlogPostStatus,
    JobListing,
    JobListingStatus,
    Project,
    ProjectStatus,
    PublishableMixin,
    PublishableEntity,
    CONTENT_MODELS,
)
from cms.kernel.models.event_log import AuditLog, AuditAction
from cms.kernel.models.site_setting import SiteSetting, SettingCategory

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "utcnow",
    # User
    "User",
    "UserRole",
    # Content
    "ContentKind",
    "BlogPost",
    "BlogPostStatus",
    "JobListing",
    "JobListingStatus",
    "Project",
    "ProjectStatus",
    "PublishableMixin",
    "PublishableEntity",
    "CONTENT_MODELS",
    # Audit
    "AuditLog",
    "AuditAction",
    # Settings
    "SiteSetting",
    "SettingCategory",
]
