"""
Stable Kernel Layer

The foundational components the lifecycle and settings services build on:
- Data models (users, publishable content, audit log, site settings)
- Permission Core (static role/capability table)
- Identity Core (bearer token -> Actor)
- Audit log writer (append-only, flushed inside the caller's unit of work)

Invariants:
- Every state change is audited inside the same transaction; no audit, no commit
- The permission table is immutable and injected, never mutated at runtime
"""

from cms.kernel.models import (
    User,
    UserRole,
    ContentKind,
    BlogPost,
    BlogPostStatus,
    JobListing,
    JobListingStatus,
    Project,
    ProjectStatus,
    AuditLog,
    AuditAction,
    SiteSetting,
    SettingCategory,
)

__all__ = [
    # User & Identity
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
    # Audit
    "AuditLog",
    "AuditAction",
    # Settings
    "SiteSetting",
    "SettingCategory",
]
