"""
Publishable content models: blog posts, job listings and projects.

All three share the same lifecycle columns (status, published_at,
updated_at) through PublishableMixin; each kind has its own closed set of
status values. The status graphs themselves live in
cms.orchestration.transition_rules.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Type, Union

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cms.kernel.models.base import Base, TimestampMixin, generate_uuid


class ContentKind(str, Enum):
    """Entity categories whose status graph and capabilities differ."""
    BLOG_POST = "blog_post"
    JOB_LISTING = "job_listing"
    PROJECT = "project"


class BlogPostStatus(str, Enum):
    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class JobListingStatus(str, Enum):
    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"
    ARCHIVED = "archived"


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class PublishableMixin(TimestampMixin):
    """Identity, title and lifecycle columns shared by every publishable kind."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default="draft",
        server_default="draft",
        nullable=False,
        index=True,
    )
    # Set on the first move into the kind's live status, never moved forward afterwards
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )


class BlogPost(Base, PublishableMixin):
    """Blog post."""

    __tablename__ = "blog_posts"

    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<BlogPost {self.slug} {self.status}>"


class JobListing(Base, PublishableMixin):
    """Job listing on the careers page."""

    __tablename__ = "jobs"

    employment_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    apply_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<JobListing {self.slug} {self.status}>"


class Project(Base, PublishableMixin):
    """Portfolio project."""

    __tablename__ = "projects"

    client_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Project {self.slug} {self.status}>"


PublishableEntity = Union[BlogPost, JobListing, Project]

CONTENT_MODELS: Dict[ContentKind, Type[PublishableEntity]] = {
    ContentKind.BLOG_POST: BlogPost,
    ContentKind.JOB_LISTING: JobListing,
    ContentKind.PROJECT: Project,
}
