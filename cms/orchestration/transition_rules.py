"""
Transition rules for publishable content.

Pure decision logic: (kind, from, to, role) -> Allow | Deny. No I/O, no
clock, no session, so the full kind x from x to x role cross-product can be
checked in unit tests.

Order of checks:
1. target must be one of the kind's statuses          -> invalid_status
2. (from, to) must be an edge of the kind's graph     -> illegal_transition
3. role must hold the capability for the target       -> forbidden
4. Allow, stamping published_at when entering the live status
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Tuple, Union

from cms.kernel.models.content import (
    BlogPostStatus,
    ContentKind,
    JobListingStatus,
    ProjectStatus,
)
from cms.kernel.models.user import UserRole
from cms.kernel.permissions import permission_table as perms
from cms.kernel.permissions.permission_table import DEFAULT_PERMISSION_TABLE, PermissionTable


class DenyReason(str, Enum):
    INVALID_STATUS = "invalid_status"
    ILLEGAL_TRANSITION = "illegal_transition"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Allow:
    """Transition permitted. ``stamp_published_at`` is the side-effect directive."""

    capability: str
    stamp_published_at: bool = False
    allowed: bool = True


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    message: str
    allowed: bool = False


Decision = Union[Allow, Deny]


@dataclass(frozen=True)
class KindPolicy:
    """Status set, graph, live status and per-target capability for one kind."""

    kind: ContentKind
    statuses: FrozenSet[str]
    edges: FrozenSet[Tuple[str, str]]
    live_status: str
    capabilities: Mapping[str, str]


def status_value(value) -> str:
    """Plain string form of a status given as enum member or string."""
    return value.value if isinstance(value, Enum) else str(value)


def _policy(kind, status_enum, live, edges, capabilities) -> KindPolicy:
    return KindPolicy(
        kind=kind,
        statuses=frozenset(s.value for s in status_enum),
        edges=frozenset((status_value(f), status_value(t)) for f, t in edges),
        live_status=status_value(live),
        capabilities={status_value(target): action for target, action in capabilities.items()},
    )


_BLOG = _policy(
    ContentKind.BLOG_POST,
    BlogPostStatus,
    BlogPostStatus.PUBLISHED,
    [
        (BlogPostStatus.DRAFT, BlogPostStatus.REVIEW),
        (BlogPostStatus.REVIEW, BlogPostStatus.PUBLISHED),
        (BlogPostStatus.PUBLISHED, BlogPostStatus.ARCHIVED),
        (BlogPostStatus.DRAFT, BlogPostStatus.ARCHIVED),
    ],
    {
        # Any editor-tier role may submit; publishing and archiving are elevated
        BlogPostStatus.REVIEW: perms.BLOG_POST_SUBMIT,
        BlogPostStatus.PUBLISHED: perms.BLOG_POST_PUBLISH,
        BlogPostStatus.ARCHIVED: perms.BLOG_POST_ARCHIVE,
    },
)

_JOB = _policy(
    ContentKind.JOB_LISTING,
    JobListingStatus,
    JobListingStatus.OPEN,
    [
        (JobListingStatus.DRAFT, JobListingStatus.OPEN),
        (JobListingStatus.OPEN, JobListingStatus.CLOSED),
        (JobListingStatus.CLOSED, JobListingStatus.ARCHIVED),
    ],
    {
        JobListingStatus.OPEN: perms.JOB_LISTING_OPEN,
        JobListingStatus.CLOSED: perms.JOB_LISTING_CLOSE,
        JobListingStatus.ARCHIVED: perms.JOB_LISTING_ARCHIVE,
    },
)

_PROJECT = _policy(
    ContentKind.PROJECT,
    ProjectStatus,
    ProjectStatus.PUBLISHED,
    [
        (ProjectStatus.DRAFT, ProjectStatus.PUBLISHED),
        (ProjectStatus.PUBLISHED, ProjectStatus.DRAFT),
    ],
    {
        ProjectStatus.PUBLISHED: perms.PROJECT_PUBLISH,
        ProjectStatus.DRAFT: perms.PROJECT_UNPUBLISH,
    },
)

KIND_POLICIES: Dict[ContentKind, KindPolicy] = {
    ContentKind.BLOG_POST: _BLOG,
    ContentKind.JOB_LISTING: _JOB,
    ContentKind.PROJECT: _PROJECT,
}


class TransitionRuleEngine:
    """
    Decides whether a role may move an entity of a kind between two statuses.

    The permission table is fixed at construction.
    """

    def __init__(
        self,
        permission_table: PermissionTable = DEFAULT_PERMISSION_TABLE,
        policies: Mapping[ContentKind, KindPolicy] = KIND_POLICIES,
    ):
        self.permission_table = permission_table
        self._policies = dict(policies)

    def policy(self, kind: ContentKind) -> KindPolicy:
        return self._policies[ContentKind(kind)]

    def statuses(self, kind: ContentKind) -> FrozenSet[str]:
        return self.policy(kind).statuses

    def live_status(self, kind: ContentKind) -> str:
        return self.policy(kind).live_status

    def decide(self, kind: ContentKind, from_status, to_status, role: UserRole) -> Decision:
        policy = self.policy(kind)
        current, target = status_value(from_status), status_value(to_status)
        role = UserRole.parse(role)

        if target not in policy.statuses:
            return Deny(
                DenyReason.INVALID_STATUS,
                f"{target!r} is not a {policy.kind.value} status",
            )

        if (current, target) not in policy.edges:
            return Deny(
                DenyReason.ILLEGAL_TRANSITION,
                f"{policy.kind.value} cannot move from {current} to {target}",
            )

        capability = policy.capabilities[target]
        if not self.permission_table.allows(role, capability):
            return Deny(
                DenyReason.FORBIDDEN,
                f"role {role.value} lacks {capability}",
            )

        stamp = target == policy.live_status and current != policy.live_status
        return Allow(capability=capability, stamp_published_at=stamp)

    def allowed_targets(self, kind: ContentKind, from_status, role: UserRole) -> List[str]:
        """Statuses ``role`` may move an entity of ``kind`` to from ``from_status``."""
        policy = self.policy(kind)
        current = status_value(from_status)
        return sorted(
            target
            for source, target in policy.edges
            if source == current and self.decide(kind, current, target, role).allowed
        )
