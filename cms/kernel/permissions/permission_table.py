"""
Role/permission table.

A static, immutable mapping from action identifier to the roles that hold
it. Checked on every request without I/O. Instances are passed to the
components that need them (see cms.api.deps.get_permission_table), so tests
can substitute a different table without touching shared state.
"""

from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Tuple

from cms.kernel.models.user import UserRole


# Action identifiers
BLOG_POST_SUBMIT = "blog_post.submit"
BLOG_POST_PUBLISH = "blog_post.publish"
BLOG_POST_ARCHIVE = "blog_post.archive"
JOB_LISTING_OPEN = "job_listing.open"
JOB_LISTING_CLOSE = "job_listing.close"
JOB_LISTING_ARCHIVE = "job_listing.archive"
PROJECT_PUBLISH = "project.publish"
PROJECT_UNPUBLISH = "project.unpublish"
SETTINGS_VIEW = "settings.view"
SETTINGS_EDIT = "settings.edit"
AUDIT_VIEW = "audit.view"

_ADMIN = UserRole.ADMIN
_EDITOR = UserRole.EDITOR
_CONTENT_MANAGER = UserRole.CONTENT_MANAGER
_HR = UserRole.HR
_HR_MANAGER = UserRole.HR_MANAGER


class PermissionTable:
    """Immutable action -> roles mapping."""

    __slots__ = ("_grants",)

    def __init__(self, grants: Mapping[str, Iterable[UserRole]]):
        self._grants: Mapping[str, FrozenSet[UserRole]] = MappingProxyType({
            action: frozenset(UserRole.parse(r) for r in roles)
            for action, roles in grants.items()
        })

    def allows(self, role: UserRole, action: str) -> bool:
        """True if ``role`` holds ``action``. Unknown actions are denied."""
        return UserRole.parse(role) in self._grants.get(action, frozenset())

    def roles_for(self, action: str) -> FrozenSet[UserRole]:
        return self._grants.get(action, frozenset())

    def actions_for(self, role: UserRole) -> Tuple[str, ...]:
        role = UserRole.parse(role)
        return tuple(sorted(a for a, roles in self._grants.items() if role in roles))

    @property
    def actions(self) -> Tuple[str, ...]:
        return tuple(sorted(self._grants))

    def with_grants(self, action: str, roles: Iterable[UserRole]) -> "PermissionTable":
        """Return a copy with ``action`` granted to exactly ``roles``."""
        grants = dict(self._grants)
        grants[action] = frozenset(roles)
        return PermissionTable(grants)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermissionTable):
            return NotImplemented
        return dict(self._grants) == dict(other._grants)

    def __hash__(self) -> int:
        return hash(frozenset(self._grants.items()))

    def __repr__(self) -> str:
        return f"<PermissionTable actions={len(self._grants)}>"


DEFAULT_PERMISSION_TABLE = PermissionTable({
    BLOG_POST_SUBMIT: {_ADMIN, _EDITOR, _CONTENT_MANAGER},
    BLOG_POST_PUBLISH: {_ADMIN, _CONTENT_MANAGER},
    BLOG_POST_ARCHIVE: {_ADMIN, _CONTENT_MANAGER},
    JOB_LISTING_OPEN: {_ADMIN, _HR, _HR_MANAGER, _CONTENT_MANAGER},
    JOB_LISTING_CLOSE: {_ADMIN, _HR, _HR_MANAGER, _CONTENT_MANAGER},
    JOB_LISTING_ARCHIVE: {_ADMIN, _HR_MANAGER, _CONTENT_MANAGER},
    PROJECT_PUBLISH: {_ADMIN, _CONTENT_MANAGER},
    PROJECT_UNPUBLISH: {_ADMIN, _CONTENT_MANAGER},
    SETTINGS_VIEW: {_ADMIN, _CONTENT_MANAGER},
    SETTINGS_EDIT: {_ADMIN},
    AUDIT_VIEW: {_ADMIN},
})
