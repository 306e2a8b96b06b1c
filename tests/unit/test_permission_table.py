"""Unit tests for the role/permission table and PermissionService."""

import uuid

import pytest

from cms.kernel.errors import ForbiddenError
from cms.kernel.identity.identity_service import Actor
from cms.kernel.models.user import UserRole
from cms.kernel.permissions import permission_table as perms
from cms.kernel.permissions.permission_service import PermissionService, check_permission
from cms.kernel.permissions.permission_table import DEFAULT_PERMISSION_TABLE, PermissionTable


EXPECTED_GRANTS = {
    perms.BLOG_POST_SUBMIT: {"admin", "editor", "content_manager"},
    perms.BLOG_POST_PUBLISH: {"admin", "content_manager"},
    perms.BLOG_POST_ARCHIVE: {"admin", "content_manager"},
    perms.JOB_LISTING_OPEN: {"admin", "hr", "hr_manager", "content_manager"},
    perms.JOB_LISTING_CLOSE: {"admin", "hr", "hr_manager", "content_manager"},
    perms.JOB_LISTING_ARCHIVE: {"admin", "hr_manager", "content_manager"},
    perms.PROJECT_PUBLISH: {"admin", "content_manager"},
    perms.PROJECT_UNPUBLISH: {"admin", "content_manager"},
    perms.SETTINGS_VIEW: {"admin", "content_manager"},
    perms.SETTINGS_EDIT: {"admin"},
    perms.AUDIT_VIEW: {"admin"},
}


class TestDefaultTable:
    """The shipped grants, checked for every (role, action) pair."""

    @pytest.mark.parametrize("action", sorted(EXPECTED_GRANTS))
    @pytest.mark.parametrize("role", list(UserRole))
    def test_grant_matrix(self, role, action):
        expected = role.value in EXPECTED_GRANTS[action]
        assert DEFAULT_PERMISSION_TABLE.allows(role, action) is expected

    def test_actions_are_exactly_the_known_set(self):
        assert set(DEFAULT_PERMISSION_TABLE.actions) == set(EXPECTED_GRANTS)

    def test_viewer_holds_nothing(self):
        assert DEFAULT_PERMISSION_TABLE.actions_for(UserRole.VIEWER) == ()

    def test_unknown_action_is_denied(self):
        assert DEFAULT_PERMISSION_TABLE.allows(UserRole.ADMIN, "blog_post.delete") is False
        assert DEFAULT_PERMISSION_TABLE.roles_for("blog_post.delete") == frozenset()

    def test_role_given_as_string(self):
        assert DEFAULT_PERMISSION_TABLE.allows("content_manager", perms.BLOG_POST_PUBLISH)
        assert not DEFAULT_PERMISSION_TABLE.allows("superuser", perms.BLOG_POST_PUBLISH)


class TestTableImmutability:
    def test_with_grants_returns_new_table(self):
        widened = DEFAULT_PERMISSION_TABLE.with_grants(
            perms.BLOG_POST_PUBLISH, {UserRole.ADMIN, UserRole.EDITOR}
        )
        assert widened.allows(UserRole.EDITOR, perms.BLOG_POST_PUBLISH)
        assert not widened.allows(UserRole.CONTENT_MANAGER, perms.BLOG_POST_PUBLISH)
        # Original untouched
        assert not DEFAULT_PERMISSION_TABLE.allows(UserRole.EDITOR, perms.BLOG_POST_PUBLISH)
        assert widened != DEFAULT_PERMISSION_TABLE

    def test_grants_cannot_be_mutated(self):
        with pytest.raises(TypeError):
            DEFAULT_PERMISSION_TABLE._grants[perms.AUDIT_VIEW] = frozenset({UserRole.VIEWER})

    def test_equal_tables_hash_equal(self):
        a = PermissionTable({"x.do": [UserRole.ADMIN]})
        b = PermissionTable({"x.do": ["admin"]})
        assert a == b
        assert hash(a) == hash(b)


class TestPermissionService:
    def test_require_passes_for_granted_role(self):
        actor = Actor(actor_id=uuid.uuid4(), role=UserRole.ADMIN)
        PermissionService().require(actor, perms.SETTINGS_EDIT)

    def test_require_raises_forbidden(self):
        actor = Actor(actor_id=uuid.uuid4(), role=UserRole.CONTENT_MANAGER)
        with pytest.raises(ForbiddenError) as exc_info:
            PermissionService().require(actor, perms.SETTINGS_EDIT)
        # Reason stays out of the public payload
        assert "settings.edit" not in exc_info.value.to_payload()["error"]
        assert exc_info.value.to_payload()["code"] == "forbidden"

    def test_injected_table_is_used(self):
        actor = Actor(actor_id=uuid.uuid4(), role=UserRole.VIEWER)
        table = DEFAULT_PERMISSION_TABLE.with_grants(perms.AUDIT_VIEW, {UserRole.VIEWER})
        assert check_permission(table, actor, perms.AUDIT_VIEW) is True
        assert check_permission(DEFAULT_PERMISSION_TABLE, actor, perms.AUDIT_VIEW) is False
