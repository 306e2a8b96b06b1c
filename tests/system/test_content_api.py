"""
System tests: status, settings and audit endpoints in-process with SQLite.

Covers the HTTP mapping of every core error (400/401/403/404/409) and the
success payloads.
"""

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from cms.api.deps import get_permission_table
from cms.database import get_db
from cms.kernel.identity.jwt import get_jwt_manager
from cms.kernel.models import ContentKind, UserRole
from cms.kernel.permissions import permission_table as perms
from cms.kernel.permissions.permission_table import DEFAULT_PERMISSION_TABLE
from cms.kernel.settings.settings_manager import seed_default_settings
from cms.main import app


@pytest_asyncio.fixture
async def client(session_maker, jwt_manager):
    """Async client bound to the per-test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async with session_maker() as session:
        await seed_default_settings(session)
        await session.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_jwt_manager] = lambda: jwt_manager
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        r = await client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert "X-Request-ID" in r.headers

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        r = await client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert r.headers["X-Request-ID"] == "trace-123"


class TestStatusEndpoints:
    @pytest.mark.asyncio
    async def test_blog_flow_over_http(self, client, make_entity, editor, content_manager, auth_headers):
        post = await make_entity(ContentKind.BLOG_POST)
        url = f"/api/v1/blog/posts/{post.id}/status"

        r = await client.patch(url, json={"status": "review"}, headers=auth_headers(editor))
        assert r.status_code == 200
        body = r.json()
        assert body["id"] == str(post.id)
        assert body["status"] == "review"
        assert body["published_at"] is None
        assert set(body) == {"id", "title", "status", "published_at", "updated_at"}

        r = await client.patch(url, json={"status": "published"}, headers=auth_headers(editor))
        assert r.status_code == 403
        assert r.json() == {
            "error": "You do not have permission to perform this action",
            "code": "forbidden",
        }

        r = await client.patch(url, json={"status": "published"}, headers=auth_headers(content_manager))
        assert r.status_code == 200
        assert r.json()["published_at"] is not None

        r = await client.patch(url, json={"status": "archived"}, headers=auth_headers(content_manager))
        assert r.status_code == 200

        r = await client.patch(url, json={"status": "draft"}, headers=auth_headers(content_manager))
        assert r.status_code == 409
        assert r.json()["code"] == "illegal_transition"

    @pytest.mark.asyncio
    async def test_unauthenticated(self, client, make_entity):
        job = await make_entity(ContentKind.JOB_LISTING)
        r = await client.patch(f"/api/v1/careers/jobs/{job.id}/status", json={"status": "open"})
        assert r.status_code == 401
        assert r.json() == {"error": "Unauthorized", "code": "unauthenticated"}

        r = await client.patch(
            f"/api/v1/careers/jobs/{job.id}/status",
            json={"status": "open"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert r.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_status(self, client, make_entity, admin, auth_headers):
        job = await make_entity(ContentKind.JOB_LISTING)
        r = await client.patch(
            f"/api/v1/careers/jobs/{job.id}/status",
            json={"status": "published"},
            headers=auth_headers(admin),
        )
        assert r.status_code == 400
        assert r.json()["code"] == "invalid_status"

    @pytest.mark.asyncio
    async def test_missing_status_field(self, client, make_entity, admin, auth_headers):
        project = await make_entity(ContentKind.PROJECT)
        r = await client.patch(f"/api/v1/projects/{project.id}/status", json={}, headers=auth_headers(admin))
        assert r.status_code == 400
        assert r.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_not_found(self, client, admin, auth_headers):
        r = await client.patch(
            f"/api/v1/projects/{uuid.uuid4()}/status",
            json={"status": "published"},
            headers=auth_headers(admin),
        )
        assert r.status_code == 404
        assert r.json() == {"error": "Project not found", "code": "not_found"}

    @pytest.mark.asyncio
    async def test_disabled_account(self, client, make_entity, make_user, auth_headers):
        project = await make_entity(ContentKind.PROJECT)
        user = await make_user(UserRole.ADMIN, is_active=False)
        r = await client.patch(
            f"/api/v1/projects/{project.id}/status",
            json={"status": "published"},
            headers=auth_headers(user),
        )
        assert r.status_code == 403

    @pytest.mark.asyncio
    async def test_job_listing_lifecycle(self, client, make_entity, hr, hr_manager, auth_headers):
        job = await make_entity(ContentKind.JOB_LISTING)
        url = f"/api/v1/careers/jobs/{job.id}/status"

        assert (await client.patch(url, json={"status": "open"}, headers=auth_headers(hr))).status_code == 200
        assert (await client.patch(url, json={"status": "closed"}, headers=auth_headers(hr))).status_code == 200
        assert (await client.patch(url, json={"status": "archived"}, headers=auth_headers(hr))).status_code == 403
        assert (await client.patch(url, json={"status": "archived"}, headers=auth_headers(hr_manager))).status_code == 200

    @pytest.mark.asyncio
    async def test_get_status_lists_allowed_targets(self, client, make_entity, hr, viewer, auth_headers):
        job = await make_entity(ContentKind.JOB_LISTING)
        url = f"/api/v1/careers/jobs/{job.id}/status"

        r = await client.get(url, headers=auth_headers(hr))
        assert r.status_code == 200
        assert r.json() == {"id": str(job.id), "status": "draft", "allowed_targets": ["open"]}

        r = await client.get(url, headers=auth_headers(viewer))
        assert r.json()["allowed_targets"] == []

    @pytest.mark.asyncio
    async def test_injected_permission_table(self, client, make_entity, editor, auth_headers):
        post = await make_entity(ContentKind.BLOG_POST, status="review")
        app.dependency_overrides[get_permission_table] = lambda: DEFAULT_PERMISSION_TABLE.with_grants(
            perms.BLOG_POST_PUBLISH, {UserRole.EDITOR}
        )
        r = await client.patch(
            f"/api/v1/blog/posts/{post.id}/status",
            json={"status": "published"},
            headers=auth_headers(editor),
        )
        assert r.status_code == 200


class TestSettingsEndpoints:
    @pytest.mark.asyncio
    async def test_batch_update(self, client, admin, auth_headers):
        r = await client.put(
            "/api/v1/settings",
            json={"settings": {"general": {"company_name": "Acme"}, "seo": {"unknown_key": "x"}}},
            headers=auth_headers(admin),
        )
        assert r.status_code == 200
        assert r.json() == {"success": True, "updated_keys": ["company_name"], "ignored_keys": ["unknown_key"]}

        r = await client.get("/api/v1/public/settings")
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["data"]["general"]["company_name"] == "Acme"

    @pytest.mark.asyncio
    async def test_settings_permissions(self, client, admin, content_manager, editor, auth_headers):
        payload = {"settings": {"general": {"company_name": "Acme"}}}
        assert (await client.put("/api/v1/settings", json=payload)).status_code == 401
        assert (await client.put("/api/v1/settings", json=payload, headers=auth_headers(content_manager))).status_code == 403

        assert (await client.get("/api/v1/settings", headers=auth_headers(content_manager))).status_code == 200
        assert (await client.get("/api/v1/settings", headers=auth_headers(editor))).status_code == 403
        assert (await client.get("/api/v1/settings", headers=auth_headers(admin))).status_code == 200

    @pytest.mark.asyncio
    async def test_unknown_category(self, client, admin, auth_headers):
        r = await client.put(
            "/api/v1/settings",
            json={"settings": {"misc": {"company_name": "Acme"}}},
            headers=auth_headers(admin),
        )
        assert r.status_code == 400
        assert r.json() == {"error": "Unknown settings category: misc", "code": "validation_error"}


class TestAuditEndpoint:
    @pytest.mark.asyncio
    async def test_history_requires_admin(self, client, make_entity, admin, content_manager, auth_headers):
        project = await make_entity(ContentKind.PROJECT)
        await client.patch(
            f"/api/v1/projects/{project.id}/status",
            json={"status": "published"},
            headers=auth_headers(content_manager),
        )

        r = await client.get(f"/api/v1/audit/project/{project.id}", headers=auth_headers(content_manager))
        assert r.status_code == 403

        r = await client.get(f"/api/v1/audit/project/{project.id}", headers=auth_headers(admin))
        assert r.status_code == 200
        body = r.json()
        assert body["total"] == 1
        item = body["items"][0]
        assert item["action"] == "project.status_changed"
        assert item["user_id"] == str(content_manager.id)
        assert item["details"]["from"] == "draft"
        assert item["details"]["to"] == "published"
