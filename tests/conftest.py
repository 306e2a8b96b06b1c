"""
Pytest fixtures for CMS core tests.

Every test gets its own file-based SQLite database (in-memory is per
connection, and the race tests need two connections to see each other).
"""

import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

# Point the app's own engine at SQLite before anything under cms is imported
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp.name}"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["SEED_SETTINGS_ON_STARTUP"] = "false"

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from cms.config import get_settings

get_settings.cache_clear()

from cms.kernel.identity.identity_service import Actor
from cms.kernel.identity.jwt import JWTManager
from cms.kernel.models import CONTENT_MODELS, Base, ContentKind, User, UserRole


class TickingClock:
    """Deterministic clock: each call returns a time one second after the previous one."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a test database engine on a fresh SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'cms_test.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory: persist a user with the given role."""

    async def _make(role: UserRole, is_active: bool = True) -> User:
        user = User(
            id=uuid.uuid4(),
            email=f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
            name=role.value.replace("_", " ").title(),
            role=role.value,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_entity(db_session: AsyncSession):
    """Factory: persist a blog post, job listing or project in a given status."""

    async def _make(kind: ContentKind, status: str = "draft", published_at: Optional[datetime] = None):
        model = CONTENT_MODELS[kind]
        entity_id = uuid.uuid4()
        entity = model(
            id=entity_id,
            title=f"Test {kind.value}",
            slug=f"{kind.value}-{entity_id.hex[:12]}",
            status=status,
            published_at=published_at,
        )
        db_session.add(entity)
        await db_session.commit()
        return entity

    return _make


def actor_for(user: User) -> Actor:
    return Actor(actor_id=user.id, role=UserRole.parse(user.role))


@pytest.fixture
def as_actor():
    """The resolved Actor for a persisted user."""
    return actor_for


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(UserRole.ADMIN)


@pytest_asyncio.fixture
async def editor(make_user) -> User:
    return await make_user(UserRole.EDITOR)


@pytest_asyncio.fixture
async def content_manager(make_user) -> User:
    return await make_user(UserRole.CONTENT_MANAGER)


@pytest_asyncio.fixture
async def hr(make_user) -> User:
    return await make_user(UserRole.HR)


@pytest_asyncio.fixture
async def hr_manager(make_user) -> User:
    return await make_user(UserRole.HR_MANAGER)


@pytest_asyncio.fixture
async def viewer(make_user) -> User:
    return await make_user(UserRole.VIEWER)


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )


@pytest.fixture
def auth_headers(jwt_manager: JWTManager):
    """Factory: bearer headers for a user."""

    def _headers(user: User) -> dict:
        token, _, _ = jwt_manager.create_access_token(
            user_id=user.id,
            email=user.email,
            role=UserRole.parse(user.role).value,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
