"""
Database connection and session management.
Uses SQLAlchemy 2.0 async pattern.
"""

from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from cms.config import get_settings
from cms.logging_config import get_logger

settings = get_settings()
logger = get_logger(__name__)

# Determine engine options based on database type
is_sqlite = settings.database_url.startswith("sqlite")

if is_sqlite:
    # SQLite with NullPool: every session gets its own connection, avoiding
    # "cannot commit transaction – SQL statements in progress" from StaticPool.
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        """Enable WAL mode + foreign keys on every new SQLite connection."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()
else:
    # PostgreSQL settings with connection pooling
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that yields one database session per request.

    Services commit their own unit of work; whatever is still pending when
    the handler returns is committed here, and any exception rolls back.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Initialize database tables and seed default site settings."""
    # Import Base from kernel models to ensure all models are registered
    from cms.kernel.models import Base
    from cms.kernel.settings.settings_manager import seed_default_settings

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_settings_on_startup:
        async with async_session_maker() as session:
            inserted = await seed_default_settings(session)
            await session.commit()
        if inserted:
            logger.info("Seeded %d default site settings", inserted)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
