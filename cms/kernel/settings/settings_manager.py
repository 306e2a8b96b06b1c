"""
Settings transaction manager.

A batch of key -> value writes is one unit of work: every row is written,
the batch is audited, and the whole thing commits, or nothing does. Rows are
matched on ``key`` alone; the category in the request only groups keys and
is validated, never used as a predicate.

Keys that match no row are skipped rather than rejected, so a settings form
rendered before a key was removed still saves. They are logged at WARNING and
returned in ``BatchResult.ignored_keys``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.kernel.errors import StorageError, ValidationError
from cms.kernel.events.event_store import EventStore
from cms.kernel.events.event_types import SettingsBatchDetail
from cms.kernel.identity.identity_service import Actor
from cms.kernel.models.base import utcnow
from cms.kernel.models.event_log import AuditAction
from cms.kernel.models.site_setting import SettingCategory, SiteSetting
from cms.kernel.permissions import permission_table as perms
from cms.kernel.permissions.permission_service import PermissionService
from cms.logging_config import get_logger

logger = get_logger(__name__)


# (key, default value, category), in display order
DEFAULT_SETTINGS: Tuple[Tuple[str, str, SettingCategory], ...] = (
    ("company_name", "Acme Corporation", SettingCategory.GENERAL),
    ("site_title", "Acme Corporation - Company Profile", SettingCategory.GENERAL),
    ("site_tagline", "Innovation for a Better Tomorrow", SettingCategory.GENERAL),
    ("contact_email", "contact@acme.com", SettingCategory.GENERAL),
    ("timezone", "UTC", SettingCategory.GENERAL),
    ("date_format", "MM/dd/yyyy", SettingCategory.GENERAL),
    ("about_excerpt", "Acme Corporation is a leading innovator in the industry.", SettingCategory.COMPANY),
    ("facebook_url", "https://facebook.com/acme", SettingCategory.COMPANY),
    ("twitter_url", "https://twitter.com/acme", SettingCategory.COMPANY),
    ("linkedin_url", "https://linkedin.com/company/acme", SettingCategory.COMPANY),
    ("instagram_url", "", SettingCategory.COMPANY),
    ("address", "", SettingCategory.COMPANY),
    ("phone", "", SettingCategory.COMPANY),
    ("meta_title_template", "%title | Acme Corporation", SettingCategory.SEO),
    ("meta_description_default", "Learn more about Acme Corporation.", SettingCategory.SEO),
    ("og_image_url", "", SettingCategory.SEO),
    ("robots_default", "index, follow", SettingCategory.SEO),
    ("blog_enabled", "true", SettingCategory.FEATURES),
    ("careers_enabled", "true", SettingCategory.FEATURES),
    ("contact_form_enabled", "false", SettingCategory.FEATURES),
)


@dataclass
class BatchResult:
    """Keys written and keys skipped by one batch."""

    updated_keys: List[str] = field(default_factory=list)
    ignored_keys: List[str] = field(default_factory=list)


async def seed_default_settings(session: AsyncSession) -> int:
    """
    Insert any default setting whose key is missing. Idempotent.

    Does not commit. Returns the number of rows added.
    """
    result = await session.execute(select(SiteSetting.key))
    existing = set(result.scalars().all())

    added = 0
    for key, value, category in DEFAULT_SETTINGS:
        if key in existing:
            continue
        session.add(SiteSetting(key=key, value=value, category=category.value))
        added += 1

    if added:
        await session.flush()
    return added


def _normalize_batch(updates: Any) -> List[Tuple[str, str, str]]:
    """
    Validate ``{category: {key: value}}`` and flatten to (category, key, value).

    Raises:
        ValidationError: not a mapping, unknown category, or non-string key/value
    """
    if not isinstance(updates, Mapping):
        raise ValidationError("settings must be an object of categories")

    valid_categories = {c.value for c in SettingCategory}
    flat: List[Tuple[str, str, str]] = []
    for category, entries in updates.items():
        if category not in valid_categories:
            raise ValidationError(f"Unknown settings category: {category}")
        if not isinstance(entries, Mapping):
            raise ValidationError(f"Settings for {category} must be an object")
        for key, value in entries.items():
            if not isinstance(key, str) or not key:
                raise ValidationError(f"Invalid settings key in {category}")
            if not isinstance(value, str):
                raise ValidationError(f"Value for {key} must be a string")
            flat.append((category, key, value))
    return flat


class SettingsTransactionManager:
    """
    Applies settings batches atomically and serves the grouped read view.

    Usage:
        manager = SettingsTransactionManager(session)
        result = await manager.apply_batch(actor, {"general": {"company_name": "Acme"}})
    """

    def __init__(
        self,
        session: AsyncSession,
        event_store: Optional[EventStore] = None,
        clock: Callable[[], datetime] = utcnow,
        permissions: Optional[PermissionService] = None,
    ):
        self.session = session
        self.clock = clock
        self.event_store = event_store or EventStore(session, clock=clock)
        self.permissions = permissions or PermissionService()

    async def apply_batch(self, actor: Actor, updates: Mapping[str, Mapping[str, str]]) -> BatchResult:
        """
        Write every key in ``updates`` in one unit of work.

        Raises:
            ForbiddenError: actor lacks settings.edit
            ValidationError: malformed batch (nothing is written)
            StorageError: any write or the audit record failed (nothing is written)
        """
        self.permissions.require(actor, perms.SETTINGS_EDIT)
        entries = _normalize_batch(updates)

        result = BatchResult()
        now = self.clock()
        try:
            for category, key, value in entries:
                if await self._apply_row(key, value, actor, now):
                    result.updated_keys.append(key)
                else:
                    logger.warning(
                        "Ignoring unknown settings key",
                        extra={"category": category, "key": key},
                    )
                    result.ignored_keys.append(key)

            await self.event_store.record(
                actor_id=actor.actor_id,
                action=AuditAction.SETTINGS_BATCH_UPDATED,
                resource_type="site_settings",
                resource_id=None,
                detail=SettingsBatchDetail(
                    updated_keys=result.updated_keys,
                    ignored_keys=result.ignored_keys,
                ),
                created_at=now,
            )
            await self.session.commit()
        except BaseException as exc:
            await self._rollback()
            if isinstance(exc, SQLAlchemyError):
                raise StorageError(f"settings batch failed: {exc}") from exc
            raise

        logger.info(
            "Settings batch applied",
            extra={
                "updated": len(result.updated_keys),
                "ignored": len(result.ignored_keys),
            },
        )
        return result

    async def get_all(self) -> Dict[str, Dict[str, str]]:
        """All settings grouped as ``{category: {key: value}}``."""
        try:
            result = await self.session.execute(
                select(SiteSetting).order_by(SiteSetting.category, SiteSetting.key)
            )
        except SQLAlchemyError as exc:
            raise StorageError(f"settings read failed: {exc}") from exc

        grouped: Dict[str, Dict[str, str]] = {}
        for row in result.scalars().all():
            category = row.category.value if isinstance(row.category, SettingCategory) else row.category
            grouped.setdefault(category, {})[row.key] = row.value or ""
        return grouped

    async def seed_defaults(self) -> int:
        """Insert missing default keys and commit."""
        try:
            added = await seed_default_settings(self.session)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self._rollback()
            raise StorageError(f"settings seed failed: {exc}") from exc
        return added

    async def _apply_row(self, key: str, value: str, actor: Actor, now: datetime) -> bool:
        """Write one row matched on key. False when no row has that key."""
        stmt = (
            update(SiteSetting)
            .where(SiteSetting.key == key)
            .values(value=value, updated_at=now, updated_by=actor.actor_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")
