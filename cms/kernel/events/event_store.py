"""
Audit log writer.

Records are appended inside the caller's unit of work and flushed
immediately, so a failing audit write surfaces as StorageError before the
caller commits. The caller must then roll back: an unaudited state change
is never committed.
"""

import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select, desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.kernel.errors import StorageError, ValidationError
from cms.kernel.events.event_types import DETAIL_TYPES, AuditDetail
from cms.kernel.models.base import utcnow
from cms.kernel.models.event_log import AuditAction, AuditLog
from cms.logging_config import get_logger

logger = get_logger(__name__)


class EventStore:
    """
    Service for appending to and reading the audit log.

    Usage:
        store = EventStore(session)
        await store.record(
            actor_id=actor.actor_id,
            action=AuditAction.BLOG_POST_STATUS_CHANGED,
            resource_type="blog_post",
            resource_id=post.id,
            detail=StatusChangedDetail(from_status="draft", to_status="review"),
        )
    """

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock

    async def record(
        self,
        actor_id: uuid.UUID,
        action: AuditAction,
        resource_type: str,
        resource_id: Optional[uuid.UUID],
        detail: Union[AuditDetail, Dict[str, Any]],
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> AuditLog:
        """
        Append one audit record.

        ``created_at`` defaults to the store clock; callers pass their own
        timestamp so the record matches the change it describes.

        Raises:
            ValidationError: detail does not match the action's payload model
            StorageError: the write failed
        """
        payload = self._build_payload(action, detail)

        entry = AuditLog(
            user_id=actor_id,
            action=action.value,
            resource_type=resource_type,
            resource_id=resource_id,
            details=payload,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=created_at or self.clock(),
        )
        self.session.add(entry)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            logger.error(
                "Audit write failed",
                extra={"action": action.value, "resource_type": resource_type},
            )
            raise StorageError(f"audit write failed: {exc}") from exc
        return entry

    async def get_entity_history(
        self,
        resource_type: str,
        resource_id: uuid.UUID,
        actions: Optional[List[AuditAction]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[AuditLog]:
        """
        Get the audit history for one resource, newest first.
        """
        query = select(AuditLog).where(
            AuditLog.resource_type == resource_type,
            AuditLog.resource_id == resource_id,
        )
        if actions:
            query = query.where(AuditLog.action.in_([a.value for a in actions]))

        query = query.order_by(desc(AuditLog.created_at)).offset(offset).limit(limit)
        return await self._fetch(query)

    async def get_user_activity(
        self,
        user_id: uuid.UUID,
        since: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[AuditLog]:
        """Get all records written by one actor, newest first."""
        query = select(AuditLog).where(AuditLog.user_id == user_id)
        if since:
            query = query.where(AuditLog.created_at >= since)
        query = query.order_by(desc(AuditLog.created_at)).limit(limit)
        return await self._fetch(query)

    async def count_events(
        self,
        resource_type: Optional[str] = None,
        resource_id: Optional[uuid.UUID] = None,
        action: Optional[AuditAction] = None,
    ) -> int:
        query = select(func.count(AuditLog.id))
        if resource_type:
            query = query.where(AuditLog.resource_type == resource_type)
        if resource_id:
            query = query.where(AuditLog.resource_id == resource_id)
        if action:
            query = query.where(AuditLog.action == action.value)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise StorageError(f"audit read failed: {exc}") from exc
        return result.scalar() or 0

    async def _fetch(self, query) -> List[AuditLog]:
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise StorageError(f"audit read failed: {exc}") from exc
        return list(result.scalars().all())

    @staticmethod
    def _build_payload(
        action: AuditAction,
        detail: Union[AuditDetail, Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Validate detail against the action's model and dump JSON-safe."""
        model = DETAIL_TYPES[action]
        if not isinstance(detail, model):
            raw = detail.model_dump(by_alias=True) if isinstance(detail, AuditDetail) else detail
            try:
                detail = model.model_validate(raw)
            except PydanticValidationError as exc:
                raise ValidationError(
                    f"invalid detail for {action.value}: {exc.errors()}"
                ) from exc
        return detail.model_dump(mode="json", by_alias=True, exclude_none=True)
