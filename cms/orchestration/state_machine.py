"""
Lifecycle service for publishable content.

One call to ``transition`` is one unit of work: load with a row lock,
decide, compare-and-set the status (plus published_at / updated_at), append
the audit record, commit. Any failure, cancellation included, rolls the
whole unit back, so callers never observe a status change without its
audit record.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.kernel.content_store import ContentStore
from cms.kernel.errors import (
    CoreError,
    ForbiddenError,
    IllegalTransitionError,
    InvalidStatusError,
    NotFoundError,
    StorageError,
)
from cms.kernel.events.event_store import EventStore
from cms.kernel.events.event_types import StatusChangedDetail
from cms.kernel.identity.identity_service import Actor
from cms.kernel.models.base import utcnow
from cms.kernel.models.content import ContentKind, PublishableEntity
from cms.kernel.models.event_log import AuditAction
from cms.logging_config import get_logger
from cms.orchestration.transition_rules import (
    DenyReason,
    TransitionRuleEngine,
    status_value,
)

logger = get_logger(__name__)


_AUDIT_ACTIONS: Dict[ContentKind, AuditAction] = {
    ContentKind.BLOG_POST: AuditAction.BLOG_POST_STATUS_CHANGED,
    ContentKind.JOB_LISTING: AuditAction.JOB_LISTING_STATUS_CHANGED,
    ContentKind.PROJECT: AuditAction.PROJECT_STATUS_CHANGED,
}

_DENY_ERRORS: Dict[DenyReason, Type[CoreError]] = {
    DenyReason.INVALID_STATUS: InvalidStatusError,
    DenyReason.ILLEGAL_TRANSITION: IllegalTransitionError,
    DenyReason.FORBIDDEN: ForbiddenError,
}


@dataclass(frozen=True)
class StatusView:
    """Current status of an entity and where the actor may move it."""

    id: uuid.UUID
    kind: ContentKind
    status: str
    allowed_targets: List[str]


class LifecycleService:
    """Service for performing status transitions with audit logging."""

    def __init__(
        self,
        session: AsyncSession,
        engine: Optional[TransitionRuleEngine] = None,
        clock: Callable[[], datetime] = utcnow,
        store: Optional[ContentStore] = None,
        event_store: Optional[EventStore] = None,
    ):
        self.session = session
        self.engine = engine or TransitionRuleEngine()
        self.clock = clock
        self.store = store or ContentStore(session)
        self.event_store = event_store or EventStore(session, clock=clock)

    async def transition(
        self,
        actor: Actor,
        kind: ContentKind,
        entity_id: uuid.UUID,
        requested_status: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> PublishableEntity:
        """
        Move an entity to ``requested_status`` on behalf of ``actor``.

        Returns:
            The updated entity (reloaded after the write)

        Raises:
            NotFoundError: no entity with that id
            InvalidStatusError: status is not one of the kind's statuses
            IllegalTransitionError: no edge from the current status, including
                a concurrent request having moved the entity first
            ForbiddenError: actor's role lacks the capability for the target
            StorageError: the store or audit log failed
        """
        kind = ContentKind(kind)
        target = status_value(requested_status)

        try:
            entity = await self.store.find_by_id(kind, entity_id, for_update=True)
            if entity is None:
                raise NotFoundError(kind.value, entity_id)

            from_status = status_value(entity.status)
            decision = self.engine.decide(kind, from_status, target, actor.role)
            if not decision.allowed:
                logger.info(
                    "Transition denied",
                    extra={
                        "kind": kind.value,
                        "entity_id": str(entity_id),
                        "from_status": from_status,
                        "to_status": target,
                        "reason": decision.reason.value,
                        "detail": decision.message,
                    },
                )
                raise _DENY_ERRORS[decision.reason](decision.message)

            now = self.clock()
            # Keep the first publish time across unpublish/republish cycles
            published_at = (
                now if decision.stamp_published_at and entity.published_at is None else None
            )

            changed = await self.store.update_status(
                kind,
                entity.id,
                expected_status=from_status,
                new_status=target,
                updated_at=now,
                published_at=published_at,
            )
            if not changed:
                raise IllegalTransitionError(
                    f"{kind.value} {entity_id} is no longer {from_status}"
                )

            await self.event_store.record(
                actor_id=actor.actor_id,
                action=_AUDIT_ACTIONS[kind],
                resource_type=kind.value,
                resource_id=entity.id,
                detail=StatusChangedDetail(
                    from_status=from_status,
                    to_status=target,
                    published_at=published_at,
                ),
                ip_address=ip_address,
                user_agent=user_agent,
                created_at=now,
            )

            entity = await self.store.refresh(entity)
            await self._commit()
        except BaseException:
            # BaseException so a cancelled request also releases the row
            await self._rollback()
            raise

        logger.info(
            "Status changed",
            extra={
                "kind": kind.value,
                "entity_id": str(entity_id),
                "from_status": from_status,
                "to_status": target,
                "published_at_stamped": published_at is not None,
            },
        )
        return entity

    async def describe(
        self,
        actor: Actor,
        kind: ContentKind,
        entity_id: uuid.UUID,
    ) -> StatusView:
        """Current status plus the targets ``actor`` may move the entity to."""
        kind = ContentKind(kind)
        entity = await self.store.find_by_id(kind, entity_id)
        if entity is None:
            raise NotFoundError(kind.value, entity_id)
        current = status_value(entity.status)
        return StatusView(
            id=entity.id,
            kind=kind,
            status=current,
            allowed_targets=self.engine.allowed_targets(kind, current, actor.role),
        )

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"commit failed: {exc}") from exc

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")
