"""
Persistent store for publishable content.

Only the two operations the lifecycle needs: read by primary key, and a
single-statement compare-and-set status write. The compare-and-set is what
serializes concurrent transitions on one entity: the UPDATE only matches
while the row still has the status the caller decided on, so of two racing
requests exactly one changes the row.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.kernel.errors import StorageError
from cms.kernel.models.content import CONTENT_MODELS, ContentKind, PublishableEntity


class ContentStore:
    """Reads and writes publishable entities inside the caller's session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(
        self,
        kind: ContentKind,
        entity_id: uuid.UUID,
        for_update: bool = False,
    ) -> Optional[PublishableEntity]:
        """
        Load an entity by id.

        With ``for_update`` the row is locked until the unit of work ends
        (SELECT ... FOR UPDATE; SQLite ignores the clause and relies on the
        compare-and-set in update_status).
        """
        model = CONTENT_MODELS[kind]
        query = select(model).where(model.id == entity_id)
        if for_update:
            query = query.with_for_update()
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise StorageError(f"{kind.value} lookup failed: {exc}") from exc
        return result.scalar_one_or_none()

    async def update_status(
        self,
        kind: ContentKind,
        entity_id: uuid.UUID,
        expected_status: str,
        new_status: str,
        updated_at: datetime,
        published_at: Optional[datetime] = None,
    ) -> bool:
        """
        Move ``entity_id`` from ``expected_status`` to ``new_status``.

        ``published_at`` is written only when given. Returns False when the
        row no longer has ``expected_status`` (another request got there first).
        """
        model = CONTENT_MODELS[kind]
        values = {"status": new_status, "updated_at": updated_at}
        if published_at is not None:
            values["published_at"] = published_at

        stmt = (
            update(model)
            .where(model.id == entity_id, model.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError(f"{kind.value} status write failed: {exc}") from exc
        return result.rowcount == 1

    async def refresh(self, entity: PublishableEntity) -> PublishableEntity:
        try:
            await self.session.refresh(entity)
        except SQLAlchemyError as exc:
            raise StorageError(f"reload failed: {exc}") from exc
        return entity
