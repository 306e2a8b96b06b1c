"""
Audit history endpoints.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cms.api.deps import DbSession, RequirePermission
from cms.kernel.identity.identity_service import Actor
from cms.kernel.permissions import permission_table as perms
from cms.kernel.events.event_store import EventStore
from cms.schemas.audit import AuditHistoryResponse, AuditRecordResponse

router = APIRouter()


@router.get("/audit/{resource_type}/{resource_id}", response_model=AuditHistoryResponse)
async def get_resource_history(
    resource_type: str,
    resource_id: uuid.UUID,
    actor: Annotated[Actor, Depends(RequirePermission(perms.AUDIT_VIEW))],
    db: DbSession,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """Audit records for one resource, newest first."""
    store = EventStore(db)
    records = await store.get_entity_history(
        resource_type, resource_id, limit=limit, offset=offset
    )
    total = await store.count_events(resource_type=resource_type, resource_id=resource_id)
    return AuditHistoryResponse(
        items=[AuditRecordResponse.model_validate(r) for r in records],
        total=total,
    )
