"""
Content status endpoints (blog posts, job listings, projects).
"""

import uuid

from fastapi import APIRouter, Request

from cms.api.deps import (
    CurrentActor,
    DbSession,
    TransitionEngine,
    get_client_ip,
    get_user_agent,
)
from cms.kernel.identity.identity_service import Actor
from cms.kernel.models.content import ContentKind
from cms.orchestration.state_machine import LifecycleService
from cms.schemas.content import (
    StatusChangeRequest,
    StatusChangeResponse,
    StatusViewResponse,
)

router = APIRouter()


async def _change_status(
    request: Request,
    kind: ContentKind,
    entity_id: uuid.UUID,
    data: StatusChangeRequest,
    actor: Actor,
    db,
    engine,
) -> StatusChangeResponse:
    service = LifecycleService(db, engine=engine)
    entity = await service.transition(
        actor,
        kind,
        entity_id,
        data.status,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    return StatusChangeResponse.model_validate(entity)


async def _describe(kind: ContentKind, entity_id: uuid.UUID, actor: Actor, db, engine) -> StatusViewResponse:
    view = await LifecycleService(db, engine=engine).describe(actor, kind, entity_id)
    return StatusViewResponse(id=view.id, status=view.status, allowed_targets=view.allowed_targets)


@router.patch("/blog/posts/{post_id}/status", response_model=StatusChangeResponse)
async def change_blog_post_status(
    request: Request,
    post_id: uuid.UUID,
    data: StatusChangeRequest,
    actor: CurrentActor,
    db: DbSession,
    engine: TransitionEngine,
):
    """Move a blog post through draft / review / published / archived."""
    return await _change_status(request, ContentKind.BLOG_POST, post_id, data, actor, db, engine)


@router.get("/blog/posts/{post_id}/status", response_model=StatusViewResponse)
async def get_blog_post_status(
    post_id: uuid.UUID,
    actor: CurrentActor,
    db: DbSession,
    engine: TransitionEngine,
):
    return await _describe(ContentKind.BLOG_POST, post_id, actor, db, engine)


@router.patch("/careers/jobs/{job_id}/status", response_model=StatusChangeResponse)
async def change_job_listing_status(
    request: Request,
    job_id: uuid.UUID,
    data: StatusChangeRequest,
    actor: CurrentActor,
    db: DbSession,
    engine: TransitionEngine,
):
    """Move a job listing through draft / open / closed / archived."""
    return await _change_status(request, ContentKind.JOB_LISTING, job_id, data, actor, db, engine)


@router.get("/careers/jobs/{job_id}/status", response_model=StatusViewResponse)
async def get_job_listing_status(
    job_id: uuid.UUID,
    actor: CurrentActor,
    db: DbSession,
    engine: TransitionEngine,
):
    return await _describe(ContentKind.JOB_LISTING, job_id, actor, db, engine)


@router.patch("/projects/{project_id}/status", response_model=StatusChangeResponse)
async def change_project_status(
    request: Request,
    project_id: uuid.UUID,
    data: StatusChangeRequest,
    actor: CurrentActor,
    db: DbSession,
    engine: TransitionEngine,
):
    """Publish or unpublish a project."""
    return await _change_status(request, ContentKind.PROJECT, project_id, data, actor, db, engine)


@router.get("/projects/{project_id}/status", response_model=StatusViewResponse)
async def get_project_status(
    project_id: uuid.UUID,
    actor: CurrentActor,
    db: DbSession,
    engine: TransitionEngine,
):
    return await _describe(ContentKind.PROJECT, project_id, actor, db, engine)
