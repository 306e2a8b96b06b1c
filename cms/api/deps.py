"""
FastAPI dependencies for authentication, authorization, and database sessions.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.kernel.errors import UnauthenticatedError
from cms.kernel.identity.identity_service import Actor, IdentityService
from cms.kernel.identity.jwt import JWTManager, get_jwt_manager
from cms.kernel.permissions.permission_service import PermissionService
from cms.kernel.permissions.permission_table import DEFAULT_PERMISSION_TABLE, PermissionTable
from cms.logging_config import actor_id_var
from cms.orchestration.transition_rules import TransitionRuleEngine


# Security scheme
security = HTTPBearer(auto_error=False)


DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_permission_table() -> PermissionTable:
    """The permission table for this app. Override in tests to grant extra roles."""
    return DEFAULT_PERMISSION_TABLE


PermissionTableDep = Annotated[PermissionTable, Depends(get_permission_table)]


def get_transition_engine(table: PermissionTableDep) -> TransitionRuleEngine:
    return TransitionRuleEngine(permission_table=table)


def get_permission_service(table: PermissionTableDep) -> PermissionService:
    return PermissionService(table)


TransitionEngine = Annotated[TransitionRuleEngine, Depends(get_transition_engine)]
Permissions = Annotated[PermissionService, Depends(get_permission_service)]


async def get_current_actor_optional(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DbSession,
    jwt_manager: Annotated[JWTManager, Depends(get_jwt_manager)],
) -> Optional[Actor]:
    """Resolve the caller once per request, or None when anonymous."""
    token = credentials.credentials if credentials else None
    actor = await IdentityService(db, jwt_manager).resolve_actor(token)
    if actor:
        actor_id_var.set(str(actor.actor_id))
    return actor


async def get_current_actor(
    actor: Annotated[Optional[Actor], Depends(get_current_actor_optional)],
) -> Actor:
    """Get the authenticated actor or raise 401."""
    if actor is None:
        raise UnauthenticatedError("missing, invalid or expired bearer token")
    return actor


CurrentActor = Annotated[Actor, Depends(get_current_actor)]
OptionalActor = Annotated[Optional[Actor], Depends(get_current_actor_optional)]


class RequirePermission:
    """
    Dependency class requiring the caller to hold one action.

    Usage:
        @router.get("/settings")
        async def list_settings(actor: Annotated[Actor, Depends(RequirePermission("settings.view"))]):
            ...
    """

    def __init__(self, action: str):
        self.action = action

    async def __call__(self, actor: CurrentActor, permissions: Permissions) -> Actor:
        permissions.require(actor, self.action)
        return actor


def get_request_id(request: Request) -> Optional[str]:
    """Get request correlation ID (set by RequestIdMiddleware)."""
    return getattr(request.state, "request_id", None)


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def get_user_agent(request: Request) -> Optional[str]:
    """Extract user agent from request."""
    return request.headers.get("User-Agent")
