"""
Site settings endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from cms.api.deps import DbSession, Permissions, RequirePermission
from cms.kernel.identity.identity_service import Actor
from cms.kernel.permissions import permission_table as perms
from cms.kernel.settings.settings_manager import SettingsTransactionManager
from cms.schemas.settings import (
    SettingsBatchRequest,
    SettingsBatchResponse,
    SettingsResponse,
)

router = APIRouter()


@router.put("/settings", response_model=SettingsBatchResponse)
async def update_settings(
    data: SettingsBatchRequest,
    actor: Annotated[Actor, Depends(RequirePermission(perms.SETTINGS_EDIT))],
    db: DbSession,
    permissions: Permissions,
):
    """Apply a batch of setting updates atomically."""
    manager = SettingsTransactionManager(db, permissions=permissions)
    result = await manager.apply_batch(actor, data.settings)
    return SettingsBatchResponse(
        updated_keys=result.updated_keys,
        ignored_keys=result.ignored_keys,
    )


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(
    actor: Annotated[Actor, Depends(RequirePermission(perms.SETTINGS_VIEW))],
    db: DbSession,
):
    """All settings grouped by category, for the admin screen."""
    data = await SettingsTransactionManager(db).get_all()
    return SettingsResponse(data=data)


@router.get("/public/settings", response_model=SettingsResponse)
async def get_public_settings(db: DbSession):
    """All settings grouped by category, no authentication required."""
    data = await SettingsTransactionManager(db).get_all()
    return SettingsResponse(data=data)
