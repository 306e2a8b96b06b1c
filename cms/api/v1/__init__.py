"""
API v1 routes.
"""

from fastapi import APIRouter

from cms.api.v1 import audit, content_status, settings

router = APIRouter()

router.include_router(content_status.router, tags=["Content Status"])
router.include_router(settings.router, tags=["Settings"])
router.include_router(audit.router, tags=["Audit"])
