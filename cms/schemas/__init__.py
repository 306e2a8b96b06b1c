"""
Pydantic schemas for API request/response validation.
"""

from cms.schemas.audit import AuditHistoryResponse, AuditRecordResponse
from cms.schemas.common import ErrorResponse, HealthResponse, SuccessResponse
from cms.schemas.content import (
    StatusChangeRequest,
    StatusChangeResponse,
    StatusViewResponse,
)
from cms.schemas.settings import (
    SettingsBatchRequest,
    SettingsBatchResponse,
    SettingsResponse,
)

__all__ = [
    # Content
    "StatusChangeRequest",
    "StatusChangeResponse",
    "StatusViewResponse",
    # Settings
    "SettingsBatchRequest",
    "SettingsBatchResponse",
    "SettingsResponse",
    # Audit
    "AuditRecordResponse",
    "AuditHistoryResponse",
    # Common
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
]
