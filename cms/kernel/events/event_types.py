"""
Audit detail payloads, one model per action.

Details are stored as structured JSON so audit rows stay queryable by key
(e.g. details->>'to') without re-parsing strings.
"""

from datetime import datetime
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from cms.kernel.models.event_log import AuditAction


class AuditDetail(BaseModel):
    """Base audit detail payload."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class StatusChangedDetail(AuditDetail):
    """A publishable entity moved between statuses."""

    from_status: str = Field(alias="from")
    to_status: str = Field(alias="to")
    published_at: Optional[datetime] = None


class SettingsBatchDetail(AuditDetail):
    """A settings batch was applied."""

    updated_keys: List[str] = Field(default_factory=list)
    ignored_keys: List[str] = Field(default_factory=list)


DETAIL_TYPES: Dict[AuditAction, Type[AuditDetail]] = {
    AuditAction.BLOG_POST_STATUS_CHANGED: StatusChangedDetail,
    AuditAction.JOB_LISTING_STATUS_CHANGED: StatusChangedDetail,
    AuditAction.PROJECT_STATUS_CHANGED: StatusChangedDetail,
    AuditAction.SETTINGS_BATCH_UPDATED: SettingsBatchDetail,
}
