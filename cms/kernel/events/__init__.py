"""
Append-only audit logging.
"""

from cms.kernel.events.event_store import EventStore
from cms.kernel.events.event_types import (
    AuditDetail,
    StatusChangedDetail,
    SettingsBatchDetail,
)

__all__ = [
    "EventStore",
    "AuditDetail",
    "StatusChangedDetail",
    "SettingsBatchDetail",
]
