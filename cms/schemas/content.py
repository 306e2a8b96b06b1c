"""
Schemas for content status endpoints.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StatusChangeRequest(BaseModel):
    """Requested target status. Membership in the kind's status set is checked by the service."""

    status: str = Field(..., min_length=1, max_length=20)


class StatusChangeResponse(BaseModel):
    """Entity state after a successful transition."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    status: str
    published_at: Optional[datetime] = None
    updated_at: datetime


class StatusViewResponse(BaseModel):
    """Current status and the targets the caller may choose."""

    id: uuid.UUID
    status: str
    allowed_targets: List[str]
