"""
Common schema types used across the API.
"""

from typing import Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: Optional[str] = None


class SuccessResponse(BaseModel):
    """Standard success response."""

    success: bool = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    database: str = "connected"
