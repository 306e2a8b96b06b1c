"""
Schemas for site settings endpoints.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class SettingsBatchRequest(BaseModel):
    """
    Batch of setting updates grouped by category.

    Values are left loosely typed here so a wrong category or a non-string
    value is reported by the settings manager with the standard error body.
    """

    settings: Dict[str, Any]


class SettingsBatchResponse(BaseModel):
    success: bool = True
    updated_keys: List[str] = Field(default_factory=list)
    ignored_keys: List[str] = Field(default_factory=list)


class SettingsResponse(BaseModel):
    success: bool = True
    data: Dict[str, Dict[str, str]]
