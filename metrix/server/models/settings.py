"""Pydantic models for settings API."""

from typing import Optional
from pydantic import BaseModel


class DataSourceSettings(BaseModel):
    """Stored data source; the credential itself is never returned."""
    endpoint: str = ""
    has_credential: bool = False
    credential_hint: str = ""


class DataSourceUpdateRequest(BaseModel):
    """Overwrite both data-source keys. Empty strings clear them."""
    endpoint: str = ""
    credential: Optional[str] = ""


class DataSourceUpdateResponse(BaseModel):
    status: str = "ok"
    settings: DataSourceSettings
    connectivity: str
