"""Common Pydantic models for API responses."""

from typing import List, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None


class InsightResponse(BaseModel):
    """Narrative insight report."""
    summary: str
    anomalies: List[str] = []
    recommendations: List[str] = []
