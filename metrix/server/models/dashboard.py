"""Pydantic models for the dashboard API."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class DashboardData(BaseModel):
    """Payload exactly as the data source (or demo generator) produced it."""
    metrics: List[Any] = []
    endpoints: List[Any] = []
    geoData: List[Any] = []


class DashboardResponse(BaseModel):
    """Current reconciliation result."""
    status: str
    is_mock: bool
    is_connected: bool
    last_update: str
    error: Optional[str] = None
    data: DashboardData


class TotalsData(BaseModel):
    """Headline numbers for the stat cards."""
    total_visitors: int = 0
    avg_latency_ms: int = 0
    total_errors: int = 0
    live_visitors: int = 0
    samples: int = 0


class EndpointEntry(BaseModel):
    """Endpoint ranked by call volume."""
    path: str
    calls: int = 0
    avg_latency_ms: int = 0
    status_code: int = 0


class SummaryResponse(BaseModel):
    """Stat cards plus the endpoint chart data."""
    status: str
    totals: TotalsData
    top_endpoints: List[EndpointEntry]


class GeoEntry(BaseModel):
    city: str
    country: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    users: int = 0


class GeoResponse(BaseModel):
    """Locations visible in a map region."""
    status: str
    region: str
    total_users: int = 0
    locations: List[GeoEntry]


class IntegrationSchemaResponse(BaseModel):
    """Shape an external data source must return."""
    method: str = "GET"
    cache_bust_param: str
    auth_header: str
    required: List[str]
    example: Dict[str, Any]
