"""
Data structures (entities) for MetriX.

The payload keeps records exactly as the data source sent them (wire-format
dicts). Typed records are parsed on demand by metrix.models.aggregates, which
is where malformed individual records are dropped.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ConnectivityState(str, Enum):
    """Where the current payload came from."""
    CONNECTED = "connected"        # live, validated external data
    DEMO = "mock"                  # no source configured, synthetic data
    DISCONNECTED = "disconnected"  # source configured but unusable, empty data


@dataclass
class MetricSample:
    """One point of the traffic time series."""
    timestamp: str
    visitors: int = 0
    page_views: int = 0
    errors: int = 0
    latency_ms: int = 0


@dataclass
class EndpointStat:
    """Call volume and latency for a single API path."""
    path: str
    calls: int = 0
    avg_latency_ms: int = 0
    status_code: int = 0


@dataclass
class GeoSample:
    """Active users at a location."""
    city: str
    country: str
    lat: float
    lng: float
    users: int = 0


@dataclass
class DashboardPayload:
    """Metrics, endpoint stats and geo samples, in wire format."""
    metrics: List[Dict[str, Any]] = field(default_factory=list)
    endpoints: List[Dict[str, Any]] = field(default_factory=list)
    geo: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "DashboardPayload":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.metrics or self.endpoints or self.geo)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the data source's key names."""
        return {
            "metrics": self.metrics,
            "endpoints": self.endpoints,
            "geoData": self.geo,
        }


@dataclass
class FetchResult:
    """Outcome of one reconciliation cycle."""
    payload: DashboardPayload
    state: ConnectivityState
    fetched_at: datetime = field(default_factory=datetime.now)
    error: Optional[str] = None

    @property
    def is_mock(self) -> bool:
        return self.state is ConnectivityState.DEMO

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectivityState.CONNECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.state.value,
            "is_mock": self.is_mock,
            "is_connected": self.is_connected,
            "last_update": self.fetched_at.isoformat(),
            "error": self.error,
            "data": self.payload.to_dict(),
        }


@dataclass
class Insight:
    """Narrative report produced by the insight provider."""
    summary: str
    anomalies: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "anomalies": list(self.anomalies),
            "recommendations": list(self.recommendations),
        }
