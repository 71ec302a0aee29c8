"""Models package - payload entities and dashboard aggregates."""

from .entities import (
    ConnectivityState,
    MetricSample,
    EndpointStat,
    GeoSample,
    DashboardPayload,
    FetchResult,
    Insight,
)
from .aggregates import (
    MapRegion,
    DashboardTotals,
    parse_metrics,
    parse_endpoints,
    parse_geo,
    compute_totals,
    top_endpoints,
    filter_geo,
    total_users,
)

__all__ = [
    "ConnectivityState",
    "MetricSample",
    "EndpointStat",
    "GeoSample",
    "DashboardPayload",
    "FetchResult",
    "Insight",
    "MapRegion",
    "DashboardTotals",
    "parse_metrics",
    "parse_endpoints",
    "parse_geo",
    "compute_totals",
    "top_endpoints",
    "filter_geo",
    "total_users",
]
