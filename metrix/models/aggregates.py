"""
Dashboard aggregates computed from a payload.

The data source is untrusted below the top-level shape check, so every
function here parses records defensively: anything that is not a mapping,
or whose numeric fields are missing, non-numeric, negative or out of range,
is dropped rather than coerced.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional

from metrix.models.entities import MetricSample, EndpointStat, GeoSample

logger = logging.getLogger(__name__)


class MapRegion(str, Enum):
    """Map views supported by the geo breakdown."""
    WORLD = "WORLD"
    TURKEY = "TURKEY"


REGION_COUNTRIES = {
    MapRegion.TURKEY: {"Turkey"},
}


@dataclass
class DashboardTotals:
    """Headline numbers for the stat cards."""
    total_visitors: int = 0
    avg_latency_ms: int = 0
    total_errors: int = 0
    live_visitors: int = 0
    samples: int = 0


def _records(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _count(record: dict, key: str) -> Optional[int]:
    value = record.get(key)
    if not _is_number(value) or value < 0:
        return None
    return int(value)


def parse_metrics(raw: Any) -> List[MetricSample]:
    """Typed metric samples, in their original order."""
    samples = []
    for record in _records(raw):
        if not isinstance(record, dict):
            logger.debug("Dropping non-object metric record: %r", record)
            continue
        values = [_count(record, k) for k in ("visitors", "pageViews", "errors", "latency")]
        if any(v is None for v in values):
            logger.debug("Dropping malformed metric record: %r", record)
            continue
        visitors, page_views, errors, latency = values
        samples.append(MetricSample(
            timestamp=str(record.get("timestamp", "")),
            visitors=visitors,
            page_views=page_views,
            errors=errors,
            latency_ms=latency,
        ))
    return samples


def parse_endpoints(raw: Any) -> List[EndpointStat]:
    """Typed endpoint stats."""
    stats = []
    for record in _records(raw):
        if not isinstance(record, dict) or not isinstance(record.get("path"), str):
            logger.debug("Dropping malformed endpoint record: %r", record)
            continue
        calls = _count(record, "calls")
        avg_latency = _count(record, "avgLatency")
        status = record.get("status")
        if calls is None or avg_latency is None or not _is_number(status):
            logger.debug("Dropping malformed endpoint record: %r", record)
            continue
        stats.append(EndpointStat(
            path=record["path"],
            calls=calls,
            avg_latency_ms=avg_latency,
            status_code=int(status),
        ))
    return stats


def parse_geo(raw: Any) -> List[GeoSample]:
    """Typed geo samples with coordinates inside their valid ranges."""
    samples = []
    for record in _records(raw):
        if not isinstance(record, dict):
            logger.debug("Dropping non-object geo record: %r", record)
            continue
        lat, lng = record.get("lat"), record.get("lng")
        users = _count(record, "users")
        if (
            not _is_number(lat) or not _is_number(lng) or users is None
            or not -90 <= lat <= 90 or not -180 <= lng <= 180
        ):
            logger.debug("Dropping malformed geo record: %r", record)
            continue
        samples.append(GeoSample(
            city=str(record.get("city", "")),
            country=str(record.get("country", "")),
            lat=float(lat),
            lng=float(lng),
            users=users,
        ))
    return samples


def compute_totals(metrics: Iterable[MetricSample]) -> DashboardTotals:
    """Sum visitors and errors, average latency, and take the live count from the last sample."""
    samples = list(metrics)
    if not samples:
        return DashboardTotals()

    return DashboardTotals(
        total_visitors=sum(s.visitors for s in samples),
        avg_latency_ms=round(sum(s.latency_ms for s in samples) / len(samples)),
        total_errors=sum(s.errors for s in samples),
        live_visitors=samples[-1].visitors,
        samples=len(samples),
    )


def top_endpoints(endpoints: Iterable[EndpointStat], limit: int = 5) -> List[EndpointStat]:
    """Endpoints ranked by call volume, highest first."""
    ranked = sorted(endpoints, key=lambda e: e.calls, reverse=True)
    return ranked[:limit] if limit > 0 else ranked


def filter_geo(samples: Iterable[GeoSample], region: MapRegion = MapRegion.WORLD) -> List[GeoSample]:
    """Locations visible in the given map region."""
    countries = REGION_COUNTRIES.get(MapRegion(region))
    if countries is None:
        return list(samples)
    return [s for s in samples if s.country in countries]


def total_users(samples: Iterable[GeoSample]) -> int:
    return sum(s.users for s in samples)
