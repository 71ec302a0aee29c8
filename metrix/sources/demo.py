"""
Synthetic demo data.

Used only when no data source is configured, so the dashboard has something
plausible to show before integration. Shapes are fixed, values are random.
"""

import random
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from metrix.models.entities import DashboardPayload

DEFAULT_DEMO_POINTS = 24
SPIKE_PROBABILITY = 0.1
SPIKE_VISITORS = 2000
SPIKE_LATENCY_MS = 300


def generate_time_series(
    points: int,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    """
    Generate ``points + 1`` hourly metric samples ending at ``now``.

    Visitors sit in a 500-1500 base range; roughly one sample in ten gets a
    traffic spike that also inflates page views and latency.
    """
    if points < 0:
        raise ValueError("points must be >= 0")

    now = now or datetime.now()
    rng = rng or random.Random()
    data = []

    for i in range(points, -1, -1):
        time = now - timedelta(hours=i)
        base_visitors = 500 + rng.random() * 1000
        spike = SPIKE_VISITORS if rng.random() > 1 - SPIKE_PROBABILITY else 0
        data.append({
            "timestamp": time.strftime("%H:%M"),
            "visitors": int(base_visitors + spike),
            "pageViews": int((base_visitors + spike) * (1.5 + rng.random())),
            "errors": int(rng.random() * 15),
            "latency": int(100 + rng.random() * 200 + (SPIKE_LATENCY_MS if spike else 0)),
        })

    return data


def generate_endpoint_stats() -> List[Dict[str, Any]]:
    return [
        {"path": "/api/demo/users", "calls": 120, "avgLatency": 120, "status": 200},
        {"path": "/api/demo/products", "calls": 89, "avgLatency": 145, "status": 200},
        {"path": "/api/demo/orders", "calls": 42, "avgLatency": 210, "status": 200},
    ]


def generate_geo_data() -> List[Dict[str, Any]]:
    return [
        {"city": "Demo City", "country": "Turkey", "lat": 41.0082, "lng": 28.9784, "users": 10},
        {"city": "Sample Town", "country": "Germany", "lat": 52.52, "lng": 13.405, "users": 4},
    ]


def generate_demo_payload(
    points: int = DEFAULT_DEMO_POINTS,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> DashboardPayload:
    """A complete demo payload, regenerated on every call."""
    return DashboardPayload(
        metrics=generate_time_series(points, now=now, rng=rng),
        endpoints=generate_endpoint_stats(),
        geo=generate_geo_data(),
    )
