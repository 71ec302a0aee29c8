"""Sources package - data reconciliation, demo data and polling."""

from .demo import generate_demo_payload, generate_time_series
from .fetcher import fetch_dashboard_data, build_request_url, build_headers
from .poller import DashboardPoller

__all__ = [
    "generate_demo_payload",
    "generate_time_series",
    "fetch_dashboard_data",
    "build_request_url",
    "build_headers",
    "DashboardPoller",
]
