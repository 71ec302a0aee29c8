"""FastAPI dependency injection for config, poller and shared clients."""

from pathlib import Path
from typing import Optional

from fastapi import Request

from metrix.sources.poller import DashboardPoller


def get_config(request: Request) -> dict:
    """Get the loaded config from app state."""
    return request.app.state.config


def get_config_path(request: Request) -> Optional[Path]:
    """Config file backing the data-source store (None = default location)."""
    return getattr(request.app.state, "config_path", None)


def get_poller(request: Request) -> DashboardPoller:
    return request.app.state.poller


def get_insight_provider(request: Request):
    """Insight provider from app state; None means insights use the fallback."""
    return getattr(request.app.state, "insight_provider", None)
