"""Health check endpoint."""

import time

from fastapi import APIRouter, Depends

from metrix import __version__
from metrix.server.dependencies import get_poller
from metrix.sources.poller import DashboardPoller

router = APIRouter(prefix="/api", tags=["health"])

_start_time = time.time()


@router.get("/health")
async def health_check(poller: DashboardPoller = Depends(get_poller)):
    """Health check: returns status, uptime and the last connectivity state."""
    uptime = int(time.time() - _start_time)
    current = poller.current

    return {
        "status": "ok",
        "uptime_seconds": uptime,
        "connectivity": current.state.value if current else None,
        "refreshing": poller.is_refreshing,
        "version": __version__,
    }
