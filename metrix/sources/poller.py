"""
Periodic dashboard refresh.

DashboardPoller owns the current FetchResult. A manual refresh and the
interval timer may fire close together; while one reconciliation is in
flight, every further trigger awaits that same cycle instead of starting a
second request, so results are always applied in order.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

from metrix.config.store import DataSourceConfig
from metrix.models.entities import FetchResult
from metrix.sources.fetcher import fetch_dashboard_data

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 60


class DashboardPoller:
    """Runs reconciliation cycles and keeps the latest result."""

    def __init__(
        self,
        source_loader: Callable[[], DataSourceConfig],
        client: Optional[httpx.AsyncClient] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = None,
        demo_points: int = 24,
        on_update: Optional[Callable[[FetchResult], Awaitable[None]]] = None,
    ):
        """
        Args:
            source_loader: Returns the data-source config; called every cycle
            client: Shared HTTP client passed to fetch_dashboard_data
            poll_interval: Seconds between automatic refreshes
            timeout: Explicit request timeout in seconds
            demo_points: Hourly points generated in demo mode
            on_update: Awaited with each completed result
        """
        self.source_loader = source_loader
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.demo_points = demo_points
        self.on_update = on_update

        self.current: Optional[FetchResult] = None
        self.cycles = 0
        self._inflight: Optional[asyncio.Task] = None

    @property
    def is_refreshing(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def refresh(self) -> FetchResult:
        """Run a reconciliation cycle, or join the one already running."""
        if not self.is_refreshing:
            self._inflight = asyncio.create_task(self._run_cycle())
        # Shielded so a cancelled caller does not cancel a cycle others await
        return await asyncio.shield(self._inflight)

    async def reload(self) -> FetchResult:
        """Like refresh(), but never joins a cycle that started before the call."""
        if self.is_refreshing:
            await asyncio.shield(self._inflight)
        return await self.refresh()

    async def get_current(self) -> FetchResult:
        """Latest result, refreshing first if no cycle has completed yet."""
        if self.current is None:
            return await self.refresh()
        return self.current

    async def _run_cycle(self) -> FetchResult:
        source = self.source_loader()
        result = await fetch_dashboard_data(
            source,
            client=self.client,
            timeout=self.timeout,
            demo_points=self.demo_points,
        )
        self.current = result
        self.cycles += 1
        logger.info("Dashboard refresh #%d: %s", self.cycles, result.state.value)

        if self.on_update is not None:
            try:
                await self.on_update(result)
            except Exception:
                logger.exception("Dashboard update callback failed")

        return result

    async def run(self, stop_event: Optional[asyncio.Event] = None):
        """
        Refresh immediately, then every poll_interval seconds until stopped.

        Args:
            stop_event: Event to signal shutdown
        """
        stop = stop_event or asyncio.Event()

        while not stop.is_set():
            try:
                await self.refresh()
            except Exception:
                # Keep polling; the next tick is the retry
                logger.exception("Dashboard refresh failed")

            try:
                await asyncio.wait_for(stop.wait(), timeout=self.poll_interval)
                break  # stop was set
            except asyncio.TimeoutError:
                pass  # Normal timeout, poll again
