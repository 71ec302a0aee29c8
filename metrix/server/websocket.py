"""
WebSocket connection manager for live dashboard updates.

Every completed refresh is pushed to all connected clients.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import WebSocket

from metrix.models.entities import FetchResult

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections for live updates."""

    def __init__(self):
        self.active_connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket):
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self.active_connections.add(websocket)

    async def disconnect(self, websocket: WebSocket):
        async with self._lock:
            self.active_connections.discard(websocket)

    async def broadcast(self, message: Dict[str, Any]):
        """Send a message to all connected clients, dropping any that fail."""
        if not self.active_connections:
            return

        data = json.dumps(message, default=str)
        disconnected = set()

        async with self._lock:
            for ws in self.active_connections:
                try:
                    await ws.send_text(data)
                except Exception:
                    disconnected.add(ws)

            self.active_connections -= disconnected

        if disconnected:
            logger.debug("Dropped %d stale WebSocket connection(s)", len(disconnected))

    async def broadcast_result(self, result: FetchResult):
        """Push a dashboard_update message for a completed refresh."""
        message = {"type": "dashboard_update", "timestamp": datetime.now().isoformat()}
        message.update(result.to_dict())
        await self.broadcast(message)

    @property
    def connection_count(self) -> int:
        return len(self.active_connections)
