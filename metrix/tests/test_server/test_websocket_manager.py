"""Tests for the WebSocket ConnectionManager.

Uses mock WebSocket objects to avoid needing a real ASGI scope.
"""

import json
from unittest.mock import AsyncMock

import pytest

from metrix.models.entities import ConnectivityState, DashboardPayload, FetchResult
from metrix.server.websocket import ConnectionManager


@pytest.fixture
def manager():
    return ConnectionManager()


def make_mock_ws():
    """Create a mock WebSocket with accept() and send_text() as async mocks."""
    ws = AsyncMock()
    ws.accept = AsyncMock()
    ws.send_text = AsyncMock()
    return ws


@pytest.mark.asyncio
class TestConnections:

    async def test_connect_calls_accept(self, manager):
        ws = make_mock_ws()
        await manager.connect(ws)
        ws.accept.assert_awaited_once()
        assert ws in manager.active_connections

    async def test_connect_same_ws_twice_does_not_duplicate(self, manager):
        ws = make_mock_ws()
        await manager.connect(ws)
        await manager.connect(ws)
        assert manager.connection_count == 1

    async def test_disconnect(self, manager):
        ws1, ws2 = make_mock_ws(), make_mock_ws()
        await manager.connect(ws1)
        await manager.connect(ws2)
        await manager.disconnect(ws1)
        assert ws1 not in manager.active_connections
        assert ws2 in manager.active_connections

    async def test_disconnect_unknown_ws_does_not_raise(self, manager):
        await manager.disconnect(make_mock_ws())
        assert manager.connection_count == 0


@pytest.mark.asyncio
class TestBroadcast:

    async def test_broadcast_sends_to_all_connected(self, manager):
        ws1, ws2 = make_mock_ws(), make_mock_ws()
        await manager.connect(ws1)
        await manager.connect(ws2)

        message = {"type": "dashboard_update", "status": "mock"}
        await manager.broadcast(message)

        expected = json.dumps(message, default=str)
        ws1.send_text.assert_awaited_once_with(expected)
        ws2.send_text.assert_awaited_once_with(expected)

    async def test_broadcast_no_clients_does_nothing(self, manager):
        await manager.broadcast({"type": "test"})

    async def test_broadcast_removes_failed_clients(self, manager):
        ws_good = make_mock_ws()
        ws_bad = make_mock_ws()
        ws_bad.send_text = AsyncMock(side_effect=ConnectionError("reset"))

        await manager.connect(ws_good)
        await manager.connect(ws_bad)
        await manager.broadcast({"type": "test"})

        assert ws_bad not in manager.active_connections
        assert ws_good in manager.active_connections
        assert manager.connection_count == 1

    async def test_broadcast_result_message(self, manager):
        ws = make_mock_ws()
        await manager.connect(ws)

        result = FetchResult(
            DashboardPayload(metrics=[{"timestamp": "10:00", "visitors": 1}]),
            ConnectivityState.CONNECTED,
        )
        await manager.broadcast_result(result)

        sent = json.loads(ws.send_text.call_args[0][0])
        assert sent["type"] == "dashboard_update"
        assert sent["status"] == "connected"
        assert sent["is_connected"] is True
        assert sent["data"]["metrics"] == [{"timestamp": "10:00", "visitors": 1}]
        assert "timestamp" in sent
