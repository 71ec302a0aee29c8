"""Test fixtures for server tests.

The app is created without its lifespan: poller, WebSocket manager and
insight provider are placed on app.state directly, and the external data
source is an httpx.MockTransport handler whose response each test controls.
"""

import copy
import json

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from metrix.config.loader import DEFAULT_CONFIG
from metrix.config.store import DataSourceConfig, write_data_source
from metrix.server.app import build_poller, create_app
from metrix.server.websocket import ConnectionManager

DATA_SOURCE_URL = "https://metrics.example.com/api/metrix-data"

SOURCE_BODY = {
    "metrics": [
        {"timestamp": "10:00", "visitors": 1200, "pageViews": 3000, "errors": 2, "latency": 100},
        {"timestamp": "11:00", "visitors": 800, "pageViews": 2000, "errors": 1, "latency": 200},
    ],
    "endpoints": [
        {"path": "/api/login", "calls": 120, "avgLatency": 200, "status": 200},
        {"path": "/api/cart", "calls": 450, "avgLatency": 80, "status": 200},
    ],
    "geoData": [
        {"city": "Istanbul", "country": "Turkey", "lat": 41.0082, "lng": 28.9784, "users": 150},
        {"city": "Berlin", "country": "Germany", "lat": 52.52, "lng": 13.405, "users": 40},
    ],
}


class FakeDataSource:
    """Stands in for the external metrics endpoint."""

    def __init__(self):
        self.status_code = 200
        self.body = SOURCE_BODY
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=json.dumps(self.body).encode())


class StubInsightProvider:
    def __init__(self):
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        return json.dumps({
            "summary": "Traffic is stable.",
            "anomalies": ["Error count rose at 10:00"],
            "recommendations": ["Cache /api/cart"],
        })


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.json"


@pytest.fixture
def test_config():
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def data_source():
    return FakeDataSource()


@pytest.fixture
def configured_source(config_path):
    """Store an endpoint so the poller talks to the fake data source."""
    write_data_source(DataSourceConfig(endpoint=DATA_SOURCE_URL, credential="tok"), config_path)
    return config_path


@pytest.fixture
def app(test_config, config_path, data_source):
    """App with state wired by hand (lifespan bypassed)."""
    app = create_app(config=test_config, config_path=config_path, start_polling=False)
    source_client = httpx.AsyncClient(transport=httpx.MockTransport(data_source))

    manager = ConnectionManager()
    app.state.ws_manager = manager
    app.state.poller = build_poller(test_config, config_path, source_client, manager)
    app.state.insight_provider = None
    return app


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP client against the ASGI app."""
    source_client = app.state.poller.client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await source_client.aclose()
