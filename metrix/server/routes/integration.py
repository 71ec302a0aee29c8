"""Integration helper: the response shape a data source must serve."""

from fastapi import APIRouter

from metrix.server.models.dashboard import IntegrationSchemaResponse
from metrix.sources.fetcher import CACHE_BUST_PARAM

router = APIRouter(prefix="/api", tags=["integration"])

EXAMPLE_RESPONSE = {
    "metrics": [
        {"timestamp": "14:30", "visitors": 1200, "pageViews": 3500, "errors": 2, "latency": 150},
    ],
    "endpoints": [
        {"path": "/api/login", "calls": 120, "avgLatency": 200, "status": 200},
    ],
    "geoData": [
        {"city": "Istanbul", "country": "Turkey", "lat": 41.0082, "lng": 28.9784, "users": 150},
    ],
}


@router.get("/integration/schema", response_model=IntegrationSchemaResponse)
async def integration_schema():
    """Describe the JSON document the configured endpoint must return."""
    return IntegrationSchemaResponse(
        cache_bust_param=CACHE_BUST_PARAM,
        auth_header="Authorization: Bearer <credential>",
        required=["metrics"],
        example=EXAMPLE_RESPONSE,
    )
