"""Narrative insight API endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from metrix.insights.analyzer import summarize
from metrix.server.dependencies import get_config, get_insight_provider, get_poller
from metrix.server.models.common import InsightResponse
from metrix.sources.poller import DashboardPoller

router = APIRouter(prefix="/api", tags=["insights"])


@router.post("/insights", response_model=InsightResponse)
async def generate_insights(
    poller: DashboardPoller = Depends(get_poller),
    config: dict = Depends(get_config),
    provider=Depends(get_insight_provider),
):
    """Analyze the payload currently on display."""
    result = await poller.get_current()
    if not result.payload.metrics:
        raise HTTPException(status_code=409, detail="No metrics to analyze")

    settings = config.get("insights") or {}
    insight = await summarize(
        result.payload.metrics,
        result.payload.endpoints,
        provider,
        recent_points=settings.get("recent_points", 10),
        top_endpoints=settings.get("top_endpoints", 5),
    )
    return InsightResponse(**insight.to_dict())
