"""Dashboard API endpoints."""

from fastapi import APIRouter, Depends, Query

from metrix.models.aggregates import (
    MapRegion, compute_totals, filter_geo, parse_endpoints, parse_geo,
    parse_metrics, top_endpoints, total_users,
)
from metrix.server.dependencies import get_poller
from metrix.server.models.dashboard import (
    DashboardResponse,
    EndpointEntry,
    GeoEntry,
    GeoResponse,
    SummaryResponse,
    TotalsData,
)
from metrix.sources.poller import DashboardPoller

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(poller: DashboardPoller = Depends(get_poller)):
    """Get the current dashboard payload and connectivity state."""
    result = await poller.get_current()
    return DashboardResponse(**result.to_dict())


@router.post("/dashboard/refresh", response_model=DashboardResponse)
async def refresh_dashboard(poller: DashboardPoller = Depends(get_poller)):
    """Manual refresh; joins a refresh that is already running."""
    result = await poller.refresh()
    return DashboardResponse(**result.to_dict())


@router.get("/dashboard/summary", response_model=SummaryResponse)
async def dashboard_summary(
    limit: int = Query(5, ge=1, le=50),
    poller: DashboardPoller = Depends(get_poller),
):
    """Stat card totals and the busiest endpoints."""
    result = await poller.get_current()
    totals = compute_totals(parse_metrics(result.payload.metrics))
    ranked = top_endpoints(parse_endpoints(result.payload.endpoints), limit)

    return SummaryResponse(
        status=result.state.value,
        totals=TotalsData(**vars(totals)),
        top_endpoints=[EndpointEntry(**vars(e)) for e in ranked],
    )


@router.get("/dashboard/geo", response_model=GeoResponse)
async def dashboard_geo(
    region: MapRegion = Query(MapRegion.WORLD),
    poller: DashboardPoller = Depends(get_poller),
):
    """Locations and active users for a map region."""
    result = await poller.get_current()
    samples = filter_geo(parse_geo(result.payload.geo), region)

    return GeoResponse(
        status=result.state.value,
        region=region.value,
        total_users=total_users(samples),
        locations=[GeoEntry(**vars(s)) for s in samples],
    )
