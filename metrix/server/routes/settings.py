"""Settings API endpoints."""

import asyncio

from fastapi import APIRouter, Depends, Request

from metrix.config.store import (
    DataSourceConfig,
    mask_credential,
    read_data_source,
    write_data_source,
)
from metrix.server.dependencies import get_config_path, get_poller
from metrix.server.models.settings import (
    DataSourceSettings,
    DataSourceUpdateRequest,
    DataSourceUpdateResponse,
)
from metrix.sources.poller import DashboardPoller

router = APIRouter(prefix="/api", tags=["settings"])


def _settings_view(source: DataSourceConfig) -> DataSourceSettings:
    return DataSourceSettings(
        endpoint=source.endpoint or "",
        has_credential=source.has_credential,
        credential_hint=mask_credential(source.credential),
    )


@router.get("/settings/data-source", response_model=DataSourceSettings)
async def get_data_source(request: Request):
    """Get the configured data source."""
    source = await asyncio.to_thread(read_data_source, get_config_path(request))
    return _settings_view(source)


@router.put("/settings/data-source", response_model=DataSourceUpdateResponse)
async def update_data_source(
    body: DataSourceUpdateRequest,
    request: Request,
    poller: DashboardPoller = Depends(get_poller),
):
    """Save the data source, then refresh so the dashboard reflects it."""
    config_path = get_config_path(request)
    source = DataSourceConfig(
        endpoint=body.endpoint.strip() or None,
        credential=body.credential or None,
    )
    await asyncio.to_thread(write_data_source, source, config_path)

    result = await poller.reload()
    saved = await asyncio.to_thread(read_data_source, config_path)

    return DataSourceUpdateResponse(
        settings=_settings_view(saved),
        connectivity=result.state.value,
    )
