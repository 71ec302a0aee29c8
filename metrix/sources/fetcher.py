"""
Dashboard data reconciliation.

fetch_dashboard_data() is the single place that decides where dashboard data
comes from:

    no endpoint configured          -> demo payload,  ConnectivityState.DEMO
    endpoint answers in valid shape -> payload as-is, ConnectivityState.CONNECTED
    anything else                   -> empty payload, ConnectivityState.DISCONNECTED

A configured-but-broken source is never papered over with demo data, and the
function never raises, so it is safe to call from a polling loop.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from metrix.config.store import DataSourceConfig
from metrix.models.entities import ConnectivityState, DashboardPayload, FetchResult
from metrix.sources.demo import DEFAULT_DEMO_POINTS, generate_demo_payload

logger = logging.getLogger(__name__)

CACHE_BUST_PARAM = "_t"


class InvalidResponseError(ValueError):
    """The data source answered, but not in the agreed shape."""


class CacheBuster:
    """
    Millisecond timestamps for the cache-busting query parameter.

    Values are strictly increasing, so two requests issued within the same
    millisecond still get distinct URLs.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._last = 0

    def next(self) -> int:
        stamp = max(int(self._clock() * 1000), self._last + 1)
        self._last = stamp
        return stamp


_default_cache_buster = CacheBuster()


def build_request_url(endpoint: str, timestamp_ms: int) -> str:
    """Append the cache-busting parameter, keeping any existing query string."""
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}{CACHE_BUST_PARAM}={timestamp_ms}"


def build_headers(credential: Optional[str]) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if credential:
        headers["Authorization"] = f"Bearer {credential}"
    return headers


def _list_or_empty(body: Dict[str, Any], key: str) -> List[Any]:
    value = body.get(key)
    if isinstance(value, list):
        return value
    if value is not None:
        logger.debug("Ignoring non-array %s in response", key)
    return []


def parse_response_body(body: Any) -> DashboardPayload:
    """
    Validate a decoded response body.

    Only ``metrics`` being a list is enforced. Records are kept verbatim;
    missing or non-array ``endpoints`` / ``geoData`` become empty lists.
    """
    if not isinstance(body, dict) or not isinstance(body.get("metrics"), list):
        raise InvalidResponseError("response has no metrics array")

    return DashboardPayload(
        metrics=body["metrics"],
        endpoints=_list_or_empty(body, "endpoints"),
        geo=_list_or_empty(body, "geoData"),
    )


def _demo_payload(points: Any) -> DashboardPayload:
    if not isinstance(points, int) or isinstance(points, bool) or points < 0:
        logger.warning("Invalid demo point count %r, using %d", points, DEFAULT_DEMO_POINTS)
        points = DEFAULT_DEMO_POINTS
    return generate_demo_payload(points)


def _disconnected(error: str) -> FetchResult:
    return FetchResult(
        payload=DashboardPayload.empty(),
        state=ConnectivityState.DISCONNECTED,
        error=error,
    )


async def _request(
    client: httpx.AsyncClient,
    url: str,
    headers: Dict[str, str],
    timeout: Optional[float],
) -> DashboardPayload:
    if timeout is not None:
        response = await client.get(url, headers=headers, timeout=timeout)
    else:
        response = await client.get(url, headers=headers)
    if not response.is_success:
        raise InvalidResponseError(
            f"API error: {response.status_code} {response.reason_phrase}"
        )
    try:
        body = response.json()
    except ValueError as e:
        raise InvalidResponseError(f"response is not valid JSON: {e}") from e
    return parse_response_body(body)


async def fetch_dashboard_data(
    source: DataSourceConfig,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
    demo_points: int = 24,
    cache_buster: Optional[CacheBuster] = None,
) -> FetchResult:
    """
    Run one reconciliation cycle for ``source``.

    Args:
        source: Configured endpoint and credential
        client: Shared HTTP client; a short-lived one is created if omitted
        timeout: Explicit request timeout in seconds (None keeps the client default)
        demo_points: Hourly points to generate in demo mode
        cache_buster: Timestamp source for the ``_t`` parameter
    """
    if not source.is_configured:
        return FetchResult(
            payload=_demo_payload(demo_points),
            state=ConnectivityState.DEMO,
        )

    buster = cache_buster or _default_cache_buster
    url = build_request_url(source.endpoint.strip(), buster.next())
    headers = build_headers(source.credential)

    try:
        if client is not None:
            payload = await _request(client, url, headers, timeout)
        else:
            async with httpx.AsyncClient() as own_client:
                payload = await _request(own_client, url, headers, timeout)
    except InvalidResponseError as e:
        logger.warning("Data source returned an unusable response: %s", e)
        return _disconnected(str(e))
    except httpx.HTTPError as e:
        logger.error("Failed to fetch from data source: %s", e)
        return _disconnected(f"request failed: {e.__class__.__name__}: {e}")
    except Exception as e:
        logger.exception("Unexpected error fetching from data source")
        return _disconnected(f"request failed: {e.__class__.__name__}: {e}")

    return FetchResult(payload=payload, state=ConnectivityState.CONNECTED)
