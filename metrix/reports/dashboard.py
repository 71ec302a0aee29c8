"""
Dashboard reports for the CLI.

Text renditions of the overview, endpoint and geo views, built from a
FetchResult.
"""

from metrix.models.aggregates import (
    MapRegion, compute_totals, filter_geo, parse_endpoints, parse_geo,
    parse_metrics, top_endpoints, total_users,
)
from metrix.models.entities import ConnectivityState, FetchResult
from metrix.output.formatter import (
    Colors, bold, colorize, connectivity_badge, create_bar, dim, format_latency,
    format_number, format_status_code, format_table, print_header, print_section,
)


def _disconnected_notice(result: FetchResult, color_enabled: bool) -> str:
    lines = [
        colorize("The configured API could not be reached or returned invalid data.",
                 Colors.RED, color_enabled),
        "Check the integration settings (metrix --show-config).",
    ]
    if result.error:
        lines.append(dim(f"Reason: {result.error}", color_enabled))
    return '\n'.join(lines)


def generate_dashboard(
    result: FetchResult,
    color_enabled: bool = True,
    max_rows: int = 24,
) -> str:
    """
    Generate the overview: status, stat cards and the traffic table.

    A disconnected source shows only the failure notice; no data is rendered.
    """
    lines = [print_header("METRIX SYSTEM OVERVIEW")]
    lines.append(f"Status: {connectivity_badge(result.state, color_enabled)}")

    if result.state is ConnectivityState.DISCONNECTED:
        lines.append("")
        lines.append(_disconnected_notice(result, color_enabled))
        return '\n'.join(lines)

    if result.is_mock:
        lines.append(dim("Showing sample data. Configure a data source to see real traffic.",
                         color_enabled))
    else:
        lines.append(f"Last update: {result.fetched_at.strftime('%H:%M:%S')}")

    metrics = parse_metrics(result.payload.metrics)
    totals = compute_totals(metrics)

    lines.append(print_section("OVERVIEW", color_enabled))
    lines.append(f"Total Visitors:  {format_number(totals.total_visitors)}")
    lines.append(f"Avg Latency:     {format_latency(totals.avg_latency_ms)}")
    lines.append(f"Total Errors:    {colorize(format_number(totals.total_errors), Colors.RED, color_enabled)}")
    lines.append(f"Live Traffic:    {format_number(totals.live_visitors)}")

    lines.append(print_section("TRAFFIC", color_enabled))
    if not metrics:
        lines.append("No data")
    else:
        shown = metrics[-max_rows:] if max_rows > 0 else metrics
        peak = max(s.visitors for s in shown)
        rows = [
            [
                s.timestamp,
                format_number(s.visitors),
                format_number(s.page_views),
                format_number(s.errors),
                format_latency(s.latency_ms),
                create_bar(s.visitors, peak, width=16),
            ]
            for s in shown
        ]
        lines.append(format_table(
            ["Time", "Visitors", "Views", "Errors", "Latency", ""],
            rows,
            ['l', 'r', 'r', 'r', 'r', 'l'],
            color_enabled,
        ))

    return '\n'.join(lines)


def generate_endpoints(
    result: FetchResult,
    limit: int = 10,
    color_enabled: bool = True,
) -> str:
    """Endpoint performance ranked by call volume."""
    lines = [print_section("ENDPOINT PERFORMANCE", color_enabled)]
    if result.state is ConnectivityState.DISCONNECTED:
        lines.append(_disconnected_notice(result, color_enabled))
        return '\n'.join(lines)

    ranked = top_endpoints(parse_endpoints(result.payload.endpoints), limit)
    rows = [
        [e.path, format_number(e.calls), format_latency(e.avg_latency_ms),
         format_status_code(e.status_code, color_enabled)]
        for e in ranked
    ]
    lines.append(format_table(["Path", "Calls", "Avg Latency", "Status"], rows,
                              ['l', 'r', 'r', 'r'], color_enabled))
    return '\n'.join(lines)


def generate_geo(
    result: FetchResult,
    region: MapRegion = MapRegion.WORLD,
    color_enabled: bool = True,
) -> str:
    """Active users by location for a map region."""
    region = MapRegion(region)
    title = "WORLD VIEW" if region is MapRegion.WORLD else "TURKEY VIEW"
    lines = [print_section(f"GEOGRAPHY - {title}", color_enabled)]
    if result.state is ConnectivityState.DISCONNECTED:
        lines.append(_disconnected_notice(result, color_enabled))
        return '\n'.join(lines)

    samples = sorted(filter_geo(parse_geo(result.payload.geo), region),
                     key=lambda s: s.users, reverse=True)
    rows = [
        [s.city, s.country, f"{s.lat:.4f}", f"{s.lng:.4f}", format_number(s.users)]
        for s in samples
    ]
    lines.append(format_table(["City", "Country", "Lat", "Lng", "Users"], rows,
                              ['l', 'l', 'r', 'r', 'r'], color_enabled))
    lines.append("")
    lines.append(f"{bold('Active Users:', color_enabled)} {format_number(total_users(samples))}")
    return '\n'.join(lines)
