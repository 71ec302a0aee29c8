#!/usr/bin/env python3
"""
MetriX

A CLI and web dashboard for traffic, error and latency metrics served by an
external HTTP endpoint.

Usage:
    python -m metrix [options]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from metrix.config.loader import (
    load_config, get_config_path, get_demo_points, get_poll_interval, get_request_timeout,
)
from metrix.config.store import (
    DataSourceConfig, mask_credential, read_data_source, write_data_source,
)
from metrix.models.aggregates import MapRegion
from metrix.models.entities import FetchResult


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI flags."""
    parser = argparse.ArgumentParser(
        prog='metrix',
        description='Traffic, error and latency dashboard for an external metrics source'
    )

    # Report views (mutually exclusive group)
    views = parser.add_mutually_exclusive_group()
    views.add_argument('--json', action='store_true',
                      help='Print the raw dashboard result as JSON')
    views.add_argument('--endpoints', action='store_true',
                      help='Endpoint performance ranked by calls')
    views.add_argument('--geo', action='store_true',
                      help='Active users by location')
    views.add_argument('--insights', action='store_true',
                      help='AI analysis of the current metrics')
    views.add_argument('--show-config', action='store_true',
                      help='Show the configured data source')

    parser.add_argument('--region', choices=[r.value for r in MapRegion],
                       default=MapRegion.WORLD.value,
                       help='Map region for --geo (default: WORLD)')
    parser.add_argument('--rows', type=int, default=24,
                       help='Traffic rows to show (default: 24)')

    # Data source settings
    settings = parser.add_argument_group('data source')
    settings.add_argument('--set-endpoint', metavar='URL',
                          help='Save the data source URL (empty string clears it)')
    settings.add_argument('--set-credential', metavar='TOKEN',
                          help='Save the bearer token sent to the data source')
    settings.add_argument('--config', metavar='FILE', type=Path,
                          help='Config file (default: ~/.metrix/config.json)')

    # Output options
    parser.add_argument('--no-color', action='store_true',
                       help='Disable colors')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Verbose output')

    # Web dashboard
    parser.add_argument('--serve', action='store_true',
                       help='Start web dashboard server')
    parser.add_argument('--port', type=int, default=8080,
                       help='Port for web dashboard (default: 8080)')
    parser.add_argument('--host', default='127.0.0.1',
                       help='Host for web dashboard (default: 127.0.0.1)')
    parser.add_argument('--no-browser', action='store_true',
                       help='Don\'t open browser on serve')

    # Real-time monitoring
    parser.add_argument('--watch', action='store_true',
                       help='Watch mode: refresh the dashboard continuously')
    parser.add_argument('--poll-interval', type=int, default=None,
                       help='Poll interval in seconds for watch mode (default: 60)')

    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def fetch_once(config: dict, config_path: Optional[Path] = None) -> FetchResult:
    """Run a single reconciliation cycle with the stored data source."""
    from metrix.sources.fetcher import fetch_dashboard_data

    return await fetch_dashboard_data(
        read_data_source(config_path),
        timeout=get_request_timeout(config),
        demo_points=get_demo_points(config),
    )


def main(argv=None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    config_path = args.config
    config = load_config(config_path)
    color_enabled = not args.no_color and config["display"].get("color_enabled", True)

    if args.set_endpoint is not None or args.set_credential is not None:
        _save_data_source(args, config_path)
        return

    if args.show_config:
        _print_data_source(config_path)
        return

    if args.serve:
        _run_serve(config, config_path, args)
        return

    if args.watch:
        interval = args.poll_interval or get_poll_interval(config)
        try:
            asyncio.run(_run_watch(config, config_path, interval, args, color_enabled))
        except KeyboardInterrupt:
            print("\nStopping watcher...")
        return

    result = asyncio.run(fetch_once(config, config_path))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))

    elif args.endpoints:
        from metrix.reports.dashboard import generate_endpoints
        print(generate_endpoints(result, color_enabled=color_enabled))

    elif args.geo:
        from metrix.reports.dashboard import generate_geo
        print(generate_geo(result, MapRegion(args.region), color_enabled))

    elif args.insights:
        _print_insights(config, result, color_enabled)

    else:
        # Default: overview
        from metrix.reports.dashboard import generate_dashboard
        print(generate_dashboard(result, color_enabled, max_rows=args.rows))


def _save_data_source(args, config_path: Optional[Path]):
    """Overwrite the stored data source with the given flags."""
    current = read_data_source(config_path, environ={})
    endpoint = args.set_endpoint if args.set_endpoint is not None else current.endpoint
    credential = args.set_credential if args.set_credential is not None else current.credential

    source = DataSourceConfig(endpoint=(endpoint or "").strip() or None, credential=credential or None)
    write_data_source(source, config_path)

    if source.is_configured:
        print(f"Data source saved: {source.endpoint}")
        print("The dashboard will now try to fetch data from this address.")
    else:
        print("Data source cleared. The dashboard will show demo data.")


def _print_data_source(config_path: Optional[Path]):
    source = read_data_source(config_path)
    print(f"Config file:  {config_path or get_config_path()}")
    print(f"Endpoint:     {source.endpoint or '(not set - demo mode)'}")
    print(f"Credential:   {mask_credential(source.credential) or '(not set)'}")


def _print_insights(config: dict, result: FetchResult, color_enabled: bool):
    from metrix.insights.analyzer import summarize
    from metrix.insights.gemini import build_insight_provider
    from metrix.reports.insight import generate_insight

    if not result.payload.metrics:
        print("Error: No metrics to analyze.")
        sys.exit(1)

    settings = config.get("insights") or {}
    insight = asyncio.run(summarize(
        result.payload.metrics,
        result.payload.endpoints,
        build_insight_provider(config),
        recent_points=settings.get("recent_points", 10),
        top_endpoints=settings.get("top_endpoints", 5),
    ))
    print(generate_insight(insight, color_enabled))


async def _run_watch(config, config_path, interval, args, color_enabled):
    """Refresh and print the overview every interval seconds."""
    import httpx
    from metrix.reports.dashboard import generate_dashboard
    from metrix.sources.poller import DashboardPoller

    async def on_update(result: FetchResult):
        print(generate_dashboard(result, color_enabled, max_rows=args.rows))
        print()

    print(f"Watching data source (poll interval: {interval}s)")
    print("Press Ctrl+C to stop\n")

    async with httpx.AsyncClient() as client:
        poller = DashboardPoller(
            source_loader=lambda: read_data_source(config_path),
            client=client,
            poll_interval=interval,
            timeout=get_request_timeout(config),
            demo_points=get_demo_points(config),
            on_update=on_update,
        )
        await poller.run()


def _run_serve(config, config_path, args):
    """Start the web dashboard server."""
    try:
        import uvicorn
    except ImportError:
        print("Error: Web dashboard requires additional dependencies.")
        print("Install them with: python -m pip install fastapi uvicorn[standard] httpx pydantic")
        sys.exit(1)

    from metrix.server.app import create_app
    app = create_app(config=config, config_path=config_path)

    url = f"http://{args.host}:{args.port}"
    print(f"\nStarting MetriX Dashboard API at {url}")
    print("Press Ctrl+C to stop\n")

    if not args.no_browser:
        import webbrowser
        import threading
        threading.Timer(1.0, webbrowser.open, args=[f"{url}/docs"]).start()

    uvicorn.run(app, host=args.host, port=args.port,
                log_level="debug" if args.verbose else "info")


if __name__ == '__main__':
    main()
