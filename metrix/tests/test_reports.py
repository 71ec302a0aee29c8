"""Tests for the CLI report views."""

import unittest

from metrix.models.aggregates import MapRegion
from metrix.models.entities import (
    ConnectivityState, DashboardPayload, FetchResult, Insight,
)
from metrix.reports.dashboard import generate_dashboard, generate_endpoints, generate_geo
from metrix.reports.insight import generate_insight
from metrix.sources.demo import generate_demo_payload


def _connected_payload():
    return DashboardPayload(
        metrics=[
            {"timestamp": "10:00", "visitors": 1200, "pageViews": 3000, "errors": 2, "latency": 100},
            {"timestamp": "11:00", "visitors": 800, "pageViews": 2000, "errors": 1, "latency": 200},
        ],
        endpoints=[
            {"path": "/api/login", "calls": 120, "avgLatency": 200, "status": 200},
            {"path": "/api/cart", "calls": 450, "avgLatency": 80, "status": 200},
            {"path": "/api/pay", "calls": 30, "avgLatency": 1500, "status": 502},
        ],
        geo=[
            {"city": "Istanbul", "country": "Turkey", "lat": 41.0082, "lng": 28.9784, "users": 150},
            {"city": "Berlin", "country": "Germany", "lat": 52.52, "lng": 13.405, "users": 40},
        ],
    )


class ReportTestBase(unittest.TestCase):
    """Provides one result per connectivity state."""

    def setUp(self):
        self.connected = FetchResult(_connected_payload(), ConnectivityState.CONNECTED)
        self.demo = FetchResult(generate_demo_payload(24), ConnectivityState.DEMO)
        self.disconnected = FetchResult(
            DashboardPayload.empty(), ConnectivityState.DISCONNECTED, error="HTTP 500"
        )


class TestDashboardReport(ReportTestBase):

    def test_connected_overview(self):
        output = generate_dashboard(self.connected, color_enabled=False)
        self.assertIn("METRIX SYSTEM OVERVIEW", output)
        self.assertIn("[LIVE CONNECTION]", output)
        self.assertIn("Total Visitors:  2,000", output)
        self.assertIn("Avg Latency:     150ms", output)
        self.assertIn("Total Errors:    3", output)
        self.assertIn("Live Traffic:    800", output)
        self.assertIn("Last update:", output)

    def test_demo_overview_is_labelled(self):
        output = generate_dashboard(self.demo, color_enabled=False)
        self.assertIn("[DEMO MODE]", output)
        self.assertIn("sample data", output)

    def test_disconnected_shows_notice_and_no_data(self):
        output = generate_dashboard(self.disconnected, color_enabled=False)
        self.assertIn("[NO DATA CONNECTION]", output)
        self.assertIn("could not be reached", output)
        self.assertIn("HTTP 500", output)
        self.assertNotIn("Total Visitors", output)
        self.assertNotIn("TRAFFIC", output)

    def test_max_rows_limits_traffic_table(self):
        output = generate_dashboard(self.demo, color_enabled=False, max_rows=3)
        table_rows = [line for line in output.split('\n') if '│' in line]
        self.assertEqual(len(table_rows), 4)  # header + 3 rows

    def test_connected_with_no_metrics(self):
        result = FetchResult(DashboardPayload(), ConnectivityState.CONNECTED)
        output = generate_dashboard(result, color_enabled=False)
        self.assertIn("No data", output)


class TestEndpointsReport(ReportTestBase):

    def test_ranked_by_calls(self):
        output = generate_endpoints(self.connected, color_enabled=False)
        self.assertLess(output.index("/api/cart"), output.index("/api/login"))
        self.assertLess(output.index("/api/login"), output.index("/api/pay"))
        self.assertIn("1.50s", output)

    def test_limit(self):
        output = generate_endpoints(self.connected, limit=1, color_enabled=False)
        self.assertIn("/api/cart", output)
        self.assertNotIn("/api/login", output)

    def test_disconnected(self):
        output = generate_endpoints(self.disconnected, color_enabled=False)
        self.assertIn("could not be reached", output)


class TestGeoReport(ReportTestBase):

    def test_world_view(self):
        output = generate_geo(self.connected, MapRegion.WORLD, color_enabled=False)
        self.assertIn("GEOGRAPHY - WORLD VIEW", output)
        self.assertIn("Berlin", output)
        self.assertIn("Active Users: 190", output)

    def test_turkey_view(self):
        output = generate_geo(self.connected, MapRegion.TURKEY, color_enabled=False)
        self.assertIn("GEOGRAPHY - TURKEY VIEW", output)
        self.assertIn("Istanbul", output)
        self.assertNotIn("Berlin", output)
        self.assertIn("Active Users: 150", output)

    def test_disconnected(self):
        output = generate_geo(self.disconnected, color_enabled=False)
        self.assertNotIn("Active Users", output)


class TestInsightReport(unittest.TestCase):

    def test_sections(self):
        insight = Insight("All good.", ["Error burst at 03:00"], ["Add caching"])
        output = generate_insight(insight, color_enabled=False)
        self.assertIn("AI ANALYSIS REPORT", output)
        self.assertIn("All good.", output)
        self.assertIn("Detected Issues", output)
        self.assertIn("! Error burst at 03:00", output)
        self.assertIn("* Add caching", output)

    def test_empty_lists_omit_sections(self):
        output = generate_insight(Insight("Quiet day."), color_enabled=False)
        self.assertNotIn("Detected Issues", output)
        self.assertNotIn("Recommendations", output)
