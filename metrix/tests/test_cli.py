"""Tests for CLI argument parsing and integration."""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from metrix.config.store import DataSourceConfig, read_data_source, write_data_source
from metrix.metrix import create_parser, main


class TestArgumentParser(unittest.TestCase):
    """Test CLI argument parsing."""

    def setUp(self):
        self.parser = create_parser()

    def test_default_no_args(self):
        args = self.parser.parse_args([])
        self.assertFalse(args.json)
        self.assertFalse(args.serve)
        self.assertFalse(args.watch)
        self.assertEqual(args.region, "WORLD")
        self.assertEqual(args.rows, 24)
        self.assertEqual(args.port, 8080)
        self.assertIsNone(args.set_endpoint)

    def test_geo_region(self):
        args = self.parser.parse_args(['--geo', '--region', 'TURKEY'])
        self.assertTrue(args.geo)
        self.assertEqual(args.region, "TURKEY")

    def test_invalid_region(self):
        with self.assertRaises(SystemExit):
            self.parser.parse_args(['--region', 'MARS'])

    def test_views_are_mutually_exclusive(self):
        with self.assertRaises(SystemExit):
            self.parser.parse_args(['--json', '--endpoints'])

    def test_set_endpoint_accepts_empty_string(self):
        args = self.parser.parse_args(['--set-endpoint', ''])
        self.assertEqual(args.set_endpoint, '')

    def test_verbose_short_flag(self):
        self.assertTrue(self.parser.parse_args(['-v']).verbose)


class CLITestBase(unittest.TestCase):
    """Runs main() against a config file in a temporary directory."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.json"

    def tearDown(self):
        self._tmp.cleanup()

    def run_cli(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            main(['--config', str(self.config_path), '--no-color', *argv])
        return out.getvalue()


class TestDataSourceCommands(CLITestBase):

    def test_set_endpoint_and_credential(self):
        output = self.run_cli('--set-endpoint', 'https://m.example/api', '--set-credential', 'tok-9876')
        self.assertIn("Data source saved: https://m.example/api", output)
        self.assertEqual(
            read_data_source(self.config_path, environ={}),
            DataSourceConfig("https://m.example/api", "tok-9876"),
        )

    def test_set_endpoint_keeps_existing_credential(self):
        write_data_source(DataSourceConfig("https://old.example", "tok"), self.config_path)
        self.run_cli('--set-endpoint', 'https://new.example')
        self.assertEqual(
            read_data_source(self.config_path, environ={}),
            DataSourceConfig("https://new.example", "tok"),
        )

    def test_clear_endpoint(self):
        write_data_source(DataSourceConfig("https://old.example"), self.config_path)
        output = self.run_cli('--set-endpoint', '')
        self.assertIn("Data source cleared", output)
        with open(self.config_path, encoding='utf-8') as f:
            self.assertEqual(json.load(f)["data_source"]["endpoint"], "")

    def test_show_config_masks_credential(self):
        write_data_source(DataSourceConfig("https://m.example/api", "secret-1234"), self.config_path)
        output = self.run_cli('--show-config')
        self.assertIn("Endpoint:     https://m.example/api", output)
        self.assertIn("*******1234", output)
        self.assertNotIn("secret-1234", output)

    def test_show_config_demo_mode(self):
        output = self.run_cli('--show-config')
        self.assertIn("not set - demo mode", output)


class TestReportCommands(CLITestBase):
    """Without a configured endpoint every view renders demo data."""

    def test_json_output(self):
        data = json.loads(self.run_cli('--json'))
        self.assertEqual(data["status"], "mock")
        self.assertTrue(data["is_mock"])
        self.assertFalse(data["is_connected"])
        self.assertEqual(len(data["data"]["metrics"]), 25)
        self.assertIn("geoData", data["data"])

    def test_default_overview(self):
        output = self.run_cli()
        self.assertIn("METRIX SYSTEM OVERVIEW", output)
        self.assertIn("[DEMO MODE]", output)

    def test_endpoints_view(self):
        self.assertIn("ENDPOINT PERFORMANCE", self.run_cli('--endpoints'))

    def test_geo_view(self):
        output = self.run_cli('--geo', '--region', 'TURKEY')
        self.assertIn("TURKEY VIEW", output)
        self.assertIn("Demo City", output)
        self.assertNotIn("Sample Town", output)

    def test_insights_without_key_prints_fallback(self):
        output = self.run_cli('--insights')
        self.assertIn("AI ANALYSIS REPORT", output)
        self.assertIn("Check your API key.", output)

    def test_insights_when_disconnected_exits(self):
        # Unroutable endpoint: connection fails, nothing to analyze
        write_data_source(DataSourceConfig("http://127.0.0.1:9/metrics"), self.config_path)
        with self.assertRaises(SystemExit) as ctx:
            self.run_cli('--insights')
        self.assertEqual(ctx.exception.code, 1)
