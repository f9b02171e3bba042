"""Unit tests for the `fleetapi enroll` CLI command."""

import json
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from fleetapi.cli import cli
from fleetapi.platform.client import FleetClient


ENV = {
    "FLEET_URL": None,
    "FLEET_ENROLLMENT_TOKEN": None,
    "FLEET_REQUEST_TIMEOUT": None,
    "FLEET_TLS_MODE": None,
    "FLEET_CA_BUNDLE": None,
}


def _client_factory(handler):
    def factory(url, tls_config=None, timeout=None):
        return FleetClient(
            url, tls_config=tls_config, timeout=timeout, transport=httpx.MockTransport(handler)
        )

    return factory


@pytest.mark.unit
class TestEnrollCommand(unittest.TestCase):

    @pytest.fixture(autouse=True)
    def _success_body(self, success_body):
        self.success_body = success_body

    def setUp(self):
        self.maxDiff = None
        self.runner = CliRunner()
        self.requests = []

    def _invoke(self, args, handler=None):
        def record(request):
            self.requests.append(request)
            if handler:
                return handler(request)
            return httpx.Response(200, json=self.success_body)

        with patch("fleetapi.cli.FleetClient", side_effect=_client_factory(record)), \
                patch("fleetapi.cli.CONFIG", Path("/nonexistent/config.ini")), \
                patch("fleetapi.cli.get_tls_config") as mock_tls:
            mock_tls.return_value = None
            return self.runner.invoke(cli, args, env=ENV)

    def test_successful_enrollment(self):
        result = self._invoke(
            [
                "enroll",
                "--url", "https://kibana.example.com:5601",
                "--enrollment-token", "tok123",
                "-m", "region=us-east",
                "--shared-id", "shared-1",
            ]
        )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Enrollment successful", result.output)
        self.assertIn("a4937110-e53e-11e9-934f-47a8e38a522c", result.output)
        self.assertIn("ACCESS_TOKEN", result.output)

        request = self.requests[0]
        self.assertEqual(request.headers["kbn-fleet-enrollment-token"], "tok123")
        body = json.loads(request.content)
        self.assertEqual(body["type"], "PERMANENT")
        self.assertEqual(body["sharedId"], "shared-1")
        self.assertEqual(body["metadata"]["userProvided"], {"region": "us-east"})
        self.assertIn("os", body["metadata"]["local"])

    def test_json_output(self):
        result = self._invoke(
            [
                "enroll",
                "--url", "https://kibana.example.com:5601",
                "--enrollment-token", "tok123",
                "--json",
            ]
        )

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.output)
        self.assertEqual(payload["item"]["id"], "a4937110-e53e-11e9-934f-47a8e38a522c")
        self.assertEqual(payload["item"]["type"], "PERMANENT")

    def test_missing_token_exits_with_validation_code(self):
        result = self._invoke(["enroll", "--url", "https://kibana.example.com:5601"])

        self.assertEqual(result.exit_code, 65, result.output)
        self.assertIn("missing enrollment token", result.output)
        self.assertEqual(self.requests, [])

    def test_missing_url_exits_with_configuration_code(self):
        result = self._invoke(["enroll", "--enrollment-token", "tok123"])

        self.assertEqual(result.exit_code, 70, result.output)
        self.assertIn("url", result.output)

    def test_remote_error_exit_code(self):
        def handler(request):
            return httpx.Response(
                401, json={"statusCode": 401, "error": "Unauthorized", "message": "bad token"}
            )

        result = self._invoke(
            [
                "enroll",
                "--url", "https://kibana.example.com:5601",
                "--enrollment-token", "tok123",
            ],
            handler=handler,
        )

        self.assertEqual(result.exit_code, 68, result.output)
        self.assertIn("bad token", result.output)

    def test_transport_error_exit_code(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused")

        result = self._invoke(
            [
                "enroll",
                "--url", "https://kibana.example.com:5601",
                "--enrollment-token", "tok123",
            ],
            handler=handler,
        )

        self.assertEqual(result.exit_code, 67, result.output)
        self.assertIn("Network connection error", result.output)

    def test_body_cut_short_exit_code(self):
        class BrokenStream(httpx.SyncByteStream):
            def __iter__(self):
                yield b'{"action"'
                raise httpx.ReadError("connection reset")

        result = self._invoke(
            [
                "enroll",
                "--url", "https://kibana.example.com:5601",
                "--enrollment-token", "tok123",
            ],
            handler=lambda request: httpx.Response(200, stream=BrokenStream()),
        )

        self.assertEqual(result.exit_code, 67, result.output)
        self.assertIn("connection reset", result.output)

    def test_invalid_response_exit_code(self):
        body = self.success_body
        body["item"]["access_token"] = ""

        result = self._invoke(
            [
                "enroll",
                "--url", "https://kibana.example.com:5601",
                "--enrollment-token", "tok123",
            ],
            handler=lambda request: httpx.Response(200, json=body),
        )

        self.assertEqual(result.exit_code, 65, result.output)
        self.assertIn("access token is missing", result.output)

    def test_bad_metadata(self):
        result = self._invoke(
            [
                "enroll",
                "--url", "https://kibana.example.com:5601",
                "--enrollment-token", "tok123",
                "-m", "no-separator",
            ]
        )

        self.assertEqual(result.exit_code, 2, result.output)
        self.assertIn("KEY=VALUE", result.output)
