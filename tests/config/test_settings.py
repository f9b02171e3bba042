import pytest

from fleetapi.config.settings import FleetSettings, get_fleet_settings
from fleetapi.errors import ConfigurationError


def _write_config(path, body):
    path.write_text(body)
    return path


@pytest.mark.unit
class TestGetFleetSettings:

    def test_cli_values_win(self, fleet_env, monkeypatch):
        monkeypatch.setenv("FLEET_URL", "https://env.example.com")
        monkeypatch.setenv("FLEET_ENROLLMENT_TOKEN", "env-token")
        _write_config(fleet_env, "[fleet]\nurl = https://ini.example.com\n")

        settings = get_fleet_settings(
            url="https://cli.example.com",
            enrollment_token="cli-token",
            timeout=5,
            config_path=fleet_env,
        )

        assert settings == FleetSettings("https://cli.example.com", "cli-token", 5.0)

    def test_environment_over_config(self, fleet_env, monkeypatch):
        monkeypatch.setenv("FLEET_URL", "https://env.example.com")
        monkeypatch.setenv("FLEET_REQUEST_TIMEOUT", "12")
        _write_config(
            fleet_env,
            "[fleet]\nurl = https://ini.example.com\nenrollment_token = ini-token\ntimeout = 3\n",
        )

        settings = get_fleet_settings(config_path=fleet_env)

        assert settings.url == "https://env.example.com"
        assert settings.enrollment_token == "ini-token"
        assert settings.timeout == 12.0

    def test_config_file(self, fleet_env):
        _write_config(
            fleet_env,
            "[fleet]\nurl = https://ini.example.com\nenrollment_token = ini-token\ntimeout = 3\n",
        )

        settings = get_fleet_settings(config_path=fleet_env)

        assert settings == FleetSettings("https://ini.example.com", "ini-token", 3.0)

    def test_defaults(self, fleet_env):
        settings = get_fleet_settings(url="https://cli.example.com", config_path=fleet_env)

        assert settings.enrollment_token == ""
        assert settings.timeout == 30.0

    def test_blank_values_are_skipped(self, fleet_env, monkeypatch):
        monkeypatch.setenv("FLEET_URL", "   ")
        _write_config(fleet_env, "[fleet]\nurl = https://ini.example.com\n")

        settings = get_fleet_settings(url="", config_path=fleet_env)

        assert settings.url == "https://ini.example.com"

    def test_missing_url(self, fleet_env):
        _write_config(fleet_env, "[tls]\nmode = system\n")

        with pytest.raises(ConfigurationError, match="'url'") as exc_info:
            get_fleet_settings(config_path=fleet_env)

        assert exc_info.value.get_exit_code() == 70

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_invalid_timeout(self, fleet_env, monkeypatch, raw):
        monkeypatch.setenv("FLEET_REQUEST_TIMEOUT", raw)

        with pytest.raises(ConfigurationError, match="timeout"):
            get_fleet_settings(url="https://cli.example.com", config_path=fleet_env)
