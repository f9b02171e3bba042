import configparser
import logging
import os
from pathlib import Path
from typing import NamedTuple, Optional

from fleetapi.constants import CONFIG, REQUEST_TIMEOUT
from fleetapi.errors import ConfigurationError
from .log_codes import SETTINGS_MISSING_SECTION, SETTINGS_RESOLVED, SETTINGS_URL_MISSING

logger = logging.getLogger(__name__)

FLEET_SECTION_NAME = "fleet"
URL_KEY = "url"
ENROLLMENT_TOKEN_KEY = "enrollment_token"
TIMEOUT_KEY = "timeout"

ENV_URL = "FLEET_URL"
ENV_ENROLLMENT_TOKEN = "FLEET_ENROLLMENT_TOKEN"
ENV_TIMEOUT = "FLEET_REQUEST_TIMEOUT"


class FleetSettings(NamedTuple):
    url: str
    enrollment_token: str
    timeout: float


def _read_section(config_path: Path) -> dict:
    config = configparser.ConfigParser()
    config_files = config.read([config_path])

    if not config_files or not config.has_section(FLEET_SECTION_NAME):
        if config_files:
            logger.debug(
                SETTINGS_MISSING_SECTION, extra={"config_path": str(config_path)}
            )
        return {}

    return dict(config[FLEET_SECTION_NAME])


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None and value.strip():
            return value.strip()
    return None


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None:
        return float(REQUEST_TIMEOUT)

    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(TIMEOUT_KEY, reason=f"{raw!r} is not a number")

    if timeout <= 0:
        raise ConfigurationError(TIMEOUT_KEY, reason="must be greater than zero")

    return timeout


def get_fleet_settings(
    url: Optional[str] = None,
    enrollment_token: Optional[str] = None,
    timeout: Optional[float] = None,
    config_path: Path = CONFIG,
) -> FleetSettings:
    """
    Resolve the settings used to reach Fleet.

    Each setting is resolved independently (first non-empty wins):
      1. Command-line options
      2. Environment variables (FLEET_URL, FLEET_ENROLLMENT_TOKEN, FLEET_REQUEST_TIMEOUT)
      3. config.ini [fleet] section
      4. Default (timeout only)

    The enrollment token may resolve to an empty string; rejecting it is
    left to the enrollment request validation.

    Raises:
        ConfigurationError: If no Fleet URL is found or the timeout is invalid.
    """
    section = _read_section(config_path)

    resolved_url = _first(url, os.getenv(ENV_URL), section.get(URL_KEY))
    if not resolved_url:
        logger.error(SETTINGS_URL_MISSING, extra={"config_path": str(config_path)})
        raise ConfigurationError(
            URL_KEY, reason=f"set --url, {ENV_URL} or '{URL_KEY}' in the [{FLEET_SECTION_NAME}] section"
        )

    resolved_token = _first(
        enrollment_token, os.getenv(ENV_ENROLLMENT_TOKEN), section.get(ENROLLMENT_TOKEN_KEY)
    ) or ""

    raw_timeout = str(timeout) if timeout is not None else None
    resolved_timeout = _parse_timeout(
        _first(raw_timeout, os.getenv(ENV_TIMEOUT), section.get(TIMEOUT_KEY))
    )

    logger.info(
        SETTINGS_RESOLVED,
        extra={"url": resolved_url, "timeout": resolved_timeout},
    )
    return FleetSettings(
        url=resolved_url,
        enrollment_token=resolved_token,
        timeout=resolved_timeout,
    )
