"""
Certificate verification used when talking to Fleet.

Three trust stores are supported: the certifi bundle shipped with the
client (``default``), the operating system store (``system``) and a CA
file chosen by the operator (``bundle``).
"""

import configparser
import logging
import os
import ssl
from pathlib import Path
from typing import Dict, NamedTuple, Optional

import certifi

from fleetapi.constants import CONFIG
from .log_codes import TLS_RESOLVED

logger = logging.getLogger(__name__)

TLS_SECTION_NAME = "tls"
TLS_MODE_KEY = "mode"
TLS_CA_BUNDLE_KEY = "ca_bundle"

ENV_TLS_MODE = "FLEET_TLS_MODE"
ENV_CA_BUNDLE = "FLEET_CA_BUNDLE"

DEFAULT_TLS_MODE = "default"
BUNDLE_TLS_MODE = "bundle"
VALID_TLS_MODES = (DEFAULT_TLS_MODE, "system", BUNDLE_TLS_MODE)


class TLSConfig(NamedTuple):
    mode: str
    bundle_path: Optional[Path]
    verify_context: ssl.SSLContext

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            TLS_MODE_KEY: self.mode,
            TLS_CA_BUNDLE_KEY: str(self.bundle_path) if self.bundle_path else None,
        }


def _blank_as_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _read_section(config_path: Path) -> Dict[str, str]:
    config = configparser.ConfigParser()
    if not config.read([config_path]) or not config.has_section(TLS_SECTION_NAME):
        return {}
    return dict(config[TLS_SECTION_NAME])


def _check_bundle(raw: str) -> Path:
    path = Path(raw).expanduser().resolve()

    if not path.exists():
        raise ValueError(f"CA bundle path does not exist: {path}")
    if not path.is_file():
        raise ValueError(f"CA bundle path is not a file: {path}")

    return path


def _verify_context(mode: Optional[str], bundle: Optional[str]) -> TLSConfig:
    """
    Build the verification context for a mode, a bundle implies ``bundle``.

    Raises:
        ValueError: If the mode is unknown, the bundle is missing or a bundle
            is given with another mode.
    """
    mode = (mode or (BUNDLE_TLS_MODE if bundle else DEFAULT_TLS_MODE)).lower()

    if mode not in VALID_TLS_MODES:
        raise ValueError(
            f"Invalid TLS mode: {mode!r}. Valid options: {', '.join(VALID_TLS_MODES)}"
        )

    if mode != BUNDLE_TLS_MODE:
        if bundle:
            raise ValueError(f"A CA bundle requires TLS mode 'bundle', not {mode!r}.")

        cafile = certifi.where() if mode == DEFAULT_TLS_MODE else None
        return TLSConfig(mode, None, ssl.create_default_context(cafile=cafile))

    if not bundle:
        raise ValueError("TLS mode 'bundle' requires a CA bundle path.")

    path = _check_bundle(bundle)
    return TLSConfig(mode, path, ssl.create_default_context(cafile=str(path)))


def get_tls_config(
    mode: Optional[str] = None,
    ca_bundle: Optional[str] = None,
    config_path: Path = CONFIG,
) -> TLSConfig:
    """
    Resolve how the Fleet server certificate is verified.

    The first source giving a mode or a bundle wins, both values are taken
    from it: command-line options, then FLEET_TLS_MODE/FLEET_CA_BUNDLE,
    then the [tls] section of config.ini. Without any, certifi is used.

    Raises:
        ValueError: If the chosen source holds an invalid combination.
    """
    section = _read_section(config_path)
    candidates = (
        ("cli", mode, ca_bundle),
        ("environment", os.getenv(ENV_TLS_MODE), os.getenv(ENV_CA_BUNDLE)),
        ("config", section.get(TLS_MODE_KEY), section.get(TLS_CA_BUNDLE_KEY)),
    )

    source, raw_mode, raw_bundle = "default", None, None
    for name, candidate_mode, candidate_bundle in candidates:
        candidate_mode = _blank_as_none(candidate_mode)
        candidate_bundle = _blank_as_none(candidate_bundle)
        if candidate_mode or candidate_bundle:
            source, raw_mode, raw_bundle = name, candidate_mode, candidate_bundle
            break

    tls_config = _verify_context(raw_mode, raw_bundle)
    logger.info(
        TLS_RESOLVED,
        extra={"source": source, "config_path": str(config_path), **tls_config.as_dict()},
    )
    return tls_config
