from .settings import FleetSettings, get_fleet_settings
from .tls import TLSConfig, get_tls_config

__all__ = [
    "FleetSettings",
    "get_fleet_settings",
    "TLSConfig",
    "get_tls_config",
]
