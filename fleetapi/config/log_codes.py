"""
Log codes for configuration-related operations.
"""

CONFIG = "config"

# Fleet settings
SETTINGS = f"{CONFIG}.fleet"
SETTINGS_RESOLVED = f"{SETTINGS}.resolved"
SETTINGS_URL_MISSING = f"{SETTINGS}.url_missing"
SETTINGS_MISSING_SECTION = f"{SETTINGS}.missing_section"

# TLS Configuration
TLS = f"{CONFIG}.tls"
TLS_RESOLVED = f"{TLS}.resolved"
