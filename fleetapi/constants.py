# -*- coding: utf-8 -*-
import os
from pathlib import Path

DIR_NAME = ".fleetapi"


def get_system_dir() -> Path:
    """
    Get the system directory for the fleetapi configuration.

    Returns:
        Path: The system directory path.
    """
    import sys

    raw_dir = os.getenv("FLEET_SYSTEM_CONFIG_PATH")
    app_data = os.environ.get("ALLUSERSPROFILE", None)

    if not raw_dir:
        if sys.platform.startswith("win") and app_data:
            raw_dir = app_data
        elif sys.platform.startswith("darwin"):
            raw_dir = "/Library/Application Support"
        elif sys.platform.startswith("linux"):
            raw_dir = "/etc"
        else:
            raw_dir = "/"

    return Path(raw_dir, DIR_NAME)


def get_user_dir() -> Path:
    """
    Get the user directory for the fleetapi configuration.

    Returns:
        Path: The user directory path.
    """
    path = Path("~", DIR_NAME).expanduser()
    return path


USER_CONFIG_DIR = get_user_dir()
SYSTEM_CONFIG_DIR = get_system_dir()

CONFIG_FILE_NAME = "config.ini"
CONFIG_FILE_SYSTEM = SYSTEM_CONFIG_DIR / CONFIG_FILE_NAME if SYSTEM_CONFIG_DIR else None
CONFIG_FILE_USER = USER_CONFIG_DIR / CONFIG_FILE_NAME

CONFIG = (
    CONFIG_FILE_SYSTEM
    if CONFIG_FILE_SYSTEM and CONFIG_FILE_SYSTEM.exists()
    else CONFIG_FILE_USER
)

# Fleet API
ENROLL_PATH = "/api/fleet/agents/enroll"
ENROLLMENT_TOKEN_HEADER = "kbn-fleet-enrollment-token"

# Fetch the REQUEST_TIMEOUT from the environment variable, defaulting to 30 if not set
REQUEST_TIMEOUT = int(os.getenv("FLEET_REQUEST_TIMEOUT", 30))

# Exit codes
EXIT_CODE_OK = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_VALIDATION = 65
EXIT_CODE_ENCODING = 66
EXIT_CODE_TRANSPORT = 67
EXIT_CODE_REMOTE = 68
EXIT_CODE_DECODING = 69
EXIT_CODE_CONFIGURATION = 70

CLI_DOCUMENTATION_URL = "https://www.elastic.co/guide/en/fleet/current/index.html"
