from importlib.metadata import PackageNotFoundError, version
import logging
import platform
from typing import Dict, Optional


LOG = logging.getLogger(__name__)


def get_version() -> Optional[str]:
    """
    Get the version of the fleetapi package.

    Returns:
      Optional[str]: The fleetapi version if found, otherwise None.
    """
    try:
        return version("fleetapi")
    except PackageNotFoundError:
        LOG.exception("Unable to get fleetapi version.")
        return None


def get_architecture() -> str:
    """
    Get the normalized machine architecture.

    Returns:
      str: The architecture name, e.g. x86_64 or arm_64.
    """
    machine = platform.machine()
    if machine in ("x86_64", "AMD64"):
        return "x86_64"
    elif machine in ("arm64", "aarch64"):
        return "arm_64"
    elif machine == "i386":
        return "x86"

    return machine or "unknown"


def get_user_agent() -> str:
    """
    Get the user agent string for HTTP requests.

    Returns:
      str: The user agent string in the format: fleetapi/{version} ({os} {arch}; Python/{python_version})
    """
    client_version = get_version() or "unknown"
    os_name = platform.system()
    python_version = platform.python_version()

    return f"fleetapi/{client_version} ({os_name} {get_architecture()}; Python/{python_version})"


def get_meta_http_headers() -> Dict[str, str]:
    """
    Get the metadata headers for the client.

    Returns:
      Dict[str, str]: The metadata headers.
    """
    return {
        "Fleet-Client-Version": get_version() or "",
        "User-Agent": get_user_agent(),
    }


def collect_local_metadata() -> Dict[str, str]:
    """
    Describe the host the agent enrolls from.

    The result is sent as the ``local`` half of the enrollment metadata.
    """
    return {
        "host": platform.node(),
        "os": platform.system().lower(),
        "os_version": platform.release(),
        "arch": get_architecture(),
        "python": platform.python_version(),
        "client_version": get_version() or "unknown",
    }
