import json
import logging
from typing import Any, Optional

import httpx

from fleetapi.errors import RemoteError

logger = logging.getLogger(__name__)


def _read_text(response: httpx.Response) -> str:
    try:
        response.read()
        return response.text
    except (httpx.StreamError, UnicodeDecodeError) as e:
        logger.debug("Unable to read error response body: %s", e)
        return ""


def _field(data: Any, key: str) -> Optional[str]:
    value = data.get(key) if isinstance(data, dict) else None
    return str(value) if value is not None else None


def extract_error(response: httpx.Response) -> RemoteError:
    """
    Turn a non-OK Fleet response into an error.

    Kibana answers failures with a body like
    ``{"statusCode": 401, "error": "Unauthorized", "message": "..."}``.
    Anything else falls back to the HTTP reason phrase and the raw body.

    Args:
        response: The HTTP response to extract the error from

    Returns:
        The error describing the remote failure
    """
    text = _read_text(response)

    try:
        data = json.loads(text)
    except ValueError:
        data = None

    if isinstance(data, dict):
        status_code = data.get("statusCode")
        if not isinstance(status_code, int):
            status_code = response.status_code

        error = RemoteError(
            status_code=status_code,
            error=_field(data, "error"),
            reason=_field(data, "message"),
        )
    else:
        error = RemoteError(
            status_code=response.status_code,
            error=response.reason_phrase or None,
            reason=text.strip() or None,
        )

    logger.warning("Fleet returned status %s: %s", response.status_code, error.reason)
    return error
