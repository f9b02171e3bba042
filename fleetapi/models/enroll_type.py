"""
Enrollment type and its wire encoding.

The wire form of an enrollment type is a JSON string token. Both
directions go through a single canonical table, the reverse mapping is
computed from it so every member round-trips.
"""

import json
from enum import Enum
from typing import Dict, Union

from fleetapi.errors import EnrollmentTypeDecodeError, EnrollmentTypeEncodeError


class EnrollmentType(Enum):
    """
    The type of enrollment to do with the agent.
    """

    # Default enrollment type, the agent is permanently enrolled.
    PERMANENT = "PERMANENT"


ENROLLMENT_TYPES: Dict[str, EnrollmentType] = {
    "PERMANENT": EnrollmentType.PERMANENT,
}

_TOKENS: Dict[EnrollmentType, str] = {
    member: token for token, member in ENROLLMENT_TYPES.items()
}


def parse_enrollment_type(token: str) -> EnrollmentType:
    """
    Map an unquoted wire token to its enrollment type.

    Raises:
        EnrollmentTypeDecodeError: If the token is empty or unknown.
    """
    if not token:
        raise EnrollmentTypeDecodeError()

    try:
        return ENROLLMENT_TYPES[token]
    except KeyError:
        raise EnrollmentTypeDecodeError(token=token, supported=ENROLLMENT_TYPES)


def format_enrollment_type(value: object) -> str:
    """
    Map an enrollment type to its unquoted wire token.

    Raises:
        EnrollmentTypeEncodeError: If the value is not in the canonical table.
    """
    try:
        return _TOKENS[value]  # type: ignore[index]
    except (KeyError, TypeError):
        raise EnrollmentTypeEncodeError(value)


def decode_enrollment_type(raw: Union[bytes, str]) -> EnrollmentType:
    """
    Decode a quoted JSON token, e.g. ``b'"PERMANENT"'``.

    Args:
        raw: The raw token as found in the payload, quotes included.

    Returns:
        EnrollmentType: The decoded type.

    Raises:
        EnrollmentTypeDecodeError: If the token is too short to be a quoted
            string, is not valid UTF-8 or is not a known enrollment type.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EnrollmentTypeDecodeError() from e

    if len(raw) <= 2 or not (raw.startswith('"') and raw.endswith('"')):
        raise EnrollmentTypeDecodeError()

    return parse_enrollment_type(raw[1:-1])


def encode_enrollment_type(value: object) -> bytes:
    """
    Encode an enrollment type as a quoted JSON token.

    Raises:
        EnrollmentTypeEncodeError: If the value is not a known enrollment type.
    """
    return json.dumps(format_enrollment_type(value)).encode("utf-8")
