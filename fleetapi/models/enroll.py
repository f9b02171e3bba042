import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BeforeValidator, StrictBool, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from fleetapi.errors import (
    DecodingError,
    EncodingError,
    EnrollmentTypeDecodeError,
    ValidationError,
)
from .enroll_type import EnrollmentType, format_enrollment_type, parse_enrollment_type

logger = logging.getLogger(__name__)


def _none_as_empty(empty):
    def convert(value):
        return empty() if value is None else value

    return BeforeValidator(convert)


def _wire_enrollment_type(value: Any) -> Any:
    # only runs for a key present in the body, an absent key keeps None
    if value is None:
        raise EnrollmentTypeDecodeError()
    if isinstance(value, str):
        return parse_enrollment_type(value)
    return value


WireMapping = Annotated[Dict[str, Any], _none_as_empty(dict)]
WireList = Annotated[List[Any], _none_as_empty(list)]
WireEnrollmentType = Annotated[Optional[EnrollmentType], BeforeValidator(_wire_enrollment_type)]


@dataclass
class Metadata:
    """
    All the metadata sent by the agent.

    ``local`` holds attributes observed on the host, ``user_provided``
    holds attributes given by the operator.
    """

    local: Dict[str, Any] = field(default_factory=dict)
    user_provided: Dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return {"local": self.local, "userProvided": self.user_provided}


@dataclass
class EnrollRequest:
    """
    The data required to enroll the agent into Fleet.

    The enrollment token is never part of the body, it travels as a header.

    Example body::

        POST /api/fleet/agents/enroll
        {
          "type": "PERMANENT",
          "metadata": {
            "local": {"os": "macos"},
            "userProvided": {"region": "us-east"}
          }
        }
    """

    enrollment_token: str = field(default="", repr=False)
    type: Optional[EnrollmentType] = None
    shared_id: str = ""
    metadata: Metadata = field(default_factory=Metadata)

    def validate(self) -> Optional[ValidationError]:
        """
        Validate the request before sending it to the API.

        Returns:
            Optional[ValidationError]: Every violation found, or None.
        """
        violations = []

        if not self.enrollment_token:
            violations.append("missing enrollment token")

        if not self.type:
            violations.append("missing enrollment type")

        return ValidationError(violations) if violations else None

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": format_enrollment_type(self.type)}

        if self.shared_id:
            payload["sharedId"] = self.shared_id

        payload["metadata"] = self.metadata.to_wire()
        return payload

    def to_json(self) -> bytes:
        """
        Serialize the request body.

        Raises:
            EncodingError: If the type is unknown or the metadata cannot be
                represented as JSON.
        """
        payload = self.to_wire()

        try:
            return json.dumps(payload, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodingError(f"fail to encode the enrollment request: {e}") from e


@dataclass
class EnrollItemResponse:
    id: str = ""
    active: StrictBool = False
    policy_id: str = ""
    type: WireEnrollmentType = None
    enrolled_at: Optional[datetime] = None
    user_provided_metadata: WireMapping = field(default_factory=dict)
    local_metadata: WireMapping = field(default_factory=dict)
    actions: WireList = field(default_factory=list)
    access_token: str = field(default="", repr=False)


@dataclass
class EnrollResponse:
    """
    The data received after enrolling an agent into Fleet.

    Example::

        {
          "action": "created",
          "success": true,
          "item": {
            "id": "a4937110-e53e-11e9-934f-47a8e38a522c",
            "active": true,
            "policy_id": "default",
            "type": "PERMANENT",
            "enrolled_at": "2019-10-02T18:01:22.337Z",
            "user_provided_metadata": {},
            "local_metadata": {},
            "actions": [],
            "access_token": "ACCESS_TOKEN"
          }
        }
    """

    action: str = ""
    success: StrictBool = False
    item: EnrollItemResponse = field(default_factory=EnrollItemResponse)

    def validate(self) -> Optional[ValidationError]:
        """
        Validate the response sent by the server.

        Returns:
            Optional[ValidationError]: Every violation found, or None.
        """
        violations = []

        if not self.item.id:
            violations.append("missing ID")

        if not self.item.type:
            violations.append("missing enrollment type")

        if not self.item.access_token:
            violations.append("access token is missing")

        return ValidationError(violations) if violations else None

    def to_json(self, indent: Optional[int] = None) -> bytes:
        return _RESPONSE_ADAPTER.dump_json(self, indent=indent)

    @classmethod
    def from_json(cls, data: Union[bytes, str]) -> "EnrollResponse":
        """
        Decode a response body.

        Fields missing from the body keep their empty default; catching
        them is left to validate().

        Raises:
            DecodingError: If the body is not JSON or does not match the
                expected shape.
        """
        try:
            return _RESPONSE_ADAPTER.validate_json(data)
        except PydanticValidationError as e:
            logger.debug("Enrollment response rejected: %s", e)
            raise DecodingError(
                message="malformed response body",
                reason="; ".join(_describe(error) for error in e.errors()),
            ) from e


def _describe(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


_RESPONSE_ADAPTER = TypeAdapter(EnrollResponse)
