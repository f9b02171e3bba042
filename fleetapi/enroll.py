"""Enroll command: registers an agent with Fleet.

Validates the request, posts it to the enroll endpoint with the
enrollment token as a header, and validates what comes back.
"""

import logging
from typing import Callable

import httpx

from fleetapi.constants import ENROLL_PATH, ENROLLMENT_TOKEN_HEADER
from fleetapi.errors import DecodingError
from fleetapi.logs_helpers import log_call
from fleetapi.models.enroll import EnrollRequest, EnrollResponse
from fleetapi.platform.client import Sender
from fleetapi.platform.http_utils import extract_error

logger = logging.getLogger(__name__)

ErrorExtractor = Callable[[httpx.Response], Exception]


class EnrollCmd:
    """
    The command to be executed to enroll an agent into Fleet.

    Args:
        client: The transport used to reach Fleet.
        extract: Builds the error raised for a non-OK response.
    """

    def __init__(self, client: Sender, extract: ErrorExtractor = extract_error):
        self.client = client
        self.extract = extract

    @log_call(show_args=False)
    def execute(self, request: EnrollRequest) -> EnrollResponse:
        """
        Enroll the agent in Fleet.

        Args:
            request: The enrollment request.

        Returns:
            EnrollResponse: The validated response.

        Raises:
            ValidationError: If the request or the response is incomplete.
            EncodingError: If the request cannot be serialized.
            TransportError: If Fleet cannot be reached.
            DecodingError: If the response body cannot be decoded.
            Exception: Whatever the error extractor returns for a non-OK status.
        """
        error = request.validate()
        if error:
            raise error

        headers = {ENROLLMENT_TOKEN_HEADER: [request.enrollment_token]}
        body = request.to_json()

        response = self.client.send("POST", ENROLL_PATH, None, headers, body)
        try:
            if response.status_code != httpx.codes.OK:
                raise self.extract(response)

            try:
                enroll_response = EnrollResponse.from_json(response.read())
            except (DecodingError, httpx.StreamError) as e:
                raise DecodingError(reason=str(e)) from e

            error = enroll_response.validate()
            if error:
                raise error
        finally:
            response.close()

        logger.info(
            "Agent %s enrolled with policy %s",
            enroll_response.item.id,
            enroll_response.item.policy_id,
        )
        return enroll_response

