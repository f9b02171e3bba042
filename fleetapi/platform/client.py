"""
Transport used to talk to the Fleet API.

``Sender`` is the capability the enroll command depends on: given a
method, a path, query parameters, headers and a body it returns a
response exposing ``status_code``, ``read()`` and ``close()``.
``FleetClient`` implements it on top of httpx.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import httpx

from fleetapi.constants import REQUEST_TIMEOUT
from fleetapi.errors import (
    NetworkConnectionError,
    RequestTimeoutError,
    SSLCertificateError,
    TransportError,
)
from fleetapi.logs_helpers import log_call
from fleetapi.meta import get_meta_http_headers

if TYPE_CHECKING:
    from fleetapi.config.tls import TLSConfig

logger = logging.getLogger(__name__)

HeaderValues = Union[str, List[str]]
Headers = Mapping[str, HeaderValues]


class Sender(ABC):
    """
    Capability to perform one HTTP exchange with Fleet.
    """

    @abstractmethod
    def send(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Headers] = None,
        body: Optional[bytes] = None,
    ) -> httpx.Response:
        """
        Send a request and return the response.

        Failures while receiving the body are transport failures as well.

        The caller owns the response and must close it.

        Raises:
            TransportError: If the request could not be delivered.
        """


class FleetClient(Sender):
    """
    Synchronous client for the Fleet API.

    Manages the httpx client creation internally, including TLS
    verification and default headers. No retries are attempted.
    """

    def __init__(
        self,
        base_url: str,
        tls_config: Optional["TLSConfig"] = None,
        timeout: Optional[float] = REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._tls_config = tls_config
        self._timeout = timeout
        self._http_client = self._create_http_client(transport)

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "kbn-xsrf": "true",
        }
        headers.update(get_meta_http_headers())

        return headers

    def _create_http_client(
        self, transport: Optional[httpx.BaseTransport] = None
    ) -> httpx.Client:
        verify = self._tls_config.verify_context if self._tls_config else True

        return httpx.Client(
            verify=verify,
            headers=self._get_headers(),
            timeout=httpx.Timeout(self._timeout),
            trust_env=False,
            transport=transport,
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _header_items(headers: Optional[Headers]) -> List[Tuple[str, str]]:
        items = []
        for name, values in (headers or {}).items():
            if isinstance(values, str):
                values = [values]
            items.extend((name, value) for value in values)
        return items

    @log_call(show_args=False)
    def send(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Headers] = None,
        body: Optional[bytes] = None,
    ) -> httpx.Response:
        request = self._http_client.build_request(
            method,
            self._url(path),
            params=params,
            headers=self._header_items(headers),
            content=body,
        )
        logger.debug("%s %s", request.method, request.url)

        with _transport_errors():
            response = self._http_client.send(request, stream=True)

        # a body cut short surfaces here as a TransportError, not in read()
        try:
            with _transport_errors():
                response.read()
        except TransportError:
            response.close()
            raise

        logger.debug("%s %s -> %s", request.method, request.url, response.status_code)
        return response

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "FleetClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _is_ca_certificate_error(exception: Exception) -> bool:
    """
    Check if the exception is a CA/certificate verification error.
    """
    error_message = str(exception).lower()
    ca_error_indicators = [
        "certificate_verify_failed",
        "unable to get local issuer certificate",
        "self signed certificate",
        "certificate has expired",
        "unable to get issuer cert",
    ]
    return any(indicator in error_message for indicator in ca_error_indicators)


@contextmanager
def _transport_errors() -> Iterator[None]:
    """
    Translate httpx transport failures into fleetapi transport errors.
    """
    try:
        yield
    except httpx.ConnectError as e:
        if _is_ca_certificate_error(e):
            raise SSLCertificateError() from e

        raise NetworkConnectionError() from e
    except httpx.TimeoutException as e:
        raise RequestTimeoutError() from e
    except httpx.TransportError as e:
        raise TransportError(f"Unable to reach Fleet: {e}") from e
