from typing import Iterable, List, Optional

from fleetapi.constants import (
    CLI_DOCUMENTATION_URL,
    EXIT_CODE_CONFIGURATION,
    EXIT_CODE_DECODING,
    EXIT_CODE_ENCODING,
    EXIT_CODE_FAILURE,
    EXIT_CODE_REMOTE,
    EXIT_CODE_TRANSPORT,
    EXIT_CODE_VALIDATION,
)


class FleetException(Exception):
    """
    Base exception for unexpected fleetapi failures.

    Args:
        message (str): The error message template.
        info (str): Additional information to include in the error message.
    """
    def __init__(self, message: str = "An unexpected error occurred while talking to Fleet: {info}",
                 info: str = ""):
        self.message = message.format(info=info)
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        """
        Get the exit code associated with this exception.

        Returns:
            int: The exit code.
        """
        return EXIT_CODE_FAILURE


class FleetError(Exception):
    """
    Generic fleetapi error.

    Args:
        message (str): The error message.
        error_code (Optional[int]): The error code.
    """
    def __init__(self, message: str = "An error occurred while enrolling the agent.",
                 error_code: Optional[int] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        """
        Get the exit code associated with this error.

        Returns:
            int: The exit code.
        """
        return EXIT_CODE_FAILURE


class ValidationError(FleetError):
    """
    Aggregate of every violation found while validating a request or a response.

    Args:
        violations (Iterable[str]): The violations, in the order they were checked.
    """
    def __init__(self, violations: Iterable[str]):
        self.violations: List[str] = list(violations)
        super().__init__(self._format(self.violations))

    @staticmethod
    def _format(violations: List[str]) -> str:
        noun = "error" if len(violations) == 1 else "errors"
        points = "\n".join(f"\t* {violation}" for violation in violations)
        return f"{len(violations)} {noun} occurred:\n{points}"

    def get_exit_code(self) -> int:
        return EXIT_CODE_VALIDATION


class EncodingError(FleetError):
    """
    Error raised when the enrollment request cannot be serialized.
    """
    def __init__(self, message: str = "fail to encode the enrollment request"):
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_ENCODING


class EnrollmentTypeEncodeError(EncodingError):
    """
    Error raised when an enrollment type is not part of the known set.

    Args:
        value: The offending in-memory value.
    """
    def __init__(self, value: object = None):
        self.value = value
        super().__init__("cannot serialize unknown type")


class DecodingError(FleetError):
    """
    Error raised when a response body does not decode into the expected shape.

    Args:
        message (str): The error message.
        reason (Optional[str]): Details about the underlying failure.
    """
    def __init__(self, message: str = "fail to decode enrollment response",
                 reason: Optional[str] = None):
        self.reason = reason
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_DECODING


class EnrollmentTypeDecodeError(DecodingError):
    """
    Error raised when a wire token is not a valid enrollment type.

    Args:
        token (Optional[str]): The unquoted token, None when the raw value was too short.
        supported (Iterable[str]): The supported tokens.
    """
    def __init__(self, token: Optional[str] = None, supported: Iterable[str] = ()):
        self.token = token
        if token is None:
            message = "invalid enroll type received"
        else:
            names = ", ".join(f"'{name}'" for name in supported)
            message = f"value of '{token}' is an invalid enrollment type, supported type is {names}"
        super().__init__(message)


class TransportError(FleetError):
    """
    Error raised when the request could not be delivered to Fleet.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "Unable to reach Fleet.\n"
                                      "Please check your network connection and the Fleet URL."):
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_TRANSPORT


class NetworkConnectionError(TransportError):
    """
    Error raised when there is a network connection issue.

    Args:
        message (str): The error message.
    """

    def __init__(self, message: str = "Network connection error: Unable to reach the Fleet server.\n"
                                      "Please check your internet connection and try again.\n"
                                      "If you're behind a proxy or firewall, ensure the agent is allowed to connect."):
        super().__init__(message)


class RequestTimeoutError(TransportError):
    """
    Error raised when a request times out.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "Request timed out: The Fleet server did not respond in time.\n"
                                      "Please try again. If the problem persists, check your network settings."):
        super().__init__(message)


class SSLCertificateError(TransportError):
    """
    Error raised when the Fleet server certificate cannot be verified.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "SSL certificate verification failed.\n"
                                      "Use --tls-mode system to trust the system certificate store, "
                                      "or --ca-bundle to point at your CA bundle."):
        super().__init__(message)


class RemoteError(FleetError):
    """
    Error reported by Fleet for a non-OK response.

    Args:
        status_code (int): The status code reported by the server.
        error (Optional[str]): The short error name, e.g. "Unauthorized".
        reason (Optional[str]): The error message sent by the server.
    """
    def __init__(self, status_code: int, error: Optional[str] = None,
                 reason: Optional[str] = None):
        self.status_code = status_code
        self.error = error
        self.reason = reason
        message = f"Status code: {status_code}, Kibana returned an error: {error or ''}, message: {reason or ''}"
        super().__init__(message, error_code=status_code)

    def get_exit_code(self) -> int:
        return EXIT_CODE_REMOTE


class ConfigurationError(FleetError):
    """
    Error raised when a required setting is missing or invalid.

    Args:
        setting (str): The name of the setting.
        reason (Optional[str]): Why the setting was rejected.
    """
    def __init__(self, setting: str, reason: Optional[str] = None):
        self.setting = setting
        message = f"Invalid configuration for '{setting}'"
        if reason:
            message += f": {reason}"
        message += f"\nFor help, visit: {CLI_DOCUMENTATION_URL}"
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_CONFIGURATION
