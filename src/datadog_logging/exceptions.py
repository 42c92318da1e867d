"""
Exceptions raised by the Datadog logging handler
"""

from typing import Optional


class DatadogLoggingError(Exception):
    """Base class for all datadog_logging errors"""

    pass


class MissingCapability(DatadogLoggingError, ImportError):
    """Raised when the HTTP transport library is not installed"""

    pass


class ConfigurationError(DatadogLoggingError, ValueError):
    """Raised when the handler configuration is invalid"""

    pass


class MalformedRecord(DatadogLoggingError, ValueError):
    """Raised when the service name cannot be derived from a formatted record"""

    pass


class DeliveryError(DatadogLoggingError):
    """
    Raised when a log record could not be delivered to the intake

    Wraps transport failures (DNS, connection, TLS, timeout) and
    HTTP error responses.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
