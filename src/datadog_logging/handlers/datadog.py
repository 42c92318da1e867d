"""
Handler shipping log records to the Datadog HTTP log intake
"""

import gzip
import json
import logging
import os
import socket
from typing import Callable, Dict, Optional, Union
from urllib.parse import quote, urlencode

try:
    import requests

    HAS_REQUESTS = True
except ImportError:
    requests = None
    HAS_REQUESTS = False

from ..config import RESERVED_ATTRIBUTES, DatadogConfig, LoggerConfig
from ..exceptions import (
    ConfigurationError,
    DeliveryError,
    MalformedRecord,
    MissingCapability,
)
from ..formatter import DatadogJSONFormatter

DATADOG_LOG_HOST = "https://http-intake.logs.datadoghq.com"
INTAKE_PATH = "/v1/input/"


def default_hostname() -> str:
    """Server name from the environment, else the machine hostname"""
    server_name = os.environ.get("SERVER_NAME")
    if server_name:
        return server_name
    try:
        return socket.gethostname()
    except OSError:
        return ""


class DatadogHandler(logging.Handler):
    """
    Sends each log record to Datadog with one synchronous HTTP POST

    The API key travels as a URL path segment. ``source``, ``service`` and
    ``hostname`` attributes become the ``ddsource``, ``service`` and
    ``hostname`` query parameters; every other attribute is appended to the
    query string as a tag.

    Delivery failures raise DeliveryError from ``write``/``send``. When the
    handler is driven by the logging framework, ``emit`` routes them through
    ``handleError`` so ``logging.raiseExceptions`` decides what is surfaced.
    Nothing is retried or buffered.
    """

    def __init__(
        self,
        api_key: str,
        attributes: Optional[Dict[str, str]] = None,
        level: Union[int, str] = logging.DEBUG,
        bubble: bool = True,
        compress: bool = True,
        *,
        timeout: float = 5.0,
        compression_level: int = 9,
        default_source: str = "python",
        hostname_provider: Optional[Callable[[], str]] = None,
        formatter: Optional[logging.Formatter] = None,
    ):
        if not HAS_REQUESTS:
            raise MissingCapability(
                "requests is required for the Datadog handler. "
                "Install with: pip install datadog-logging"
            )

        if not api_key:
            raise ConfigurationError("Datadog API key is required")

        super().__init__(level)
        self.api_key = api_key
        self._attributes: Dict[str, str] = dict(attributes or {})
        self.bubble = bubble
        self.compress = compress
        self.compression_level = compression_level
        self.timeout = timeout
        self.default_source = default_source
        self.hostname_provider = hostname_provider or default_hostname

        self.setFormatter(formatter or self.get_default_formatter())

    @classmethod
    def from_config(cls, config: DatadogConfig, **kwargs) -> "DatadogHandler":
        """Create a handler from a DatadogConfig"""
        return cls(
            config.api_key,
            attributes=config.attributes,
            level=config.level,
            bubble=config.bubble,
            compress=config.compress,
            timeout=config.timeout,
            compression_level=config.compression_level,
            default_source=config.default_source,
            **kwargs,
        )

    @property
    def attributes(self) -> Dict[str, str]:
        return self._snapshot_attributes()

    def set_attributes(self, attributes: Dict[str, str]) -> None:
        """Replace all attributes"""
        self.acquire()
        try:
            self._attributes = dict(attributes)
        finally:
            self.release()

    def get_default_formatter(self) -> logging.Formatter:
        # Explicit config so building a handler never reads the environment
        return DatadogJSONFormatter(LoggerConfig())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.write(record)
        except Exception:
            self.handleError(record)

    def write(self, record: logging.LogRecord) -> None:
        """Send a record, reusing its ``formatted`` payload when already set"""
        formatted = getattr(record, "formatted", None) or self.format(record)
        self.send(formatted)

    def send(self, body: str) -> None:
        """POST one formatted record to the intake"""
        url = self.build_url(body)
        headers = self._build_headers()
        data = self._encode_body(body)

        try:
            response = requests.post(
                url, data=data, headers=headers, timeout=self.timeout, verify=True
            )
        except requests.RequestException as e:
            # The transport error text carries the request path, key included
            raise DeliveryError(
                f"Failed to send log to Datadog: {type(e).__name__}: {self._redact(str(e))}",
                url=self._redact(url),
            ) from None

        if response.status_code >= 400:
            raise DeliveryError(
                f"Datadog intake error: HTTP {response.status_code}",
                status_code=response.status_code,
                url=self._redact(url),
            )

    def build_url(self, body: str) -> str:
        """Build the intake URL for a formatted record"""
        attributes = self._snapshot_attributes()

        source = attributes.get("source") or self.default_source
        hostname = attributes.get("hostname") or self.hostname_provider() or ""
        service = attributes.get("service") or self._service_from_body(body)

        # Reserved keys have their own query parameters
        for key in RESERVED_ATTRIBUTES:
            attributes.pop(key, None)

        query = urlencode(
            [("ddsource", source), ("service", service), ("hostname", hostname)]
        )
        if attributes:
            query += "&" + urlencode(attributes)

        return f"{DATADOG_LOG_HOST}{INTAKE_PATH}{quote(self.api_key, safe='')}?{query}"

    def _snapshot_attributes(self) -> Dict[str, str]:
        self.acquire()
        try:
            return dict(self._attributes)
        finally:
            self.release()

    def _service_from_body(self, body: str) -> str:
        """Use the record's channel as the service name"""
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise MalformedRecord(
                "Cannot derive service: record is not valid JSON"
            ) from e

        channel = payload.get("channel") if isinstance(payload, dict) else None
        if not channel:
            raise MalformedRecord(
                "Cannot derive service: record has no 'channel' field"
            )
        return str(channel)

    def _build_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.compress:
            headers["Content-Encoding"] = "gzip"
        return headers

    def _encode_body(self, body: str) -> bytes:
        data = body.encode("utf-8")
        if self.compress:
            return gzip.compress(data, compresslevel=self.compression_level)
        return data

    def _redact(self, text: str) -> str:
        text = text.replace(quote(self.api_key, safe=""), "***")
        return text.replace(self.api_key, "***")
