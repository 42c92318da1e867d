"""
Datadog Logging

Structured JSON logging for the Python standard library, shipped to the
Datadog HTTP log intake.
"""

__version__ = "0.1.0"

from .config import (
    DatadogConfig,
    LoggerConfig,
    OutputType,
    get_default_config,
    set_default_config,
)
from .exceptions import (
    ConfigurationError,
    DatadogLoggingError,
    DeliveryError,
    MalformedRecord,
    MissingCapability,
)
from .formatter import DatadogJSONFormatter
from .handlers import DATADOG_LOG_HOST, DatadogHandler, default_hostname
from .logger import create_datadog_logger, get_logger, log_with_context

__all__ = [
    # Configuration
    "DatadogConfig",
    "LoggerConfig",
    "OutputType",
    "get_default_config",
    "set_default_config",
    # Errors
    "DatadogLoggingError",
    "MissingCapability",
    "ConfigurationError",
    "DeliveryError",
    "MalformedRecord",
    # Formatting
    "DatadogJSONFormatter",
    # Handler
    "DATADOG_LOG_HOST",
    "DatadogHandler",
    "default_hostname",
    # Logger setup
    "get_logger",
    "create_datadog_logger",
    "log_with_context",
]
