"""
Logging handlers for the Datadog log intake
"""

from .datadog import DATADOG_LOG_HOST, DatadogHandler, default_hostname

__all__ = [
    "DATADOG_LOG_HOST",
    "DatadogHandler",
    "default_hostname",
]
