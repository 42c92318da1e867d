"""
Formatters for Datadog log payloads
"""

from .json_formatter import DatadogJSONFormatter

__all__ = [
    "DatadogJSONFormatter",
]
