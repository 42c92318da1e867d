import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Union

from .exceptions import ConfigurationError

OutputType = Literal["datadog", "console", "console+datadog"]

# Attributes that map onto dedicated intake query parameters
RESERVED_ATTRIBUTES = ("source", "service", "hostname")


def _parse_bool_env(key: str, default: str = "false") -> bool:
    """Parse boolean from environment variable"""
    return os.getenv(key, default).lower() == "true"


def _parse_tags(raw: str) -> Dict[str, str]:
    """Parse ``key=value,key2=value2`` into a dictionary"""
    tags: Dict[str, str] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if "=" not in pair:
            raise ConfigurationError(
                f"Invalid tag '{pair}', expected key=value"
            )
        key, value = pair.split("=", 1)
        tags[key.strip()] = value.strip()
    return tags


@dataclass
class DatadogConfig:
    """Configuration for the Datadog intake handler"""

    api_key: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)

    # Handler behaviour
    level: Union[int, str] = logging.DEBUG
    bubble: bool = True

    # Payload settings
    compress: bool = True
    compression_level: int = 9

    # Request settings
    timeout: float = 5.0

    # Used for ddsource when attributes carry no "source"
    default_source: str = "python"

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("Datadog API key is required")
        if not 0 <= self.compression_level <= 9:
            raise ConfigurationError(
                f"compression_level must be between 0 and 9, got {self.compression_level}"
            )
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @classmethod
    def _attributes_from_env(cls) -> Dict[str, str]:
        """Collect tags and reserved attributes from environment variables"""
        attributes = _parse_tags(os.getenv("DATADOG_LOG_TAGS", ""))
        for key in RESERVED_ATTRIBUTES:
            value = os.getenv(f"DATADOG_LOG_{key.upper()}")
            if value:
                attributes[key] = value
        return attributes

    @classmethod
    def from_env(cls) -> "DatadogConfig":
        """Create configuration from environment variables"""
        return cls(
            api_key=os.getenv("DATADOG_LOG_API_KEY", ""),
            attributes=cls._attributes_from_env(),
            level=os.getenv("DATADOG_LOG_LEVEL", "DEBUG").upper(),
            bubble=_parse_bool_env("DATADOG_LOG_BUBBLE", "true"),
            compress=_parse_bool_env("DATADOG_LOG_COMPRESS", "true"),
            timeout=float(os.getenv("DATADOG_LOG_TIMEOUT", "5.0")),
        )


@dataclass
class LoggerConfig:
    """Configuration for loggers created by get_logger"""

    log_level: str = "INFO"
    include_timestamp: bool = True
    output_type: OutputType = "datadog"
    datadog: Optional[DatadogConfig] = None

    @classmethod
    def _create_datadog_config_from_env(cls, output_type: str) -> Optional[DatadogConfig]:
        """Build the Datadog section only when it is requested and has a key"""
        if "datadog" not in output_type:
            return None
        if not os.getenv("DATADOG_LOG_API_KEY"):
            return None
        return DatadogConfig.from_env()

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """Create configuration from environment variables"""
        output_type = os.getenv("STRUCTURED_LOG_OUTPUT", "datadog").lower()
        if output_type not in ["datadog", "console", "console+datadog"]:
            output_type = "datadog"

        return cls(
            log_level=os.getenv("STRUCTURED_LOG_LEVEL", "INFO"),
            include_timestamp=_parse_bool_env("STRUCTURED_LOG_TIMESTAMP", "true"),
            output_type=output_type,
            datadog=cls._create_datadog_config_from_env(output_type),
        )


_default_config: Optional[LoggerConfig] = None


def get_default_config() -> LoggerConfig:
    """Get the default configuration instance"""
    global _default_config
    if _default_config is None:
        _default_config = LoggerConfig.from_env()
    return _default_config


def set_default_config(config: LoggerConfig) -> None:
    """Set the default configuration instance"""
    global _default_config
    _default_config = config
