import logging
import sys
from typing import Any, Dict, Optional

from .config import DatadogConfig, LoggerConfig, get_default_config
from .formatter import DatadogJSONFormatter
from .handlers import DatadogHandler


def _add_console_handler(
    logger: logging.Logger, config: LoggerConfig, formatter: logging.Formatter
) -> None:
    """Add console handler if required"""
    if "console" in config.output_type:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)


def _add_datadog_handler(
    logger: logging.Logger, config: LoggerConfig, formatter: logging.Formatter
) -> None:
    """Add Datadog handler if required"""
    if "datadog" in config.output_type and config.datadog:
        datadog_handler = DatadogHandler.from_config(config.datadog, formatter=formatter)
        logger.addHandler(datadog_handler)
        # A non-bubbling handler keeps records away from ancestor loggers
        logger.propagate = datadog_handler.bubble


def get_logger(name: str, config: Optional[LoggerConfig] = None) -> logging.Logger:
    """Create a logger shipping JSON records to Datadog"""
    logger = logging.getLogger(name)

    if not logger.handlers:
        config = config or get_default_config()
        logger.setLevel(getattr(logging, config.log_level.upper()))

        formatter = DatadogJSONFormatter(config)

        _add_console_handler(logger, config, formatter)
        _add_datadog_handler(logger, config, formatter)

    return logger


def create_datadog_logger(
    name: str,
    api_key: str,
    attributes: Optional[Dict[str, str]] = None,
    log_level: str = "INFO",
    **handler_options: Any,
) -> logging.Logger:
    """
    Create a logger configured for the Datadog intake

    Any handler already attached to the logger is removed and closed.

    Args:
        name: Logger name, also the default service
        api_key: Datadog API key
        attributes: source/service/hostname overrides and extra tags
        log_level: Logging level
        **handler_options: Other DatadogConfig fields (compress, timeout, ...)

    Returns:
        Configured logger instance

    Example:
        logger = create_datadog_logger(
            "checkout",
            api_key=os.environ["DATADOG_LOG_API_KEY"],
            attributes={"env": "prod"},
        )
        logger.info("Order placed")
    """
    datadog_config = DatadogConfig(
        api_key=api_key, attributes=dict(attributes or {}), **handler_options
    )
    logger_config = LoggerConfig(
        log_level=log_level, output_type="datadog", datadog=datadog_config
    )

    logger = logging.getLogger(name)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    return get_logger(name, logger_config)


def log_with_context(
    logger: logging.Logger, level: str, message: str, **context: Any
) -> None:
    """Log with context fields, which the JSON formatter turns into attributes"""
    ctx_context = {f"ctx_{k}": v for k, v in context.items() if v is not None}
    getattr(logger, level.lower())(message, extra=ctx_context, stacklevel=2)
