import gzip
import json
import logging
from unittest.mock import Mock, patch

from datadog_logging import (
    DatadogConfig,
    DatadogHandler,
    DatadogJSONFormatter,
    LoggerConfig,
    create_datadog_logger,
    get_logger,
    log_with_context,
    set_default_config,
)


def ok_response():
    response = Mock()
    response.status_code = 202
    return response


def test_get_logger():
    set_default_config(LoggerConfig())
    logger = get_logger("test_logger")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "test_logger"
    assert logger.level == logging.INFO


def test_get_logger_with_config():
    config = LoggerConfig(log_level="DEBUG")
    logger = get_logger("test_debug_logger", config)
    assert logger.level == logging.DEBUG


def test_get_logger_with_datadog():
    config = LoggerConfig(datadog=DatadogConfig(api_key="KEY123", bubble=False))

    logger = get_logger("test_datadog_logger_unique", config)

    handlers = [h for h in logger.handlers if isinstance(h, DatadogHandler)]
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, DatadogJSONFormatter)
    assert logger.propagate is False


def test_get_logger_console_only():
    config = LoggerConfig(
        output_type="console", datadog=DatadogConfig(api_key="KEY123")
    )

    logger = get_logger("test_console_logger_unique", config)

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert not isinstance(logger.handlers[0], DatadogHandler)


def test_get_logger_is_configured_once():
    config = LoggerConfig(
        output_type="console+datadog", datadog=DatadogConfig(api_key="KEY123")
    )

    logger = get_logger("test_once_logger_unique", config)
    again = get_logger("test_once_logger_unique", config)

    assert again is logger
    assert len(logger.handlers) == 2


@patch("requests.post")
def test_create_datadog_logger(mock_post):
    mock_post.return_value = ok_response()

    logger = create_datadog_logger(
        "test_create_logger_unique",
        api_key="KEY123",
        attributes={"env": "prod", "hostname": "web-01"},
        compress=False,
    )
    logger.info("Order placed")

    assert mock_post.call_count == 1
    args, kwargs = mock_post.call_args
    assert args[0] == (
        "https://http-intake.logs.datadoghq.com/v1/input/KEY123"
        "?ddsource=python&service=test_create_logger_unique&hostname=web-01&env=prod"
    )
    payload = json.loads(kwargs["data"])
    assert payload["message"] == "Order placed"


def test_create_datadog_logger_replaces_handlers():
    first = create_datadog_logger("test_replace_logger_unique", api_key="KEY1")
    second = create_datadog_logger("test_replace_logger_unique", api_key="KEY2")

    assert first is second
    assert len(second.handlers) == 1
    assert second.handlers[0].api_key == "KEY2"


@patch("requests.post")
def test_log_with_context(mock_post):
    mock_post.return_value = ok_response()
    logger = create_datadog_logger(
        "test_context_logger_unique", api_key="KEY123", attributes={"hostname": "h"}
    )

    log_with_context(logger, "warning", "Payment retried", order_id="A1", user_id=None)

    payload = json.loads(gzip.decompress(mock_post.call_args[1]["data"]))
    assert payload["message"] == "Payment retried"
    assert payload["level"] == "WARNING"
    assert payload["order_id"] == "A1"
    assert "user_id" not in payload
    assert payload["logger"]["function"] == "test_log_with_context"
    assert payload["logger"]["module"] == "test_logger"


def test_log_with_context_record(caplog):
    set_default_config(LoggerConfig(output_type="console"))
    logger = get_logger("test_context_record_unique")

    with caplog.at_level(logging.INFO, logger="test_context_record_unique"):
        log_with_context(logger, "info", "Test message", extra_field="extra_value")

    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.ctx_extra_field == "extra_value"
    set_default_config(LoggerConfig())


@patch("requests.post")
def test_log_with_context_cannot_change_service(mock_post):
    mock_post.return_value = ok_response()
    logger = create_datadog_logger(
        "test_service_logger_unique", api_key="KEY123", attributes={"hostname": "h"}
    )

    log_with_context(logger, "info", "m", channel="spoofed")

    args, kwargs = mock_post.call_args
    assert "service=test_service_logger_unique" in args[0]
    assert "spoofed" not in args[0]
    payload = json.loads(gzip.decompress(kwargs["data"]))
    assert payload["channel"] == "test_service_logger_unique"
    assert payload["context"] == {"channel": "spoofed"}
