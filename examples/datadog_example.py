"""
Example: Shipping structured logs to Datadog

Set DATADOG_LOG_API_KEY before running.
"""

import logging
import os

from datadog_logging import (
    DatadogHandler,
    DeliveryError,
    LoggerConfig,
    create_datadog_logger,
    get_logger,
    log_with_context,
)


def basic_example():
    """One-line setup with a convenience factory"""
    print("\n=== Basic Datadog Example ===")

    logger = create_datadog_logger(
        "checkout",
        api_key=os.environ["DATADOG_LOG_API_KEY"],
        attributes={"env": "dev", "team": "payments"},
    )

    logger.info("Application started")
    log_with_context(logger, "warning", "Payment retried", order_id="A-1001", attempt=2)

    print("✓ Logs sent to Datadog")


def env_config_example():
    """Configuration taken from STRUCTURED_LOG_* and DATADOG_LOG_* variables"""
    print("\n=== Environment Configuration Example ===")

    logger = get_logger("inventory", LoggerConfig.from_env())
    logger.info("Stock level checked")

    print("✓ Logger configured from environment")


def direct_handler_example():
    """Attach the handler yourself and call it without the logging framework"""
    print("\n=== Direct Handler Example ===")

    handler = DatadogHandler(
        os.environ["DATADOG_LOG_API_KEY"],
        attributes={"service": "billing", "source": "cron"},
        level=logging.WARNING,
        compress=False,
        timeout=2.0,
    )

    logger = logging.getLogger("billing.nightly")
    logger.addHandler(handler)
    logger.warning("Invoice run took longer than expected")

    # Switch tags at runtime
    handler.set_attributes({"service": "billing", "env": "dev"})

    # Delivery errors surface when write/send are called directly
    record = logging.LogRecord("billing.nightly", logging.ERROR, "", 0, "Run failed", (), None)
    try:
        handler.write(record)
    except DeliveryError as e:
        print(f"✗ Delivery failed: {e}")
    else:
        print("✓ Record delivered")


if __name__ == "__main__":
    basic_example()
    env_config_example()
    direct_handler_example()
