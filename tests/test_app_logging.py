"""Tests for logging configuration."""

import logging

from catalog_cache.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("catalog_cache")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_configure_logging_debug_level() -> None:
    logger = logging.getLogger("catalog_cache")

    configure_logging(debug=True)
    assert logger.level == logging.DEBUG

    configure_logging()
    assert logger.level == logging.INFO
