"""Tests for logging configuration."""

from __future__ import annotations

import io
import logging

from handbook_lint.utils.logging_config import ExtraFieldsFormatter, configure_logging, get_logger


def test_get_logger_nests_under_package() -> None:
    assert get_logger("handbook_lint.pipeline").name == "handbook_lint.pipeline"
    assert get_logger("server.main").name == "handbook_lint.server.main"


def test_formatter_renders_extra_fields() -> None:
    record = logging.makeLogRecord(
        {"name": "handbook_lint.x", "levelname": "INFO", "msg": "Linted document", "document_id": "a.md", "errors": 2}
    )
    formatted = ExtraFieldsFormatter("%(message)s").format(record)
    assert formatted == "Linted document [document_id='a.md' errors=2]"


def test_configure_logging_installs_one_handler() -> None:
    stream = io.StringIO()
    logger = configure_logging("INFO", stream=stream)
    before = len(logger.handlers)
    configure_logging("INFO")

    assert len(logger.handlers) == before
    assert logger.level == logging.INFO
