"""Tests for the logging bootstrap."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from typing import Iterator

import pytest

from core.logging import setup_logging


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_rotating_file(monkeypatch, tmp_path, restore_root_logger):
    monkeypatch.setenv("CONNECTOR_LOG_LEVEL", "debug")
    monkeypatch.setenv("CONNECTOR_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("CONNECTOR_LOG_FILE", "worker.log")
    monkeypatch.setenv("CONNECTOR_LOG_RETENTION", "3")

    setup_logging(force=True)

    root = restore_root_logger
    file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
    assert root.level == logging.DEBUG
    assert len(file_handlers) == 1
    assert file_handlers[0].backupCount == 3
    assert (tmp_path / "logs" / "worker.log").exists()

    logging.getLogger("infrastructure.aws.queue").info("message sent")
    file_handlers[0].flush()
    assert "message sent" in (tmp_path / "logs" / "worker.log").read_text(encoding="utf-8")


def test_setup_logging_quiets_vendor_loggers(monkeypatch, restore_root_logger):
    monkeypatch.delenv("CONNECTOR_LOG_DIR", raising=False)
    monkeypatch.setenv("CONNECTOR_LOG_LEVEL", "not-a-level")

    setup_logging(force=True)

    assert restore_root_logger.level == logging.INFO
    assert logging.getLogger("botocore").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
    assert not any(isinstance(h, TimedRotatingFileHandler) for h in restore_root_logger.handlers)
