from __future__ import annotations

import io
import logging

import pytest
import structlog

from logging_config import DEBUG_ENV_VAR, configure_logging, level_for


def test_level_for_maps_verbosity(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)

    assert level_for(0) == logging.WARNING
    assert level_for(1) == logging.INFO
    assert level_for(2) == logging.DEBUG

    monkeypatch.setenv(DEBUG_ENV_VAR, "1")
    assert level_for(0) == logging.DEBUG


def test_logs_follow_current_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)
    configure_logging(0)
    logger = structlog.get_logger("refcheck.test")

    first = io.StringIO()
    monkeypatch.setattr("sys.stderr", first)
    logger.warning("first event")
    first.close()

    second = io.StringIO()
    monkeypatch.setattr("sys.stderr", second)
    logger.warning("second event", path="routes/web.php")
    logger.info("filtered out")

    output = second.getvalue()
    assert "second event" in output
    assert "path=routes/web.php" in output
    assert "filtered out" not in output
