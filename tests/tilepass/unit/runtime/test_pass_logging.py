from __future__ import annotations

import json
import logging
import sys

import pytest

from tilepass.api.logging import PassLoggingConfig
from tilepass.runtime.logging import (
    PACKAGE_LOGGER,
    JsonFormatter,
    configure_logging,
    setup_logging,
    shutdown_logging,
)


@pytest.fixture
def bare_root():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    root.handlers.clear()
    try:
        yield root
    finally:
        shutdown_logging()
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)
        root.handlers[:] = saved_handlers


def test_setup_logging_attaches_to_package_logger(bare_root, monkeypatch) -> None:
    monkeypatch.setenv("TILEPASS_LOG_LEVEL", "DEBUG")

    logger = setup_logging()

    assert logger is logging.getLogger(PACKAGE_LOGGER)
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert bare_root.handlers == []


def test_setup_logging_defers_to_application_handlers(bare_root) -> None:
    bare_root.addHandler(logging.NullHandler())

    assert setup_logging() is None
    assert logging.getLogger(PACKAGE_LOGGER).handlers == []


def test_shutdown_logging_detaches_installed_handlers(bare_root) -> None:
    logger = configure_logging(PassLoggingConfig(level_name="warning"))
    assert logger.level == logging.WARNING

    shutdown_logging()

    assert logger.handlers == []
    assert logger.propagate is True


def test_configure_logging_streams_clip_fields_to_json_file(bare_root, tmp_path) -> None:
    log_path = tmp_path / "logs" / "pass.jsonl"
    configure_logging(PassLoggingConfig(level_name="info", file_path=str(log_path)))

    logging.getLogger("tilepass.clip").info(
        "clip restored", extra={"clip_depth": 1, "restore_height": 0, "frame": 7}
    )
    shutdown_logging()

    payload = json.loads(log_path.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert payload["logger"] == "tilepass.clip"
    assert payload["msg"] == "clip restored"
    assert payload["clip"] == {"clip_depth": 1, "restore_height": 0}
    assert payload["fields"] == {"frame": 7}


def test_json_formatter_includes_exception_text() -> None:
    formatter = JsonFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("tilepass.test").makeRecord(
            "tilepass.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )
    payload = json.loads(formatter.format(record))
    assert payload["level"] == "ERROR"
    assert "RuntimeError: boom" in payload["exc_info"]
    assert "clip" not in payload
