"""Logging for the ``tilepass`` logger tree.

Handlers are attached to the package logger rather than the root logger so
an embedding application keeps its own logging setup. File output goes
through a ``QueueListener`` so rendering never blocks on disk writes.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from tilepass.api.logging import PassLoggingConfig
from tilepass.diagnostics.json_codec import dumps_text
from tilepass.runtime.config import resolve_log_level_name

PACKAGE_LOGGER = "tilepass"

# Extras the clip stack and pass driver attach to their records.
CLIP_RECORD_FIELDS: tuple[str, ...] = ("pass_name", "clip_depth", "clip_height", "restore_height")

_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


@dataclass(slots=True)
class _InstalledLogging:
    handlers: list[logging.Handler] = field(default_factory=list)
    listener: QueueListener | None = None


_INSTALLED = _InstalledLogging()


class JsonFormatter(logging.Formatter):
    """One JSON object per record; clip extras are grouped under ``clip``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        clip = {key: extras.pop(key) for key in CLIP_RECORD_FIELDS if key in extras}
        if clip:
            payload["clip"] = clip
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return dumps_text(payload)


def configure_logging(config: PassLoggingConfig) -> logging.Logger:
    """Replace any handlers this module installed and return the package logger."""
    shutdown_logging()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level_from_name(config.level_name))

    sinks: list[logging.Handler] = [_handler(logging.StreamHandler(), config.console_format)]
    if config.file_path:
        path = Path(config.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        sinks.append(
            _handler(logging.FileHandler(path, mode="a", encoding="utf-8", delay=True), config.file_format)
        )

    if len(sinks) == 1:
        installed: logging.Handler = sinks[0]
    else:
        records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
        installed = QueueHandler(records)
        _INSTALLED.listener = QueueListener(records, *sinks, respect_handler_level=True)
        _INSTALLED.listener.start()

    logger.addHandler(installed)
    logger.propagate = False
    _INSTALLED.handlers = [installed, *sinks]
    return logger


def setup_logging() -> logging.Logger | None:
    """Install console logging unless the application already configured some."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logging.getLogger().handlers or logger.handlers:
        return None
    return configure_logging(PassLoggingConfig(level_name=resolve_log_level_name(default="INFO")))


def shutdown_logging() -> None:
    """Drain the file queue and detach the handlers installed here."""
    if _INSTALLED.listener is not None:
        _INSTALLED.listener.stop()
        _INSTALLED.listener = None

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _INSTALLED.handlers:
        logger.removeHandler(handler)
        handler.close()
    if _INSTALLED.handlers:
        logger.propagate = True
    _INSTALLED.handlers = []


def _level_from_name(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.INFO)


def _handler(handler: logging.Handler, kind: str) -> logging.Handler:
    if kind.strip().lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    return handler


__all__ = [
    "CLIP_RECORD_FIELDS",
    "PACKAGE_LOGGER",
    "JsonFormatter",
    "configure_logging",
    "setup_logging",
    "shutdown_logging",
]
