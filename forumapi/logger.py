"""Structured JSON logging for the forum service."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime

LOGGER_NAME = "forumapi"

_LEVEL_NAMES = {"WARNING": "warn", "CRITICAL": "fatal"}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": _LEVEL_NAMES.get(record.levelname, record.levelname.lower()),
            "ts": datetime.fromtimestamp(record.created).astimezone().isoformat(
                timespec="milliseconds"
            ),
            "caller": f"{record.filename}:{record.lineno}",
            "msg": record.getMessage(),
        }
        error = getattr(record, "error", None)
        if error is not None:
            entry["error"] = str(error)
        if record.exc_info:
            entry["stacktrace"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def get_logger() -> logging.Logger:
    """Return the service logger."""
    return logging.getLogger(LOGGER_NAME)


def run_logger(log_file="./logs.log", error_file="./error.log") -> logging.Logger:
    """Configure the service logger.

    Every record goes to stdout and ``log_file``; records at error level and
    above also go to stderr and ``error_file``.
    """
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    created: list[logging.Handler] = []
    try:
        created.append(logging.StreamHandler(sys.stdout))
        created.append(logging.FileHandler(log_file, encoding="utf-8"))
        error_handlers = [
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(error_file, encoding="utf-8"),
        ]
    except OSError as exc:
        for handler in created:
            handler.close()
        raise RuntimeError(f"Ошибка запуска логгера: {exc}") from exc

    formatter = _JsonFormatter()
    for handler in created:
        handler.setLevel(logging.INFO)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    for handler in error_handlers:
        handler.setLevel(logging.ERROR)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.info("Логгер запущен")
    return logger