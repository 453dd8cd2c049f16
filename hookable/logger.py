"""Logging setup for the hookable package.

Modules log through ``logging.getLogger(__name__)``; hosts that want to see
registry activity call :func:`setup_logging` once, which attaches handlers to
the ``hookable`` package logger and leaves the root logger alone.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import LoggingConfig

PACKAGE_LOGGER = "hookable"
DEFAULT_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

# Attributes every LogRecord has; anything else came in through ``extra=``.
_STANDARD_FIELDS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_FIELDS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=repr)


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name."""
    return logging.getLogger(name)


def setup_logging(config: LoggingConfig | Mapping[str, Any] | None = None) -> logging.Logger:
    """Configure handlers on the package logger.

    Calling it again replaces (and closes) the handlers installed by the
    previous call.

    Args:
        config: ``LoggingConfig`` or a mapping with ``level``, ``format``,
            ``file_path`` and ``json_format`` keys.

    Returns:
        The configured package logger.
    """
    if config is None:
        conf: dict[str, Any] = {}
    elif isinstance(config, Mapping):
        conf = dict(config)
    else:
        conf = config.model_dump()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(_parse_level(conf.get("level") or "INFO"))

    formatter: logging.Formatter
    if conf.get("json_format"):
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(conf.get("format") or DEFAULT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_path = conf.get("file_path")
    if file_path:
        handlers.append(logging.FileHandler(str(file_path), encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    return package_logger


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    parsed = logging.getLevelName(level.upper())
    return parsed if isinstance(parsed, int) else logging.INFO
