# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for releasekit.

Release runs happen mostly inside CI, where the log is the only record of
what was built, renamed, signed, and published. Every entry is therefore a
single JSON line with a timestamp, level, source module, and message, plus
whatever structured context the caller attached via `extra`.

How this works:
  - All loggers live under the "releasekit" namespace. Handlers are attached
    once, to that namespace root, by `configure_logging`.
  - `get_logger(__name__)` is what modules call at import time. It lazily
    configures the root with INFO defaults the first time it is used.
  - The CLI calls `configure_logging` again once it knows the requested
    level, which replaces the handlers instead of stacking new ones.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "releasekit.release.pipeline", "msg": "...", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "releasekit"

# LogRecord attributes that are plumbing, not caller context.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "relativeCreated",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "pathname",
        "filename",
        "module",
        "levelno",
        "levelname",
        "processName",
        "process",
        "threadName",
        "thread",
        "message",
        "msecs",
        "taskName",
    }
)

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts     - ISO 8601 UTC timestamp
      level  - log level name
      module - the logger name
      msg    - the formatted message string

    Anything passed through `extra=` is merged in as additional keys.
    Exceptions logged with `exc_info=True` land under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    (Re)attach the JSON handlers to the releasekit namespace root.

    Calling this more than once is fine: existing handlers are closed and
    replaced, so tests and the CLI can reconfigure freely.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        The configured namespace root logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level = _resolve_log_level(log_level)
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    root.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # Output is fully owned by the handlers above.
    root.propagate = False

    return root


def get_logger(name: str, log_level: Optional[str] = None) -> logging.Logger:
    """
    Return a logger inside the releasekit namespace.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: Optional per-logger level override.

    Returns:
        A logging.Logger whose records flow to the JSON handlers.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        configure_logging()

    logger = logging.getLogger(name)
    if log_level is not None:
        logger.setLevel(_resolve_log_level(log_level))
    return logger
