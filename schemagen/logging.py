"""Logging setup for schemagen runs.

Components log through children of the ``schemagen`` logger. Records emitted
while one discovered type is processed carry its fully-qualified name in the
``fqn`` attribute; both sinks print it in front of the message, so output from
parallel workers stays attributable.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple

_LOGGER_NAME = "schemagen"
_CONSOLE_FORMAT = "[schemagen] %(levelname)s %(type_context)s%(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(type_context)s%(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger under the schemagen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class TypeLogger(logging.LoggerAdapter):
    """Logger adapter tagging every record with the type being processed."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("fqn", self.extra["fqn"])
        kwargs["extra"] = extra
        return msg, kwargs


def for_type(logger: logging.Logger, fqn: str) -> TypeLogger:
    return TypeLogger(logger, {"fqn": fqn})


class _TypeContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        fqn = getattr(record, "fqn", None)
        record.type_context = f"{fqn}: " if fqn else ""
        return True


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console and optional file handlers to the schemagen logger.

    The console shows INFO by default, DEBUG with ``verbose`` and only
    warnings with ``quiet``. The log file, when given, always records DEBUG.
    Calling this again replaces the handlers of the previous call.
    """
    console_level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    context = _TypeContextFilter()
    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.addFilter(context)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(context)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["TypeLogger", "configure_logging", "for_type", "get_logger"]
