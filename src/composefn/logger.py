"""
Structured logging for the composition function.

Outputs one JSON object per line (or ``key=value`` text for consoles) on
stdout, where the runtime's log collector picks it up. Key/value context
is carried by ``FunctionLogger`` and rendered as top-level JSON fields.

Usage:
    from composefn.logger import FunctionLogger, configure_logging

    configure_logging()
    log = FunctionLogger().with_values(xr_kind="XApp", xr_name="web")
    log.info("Added deploy", name="web", container="nginx:1.25")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from composefn.config import FunctionConfig, get_config

ROOT_LOGGER = "composefn"
FUNCTION_LOGGER = "composefn.function"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def __init__(self, service_name: str = "composefn"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }
        fields = getattr(record, "fields", None)
        if fields:
            entry.update(fields)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Render a record as ``time level logger message key=value ...``."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "fields", None)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


def configure_logging(
    config: Optional[FunctionConfig] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install a handler on the ``composefn`` logger (stdout unless ``stream`` is given).

    Calling this again replaces the handler installed by the previous call.
    """
    config = config or get_config()
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(_LEVELS[config.log_level])

    for handler in list(root.handlers):
        if getattr(handler, "_composefn", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler._composefn = True  # type: ignore[attr-defined]
    if config.log_format == "json":
        handler.setFormatter(JSONFormatter(service_name=config.service_name))
    else:
        handler.setFormatter(TextFormatter())
    root.addHandler(handler)
    return root


class FunctionLogger:
    """
    Structured logger with key/value context.

    ``with_values`` returns a new logger; the original is unchanged.
    """

    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.values: Dict[str, Any] = dict(values or {})
        self._logger = logger or logging.getLogger(FUNCTION_LOGGER)

    def with_values(self, **values: Any) -> "FunctionLogger":
        merged = dict(self.values)
        merged.update(values)
        return FunctionLogger(merged, self._logger)

    def _emit(self, level: int, message: str, fields: Dict[str, Any]) -> None:
        merged = dict(self.values)
        merged.update(fields)
        self._logger.log(level, message, extra={"fields": merged})

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, fields)
