"""Logging configuration helpers for issuedraft."""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED_KEYS: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including structured ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_KEYS and not key.startswith("_"):
                data[key] = value

        return json.dumps(data, default=str, ensure_ascii=False)


def _resolve_log_level(level_name: str | None) -> int:
    if not level_name:
        return logging.WARNING
    numeric = logging.getLevelName(level_name.upper())
    if isinstance(numeric, int):
        return numeric
    return logging.WARNING


def configure_logging(level_name: str | None, json_enabled: bool = False) -> None:
    """Replace root handlers with a rich console handler or a JSON handler on stderr."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(_resolve_log_level(level_name))

    handler: logging.Handler
    if json_enabled:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    # httpx logs every request at INFO; only surface it when debugging.
    if root.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def log_resolution(
    logger: logging.Logger,
    kind: str,
    query: str | None,
    outcome: str,
    score: float | None = None,
    resolved_id: str | None = None,
) -> None:
    """Emit a structured resolution event (skipped | matched | miss | fallback)."""
    level = logging.WARNING if outcome == "miss" else logging.INFO
    logger.log(
        level,
        "resolve %s %r: %s",
        kind,
        query,
        outcome,
        extra={
            "event": "resolution",
            "kind": kind,
            "query": query,
            "outcome": outcome,
            "score": score,
            "resolved_id": resolved_id,
        },
    )
