"""Structured JSON logging for the query processor.

Writes JSON-lines to disk so dropped records can be traced back to
their position after a run. Each log entry is a single JSON object on
one line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

_logger = logging.getLogger("json_query")


def configure_logging(
    log_dir: str | Path, level: int = logging.DEBUG
) -> None:
    """Set up processor logging to write JSON-lines to a file.

    Args:
        log_dir: Directory to write ``processor.log`` into.
        level: Logging level (default: DEBUG).
    """
    log_path = Path(log_dir) / "processor.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(str(log_path))
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    _logger.addHandler(handler)
    _logger.setLevel(level)


def _position(position: bytes | None) -> str | None:
    if position is None:
        return None
    return position.decode("utf-8", errors="replace")


def _log(event: dict[str, Any], level: int = logging.INFO) -> None:
    if _logger.isEnabledFor(level):
        _logger.log(level, json.dumps(event, default=str))


def log_configured(query_type: str, query: str) -> None:
    _log({"event": "configured", "query_type": query_type, "query": query})


def log_opened() -> None:
    _log({"event": "opened"})


def log_record_processed(
    position: bytes, query_type: str, result: Any
) -> None:
    _log(
        {
            "event": "record_processed",
            "position": _position(position),
            "query_type": query_type,
            "result": result,
        },
        level=logging.DEBUG,
    )


def log_record_dropped(position: bytes, error: Exception) -> None:
    _log(
        {
            "event": "record_dropped",
            "position": _position(position),
            "error_type": type(error).__name__,
            "reason": str(error),
        },
        level=logging.ERROR,
    )


def log_batch_complete(received: int, emitted: int) -> None:
    _log({
        "event": "batch_complete",
        "received": received,
        "emitted": emitted,
        "dropped": received - emitted,
    })


def log_teardown() -> None:
    _log({"event": "teardown"})
