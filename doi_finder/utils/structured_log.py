"""Structured logging for a machine-parseable resolution audit trail."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from structlog.processors import JSONRenderer
from structlog.typing import Processor

JSONL_FILENAME = "session.jsonl"

_configured = False
_logger: structlog.BoundLogger | None = None


def configure_session_logging(log_dir: str) -> Path:
    """One-time setup per process. Writes JSON lines to {log_dir}/session.jsonl."""
    global _configured, _logger
    log_path = Path(log_dir) / JSONL_FILENAME
    if _configured:
        return log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handle = open(log_path, "a", encoding="utf-8")

    def _file_logger_factory(*args: Any, **kwargs: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file_handle)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        JSONRenderer(),
    ]
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=_file_logger_factory,
        cache_logger_on_first_use=True,
    )
    _configured = True
    _logger = structlog.get_logger()
    return log_path


def bind_session(session_id: str) -> None:
    """Bind session context so every event carries session_id."""
    structlog.contextvars.bind_contextvars(session_id=session_id)


def log_submission(status: str, *, reason: str | None = None, query_chars: int | None = None) -> None:
    """Log an accepted or rejected submission (status: accepted|rejected)."""
    payload: dict[str, Any] = {"status": status}
    if reason is not None:
        payload["reason"] = reason
    if query_chars is not None:
        payload["query_chars"] = query_chars
    if _logger is not None:
        _logger.info("submission", **payload)


def log_resolution(
    status: str,
    *,
    latency_ms: int | None = None,
    doi: str | None = None,
    sources: int | None = None,
    history_id: str | None = None,
    error: str | None = None,
    error_type: str | None = None,
) -> None:
    """Log the settlement of one resolution (status: succeeded|failed)."""
    payload: dict[str, Any] = {"status": status}
    if latency_ms is not None:
        payload["latency_ms"] = latency_ms
    if status == "succeeded":
        payload["doi"] = doi
    if sources is not None:
        payload["sources"] = sources
    if history_id is not None:
        payload["history_id"] = history_id
    if error is not None:
        payload["error"] = error[:500]
    if error_type is not None:
        payload["error_type"] = error_type
    if _logger is not None:
        _logger.info("resolution", **payload)


def load_events_from_jsonl(path: str) -> list[dict[str, Any]]:
    """Read a session.jsonl file and return its events.

    Skips lines that fail to parse.
    """
    result: list[dict[str, Any]] = []
    try:
        with open(path, encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if isinstance(entry, dict):
                    result.append(entry)
    except OSError:
        pass
    return result
