"""
Structured logging for the run orchestrator.

Run status transitions are logged as ordinary records that also carry a
``run_event`` attribute. With JSON logging switched on, StructuredFormatter
lifts those run fields to the top level of each line, so a turn can be
followed by ``run_id`` or ``thread_id`` without parsing messages.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Fields of a run_event promoted to top-level JSON keys
RUN_FIELDS = ("event", "run_id", "thread_id", "status", "error_code")


class StructuredFormatter(logging.Formatter):
    """
    Formats each record as one JSON object.

    Every line has ``ts`` (UTC, ISO 8601), ``level``, ``logger`` and
    ``message``. Records from log_run_transition add the RUN_FIELDS keys
    and, when present, a ``details`` object.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        run_event = getattr(record, "run_event", None)
        if run_event:
            for field in RUN_FIELDS:
                entry[field] = run_event.get(field)
            if run_event.get("details"):
                entry["details"] = run_event["details"]

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    logger_name: str = "scheduling_agent",
) -> logging.Logger:
    """
    Switch the package loggers to JSON lines on stdout.

    Handlers already attached to ``logger_name`` are closed and replaced.
    Propagation to the root logger is turned off so each record is written
    once, in JSON only.

    Args:
        level: Level for the package logger
        log_file: Also append JSON lines to this file
        logger_name: Root of the logger tree to switch

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = StructuredFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def log_run_transition(
    event: str,
    run: Any,
    details: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a remote run status transition at INFO.

    Args:
        event: What happened to the run (e.g. "run_created", "requires_action")
        run: Run exposing run_id, thread_id, status and last_error
        details: Event-specific values such as the retry attempt
        logger: Logger to write to (default: the package logger)
    """
    logger = logger or logging.getLogger("scheduling_agent")

    status = getattr(run, "status", None)
    last_error = getattr(run, "last_error", None)
    run_event = {
        "event": event,
        "run_id": getattr(run, "run_id", None),
        "thread_id": getattr(run, "thread_id", None),
        "status": getattr(status, "value", status),
        "error_code": getattr(last_error, "code", None),
        "details": details or {},
    }

    logger.info(
        f"[thread={run_event['thread_id']}] [run={run_event['run_id']}] "
        f"Run {event} (status={run_event['status']})",
        extra={"run_event": run_event},
    )
