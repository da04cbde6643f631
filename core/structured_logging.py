"""
Structured JSON logging for the analytics service.

Every log line is a single JSON object so it can be shipped to Loki,
CloudWatch or any other aggregator without a parsing stage.

Standard fields:
- timestamp: ISO8601 format with timezone (UTC)
- level: Log level (info, error, warning, debug)
- service: Service name (hyperapp-analytics)
- environment: Current environment (production, staging, local)
- trace_id: Request identifier propagated from the caller
- message: Log message
- context: Additional contextual data

Optional fields (when set for the current request):
- user_id: Owner of the reports being analysed
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from config import LoggingConfig

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="unknown")
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)


def get_trace_id() -> str:
    """Get the current trace ID from context."""
    return trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID in context."""
    trace_id_var.set(trace_id)


def get_user_id() -> Optional[str]:
    return user_id_var.get()


def set_user_id(user_id: Optional[str]) -> None:
    user_id_var.set(user_id)


def trace_id_from_traceparent(traceparent: Optional[str]) -> Optional[str]:
    """
    Extract the trace id from a W3C ``traceparent`` header.

    The header looks like ``00-<32 hex trace id>-<16 hex span id>-<flags>``.
    Returns None for anything that does not have that shape.
    """
    if not traceparent:
        return None
    parts = traceparent.strip().split("-")
    if len(parts) != 4 or len(parts[1]) != 32:
        return None
    return parts[1]


# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """Renders each record as one JSON object with the request context attached."""

    def __init__(self, service: str = "hyperapp-analytics", environment: str = "production"):
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "service": self.service,
            "environment": self.environment,
            "trace_id": get_trace_id(),
            "message": record.getMessage(),
        }

        user_id = get_user_id()
        if user_id is not None:
            entry["user_id"] = user_id
        if record.name != "root":
            entry["logger"] = record.name

        context = getattr(record, "context", None)
        if context:
            entry["context"] = _jsonable(context)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        if record.levelno >= logging.ERROR:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, default=str, ensure_ascii=False)


def _jsonable(value: Any) -> Any:
    """Reduce a context payload to plain JSON types; sets come out sorted."""
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, set):
        return [_jsonable(v) for v in sorted(value, key=str)]
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return str(value)


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter taking a ``context`` keyword, e.g.
    ``logger.info("Community analysis completed", context={"total_reports": 120})``.
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        context = kwargs.pop("context", None)
        extra = dict(kwargs.get("extra") or {})
        if context:
            extra["context"] = context
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    service: str = "hyperapp-analytics",
    environment: Optional[str] = None,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Route the root logger through JsonFormatter.

    Unset arguments fall back to LoggingConfig. Output goes to stdout, and
    additionally to a rotating file when a log file is configured. Calling
    this again replaces the previous handlers.
    """
    level_name = (log_level or LoggingConfig.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = JsonFormatter(
        service=service, environment=environment or LoggingConfig.ENVIRONMENT
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_file = log_file or LoggingConfig.LOG_FILE
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> ContextLogger:
    """Logger for ``name`` that accepts ``context=`` on every call."""
    return ContextLogger(logging.getLogger(name), {})
