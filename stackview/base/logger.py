"""
Structured logging for Stackview.

Every record is a single JSON line. While an HTTP request is being served,
the request middleware binds a :class:`RequestContext` (request id, method
and path); records emitted during that request, including SDK failures
logged from worker threads, carry those fields so one console action can
be traced from the access line down to the failing AWS operation.
"""

from __future__ import annotations

import contextvars
import json
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(frozen=True)
class RequestContext:
    request_id: str
    method: str
    path: str


_current_request: contextvars.ContextVar[RequestContext | None] = contextvars.ContextVar(
    "stackview_request", default=None
)


def current_request() -> RequestContext | None:
    return _current_request.get()


@contextmanager
def bind_request(method: str, path: str, request_id: str | None = None) -> Iterator[RequestContext]:
    """Bind request fields to every record logged inside the block."""
    ctx = RequestContext(request_id or uuid.uuid4().hex[:12], method, path)
    token = _current_request.set(ctx)
    try:
        yield ctx
    finally:
        _current_request.reset(token)


class RequestContextFilter(logging.Filter):
    """Copy the bound request's fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = current_request()
        if ctx is not None:
            for key in ("request_id", "method", "path"):
                if getattr(record, key, None) is None:
                    setattr(record, key, getattr(ctx, key))
        return True


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    FIELDS = (
        "request_id", "method", "path", "status", "duration_ms", "service", "operation", "endpoint",
    )

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in self.FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = f"{type(record.exc_info[1]).__name__}: {record.exc_info[1]}"
        return json.dumps(entry, default=str)


class ConsoleLogger:
    """Wrapper around :mod:`logging` for HTTP requests and proxied SDK calls."""

    def __init__(self, name: str = "stackview") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.addFilter(RequestContextFilter())
            self.logger.setLevel(logging.INFO)

    def set_level(self, level: str | int) -> None:
        """Change the threshold, accepting a level name or number."""
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO
        self.logger.setLevel(level)

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        service: str | None = None,
        operation: str | None = None,
        endpoint: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Log one SDK-level event.

        Args:
            level: Logging level (e.g. logging.ERROR).
            message: Human-readable message.
            service: Registry id of the AWS service (e.g. 's3').
            operation: SDK operation name (e.g. 'create_bucket').
            endpoint: Emulation endpoint the call went to.
            exc_info: Whether to include exception info.
        """
        extra = {"service": service, "operation": operation, "endpoint": endpoint}
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def log_request(self, status: int, duration_ms: float) -> None:
        """Access line for the request bound by :func:`bind_request`."""
        ctx = current_request()
        target = f"{ctx.method} {ctx.path}" if ctx else "request"
        level = logging.ERROR if status >= 500 else logging.INFO
        self.logger.log(
            level,
            f"{target} -> {status}",
            extra={"status": status, "duration_ms": round(duration_ms, 1)},
        )

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


sv_logger = ConsoleLogger()
