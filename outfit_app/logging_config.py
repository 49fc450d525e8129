"""Structured logging helpers for the weather outfit service."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator

SERVICE_NAME = "weather-outfit"
CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}
_SECRET_FIELDS = frozenset({"api_key", "appid", "authorization", "openweather_api_key", "cwa_api_key"})
_SECRET_QUERY = re.compile(r"(Authorization|appid)=[^&\s]+", re.IGNORECASE)
REDACTED = "[redacted]"


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra`` fields are scrubbed and inlined."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", record.getMessage()),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        for key, value in redact_for_log(extras).items():
            payload.setdefault(key, value)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: int | str | None = None) -> None:
    """Route the root logger through ``JsonFormatter``.

    ``LOG_LEVEL`` picks the level when none is given; ``LOG_FORMAT=plain`` keeps
    human-readable lines for local runs.
    """

    desired_level = level or os.getenv("LOG_LEVEL", "INFO")
    handler = logging.StreamHandler()
    if os.getenv("LOG_FORMAT", "json").lower() == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())
    logging.root.handlers.clear()
    logging.basicConfig(level=desired_level, handlers=[handler])


def _mask_query_secrets(value: str) -> str:
    return _SECRET_QUERY.sub(lambda match: f"{match.group(1)}=***", value)


def redact_for_log(payload: Any) -> Any:
    """Recursively scrub API credentials before they reach a log sink.

    Credential fields are replaced wholesale; strings have ``appid=`` and
    ``Authorization=`` query values masked. Unknown objects are stringified.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _mask_query_secrets(payload)
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    if isinstance(payload, dict):
        return {
            key: REDACTED if str(key).lower() in _SECRET_FIELDS else redact_for_log(value)
            for key, value in payload.items()
        }
    return _mask_query_secrets(str(payload))


def get_logger(name: str) -> logging.Logger:
    """Module logger; configures the root logger on first use if nothing else has."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id`` if given, else reuse the current one or mint a new one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``event`` with structured, redacted fields and the active correlation id."""

    correlation_id = fields.pop("correlation_id", None) or CORRELATION_ID.get() or ensure_correlation_id()
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Scope a correlation id around one named operation and time it.

    Emits ``operation_completed`` or ``operation_failed`` at DEBUG with the
    elapsed milliseconds; exceptions are re-raised untouched.
    """

    logger = logging.getLogger(__name__)
    with correlation_context(attributes.pop("correlation_id", None)) as scoped_id:
        started = time.perf_counter()
        try:
            yield scoped_id
        except Exception as exc:
            log_event(
                logger,
                logging.DEBUG,
                "operation_failed",
                operation=name,
                correlation_id=scoped_id,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                error_type=exc.__class__.__name__,
                **attributes,
            )
            raise
        log_event(
            logger,
            logging.DEBUG,
            "operation_completed",
            operation=name,
            correlation_id=scoped_id,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            **attributes,
        )


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
