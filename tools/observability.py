"""Observability helpers for instrumenting upstream calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from outfit_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_args(args: tuple, kwargs: dict, max_items: int = 6) -> dict:
    preview: dict = {f"arg{idx}": value for idx, value in enumerate(args[:max_items])}
    for key, value in kwargs.items():
        if len(preview) >= max_items:
            preview["truncated"] = True
            break
        preview[key] = value
    return redact_for_log(preview)


def instrument_call(call_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a callable to emit structured started/completed/failed logs with duration."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "call_started",
                call=call_name,
                correlation_id=correlation_id,
                arguments=_preview_args(args, kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "call_failed",
                    call=call_name,
                    correlation_id=correlation_id,
                    duration_ms=duration_ms,
                    error_type=exc.__class__.__name__,
                    exc_info=True,
                )
                raise
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            log_event(
                LOGGER,
                logging.INFO,
                "call_completed",
                call=call_name,
                correlation_id=correlation_id,
                duration_ms=duration_ms,
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_call"]
