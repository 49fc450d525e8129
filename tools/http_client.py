"""Single-attempt JSON GET shared by the weather and hazard adapters."""

from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from outfit_app.errors import ShapeError, TransportError
from outfit_app.logging_config import redact_for_log

LOGGER = logging.getLogger(__name__)
JSON_HEADERS = {"Accept": "application/json"}


def get_json(url: str, params: Dict[str, Any], timeout_seconds: float, provider: str) -> Any:
    """Issue one GET and decode JSON.

    Raises ``TransportError`` for network failures and non-success statuses and
    ``ShapeError`` when the body is not JSON.
    """

    LOGGER.debug("Requesting upstream", extra={"provider": provider, "url": url, "params": redact_for_log(params)})
    try:
        response = requests.get(url, params=params, headers=JSON_HEADERS, timeout=timeout_seconds)
        response.raise_for_status()
    except requests.HTTPError as exc:
        status_code = exc.response.status_code if exc.response is not None else None
        raise TransportError(
            f"{provider} responded with HTTP {status_code}", provider=provider, status_code=status_code
        ) from exc
    except requests.RequestException as exc:
        raise TransportError(f"{provider} unreachable: {exc.__class__.__name__}", provider=provider) from exc

    try:
        return response.json()
    except ValueError as exc:
        raise ShapeError(f"{provider} returned a non-JSON body") from exc


__all__ = ["JSON_HEADERS", "get_json"]
