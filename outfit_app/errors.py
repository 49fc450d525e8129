"""Error taxonomy shared by the weather, hazard and media layers."""

from __future__ import annotations


class WeatherServiceError(Exception):
    """Base class for failures raised by the weather outfit core."""


class ConfigurationError(WeatherServiceError):
    """A required credential or setting is absent or invalid."""


class TransportError(WeatherServiceError):
    """Non-success HTTP status or network failure talking to an upstream API."""

    def __init__(self, message: str, provider: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class ShapeError(WeatherServiceError):
    """Upstream payload does not match any recognised structure."""


class MediaLoadError(WeatherServiceError):
    """A media asset could not be verified as loadable."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


__all__ = [
    "WeatherServiceError",
    "ConfigurationError",
    "TransportError",
    "ShapeError",
    "MediaLoadError",
]
