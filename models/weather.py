"""Canonical, provider-independent weather records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple


class ConditionCode(str, Enum):
    """Closed vocabulary describing sky and precipitation state."""

    CLEAR = "Clear"
    CLOUDS = "Clouds"
    RAIN = "Rain"
    DRIZZLE = "Drizzle"
    THUNDERSTORM = "Thunderstorm"
    SNOW = "Snow"
    WINDY = "Windy"
    MIST = "Mist"

    @classmethod
    def parse(cls, raw: object) -> "ConditionCode":
        """Map an upstream code onto the vocabulary; anything unknown is Clear."""

        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw))
        except ValueError:
            return cls.CLEAR

    @property
    def icon(self) -> str:
        return CONDITION_ICONS.get(self, "☀️")


CONDITION_ICONS = {
    ConditionCode.CLEAR: "☀️",
    ConditionCode.CLOUDS: "☁️",
    ConditionCode.RAIN: "🌧️",
    ConditionCode.DRIZZLE: "🌦️",
    ConditionCode.THUNDERSTORM: "⛈️",
    ConditionCode.SNOW: "❄️",
    ConditionCode.WINDY: "💨",
    ConditionCode.MIST: "🌫️",
}


@dataclass(frozen=True)
class WeatherRecord:
    """Unified weather observation every upstream format is converted into.

    ``feels_like`` falls back to ``temperature`` and ``wind_speed`` to 0 so the
    decision engine never has to deal with missing values.
    """

    location: str
    temperature: float
    feels_like: Optional[float] = None
    condition_code: ConditionCode = ConditionCode.CLEAR
    condition_description: str = ""
    wind_speed: float = 0.0

    def __post_init__(self) -> None:
        if not self.location:
            raise ValueError("location is required for a weather record")
        object.__setattr__(self, "temperature", float(self.temperature))
        feels_like = self.temperature if self.feels_like is None else float(self.feels_like)
        object.__setattr__(self, "feels_like", feels_like)
        object.__setattr__(self, "condition_code", ConditionCode.parse(self.condition_code))
        object.__setattr__(self, "condition_description", self.condition_description or "")
        wind_speed = float(self.wind_speed or 0.0)
        if wind_speed < 0:
            raise ValueError("wind_speed cannot be negative")
        object.__setattr__(self, "wind_speed", wind_speed)


@dataclass(frozen=True)
class ForecastEntry:
    """One time slot of a forecast; ``timestamp`` is epoch seconds."""

    timestamp: int
    record: WeatherRecord


@dataclass(frozen=True)
class ForecastSeries:
    """Time-ordered forecast entries for a single location."""

    location: str
    entries: Tuple[ForecastEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        entries = tuple(self.entries)
        for previous, current in zip(entries, entries[1:]):
            if current.timestamp < previous.timestamp:
                raise ValueError("forecast timestamps must be non-decreasing")
        object.__setattr__(self, "entries", entries)

    @classmethod
    def from_unordered(cls, location: str, entries: Iterable[ForecastEntry]) -> "ForecastSeries":
        """Build a series after a stable sort on timestamp."""

        return cls(location=location, entries=tuple(sorted(entries, key=lambda entry: entry.timestamp)))

    def __iter__(self) -> Iterator[ForecastEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def timestamps(self) -> list[int]:
        return [entry.timestamp for entry in self.entries]


__all__ = ["CONDITION_ICONS", "ConditionCode", "ForecastEntry", "ForecastSeries", "WeatherRecord"]
