"""Bucket a forecast series into calendar days for the weekly view."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import List
from zoneinfo import ZoneInfo

from models.weather import ForecastSeries

TAIPEI_TZ = ZoneInfo("Asia/Taipei")
WEEKDAY_LABELS = ("週一", "週二", "週三", "週四", "週五", "週六", "週日")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class DailyForecast:
    day: str
    date: str
    month: int
    day_of_month: int
    temperature: int
    feels_like: int
    description: str
    condition_code: str
    icon: str
    wind_speed: float
    timestamp: int


def group_daily(series: ForecastSeries, max_days: int = 7, tz: ZoneInfo = TAIPEI_TZ) -> List[DailyForecast]:
    """Keep the first entry of each local calendar day, up to ``max_days`` days."""

    days: List[DailyForecast] = []
    seen: set[str] = set()
    for entry in series:
        if len(days) >= max_days:
            break
        local = datetime.fromtimestamp(entry.timestamp, tz)
        day_key = local.date().isoformat()
        if day_key in seen:
            continue
        seen.add(day_key)
        record = entry.record
        days.append(
            DailyForecast(
                day=WEEKDAY_LABELS[local.weekday()],
                date=day_key,
                month=local.month,
                day_of_month=local.day,
                temperature=_round_half_up(record.temperature),
                feels_like=_round_half_up(record.feels_like),
                description=record.condition_description or "晴朗",
                condition_code=record.condition_code.value,
                icon=record.condition_code.icon,
                wind_speed=record.wind_speed,
                timestamp=entry.timestamp,
            )
        )
    return days


__all__ = ["DailyForecast", "TAIPEI_TZ", "group_daily"]
