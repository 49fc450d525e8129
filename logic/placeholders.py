"""Locally generated stand-in weather for when an upstream fetch fails.

These are used by the application façade only; the providers themselves never
fabricate values.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import List

from logic.forecast_days import TAIPEI_TZ
from models.weather import ConditionCode, ForecastEntry, ForecastSeries, WeatherRecord

PLACEHOLDER_SLOTS = 40
SLOTS_PER_DAY = 8
PLACEHOLDER_CONDITIONS = (
    (ConditionCode.CLEAR, "晴朗"),
    (ConditionCode.CLOUDS, "多雲"),
    (ConditionCode.RAIN, "下雨"),
    (ConditionCode.WINDY, "風大"),
)


def placeholder_weather(city: str) -> WeatherRecord:
    """Fixed cool, windy observation."""

    return WeatherRecord(
        location=city,
        temperature=15,
        feels_like=8,
        condition_code=ConditionCode.WINDY,
        condition_description="風大",
        wind_speed=5.5,
    )


def placeholder_forecast(
    city: str,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> ForecastSeries:
    """Five days of 3-hourly slots starting at 09:00 local time today."""

    rng = rng or random.Random()
    now = now or datetime.now(TAIPEI_TZ)
    if now.tzinfo is None:
        now = now.replace(tzinfo=TAIPEI_TZ)
    midnight = now.astimezone(TAIPEI_TZ).replace(hour=0, minute=0, second=0, microsecond=0)

    entries: List[ForecastEntry] = []
    for index in range(PLACEHOLDER_SLOTS):
        slot_time = midnight + timedelta(days=index // SLOTS_PER_DAY, hours=9 + (index % SLOTS_PER_DAY) * 3)
        code, description = rng.choice(PLACEHOLDER_CONDITIONS)
        base_temp = 15 + rng.randrange(10) - 5
        entries.append(
            ForecastEntry(
                timestamp=int(slot_time.timestamp()),
                record=WeatherRecord(
                    location=city,
                    temperature=base_temp,
                    feels_like=base_temp - 3,
                    condition_code=code,
                    condition_description=description,
                    wind_speed=3 + rng.random() * 5,
                ),
            )
        )
    return ForecastSeries(location=city, entries=tuple(entries))


__all__ = ["placeholder_forecast", "placeholder_weather"]
