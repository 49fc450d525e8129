"""Condition-code inference from localized weather descriptions."""

from __future__ import annotations

from typing import Sequence, Tuple

from models.weather import ConditionCode, WeatherRecord

RAIN_MARKER = "雨"
RAINY_CODES = frozenset({ConditionCode.RAIN, ConditionCode.DRIZZLE, ConditionCode.THUNDERSTORM})

# Checked in order; the first matching marker wins.
DESCRIPTION_MARKERS: Sequence[Tuple[Tuple[str, ...], ConditionCode]] = (
    (("雨",), ConditionCode.RAIN),
    (("雪",), ConditionCode.SNOW),
    (("雲", "陰"), ConditionCode.CLOUDS),
    (("晴",), ConditionCode.CLEAR),
    (("霧",), ConditionCode.MIST),
)


def derive_condition_code(description: str | None) -> ConditionCode:
    """Map a Traditional Chinese description such as 多雲短暫雨 onto a condition code."""

    text = description or ""
    for markers, code in DESCRIPTION_MARKERS:
        if any(marker in text for marker in markers):
            return code
    return ConditionCode.CLEAR


def is_rainy(record: WeatherRecord) -> bool:
    """Rain is signalled by the condition code or by 雨 in the description."""

    return record.condition_code in RAINY_CODES or RAIN_MARKER in record.condition_description


__all__ = ["DESCRIPTION_MARKERS", "RAINY_CODES", "derive_condition_code", "is_rainy"]
