"""Deterministic weather to outfit-category classification."""

from __future__ import annotations

from logic.conditions import is_rainy
from models.outfit import OutfitCategory
from models.weather import WeatherRecord

RAINY_BOOTS_MIN_C = 20
SUNNY_SHORT_SLEEVE_MIN_C = 25


def classify(record: WeatherRecord) -> OutfitCategory:
    """Return the outfit category for a record using only rain and feels-like temperature.

    Wind speed never affects the category; it only feeds the textual
    recommendation.
    """

    feels_like = record.feels_like
    if is_rainy(record):
        if feels_like >= RAINY_BOOTS_MIN_C:
            return OutfitCategory.RAINY_SHORTS_LONG_SLEEVE_BOOTS
        return OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE
    if feels_like >= SUNNY_SHORT_SLEEVE_MIN_C:
        return OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE
    return OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE


__all__ = ["classify", "RAINY_BOOTS_MIN_C", "SUNNY_SHORT_SLEEVE_MIN_C"]
