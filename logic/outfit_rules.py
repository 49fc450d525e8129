"""Rule chain turning a weather record into textual outfit advice.

Rules run in a fixed order over an accumulator. Later rules may overwrite
``top``, ``pants``, ``shoes`` and ``notes`` but only ever append to
``accessories``, so the accessory list reflects rule-evaluation order and may
contain the same item twice (snow and cold weather both add 圍巾).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, List, Sequence, Tuple

from logic.conditions import is_rainy
from models.outfit import OutfitRecommendation
from models.weather import ConditionCode, WeatherRecord

WINDY_MIN_SPEED = 5.0
WIND_MARKER = "風"

TOP_BANDS: Sequence[Tuple[float, Tuple[str, str]]] = (
    (28, ("短袖T恤或背心", "天氣炎熱，建議穿著輕薄透氣")),
    (25, ("短袖T恤", "天氣溫暖，適合輕便穿著")),
    (20, ("長袖T恤或薄長袖", "天氣舒適，可搭配薄外套")),
    (15, ("長袖上衣 + 薄外套或風衣", "天氣涼爽，建議多層次穿搭")),
    (10, ("長袖上衣 + 厚外套或大衣", "天氣寒冷，注意保暖")),
)
TOP_FALLBACK = ("長袖上衣 + 厚外套或羽絨衣", "天氣非常寒冷，務必做好保暖")

PANTS_BANDS: Sequence[Tuple[float, str]] = (
    (25, "短褲或薄長褲"),
    (20, "薄長褲或牛仔褲"),
    (15, "長褲或牛仔褲"),
    (10, "厚長褲或保暖褲"),
)
PANTS_FALLBACK = "厚長褲或保暖褲（建議多層）"

SHOES_BANDS: Sequence[Tuple[float, str]] = (
    (25, "涼鞋或透氣運動鞋"),
    (20, "運動鞋或休閒鞋"),
    (15, "運動鞋或休閒鞋"),
    (10, "靴子或保暖鞋"),
)
SHOES_FALLBACK = "厚靴子或保暖鞋"

RAIN_SHOES = "雨鞋或防水靴子"
RAIN_ACCESSORIES = ("雨傘", "雨衣或防水外套")
RAIN_NOTES = "雨天建議，務必攜帶雨具"
SNOW_SHOES = "防滑雪靴或厚靴子"
SNOW_ACCESSORIES = ("手套", "圍巾")
SNOW_NOTES = "下雪天氣，注意防滑保暖"
WIND_ACCESSORY = "防風外套"
WIND_NOTE = " 風大，建議穿著防風衣物"
COLD_ACCESSORIES = ("圍巾", "手套")
VERY_COLD_ACCESSORIES = ("毛帽",)
SUNNY_ACCESSORIES = ("太陽眼鏡", "帽子")


@dataclass(frozen=True)
class RuleContext:
    record: WeatherRecord
    feels_like: float
    rainy: bool

    @classmethod
    def from_record(cls, record: WeatherRecord) -> "RuleContext":
        return cls(record=record, feels_like=record.feels_like, rainy=is_rainy(record))


Rule = Callable[[RuleContext, OutfitRecommendation], OutfitRecommendation]


def _band(value: float, bands: Sequence[Tuple[float, object]], fallback: object) -> object:
    for threshold, choice in bands:
        if value >= threshold:
            return choice
    return fallback


def _append(recommendation: OutfitRecommendation, *items: str) -> OutfitRecommendation:
    return replace(recommendation, accessories=[*recommendation.accessories, *items])


def top_rule(context: RuleContext, recommendation: OutfitRecommendation) -> OutfitRecommendation:
    top, notes = _band(context.feels_like, TOP_BANDS, TOP_FALLBACK)
    return replace(recommendation, top=top, notes=notes)


def pants_rule(context: RuleContext, recommendation: OutfitRecommendation) -> OutfitRecommendation:
    return replace(recommendation, pants=_band(context.feels_like, PANTS_BANDS, PANTS_FALLBACK))


def shoes_rule(context: RuleContext, recommendation: OutfitRecommendation) -> OutfitRecommendation:
    if context.rainy:
        updated = replace(recommendation, shoes=RAIN_SHOES, notes=RAIN_NOTES)
        return _append(updated, *RAIN_ACCESSORIES)
    if context.record.condition_code is ConditionCode.SNOW:
        updated = replace(recommendation, shoes=SNOW_SHOES, notes=SNOW_NOTES)
        return _append(updated, *SNOW_ACCESSORIES)
    return replace(recommendation, shoes=_band(context.feels_like, SHOES_BANDS, SHOES_FALLBACK))


def wind_rule(context: RuleContext, recommendation: OutfitRecommendation) -> OutfitRecommendation:
    if context.record.wind_speed <= WINDY_MIN_SPEED:
        return recommendation
    updated = _append(recommendation, WIND_ACCESSORY)
    if WIND_MARKER not in updated.notes:
        updated = replace(updated, notes=updated.notes + WIND_NOTE)
    return updated


def cold_rule(context: RuleContext, recommendation: OutfitRecommendation) -> OutfitRecommendation:
    if context.feels_like < 15:
        return _append(recommendation, *COLD_ACCESSORIES)
    return recommendation


def very_cold_rule(context: RuleContext, recommendation: OutfitRecommendation) -> OutfitRecommendation:
    if context.feels_like < 10:
        return _append(recommendation, *VERY_COLD_ACCESSORIES)
    return recommendation


def sunny_rule(context: RuleContext, recommendation: OutfitRecommendation) -> OutfitRecommendation:
    if context.record.condition_code is ConditionCode.CLEAR and context.feels_like >= 20:
        return _append(recommendation, *SUNNY_ACCESSORIES)
    return recommendation


RECOMMENDATION_RULES: List[Rule] = [
    top_rule,
    pants_rule,
    shoes_rule,
    wind_rule,
    cold_rule,
    very_cold_rule,
    sunny_rule,
]


def recommend(record: WeatherRecord, rules: Sequence[Rule] = RECOMMENDATION_RULES) -> OutfitRecommendation:
    """Apply the rule chain in order and return the finished recommendation."""

    context = RuleContext.from_record(record)
    recommendation = OutfitRecommendation()
    for rule in rules:
        recommendation = rule(context, recommendation)
    return recommendation


def default_recommendation() -> OutfitRecommendation:
    """Advice shown when no weather is available at all."""

    return OutfitRecommendation(
        top="長袖T恤",
        pants="牛仔褲",
        shoes="運動鞋",
        accessories=[],
        notes="建議根據實際體感調整",
    )


__all__ = [
    "RECOMMENDATION_RULES",
    "RuleContext",
    "cold_rule",
    "default_recommendation",
    "pants_rule",
    "recommend",
    "shoes_rule",
    "sunny_rule",
    "top_rule",
    "very_cold_rule",
    "wind_rule",
]
