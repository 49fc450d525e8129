"""Evaluation scenarios covering the rain, temperature and wind patterns seen in Taiwan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from models.outfit import OutfitCategory
from models.weather import ConditionCode, WeatherRecord


@dataclass
class EvaluationScenario:
    name: str
    description: str
    record: WeatherRecord
    expected_category: OutfitCategory
    expectations: Dict[str, object] = field(default_factory=dict)


def _record(
    city: str,
    temperature: float,
    feels_like: float,
    code: ConditionCode,
    description: str,
    wind_speed: float = 1.0,
) -> WeatherRecord:
    return WeatherRecord(
        location=city,
        temperature=temperature,
        feels_like=feels_like,
        condition_code=code,
        condition_description=description,
        wind_speed=wind_speed,
    )


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="kaohsiung_summer",
        description="Hot, clear afternoon in the south.",
        record=_record("高雄市", 32.0, 34.0, ConditionCode.CLEAR, "晴", wind_speed=2.0),
        expected_category=OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE,
        expectations={
            "shoes": "涼鞋或透氣運動鞋",
            "accessory_prefix": ["太陽眼鏡", "帽子"],
        },
    ),
    EvaluationScenario(
        name="taipei_plum_rain",
        description="Warm plum-rain shower; boots rather than long trousers.",
        record=_record("台北市", 26.0, 24.0, ConditionCode.RAIN, "短暫陣雨"),
        expected_category=OutfitCategory.RAINY_SHORTS_LONG_SLEEVE_BOOTS,
        expectations={
            "shoes": "雨鞋或防水靴子",
            "accessory_prefix": ["雨傘", "雨衣或防水外套"],
        },
    ),
    EvaluationScenario(
        name="keelung_winter_drizzle",
        description="Cold, windy drizzle on the north coast.",
        record=_record("基隆市", 14.0, 12.0, ConditionCode.DRIZZLE, "陰短暫雨", wind_speed=7.5),
        expected_category=OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE,
        expectations={
            "shoes": "雨鞋或防水靴子",
            "accessory_prefix": ["雨傘", "雨衣或防水外套", "防風外套", "圍巾", "手套"],
            "notes_mention_wind": True,
        },
    ),
    EvaluationScenario(
        name="hualien_mild_clouds",
        description="Mild cloudy day on the east coast.",
        record=_record("花蓮縣", 22.0, 21.0, ConditionCode.CLOUDS, "多雲"),
        expected_category=OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE,
        expectations={"shoes": "運動鞋或休閒鞋", "accessory_prefix": []},
    ),
    EvaluationScenario(
        name="nantou_mountain_cold_front",
        description="Cold front reaching the central mountains.",
        record=_record("南投縣", 9.0, 6.0, ConditionCode.CLOUDS, "陰天", wind_speed=3.0),
        expected_category=OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE,
        expectations={
            "shoes": "厚靴子或保暖鞋",
            "accessory_prefix": ["圍巾", "手套", "毛帽"],
        },
    ),
    EvaluationScenario(
        name="hehuan_snow",
        description="Snowfall at altitude; snow gear comes before the cold-weather extras.",
        record=_record("南投縣", 1.0, -3.0, ConditionCode.SNOW, "降雪"),
        expected_category=OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE,
        expectations={
            "shoes": "防滑雪靴或厚靴子",
            "accessory_prefix": ["手套", "圍巾", "圍巾", "手套", "毛帽"],
        },
    ),
]


__all__ = ["EvaluationScenario", "SCENARIOS"]
