"""Supported Taiwanese cities and the spellings the national provider expects."""

from typing import Dict, List

TAIWAN_CITIES: List[str] = [
    "台北市",
    "新北市",
    "桃園市",
    "台中市",
    "台南市",
    "高雄市",
    "基隆市",
    "新竹市",
    "嘉義市",
    "新竹縣",
    "苗栗縣",
    "彰化縣",
    "南投縣",
    "雲林縣",
    "嘉義縣",
    "屏東縣",
    "宜蘭縣",
    "花蓮縣",
    "台東縣",
    "澎湖縣",
    "金門縣",
    "連江縣",
    "竹北市",
]

# 竹北市 is reported under its county.
NATIONAL_CITY_NAMES: Dict[str, str] = {
    "台北市": "臺北市",
    "新北市": "新北市",
    "桃園市": "桃園市",
    "台中市": "臺中市",
    "台南市": "臺南市",
    "高雄市": "高雄市",
    "基隆市": "基隆市",
    "新竹市": "新竹市",
    "嘉義市": "嘉義市",
    "新竹縣": "新竹縣",
    "苗栗縣": "苗栗縣",
    "彰化縣": "彰化縣",
    "南投縣": "南投縣",
    "雲林縣": "雲林縣",
    "嘉義縣": "嘉義縣",
    "屏東縣": "屏東縣",
    "宜蘭縣": "宜蘭縣",
    "花蓮縣": "花蓮縣",
    "台東縣": "臺東縣",
    "澎湖縣": "澎湖縣",
    "金門縣": "金門縣",
    "連江縣": "連江縣",
    "竹北市": "新竹縣",
}


def national_city_name(city: str) -> str:
    """Translate a city identifier for the national provider, identity if unknown."""

    return NATIONAL_CITY_NAMES.get(city, city)


def is_supported_city(city: str) -> bool:
    return city in NATIONAL_CITY_NAMES
