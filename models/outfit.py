"""Outfit category and recommendation schemas."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class OutfitCategory(str, Enum):
    SUNNY_SHORTS_SHORT_SLEEVE = "sunny_shorts_short_sleeve"
    SUNNY_SHORTS_LONG_SLEEVE = "sunny_shorts_long_sleeve"
    RAINY_LONG_PANTS_LONG_SLEEVE = "rainy_long_pants_long_sleeve"
    RAINY_SHORTS_LONG_SLEEVE_BOOTS = "rainy_shorts_long_sleeve_boots"

    @property
    def display_name(self) -> str:
        return CATEGORY_DISPLAY_NAMES[self]


CATEGORY_DISPLAY_NAMES = {
    OutfitCategory.SUNNY_SHORTS_SHORT_SLEEVE: "晴天 短褲短袖",
    OutfitCategory.SUNNY_SHORTS_LONG_SLEEVE: "晴天 短褲長袖",
    OutfitCategory.RAINY_LONG_PANTS_LONG_SLEEVE: "雨天 長褲長袖",
    OutfitCategory.RAINY_SHORTS_LONG_SLEEVE_BOOTS: "雨天 短褲長袖 雨靴",
}


@dataclass
class OutfitRecommendation:
    """Textual outfit advice; accessories keep rule-evaluation order."""

    top: str = ""
    pants: str = ""
    shoes: str = ""
    accessories: List[str] = field(default_factory=list)
    notes: str = ""
