"""Model package exports."""

from models.media import Gender, MediaDescriptor, MediaKind, MediaLoadResult, MediaLoadState, MediaSlot
from models.outfit import OutfitCategory, OutfitRecommendation
from models.weather import ConditionCode, ForecastEntry, ForecastSeries, WeatherRecord

__all__ = [
    "ConditionCode",
    "ForecastEntry",
    "ForecastSeries",
    "Gender",
    "MediaDescriptor",
    "MediaKind",
    "MediaLoadResult",
    "MediaLoadState",
    "MediaSlot",
    "OutfitCategory",
    "OutfitRecommendation",
    "WeatherRecord",
]
