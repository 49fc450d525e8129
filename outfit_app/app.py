"""Application bootstrap wiring providers, decision engine and media resolver."""

from __future__ import annotations

import contextvars
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Dict, List

from logic.forecast_days import DailyForecast, group_daily
from logic.outfit_classifier import classify
from logic.outfit_rules import recommend
from logic.placeholders import placeholder_forecast, placeholder_weather
from models.cities import TAIWAN_CITIES
from models.media import Gender, MediaDescriptor, MediaLoadResult
from models.outfit import OutfitCategory, OutfitRecommendation
from models.weather import ForecastSeries, WeatherRecord
from outfit_app.config import AppConfig
from outfit_app.errors import WeatherServiceError
from outfit_app.logging_config import get_logger, log_event, operation_context
from tools.hazard_provider import HazardAggregator, HazardSnapshot
from tools.media_resolver import MediaResolver
from tools.observability import instrument_call
from tools.weather_provider import WeatherProvider, build_weather_provider


LOGGER = get_logger(__name__)


@dataclass
class OutfitAdvice:
    category: OutfitCategory
    recommendation: OutfitRecommendation
    media: MediaDescriptor

    def to_dict(self) -> Dict[str, object]:
        return {
            "category": self.category.value,
            "category_name": self.category.display_name,
            "recommendation": asdict(self.recommendation),
            "media": self.media.to_dict(),
        }


@dataclass
class CityWeatherView:
    """Everything the current-conditions screen needs for one city."""

    request_key: int
    city: str
    gender: Gender
    current: WeatherRecord
    forecast: ForecastSeries
    daily: List[DailyForecast]
    advice: OutfitAdvice
    current_is_placeholder: bool = False
    forecast_is_placeholder: bool = False
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "request_key": self.request_key,
            "city": self.city,
            "gender": self.gender.value,
            "current": {
                **asdict(self.current),
                "condition_code": self.current.condition_code.value,
                "icon": self.current.condition_code.icon,
            },
            "daily": [asdict(day) for day in self.daily],
            "outfit": self.advice.to_dict(),
            "current_is_placeholder": self.current_is_placeholder,
            "forecast_is_placeholder": self.forecast_is_placeholder,
            "errors": list(self.errors),
        }


class WeatherOutfitApp:
    """Wires together the weather provider, hazard aggregator and media resolver."""

    def __init__(
        self,
        config: AppConfig | None = None,
        weather_provider: WeatherProvider | None = None,
        hazard_aggregator: HazardAggregator | None = None,
        media_resolver: MediaResolver | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        self.weather_provider = weather_provider or build_weather_provider(self.config)
        self.hazard_aggregator = hazard_aggregator or HazardAggregator.from_config(self.config)
        self.media_resolver = media_resolver or MediaResolver.from_config(self.config)
        self._fetch_current = instrument_call("weather.fetch_current")(self.weather_provider.fetch_current)
        self._fetch_forecast = instrument_call("weather.fetch_forecast")(self.weather_provider.fetch_forecast)
        self._request_lock = threading.Lock()
        self._latest_request_key = 0

    def _next_request_key(self) -> int:
        with self._request_lock:
            self._latest_request_key += 1
            return self._latest_request_key

    def is_latest(self, view: CityWeatherView) -> bool:
        """True unless a newer ``load_city`` call has started since ``view`` was requested."""

        with self._request_lock:
            return view.request_key == self._latest_request_key

    def list_cities(self) -> List[str]:
        return list(TAIWAN_CITIES)

    def outfit_for(self, record: WeatherRecord, gender: object = Gender.MALE) -> OutfitAdvice:
        category = classify(record)
        return OutfitAdvice(
            category=category,
            recommendation=recommend(record),
            media=self.media_resolver.resolve(category, gender),
        )

    def load_city(self, city: str | None = None, gender: object = None) -> CityWeatherView:
        """Fetch current weather and forecast concurrently and derive the outfit.

        Each fetch degrades independently to placeholder data, so a forecast
        failure never hides current conditions and vice versa.
        """

        city = city or self.config.default_city
        parsed_gender = Gender.parse(gender or self.config.default_gender)
        request_key = self._next_request_key()

        with operation_context("app.load_city") as correlation_id:
            errors: List[str] = []
            with ThreadPoolExecutor(max_workers=2) as executor:
                current_future = executor.submit(contextvars.copy_context().run, self._fetch_current, city)
                forecast_future = executor.submit(contextvars.copy_context().run, self._fetch_forecast, city)

                current_is_placeholder = False
                try:
                    current = current_future.result()
                except WeatherServiceError as exc:
                    current = placeholder_weather(city)
                    current_is_placeholder = True
                    errors.append(f"無法連接到天氣服務: {exc}，顯示模擬數據")

                forecast_is_placeholder = False
                try:
                    forecast = forecast_future.result()
                except WeatherServiceError as exc:
                    forecast = placeholder_forecast(city)
                    forecast_is_placeholder = True
                    errors.append(f"無法取得天氣預報: {exc}，顯示模擬數據")

            view = CityWeatherView(
                request_key=request_key,
                city=city,
                gender=parsed_gender,
                current=current,
                forecast=forecast,
                daily=group_daily(forecast),
                advice=self.outfit_for(current, parsed_gender),
                current_is_placeholder=current_is_placeholder,
                forecast_is_placeholder=forecast_is_placeholder,
                errors=errors,
            )
            log_event(
                LOGGER,
                level=logging.WARNING if errors else logging.INFO,
                event="city_weather_loaded",
                correlation_id=correlation_id,
                city=city,
                provider=self.weather_provider.name,
                category=view.advice.category.value,
                degraded=bool(errors),
            )
            return view

    def load_hazards(self, city: str | None = None) -> HazardSnapshot:
        with operation_context("app.load_hazards") as correlation_id:
            snapshot = self.hazard_aggregator.fetch_all(city)
            log_event(
                LOGGER,
                level=logging.INFO,
                event="hazards_loaded",
                correlation_id=correlation_id,
                failed_slots=sorted(snapshot.failures),
            )
            return snapshot

    def preload_media(self, gender: object = None) -> Dict[OutfitCategory, MediaLoadResult]:
        return self.media_resolver.preload_all(Gender.parse(gender or self.config.default_gender))


__all__ = ["CityWeatherView", "OutfitAdvice", "WeatherOutfitApp"]
