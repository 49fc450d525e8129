"""Weather provider abstractions normalising two upstream APIs into one record shape."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from logic.conditions import derive_condition_code
from logic.forecast_days import TAIPEI_TZ
from models.cities import national_city_name
from models.weather import ConditionCode, ForecastEntry, ForecastSeries, WeatherRecord
from outfit_app.config import AppConfig, DEFAULT_CWA_BASE_URL, DEFAULT_OPENWEATHER_BASE_URL
from outfit_app.errors import ConfigurationError, ShapeError
from tools.http_client import get_json


LOGGER = logging.getLogger(__name__)

REGION_SUFFIX = "TW"
CWA_CURRENT_DATASET = "F-C0032-001"
CWA_FORECAST_DATASET = "F-D0047-091"
CWA_FORECAST_SLOTS = 40
# The national provider has no apparent temperature; this offset approximates it.
CWA_FEELS_LIKE_OFFSET = 2.0
CWA_DEFAULT_DESCRIPTION = "多雲"


class _Condition(BaseModel):
    main: str = "Clear"
    description: str = ""


class _Wind(BaseModel):
    speed: Optional[float] = 0.0


class _Main(BaseModel):
    temp: float
    feels_like: Optional[float] = None


class _CurrentResponse(BaseModel):
    name: Optional[str] = None
    main: _Main
    weather: List[_Condition] = []
    wind: _Wind = _Wind()


class _ForecastEntry(BaseModel):
    dt: int
    main: _Main
    weather: List[_Condition] = []
    wind: _Wind = _Wind()


class _ForecastResponse(BaseModel):
    list: List[_ForecastEntry] = []


class _CwaParameter(BaseModel):
    parameterName: str


class _CwaPeriod(BaseModel):
    parameter: _CwaParameter


class _CwaPeriodElement(BaseModel):
    elementName: str
    time: List[_CwaPeriod] = []


class _CwaCurrentLocation(BaseModel):
    locationName: Optional[str] = None
    weatherElement: List[_CwaPeriodElement] = []


class _CwaCurrentRecords(BaseModel):
    location: List[_CwaCurrentLocation]


class _CwaCurrentResponse(BaseModel):
    success: str | bool
    records: _CwaCurrentRecords


class _CwaValue(BaseModel):
    value: str


class _CwaSlot(BaseModel):
    dataTime: Optional[str] = None
    startTime: Optional[str] = None
    elementValue: List[_CwaValue] = []


class _CwaSlotElement(BaseModel):
    elementName: str
    time: List[_CwaSlot] = []


class _CwaForecastLocation(BaseModel):
    locationName: Optional[str] = None
    weatherElement: List[_CwaSlotElement] = []


class _CwaLocationGroup(BaseModel):
    location: List[_CwaForecastLocation]


class _CwaForecastRecords(BaseModel):
    locations: List[_CwaLocationGroup]


class _CwaForecastResponse(BaseModel):
    success: str | bool
    records: _CwaForecastRecords


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    name = "weather"

    @abstractmethod
    def fetch_current(self, city: str) -> WeatherRecord:
        """Return current conditions for a city."""

    @abstractmethod
    def fetch_forecast(self, city: str) -> ForecastSeries:
        """Return a time-ordered forecast for a city."""


class OpenWeatherProvider(WeatherProvider):
    """Global provider; condition codes already use the canonical vocabulary."""

    name = "openweather"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_OPENWEATHER_BASE_URL,
        timeout_seconds: float = 5.0,
        units: str = "metric",
        lang: str = "zh_tw",
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.units = units
        self.lang = lang

    def _params(self, city: str) -> dict:
        if not city:
            raise ValueError("city is required for weather lookups")
        if not self.api_key:
            raise ConfigurationError("OpenWeatherMap API key is not configured")
        return {
            "q": f"{city},{REGION_SUFFIX}",
            "appid": self.api_key,
            "units": self.units,
            "lang": self.lang,
        }

    @staticmethod
    def _record(city: str, main: _Main, weather: Sequence[_Condition], wind: _Wind) -> WeatherRecord:
        condition = weather[0] if weather else _Condition()
        return WeatherRecord(
            location=city,
            temperature=main.temp,
            feels_like=main.feels_like,
            condition_code=ConditionCode.parse(condition.main),
            condition_description=condition.description,
            wind_speed=_wind_speed(wind.speed),
        )

    def fetch_current(self, city: str) -> WeatherRecord:
        params = self._params(city)
        LOGGER.info("Fetching current weather", extra={"provider": self.name, "city": city})
        payload = get_json(f"{self.base_url}/weather", params, self.timeout_seconds, self.name)
        try:
            parsed = _CurrentResponse.model_validate(payload)
        except ValidationError as exc:
            raise ShapeError("OpenWeatherMap current payload failed validation") from exc
        return self._record(city, parsed.main, parsed.weather, parsed.wind)

    def fetch_forecast(self, city: str) -> ForecastSeries:
        params = self._params(city)
        LOGGER.info("Fetching forecast", extra={"provider": self.name, "city": city})
        payload = get_json(f"{self.base_url}/forecast", params, self.timeout_seconds, self.name)
        try:
            parsed = _ForecastResponse.model_validate(payload)
        except ValidationError as exc:
            raise ShapeError("OpenWeatherMap forecast payload failed validation") from exc
        entries = [
            ForecastEntry(timestamp=item.dt, record=self._record(city, item.main, item.weather, item.wind))
            for item in parsed.list
        ]
        return ForecastSeries.from_unordered(city, entries)


def _wind_speed(value: Optional[float]) -> float:
    # Missing readings arrive as negative sentinels such as -99; treat them as calm.
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return value


def _is_success(flag: str | bool) -> bool:
    return str(flag).lower() == "true"


def _parse_number(raw: str, element: str) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ShapeError(f"element {element} carried a non-numeric value {raw!r}") from exc


def parse_cwa_time(raw: str) -> int:
    """Parse a national-provider timestamp into epoch seconds; naive values are Taipei local time."""

    try:
        moment = datetime.fromisoformat(raw.strip().replace(" ", "T").replace("Z", "+00:00"))
    except ValueError as exc:
        raise ShapeError(f"unparseable forecast time {raw!r}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=TAIPEI_TZ)
    return int(moment.timestamp())


class CWAWeatherProvider(WeatherProvider):
    """National provider (Central Weather Administration open data).

    Its payload is an element-tagged time series, so values are picked out by
    ``elementName``. Feels-like is not provided and is approximated as
    temperature minus two degrees.
    """

    name = "cwa"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_CWA_BASE_URL,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _params(self, city: str) -> dict:
        if not city:
            raise ValueError("city is required for weather lookups")
        if not self.api_key:
            raise ConfigurationError("CWA API key is not configured")
        return {"Authorization": self.api_key, "locationName": national_city_name(city)}

    @staticmethod
    def _element(elements: Sequence, name: str):
        return next((element for element in elements if element.elementName == name), None)

    def _record(self, city: str, temperature: float, description: str, wind_speed: float = 0.0) -> WeatherRecord:
        return WeatherRecord(
            location=city,
            temperature=temperature,
            feels_like=temperature - CWA_FEELS_LIKE_OFFSET,
            condition_code=derive_condition_code(description),
            condition_description=description,
            wind_speed=_wind_speed(wind_speed),
        )

    def fetch_current(self, city: str) -> WeatherRecord:
        params = self._params(city)
        LOGGER.info("Fetching current weather", extra={"provider": self.name, "city": city})
        payload = get_json(f"{self.base_url}/{CWA_CURRENT_DATASET}", params, self.timeout_seconds, self.name)
        try:
            parsed = _CwaCurrentResponse.model_validate(payload)
        except ValidationError as exc:
            raise ShapeError("CWA current payload failed validation") from exc
        if not _is_success(parsed.success) or not parsed.records.location:
            raise ShapeError("CWA current payload carried no location data")

        elements = parsed.records.location[0].weatherElement
        temp_element = self._element(elements, "T")
        if temp_element is None or not temp_element.time:
            raise ShapeError("CWA current payload has no temperature element")
        temperature = _parse_number(temp_element.time[0].parameter.parameterName, "T")

        wx_element = self._element(elements, "Wx")
        description = (
            wx_element.time[0].parameter.parameterName if wx_element and wx_element.time else CWA_DEFAULT_DESCRIPTION
        )
        ws_element = self._element(elements, "WS")
        wind_speed = (
            _parse_number(ws_element.time[0].parameter.parameterName, "WS") if ws_element and ws_element.time else 0.0
        )
        return self._record(city, temperature, description, wind_speed)

    def fetch_forecast(self, city: str) -> ForecastSeries:
        params = self._params(city)
        LOGGER.info("Fetching forecast", extra={"provider": self.name, "city": city})
        payload = get_json(f"{self.base_url}/{CWA_FORECAST_DATASET}", params, self.timeout_seconds, self.name)
        try:
            parsed = _CwaForecastResponse.model_validate(payload)
        except ValidationError as exc:
            raise ShapeError("CWA forecast payload failed validation") from exc
        groups = parsed.records.locations
        if not _is_success(parsed.success) or not groups or not groups[0].location:
            raise ShapeError("CWA forecast payload carried no location data")

        elements = groups[0].location[0].weatherElement
        temp_element = self._element(elements, "T")
        if temp_element is None:
            raise ShapeError("CWA forecast payload has no temperature element")
        wx_element = self._element(elements, "Wx")
        wx_slots = wx_element.time if wx_element else []

        entries: List[ForecastEntry] = []
        for index, slot in enumerate(temp_element.time[:CWA_FORECAST_SLOTS]):
            moment = slot.dataTime or slot.startTime
            if not moment or not slot.elementValue:
                raise ShapeError(f"CWA forecast slot {index} is incomplete")
            temperature = _parse_number(slot.elementValue[0].value, "T")
            description = CWA_DEFAULT_DESCRIPTION
            if index < len(wx_slots) and wx_slots[index].elementValue:
                description = wx_slots[index].elementValue[0].value or CWA_DEFAULT_DESCRIPTION
            entries.append(
                ForecastEntry(timestamp=parse_cwa_time(moment), record=self._record(city, temperature, description))
            )
        if len(wx_slots) < len(entries):
            LOGGER.warning(
                "CWA forecast descriptions shorter than temperatures",
                extra={"city": city, "temperatures": len(entries), "descriptions": len(wx_slots)},
            )
        return ForecastSeries.from_unordered(city, entries)


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests."""

    name = "mock"

    def __init__(
        self,
        current: WeatherRecord | None = None,
        forecast: ForecastSeries | None = None,
        current_error: Exception | None = None,
        forecast_error: Exception | None = None,
    ) -> None:
        self.current = current
        self.forecast = forecast
        self.current_error = current_error
        self.forecast_error = forecast_error

    def fetch_current(self, city: str) -> WeatherRecord:
        LOGGER.info("Returning mock weather", extra={"city": city})
        if self.current_error is not None:
            raise self.current_error
        if self.current is not None:
            return self.current
        return WeatherRecord(
            location=city,
            temperature=26.0,
            feels_like=27.0,
            condition_code=ConditionCode.CLEAR,
            condition_description="晴",
            wind_speed=2.0,
        )

    def fetch_forecast(self, city: str) -> ForecastSeries:
        LOGGER.info("Returning mock forecast", extra={"city": city})
        if self.forecast_error is not None:
            raise self.forecast_error
        if self.forecast is not None:
            return self.forecast
        start = 1_700_000_000
        entries = [
            ForecastEntry(timestamp=start + index * 10_800, record=self.fetch_current(city)) for index in range(8)
        ]
        return ForecastSeries(location=city, entries=tuple(entries))


PROVIDER_ALIASES = {
    "openweather": "openweather",
    "global": "openweather",
    "cwa": "cwa",
    "cwb": "cwa",
    "national": "cwa",
}


def build_weather_provider(config: AppConfig) -> WeatherProvider:
    """Select the provider configured for this deployment."""

    selected = PROVIDER_ALIASES.get((config.weather_provider or "").strip().lower())
    if selected == "openweather":
        return OpenWeatherProvider(
            api_key=config.openweather_api_key,
            base_url=config.openweather_base_url,
            timeout_seconds=config.request_timeout_seconds,
        )
    if selected == "cwa":
        return CWAWeatherProvider(
            api_key=config.cwa_api_key,
            base_url=config.cwa_base_url,
            timeout_seconds=config.request_timeout_seconds,
        )
    raise ConfigurationError(f"Unknown weather provider {config.weather_provider!r}")


__all__ = [
    "CWAWeatherProvider",
    "CWA_FEELS_LIKE_OFFSET",
    "MockWeatherProvider",
    "OpenWeatherProvider",
    "WeatherProvider",
    "build_weather_provider",
    "parse_cwa_time",
]
