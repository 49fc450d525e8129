"""Hazard bulletins (advisories, typhoon tracks) from the national weather provider.

Bulletins are supplementary. Every accessor absorbs transport and shape
failures into an empty list. The one exception is a missing credential,
which is a configuration error and always raises.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from models.cities import national_city_name
from outfit_app.config import AppConfig, DEFAULT_CWA_BASE_URL
from outfit_app.errors import ConfigurationError, ShapeError, TransportError
from tools.http_client import get_json

LOGGER = logging.getLogger(__name__)

HazardBulletin = Dict[str, Any]

WEATHER_WARNINGS_DATASET = "W-C0033-001"
WARNING_DETAILS_DATASET = "W-C0033-002"
HEAVY_RAIN_DATASET = "W-C0033-003"
LOW_TEMPERATURE_DATASET = "W-C0033-004"
HIGH_TEMPERATURE_DATASET = "W-C0033-005"
NUMERICAL_FORECAST_DATASET = "F-C0032-001"
TYPHOON_DATASET = "W-C0034-005"

BULLETIN_RECORD_KEYS = ("location", "alert", "records")
DEFAULT_LIMIT = 100


def _is_success(payload: Dict[str, Any]) -> Optional[bool]:
    flag = payload.get("success")
    if flag is None:
        return None
    return str(flag).lower() == "true"


def resolve_bulletins(payload: Any, dataset_id: str = "") -> List[HazardBulletin]:
    """Pick the bulletin array out of a payload.

    Tries ``records.location``, ``records.alert``, ``records.records``, a bare
    ``records`` list and finally a bare payload list, in that order.
    """

    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        LOGGER.warning("Unexpected bulletin payload type", extra={"dataset": dataset_id})
        return []
    if _is_success(payload) is False:
        LOGGER.warning("Bulletin API reported failure", extra={"dataset": dataset_id})
        return []

    records = payload.get("records")
    if isinstance(records, dict):
        for key in BULLETIN_RECORD_KEYS:
            candidate = records.get(key)
            if isinstance(candidate, list):
                return candidate
    if isinstance(records, list):
        return records
    LOGGER.warning("Bulletin payload matched no known structure", extra={"dataset": dataset_id})
    return []


def resolve_tropical_cyclones(payload: Any) -> List[HazardBulletin]:
    """Return ``records.tropicalCyclones.tropicalCyclone`` as a list, wrapping a single object."""

    if not isinstance(payload, dict):
        LOGGER.warning("Unexpected typhoon payload type")
        return []
    if _is_success(payload) is False:
        LOGGER.warning("Typhoon API reported failure")
        return []
    records = payload.get("records")
    cyclones = records.get("tropicalCyclones") if isinstance(records, dict) else None
    cyclone = cyclones.get("tropicalCyclone") if isinstance(cyclones, dict) else None
    if isinstance(cyclone, list):
        return cyclone
    if isinstance(cyclone, dict):
        return [cyclone]
    return []


@dataclass
class HazardSnapshot:
    """Per-dataset results of one concurrent hazard fetch."""

    typhoons: List[HazardBulletin] = field(default_factory=list)
    weather_warnings: List[HazardBulletin] = field(default_factory=list)
    warning_details: List[HazardBulletin] = field(default_factory=list)
    heavy_rain: List[HazardBulletin] = field(default_factory=list)
    low_temperature: List[HazardBulletin] = field(default_factory=list)
    high_temperature: List[HazardBulletin] = field(default_factory=list)
    numerical_forecast: List[HazardBulletin] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "typhoons": self.typhoons,
            "weather_warnings": self.weather_warnings,
            "warning_details": self.warning_details,
            "heavy_rain": self.heavy_rain,
            "low_temperature": self.low_temperature,
            "high_temperature": self.high_temperature,
            "numerical_forecast": self.numerical_forecast,
            "failures": self.failures,
        }


class HazardAggregator:
    """Fetches the hazard datasets and joins them without failing fast."""

    name = "cwa-hazards"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_CWA_BASE_URL,
        timeout_seconds: float = 5.0,
        max_workers: int = 7,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: AppConfig) -> "HazardAggregator":
        return cls(api_key=config.cwa_api_key, base_url=config.cwa_base_url, timeout_seconds=config.request_timeout_seconds)

    def _require_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("CWA API key is not configured")
        return self.api_key

    def _fetch(self, dataset_id: str, extra_params: Dict[str, str] | None = None) -> Any:
        params = {
            "Authorization": self._require_key(),
            "format": "JSON",
            "limit": str(DEFAULT_LIMIT),
        }
        params.update(extra_params or {})
        return get_json(f"{self.base_url}/{dataset_id}", params, self.timeout_seconds, self.name)

    def fetch_bulletins(self, dataset_id: str, extra_params: Dict[str, str] | None = None) -> List[HazardBulletin]:
        """Fetch one bulletin dataset; failures other than a missing key yield ``[]``."""

        params = {"expires": "false", **(extra_params or {})}
        try:
            payload = self._fetch(dataset_id, params)
        except (TransportError, ShapeError) as exc:
            LOGGER.error("Hazard dataset unavailable", extra={"dataset": dataset_id, "reason": str(exc)})
            return []
        bulletins = resolve_bulletins(payload, dataset_id)
        LOGGER.info("Fetched hazard bulletins", extra={"dataset": dataset_id, "count": len(bulletins)})
        return bulletins

    def get_weather_warnings(self) -> List[HazardBulletin]:
        """Advisories currently in force for each county and city."""

        return self.fetch_bulletins(WEATHER_WARNINGS_DATASET)

    def get_warning_details(self) -> List[HazardBulletin]:
        """Content of each advisory and the regions it affects."""

        return self.fetch_bulletins(WARNING_DETAILS_DATASET)

    def get_heavy_rain_warnings(self) -> List[HazardBulletin]:
        return self.fetch_bulletins(HEAVY_RAIN_DATASET)

    def get_low_temperature_warnings(self) -> List[HazardBulletin]:
        return self.fetch_bulletins(LOW_TEMPERATURE_DATASET)

    def get_high_temperature_warnings(self) -> List[HazardBulletin]:
        return self.fetch_bulletins(HIGH_TEMPERATURE_DATASET)

    def get_numerical_forecast(self, city: str | None = None) -> List[HazardBulletin]:
        """36-hour city forecast records, optionally narrowed to one city."""

        extra = {"locationName": national_city_name(city)} if city else None
        return self.fetch_bulletins(NUMERICAL_FORECAST_DATASET, extra)

    def get_typhoon_info(self) -> List[HazardBulletin]:
        """Active tropical cyclones with analysis and forecast tracks."""

        try:
            payload = self._fetch(TYPHOON_DATASET, {"dataset": "analysisData,forecastData"})
        except (TransportError, ShapeError) as exc:
            LOGGER.error("Typhoon dataset unavailable", extra={"dataset": TYPHOON_DATASET, "reason": str(exc)})
            return []
        cyclones = resolve_tropical_cyclones(payload)
        LOGGER.info("Fetched tropical cyclones", extra={"dataset": TYPHOON_DATASET, "count": len(cyclones)})
        return cyclones

    def fetch_all(self, city: str | None = None) -> HazardSnapshot:
        """Run every hazard fetch concurrently and wait for all of them.

        A slot whose fetch raises is recorded in ``failures`` and left empty;
        the other slots are unaffected.
        """

        self._require_key()
        tasks: Dict[str, Callable[[], List[HazardBulletin]]] = {
            "typhoons": self.get_typhoon_info,
            "weather_warnings": self.get_weather_warnings,
            "warning_details": self.get_warning_details,
            "heavy_rain": self.get_heavy_rain_warnings,
            "low_temperature": self.get_low_temperature_warnings,
            "high_temperature": self.get_high_temperature_warnings,
            "numerical_forecast": lambda: self.get_numerical_forecast(city),
        }
        snapshot = HazardSnapshot()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {slot: executor.submit(task) for slot, task in tasks.items()}
            for slot, future in futures.items():
                try:
                    setattr(snapshot, slot, future.result() or [])
                except Exception as exc:  # noqa: BLE001
                    LOGGER.warning("Hazard fetch failed", extra={"slot": slot, "reason": str(exc)})
                    snapshot.failures[slot] = str(exc) or exc.__class__.__name__
        return snapshot


__all__ = [
    "HazardAggregator",
    "HazardBulletin",
    "HazardSnapshot",
    "resolve_bulletins",
    "resolve_tropical_cyclones",
]
