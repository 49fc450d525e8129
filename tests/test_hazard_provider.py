"""Hazard bulletin resolution and settle-all aggregation."""

import pytest

from outfit_app.config import AppConfig
from outfit_app.errors import ConfigurationError
from tools.hazard_provider import (
    HazardAggregator,
    HazardSnapshot,
    resolve_bulletins,
    resolve_tropical_cyclones,
)

BASE = "https://opendata.cwa.gov.tw/api/v1/rest/datastore"


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ([{"id": 1}], [{"id": 1}]),
        ({"success": "true", "records": {"location": [{"id": "loc"}]}}, [{"id": "loc"}]),
        ({"success": "true", "records": {"alert": [{"id": "alert"}]}}, [{"id": "alert"}]),
        ({"success": True, "records": {"records": [{"id": "nested"}]}}, [{"id": "nested"}]),
        ({"records": [{"id": "flat"}]}, [{"id": "flat"}]),
        ({"records": {"location": "not-a-list", "alert": [{"id": "second"}]}}, [{"id": "second"}]),
        ({"success": "false", "records": {"location": [{"id": "ignored"}]}}, []),
        ({"success": "true", "records": {"unexpected": []}}, []),
        ({"result": {}}, []),
        ("garbage", []),
        (None, []),
    ],
)
def test_resolve_bulletins_tries_known_structures(payload, expected) -> None:
    assert resolve_bulletins(payload, "W-C0033-001") == expected


def test_resolve_tropical_cyclones_wraps_single_object() -> None:
    single = {"success": "true", "records": {"tropicalCyclones": {"tropicalCyclone": {"typhoonName": "KOINU"}}}}
    several = {"records": {"tropicalCyclones": {"tropicalCyclone": [{"typhoonName": "A"}, {"typhoonName": "B"}]}}}

    assert resolve_tropical_cyclones(single) == [{"typhoonName": "KOINU"}]
    assert [item["typhoonName"] for item in resolve_tropical_cyclones(several)] == ["A", "B"]
    assert resolve_tropical_cyclones({"records": {"tropicalCyclones": {}}}) == []
    assert resolve_tropical_cyclones({"success": "false"}) == []
    assert resolve_tropical_cyclones([]) == []


def test_bulletin_requests_carry_standard_parameters(http_stub) -> None:
    http_stub.json("/W-C0033-001", {"success": "true", "records": {"location": [{"locationName": "臺北市"}]}})
    aggregator = HazardAggregator(api_key="cwa-key", timeout_seconds=2.0)

    bulletins = aggregator.get_weather_warnings()

    assert bulletins == [{"locationName": "臺北市"}]
    call = http_stub.calls[0]
    assert call["url"] == f"{BASE}/W-C0033-001"
    assert call["params"] == {"Authorization": "cwa-key", "format": "JSON", "limit": "100", "expires": "false"}
    assert call["timeout"] == 2.0


def test_typhoon_request_asks_for_analysis_and_forecast_tracks(http_stub) -> None:
    http_stub.json("/W-C0034-005", {"records": {"tropicalCyclones": {"tropicalCyclone": {"typhoonName": "X"}}}})

    cyclones = HazardAggregator(api_key="cwa-key").get_typhoon_info()

    assert cyclones == [{"typhoonName": "X"}]
    params = http_stub.calls[0]["params"]
    assert params["dataset"] == "analysisData,forecastData"
    assert "expires" not in params


def test_numerical_forecast_translates_city(http_stub) -> None:
    http_stub.json("/F-C0032-001", {"records": {"location": [{"locationName": "臺中市"}]}})

    records = HazardAggregator(api_key="cwa-key").get_numerical_forecast("台中市")

    assert records == [{"locationName": "臺中市"}]
    assert http_stub.calls[0]["params"]["locationName"] == "臺中市"


def test_transport_and_shape_failures_become_empty_lists(http_stub) -> None:
    http_stub.json("/W-C0033-003", {"message": "down"}, status_code=503)
    http_stub.not_json("/W-C0033-004")
    aggregator = HazardAggregator(api_key="cwa-key")

    assert aggregator.get_heavy_rain_warnings() == []
    assert aggregator.get_low_temperature_warnings() == []
    assert aggregator.get_high_temperature_warnings() == []


def test_missing_key_is_a_configuration_error(http_stub) -> None:
    aggregator = HazardAggregator.from_config(AppConfig(cwa_api_key=None))

    with pytest.raises(ConfigurationError):
        aggregator.get_weather_warnings()
    with pytest.raises(ConfigurationError):
        aggregator.fetch_all()
    assert http_stub.calls == []


def _route_all(http_stub) -> None:
    http_stub.json("/W-C0034-005", {"records": {"tropicalCyclones": {"tropicalCyclone": {"typhoonName": "T"}}}})
    http_stub.json("/W-C0033-001", {"records": {"location": [{"id": "warnings"}]}})
    http_stub.json("/W-C0033-002", {"records": {"records": [{"id": "details"}]}})
    http_stub.json("/W-C0033-003", {"records": {"alert": [{"id": "heavy-rain"}]}})
    http_stub.json("/W-C0033-004", {"records": {"location": [{"id": "low"}]}})
    http_stub.json("/W-C0033-005", {"records": {"location": [{"id": "high"}]}})
    http_stub.json("/F-C0032-001", {"records": {"location": [{"id": "forecast"}]}})


def test_fetch_all_collects_every_dataset(http_stub) -> None:
    _route_all(http_stub)

    snapshot = HazardAggregator(api_key="cwa-key").fetch_all("高雄市")

    assert isinstance(snapshot, HazardSnapshot)
    assert snapshot.typhoons == [{"typhoonName": "T"}]
    assert snapshot.weather_warnings == [{"id": "warnings"}]
    assert snapshot.warning_details == [{"id": "details"}]
    assert snapshot.heavy_rain == [{"id": "heavy-rain"}]
    assert snapshot.low_temperature == [{"id": "low"}]
    assert snapshot.high_temperature == [{"id": "high"}]
    assert snapshot.numerical_forecast == [{"id": "forecast"}]
    assert snapshot.failures == {}
    assert len(http_stub.calls) == 7


def test_fetch_all_isolates_a_failing_dataset(http_stub) -> None:
    _route_all(http_stub)
    http_stub.json("/W-C0033-001", {"message": "down"}, status_code=500)

    snapshot = HazardAggregator(api_key="cwa-key").fetch_all()

    assert snapshot.weather_warnings == []
    assert snapshot.heavy_rain == [{"id": "heavy-rain"}]
    assert snapshot.typhoons == [{"typhoonName": "T"}]


def test_fetch_all_survives_a_raising_task(http_stub, monkeypatch: pytest.MonkeyPatch) -> None:
    _route_all(http_stub)
    aggregator = HazardAggregator(api_key="cwa-key")

    def boom():
        raise RuntimeError("decoder crashed")

    monkeypatch.setattr(aggregator, "get_heavy_rain_warnings", boom)

    snapshot = aggregator.fetch_all()

    assert snapshot.heavy_rain == []
    assert snapshot.failures == {"heavy_rain": "decoder crashed"}
    assert snapshot.weather_warnings == [{"id": "warnings"}]
    assert snapshot.low_temperature == [{"id": "low"}]
    assert snapshot.high_temperature == [{"id": "high"}]
    assert snapshot.warning_details == [{"id": "details"}]
    assert snapshot.typhoons == [{"typhoonName": "T"}]
    assert snapshot.to_dict()["failures"] == {"heavy_rain": "decoder crashed"}
