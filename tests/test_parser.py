from __future__ import annotations

import pytest

from weathercore.entities import UnitSystem
from weathercore.parser import (
    parse_coordinates,
    parse_current,
    parse_daily,
    parse_forecast,
    parse_uv_index,
)
from weathercore.providers.base import MalformedResponseError


def forecast_entry(dt: int, temp: float = 20.0, **overrides) -> dict:
    entry = {
        "dt": dt,
        "main": {
            "temp": temp,
            "feels_like": temp - 1,
            "temp_min": temp - 2,
            "temp_max": temp + 2,
            "humidity": 60,
        },
        "weather": [{"id": 500, "main": "Rain", "description": "light rain"}],
        "wind": {"speed": 3.5, "deg": 180},
        "pop": 0.42,
        "rain": {"3h": 1.25},
    }
    entry.update(overrides)
    return entry


def test_forecast_entries_are_normalized():
    samples = parse_forecast({"list": [forecast_entry(1_700_000_000)]}, UnitSystem.METRIC)

    assert len(samples) == 1
    sample = samples[0]
    assert sample.timestamp == 1_700_000_000
    assert sample.temperature == 20.0
    assert sample.temp_min == 18.0
    assert sample.temp_max == 22.0
    assert sample.feels_like == 19.0
    assert sample.humidity == 60
    assert sample.wind_speed == 3.5
    assert sample.condition == "Rain"
    assert sample.description == "light rain"
    assert sample.icon_code == "500"
    assert sample.precip_probability == 42
    assert sample.rain_amount == 1.25
    assert sample.snow_amount == 0.0
    assert sample.unit_system is UnitSystem.METRIC
    assert sample.cached is False


def test_unit_system_comes_from_the_request():
    payload = {"list": [forecast_entry(1_700_000_000)]}

    assert parse_forecast(payload, UnitSystem.IMPERIAL)[0].unit_system is UnitSystem.IMPERIAL
    assert parse_forecast(payload, UnitSystem.METRIC)[0].unit_system is UnitSystem.METRIC


def test_malformed_entries_are_skipped():
    broken_wind = forecast_entry(1_700_003_600)
    del broken_wind["wind"]
    payload = {
        "list": [
            forecast_entry(1_700_000_000),
            {"dt": 1_700_001_000},
            forecast_entry(1_700_002_000, weather=[]),
            broken_wind,
            "not-an-object",
            forecast_entry(1_700_010_800),
        ]
    }

    samples = parse_forecast(payload, UnitSystem.METRIC)

    assert [sample.timestamp for sample in samples] == [1_700_000_000, 1_700_010_800]


def test_forecast_output_is_chronological():
    payload = {"list": [forecast_entry(3), forecast_entry(1), forecast_entry(2)]}

    samples = parse_forecast(payload, UnitSystem.METRIC)

    assert [sample.timestamp for sample in samples] == [1, 2, 3]


@pytest.mark.parametrize("payload", [None, [], {}, {"list": None}, {"list": "oops"}, "garbage"])
def test_structurally_invalid_forecast_raises(payload):
    with pytest.raises(MalformedResponseError):
        parse_forecast(payload, UnitSystem.METRIC)


def test_forecast_with_no_usable_entries_is_empty_not_an_error():
    assert parse_forecast({"list": [{"dt": 1}]}, UnitSystem.METRIC) == []


def test_missing_range_falls_back_to_temperature():
    entry = forecast_entry(1)
    entry["main"] = {"temp": 12.5, "humidity": 50}

    sample = parse_forecast({"list": [entry]}, UnitSystem.METRIC)[0]

    assert sample.temp_min == sample.temp_max == sample.feels_like == 12.5


def test_inverted_range_is_reordered():
    entry = forecast_entry(1)
    entry["main"].update({"temp_min": 15.0, "temp_max": 10.0})

    sample = parse_forecast({"list": [entry]}, UnitSystem.METRIC)[0]

    assert (sample.temp_min, sample.temp_max) == (10.0, 15.0)


def test_snow_amount_is_read_from_three_hour_block():
    entry = forecast_entry(1, snow={"3h": 0.8})
    del entry["rain"]

    sample = parse_forecast({"list": [entry]}, UnitSystem.METRIC)[0]

    assert sample.snow_amount == 0.8
    assert sample.rain_amount == 0.0


def test_current_conditions_include_details():
    payload = forecast_entry(
        1_700_000_000,
        name="New York",
        sys={"country": "US", "sunrise": 1_699_990_000, "sunset": 1_700_030_000},
        coord={"lat": 40.71, "lon": -74.0},
        clouds={"all": 75},
        visibility=10000,
        rain={"1h": 0.4},
    )
    payload["main"]["pressure"] = 1012

    sample = parse_current(payload, UnitSystem.IMPERIAL)

    assert sample.location_name == "New York"
    assert sample.country == "US"
    assert (sample.latitude, sample.longitude) == (40.71, -74.0)
    assert sample.pressure == 1012
    assert sample.wind_direction == 180
    assert sample.cloudiness == 75
    assert sample.visibility == 10000
    assert sample.sunrise == 1_699_990_000
    assert sample.rain_amount == 0.4
    assert sample.uv_index is None


def test_current_conditions_without_required_blocks_raise():
    payload = forecast_entry(1_700_000_000)
    del payload["main"]

    with pytest.raises(MalformedResponseError):
        parse_current(payload, UnitSystem.METRIC)


def test_daily_source_yields_one_sample_per_day():
    payload = {
        "daily": [
            {
                "dt": 1_700_000_000 + day * 86400,
                "temp": {"min": 5 + day, "max": 12 + day, "day": 10 + day},
                "humidity": 70,
                "wind_speed": 4.0,
                "pop": 0.3,
                "rain": 2.5,
                "weather": [{"id": 801, "main": "Clouds", "description": "few clouds"}],
            }
            for day in range(12)
        ]
    }

    samples = parse_daily(payload, UnitSystem.METRIC)

    assert len(samples) == 10
    assert samples[0].temp_min == 5
    assert samples[0].temp_max == 12
    assert samples[0].temperature == 10
    assert samples[0].precip_probability == 30
    assert samples[0].rain_amount == 2.5
    assert samples[0].condition == "Clouds"


def test_daily_source_without_daily_block_is_empty():
    assert parse_daily({"lat": 1.0}, UnitSystem.METRIC) == []


def test_daily_entry_without_weather_uses_blank_condition():
    samples = parse_daily({"daily": [{"dt": 1, "temp": {"min": 1, "max": 3}}]}, UnitSystem.METRIC)

    assert samples[0].condition == ""
    assert samples[0].temperature == 2


def test_coordinates_from_geocoding():
    assert parse_coordinates([{"name": "Paris", "lat": 48.85, "lon": 2.35}]) == (48.85, 2.35)
    assert parse_coordinates([]) is None


def test_geocoding_must_be_a_list():
    with pytest.raises(MalformedResponseError):
        parse_coordinates({"lat": 1, "lon": 2})


def test_uv_index_is_rounded():
    assert parse_uv_index({"current": {"uvi": 6.6}}) == 7
    assert parse_uv_index({"current": {}}) is None
    assert parse_uv_index({}) is None


@pytest.mark.parametrize("dt", [10**20, -1])
def test_entry_with_unrepresentable_timestamp_is_skipped(dt):
    payload = {"list": [forecast_entry(1_700_000_000), forecast_entry(dt)]}

    samples = parse_forecast(payload, UnitSystem.METRIC)

    assert [sample.timestamp for sample in samples] == [1_700_000_000]


def test_daily_entry_with_unrepresentable_timestamp_is_skipped():
    payload = {"daily": [{"dt": 10**20, "temp": {"min": 1, "max": 3}}, {"dt": 1_700_000_000, "temp": {"min": 2, "max": 4}}]}

    assert [sample.timestamp for sample in parse_daily(payload, UnitSystem.METRIC)] == [1_700_000_000]


@pytest.mark.parametrize("pop,expected", [(0.29, 28), (0.999, 99), (1.0, 100), (0.0, 0)])
def test_precipitation_probability_is_truncated(pop, expected):
    sample = parse_forecast({"list": [forecast_entry(1, pop=pop)]}, UnitSystem.METRIC)[0]

    assert sample.precip_probability == expected
