"""Turn raw OpenWeather documents into typed samples.

A malformed entry inside a larger series is logged and dropped. A document
that does not have the expected shape at all raises
:class:`MalformedResponseError`.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from .entities import Sample, UnitSystem
from .providers.base import MalformedResponseError
from .schemas import (
    CurrentPayload,
    DailyEntry,
    DailyPayload,
    ForecastEntry,
    ForecastPayload,
    GeocodeEntry,
    PrecipBlock,
    UvPayload,
)


logger = logging.getLogger(__name__)

MAX_DAILY_ENTRIES = 10


def parse_forecast(payload: Any, unit_system: UnitSystem) -> List[Sample]:
    """Decode a 5 day / 3 hour forecast into chronologically ordered samples."""
    document = decode(ForecastPayload, payload, "forecast")
    samples: List[Sample] = []
    for index, raw in enumerate(document.entries):
        try:
            entry = ForecastEntry.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping malformed forecast entry %s: %s", index, describe_errors(exc))
            continue
        samples.append(_sample_from_entry(entry, unit_system))
    samples.sort(key=lambda sample: sample.timestamp)
    return samples


def parse_current(payload: Any, unit_system: UnitSystem) -> Sample:
    document = decode(CurrentPayload, payload, "current conditions")
    sample = _sample_from_entry(document, unit_system)
    coord = document.coord
    sys_block = document.sys
    return replace(
        sample,
        pressure=document.main.pressure,
        wind_direction=document.wind.deg,
        cloudiness=document.clouds.all if document.clouds else None,
        visibility=document.visibility,
        uv_index=round(document.uvi) if document.uvi is not None else None,
        sunrise=sys_block.sunrise if sys_block else None,
        sunset=sys_block.sunset if sys_block else None,
        country=sys_block.country if sys_block else None,
        location_name=document.name,
        latitude=coord.lat if coord else None,
        longitude=coord.lon if coord else None,
        rain_amount=_precip(document.rain, prefer_hourly=True),
        snow_amount=_precip(document.snow, prefer_hourly=True),
    )


def parse_daily(payload: Any, unit_system: UnitSystem) -> List[Sample]:
    """Decode the dedicated daily source, one sample per day.

    A document without a ``daily`` block is not an error: the source simply
    had nothing for this location.
    """
    document = decode(DailyPayload, payload, "daily forecast")
    if not document.daily:
        return []
    samples: List[Sample] = []
    for index, raw in enumerate(document.daily[:MAX_DAILY_ENTRIES]):
        try:
            entry = DailyEntry.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping malformed daily entry %s: %s", index, describe_errors(exc))
            continue
        condition = entry.weather[0] if entry.weather else None
        temperature = entry.temp.day if entry.temp.day is not None else (entry.temp.min + entry.temp.max) / 2
        samples.append(
            Sample(
                timestamp=entry.dt,
                temperature=temperature,
                temp_min=entry.temp.min,
                temp_max=entry.temp.max,
                feels_like=temperature,
                humidity=entry.humidity,
                wind_speed=entry.wind_speed,
                condition=condition.main if condition else "",
                description=condition.description if condition else "",
                icon_code=str(condition.id) if condition else "",
                precip_probability=_percent(entry.pop),
                rain_amount=entry.rain,
                snow_amount=entry.snow,
                unit_system=unit_system,
            )
        )
    samples.sort(key=lambda sample: sample.timestamp)
    return samples


def parse_coordinates(payload: Any) -> Optional[Tuple[float, float]]:
    """Return ``(lat, lon)`` of the first geocoding match, or ``None``."""
    if not isinstance(payload, list):
        raise MalformedResponseError("geocoding response is not a list")
    if not payload:
        return None
    entry = decode(GeocodeEntry, payload[0], "geocoding")
    return entry.lat, entry.lon


def parse_uv_index(payload: Any) -> Optional[int]:
    document = decode(UvPayload, payload, "uv index")
    if document.current is None or document.current.uvi is None:
        return None
    return round(document.current.uvi)


# decoding -----------------------------------------------------------
def decode(schema, payload: Any, what: str):
    """Validate ``payload`` against ``schema`` or raise MalformedResponseError."""
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        logger.error("Malformed %s response: %s", what, describe_errors(exc))
        raise MalformedResponseError(f"malformed {what} response") from exc


def describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}" for error in exc.errors()
    )


# helpers ------------------------------------------------------------
def _sample_from_entry(entry: ForecastEntry, unit_system: UnitSystem) -> Sample:
    condition = entry.weather[0]
    return Sample(
        timestamp=entry.dt,
        temperature=entry.main.temp,
        temp_min=entry.main.temp_min,
        temp_max=entry.main.temp_max,
        feels_like=entry.main.feels_like,
        humidity=entry.main.humidity,
        wind_speed=entry.wind.speed,
        condition=condition.main,
        description=condition.description,
        # the UI keys its icons off the condition id
        icon_code=str(condition.id),
        precip_probability=_percent(entry.pop),
        rain_amount=_precip(entry.rain),
        snow_amount=_precip(entry.snow),
        unit_system=unit_system,
    )


def _precip(block: Optional[PrecipBlock], prefer_hourly: bool = False) -> float:
    if block is None:
        return 0.0
    if prefer_hourly and block.one_hour:
        return block.one_hour
    return block.three_hour


def _percent(pop: float) -> int:
    return int(pop * 100)


__all__ = [
    "decode",
    "describe_errors",
    "parse_coordinates",
    "parse_current",
    "parse_daily",
    "parse_forecast",
    "parse_uv_index",
]
