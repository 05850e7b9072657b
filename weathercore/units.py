"""Display-time unit conversion.

Stored samples and summaries keep the unit system they were fetched in.
Everything here computes a converted copy on demand, so toggling the display
unit back and forth never accumulates drift.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .entities import DailySummary, Sample, UnitSystem

FAHRENHEIT_FREEZING_POINT = 32.0
CELSIUS_TO_FAHRENHEIT_FACTOR = 9.0 / 5.0
METRES_PER_MILE = 1609.344
SECONDS_PER_HOUR = 3600.0

_COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * CELSIUS_TO_FAHRENHEIT_FACTOR + FAHRENHEIT_FREEZING_POINT


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - FAHRENHEIT_FREEZING_POINT) / CELSIUS_TO_FAHRENHEIT_FACTOR


def ms_to_mph(metres_per_second: float) -> float:
    return metres_per_second * SECONDS_PER_HOUR / METRES_PER_MILE


def mph_to_ms(miles_per_hour: float) -> float:
    return miles_per_hour * METRES_PER_MILE / SECONDS_PER_HOUR


def convert_temperature(value: float, source: UnitSystem, target: UnitSystem) -> float:
    if source is target:
        return value
    if target is UnitSystem.IMPERIAL:
        return celsius_to_fahrenheit(value)
    return fahrenheit_to_celsius(value)


def convert_speed(value: float, source: UnitSystem, target: UnitSystem) -> float:
    if source is target:
        return value
    if target is UnitSystem.IMPERIAL:
        return ms_to_mph(value)
    return mph_to_ms(value)


def temperature_symbol(unit_system: UnitSystem) -> str:
    return "°F" if unit_system is UnitSystem.IMPERIAL else "°C"


def speed_symbol(unit_system: UnitSystem) -> str:
    return "mph" if unit_system is UnitSystem.IMPERIAL else "m/s"


def format_temperature(value: float, unit_system: UnitSystem, decimals: int = 0) -> str:
    """Format a temperature like ``"25°C"`` or ``"77.5°F"``."""
    return f"{value:.{decimals}f}{temperature_symbol(unit_system)}"


def wind_compass(degrees: Optional[float]) -> Optional[str]:
    if degrees is None:
        return None
    index = int(round((degrees % 360) / 45.0)) % len(_COMPASS_POINTS)
    return _COMPASS_POINTS[index]


@dataclass(frozen=True)
class DisplayValues:
    unit_system: UnitSystem
    temperature: float
    temp_min: float
    temp_max: float
    feels_like: float
    wind_speed: float

    @property
    def temperature_label(self) -> str:
        return format_temperature(self.temperature, self.unit_system)

    @property
    def range_label(self) -> str:
        return (
            f"{format_temperature(self.temp_min, self.unit_system)} / "
            f"{format_temperature(self.temp_max, self.unit_system)}"
        )

    @property
    def wind_label(self) -> str:
        return f"{self.wind_speed:.1f} {speed_symbol(self.unit_system)}"


def for_display(item: Union[Sample, DailySummary], unit_system: UnitSystem) -> DisplayValues:
    """Return ``item``'s temperatures and wind speed in ``unit_system``.

    ``item`` itself is left untouched.
    """
    source = item.unit_system
    if isinstance(item, DailySummary):
        temperature = item.temperature_midpoint
        feels_like = item.temperature_midpoint
        wind_speed = item.avg_wind_speed
    else:
        temperature = item.temperature
        feels_like = item.feels_like
        wind_speed = item.wind_speed
    return DisplayValues(
        unit_system=unit_system,
        temperature=convert_temperature(temperature, source, unit_system),
        temp_min=convert_temperature(item.temp_min, source, unit_system),
        temp_max=convert_temperature(item.temp_max, source, unit_system),
        feels_like=convert_temperature(feels_like, source, unit_system),
        wind_speed=convert_speed(wind_speed, source, unit_system),
    )


__all__ = [
    "DisplayValues",
    "celsius_to_fahrenheit",
    "convert_speed",
    "convert_temperature",
    "fahrenheit_to_celsius",
    "for_display",
    "format_temperature",
    "mph_to_ms",
    "ms_to_mph",
    "speed_symbol",
    "temperature_symbol",
    "wind_compass",
]
