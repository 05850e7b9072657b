from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional, Tuple


class UnitSystem(str, Enum):
    """Measurement convention a value was produced in.

    - metric: temperature in Celsius, wind speed in metres per second (m/s)
    - imperial: temperature in Fahrenheit, wind speed in miles per hour (mph)
    """

    METRIC = "metric"
    IMPERIAL = "imperial"

    @classmethod
    def parse(cls, value: Any) -> "UnitSystem":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text == cls.IMPERIAL.value:
            return cls.IMPERIAL
        if text == cls.METRIC.value:
            return cls.METRIC
        raise ValueError(f"unknown unit system: {value!r}")


class DataKind(str, Enum):
    CURRENT = "current"
    HOURLY = "hourly"
    DAILY = "daily"


class Provenance(str, Enum):
    LIVE = "live"
    CACHED = "cached"
    SIMULATED = "simulated"
    EMPTY = "empty"


class RequestState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LIVE = "live"
    CACHED_FALLBACK = "cached_fallback"
    EMPTY = "empty"


@dataclass(frozen=True)
class Sample:
    """One normalized reading from the remote source.

    Values are in the ``unit_system`` the request was made with. Optional
    details are only filled for current conditions.
    """

    timestamp: int
    temperature: float
    temp_min: float
    temp_max: float
    feels_like: float
    humidity: float
    wind_speed: float
    condition: str
    description: str
    icon_code: str
    precip_probability: int
    rain_amount: float
    snow_amount: float
    unit_system: UnitSystem
    cached: bool = False
    pressure: Optional[int] = None
    wind_direction: Optional[int] = None
    cloudiness: Optional[int] = None
    visibility: Optional[int] = None
    uv_index: Optional[int] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None
    location_name: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class DailySummary:
    """Aggregate for one local calendar date, built by ``group_by_day``."""

    date: date
    day_label: str
    timestamp: int
    temp_min: float
    temp_max: float
    temperature_midpoint: float
    representative_condition: str
    description: str
    icon_code: str
    avg_humidity: float
    avg_wind_speed: float
    max_precip_probability: int
    total_rain: float
    total_snow: float
    unit_system: UnitSystem
    sample_count: int
    cached: bool = False


@dataclass(frozen=True)
class CacheEntry:
    fetched_at: int
    payload: Any


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class AlertRecord:
    id: str
    type: str
    title: str
    description: str
    severity: Severity
    timestamp: int
    effective_start: int
    effective_end: int
    provenance: Provenance = Provenance.LIVE


@dataclass(frozen=True)
class AlertHistoryEntry:
    location_key: str
    fetched_at: int
    snapshot: Tuple[AlertRecord, ...] = ()


@dataclass(frozen=True)
class Result:
    """What the display layer receives: a value plus where it came from."""

    value: Any
    provenance: Provenance
    fetched_at: Optional[int] = None
    message: str = ""

    @property
    def is_empty(self) -> bool:
        return self.provenance is Provenance.EMPTY


@dataclass(frozen=True)
class Snapshot:
    location: str
    current: Result
    hourly: Result
    daily: Result
    alerts: Result


__all__ = [
    "AlertHistoryEntry",
    "AlertRecord",
    "CacheEntry",
    "DailySummary",
    "DataKind",
    "Provenance",
    "RequestState",
    "Result",
    "Sample",
    "Severity",
    "Snapshot",
    "UnitSystem",
]
