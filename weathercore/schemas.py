"""Pydantic schemas for the OpenWeather documents the pipeline consumes.

Only the fields the pipeline reads are declared; everything else is ignored.
Required fields are the ones a sample cannot be built without, the rest are
optional with neutral defaults.
"""
from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# 3000-01-01T00:00:00Z
MAX_TIMESTAMP = 32_503_680_000


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ConditionBlock(_Schema):
    id: Union[int, str]
    main: str
    description: str = ""


class MainBlock(_Schema):
    temp: float
    feels_like: Optional[float] = None
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    humidity: float = 0.0
    pressure: Optional[int] = None

    @model_validator(mode="after")
    def _fill_from_temp(self) -> "MainBlock":
        if self.feels_like is None:
            self.feels_like = self.temp
        if self.temp_min is None:
            self.temp_min = self.temp
        if self.temp_max is None:
            self.temp_max = self.temp
        if self.temp_min > self.temp_max:
            self.temp_min, self.temp_max = self.temp_max, self.temp_min
        return self


class WindBlock(_Schema):
    speed: float
    deg: Optional[int] = None


class PrecipBlock(_Schema):
    one_hour: float = Field(default=0.0, alias="1h")
    three_hour: float = Field(default=0.0, alias="3h")


class SysBlock(_Schema):
    country: Optional[str] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None


class CoordBlock(_Schema):
    lat: float
    lon: float


class CloudsBlock(_Schema):
    all: Optional[int] = None


class ForecastEntry(_Schema):
    dt: int = Field(ge=0, le=MAX_TIMESTAMP)
    main: MainBlock
    weather: List[ConditionBlock] = Field(min_length=1)
    wind: WindBlock
    pop: float = 0.0
    rain: Optional[PrecipBlock] = None
    snow: Optional[PrecipBlock] = None


class ForecastPayload(_Schema):
    entries: List[Any] = Field(alias="list")


class CurrentPayload(ForecastEntry):
    name: Optional[str] = None
    sys: Optional[SysBlock] = None
    coord: Optional[CoordBlock] = None
    clouds: Optional[CloudsBlock] = None
    visibility: Optional[int] = None
    uvi: Optional[float] = None


class TempBlock(_Schema):
    min: float
    max: float
    day: Optional[float] = None

    @model_validator(mode="after")
    def _order_range(self) -> "TempBlock":
        if self.min > self.max:
            self.min, self.max = self.max, self.min
        return self


class DailyEntry(_Schema):
    dt: int = Field(ge=0, le=MAX_TIMESTAMP)
    temp: TempBlock
    humidity: float = 0.0
    wind_speed: float = 0.0
    pop: float = 0.0
    rain: float = 0.0
    snow: float = 0.0
    weather: List[ConditionBlock] = Field(default_factory=list)


class DailyPayload(_Schema):
    daily: Optional[List[Any]] = None


class GeocodeEntry(_Schema):
    lat: float
    lon: float
    name: Optional[str] = None


class AlertEntry(_Schema):
    event: str = "Weather Alert"
    description: str = ""
    start: Optional[int] = None
    end: int = 0


class AlertsPayload(_Schema):
    alerts: Optional[List[Any]] = None


class UvCurrentBlock(_Schema):
    uvi: Optional[float] = None


class UvPayload(_Schema):
    current: Optional[UvCurrentBlock] = None


__all__ = [
    "MAX_TIMESTAMP",
    "AlertEntry",
    "AlertsPayload",
    "ConditionBlock",
    "CurrentPayload",
    "DailyEntry",
    "DailyPayload",
    "ForecastEntry",
    "ForecastPayload",
    "GeocodeEntry",
    "MainBlock",
    "UvPayload",
]
