from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .base import ApiError, RequestConfig, WeatherProvider
from ..config import Settings
from ..entities import UnitSystem


class OpenWeatherClient(WeatherProvider):
    """Raw OpenWeather endpoints.

    Each method returns the decoded JSON document untouched; turning it into
    samples is the parser's job.
    """

    base_url = "https://api.openweathermap.org/data/2.5"
    geo_base_url = "https://api.openweathermap.org"
    onecall_base_url = "https://api.openweathermap.org/data/3.0"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        geo_base_url: Optional[str] = None,
        onecall_base_url: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url or self.base_url
        self.geo_base_url = geo_base_url or self.geo_base_url
        self.onecall_base_url = onecall_base_url or self.onecall_base_url
        self._log = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "OpenWeatherClient":
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            geo_base_url=settings.geo_base_url,
            onecall_base_url=settings.onecall_base_url,
            request_config=RequestConfig(timeout=settings.request_timeout),
            **kwargs,
        )

    # Public API ---------------------------------------------------------
    def current(self, location: str, units: UnitSystem) -> Any:
        return self._get(f"{self.base_url}/weather", {"q": location, "units": units.value})

    def forecast(self, location: str, units: UnitSystem) -> Any:
        return self._get(f"{self.base_url}/forecast", {"q": location, "units": units.value})

    def geocode(self, location: str) -> Any:
        return self._get(f"{self.geo_base_url}/geo/1.0/direct", {"q": location, "limit": 1})

    def daily(self, latitude: float, longitude: float, units: UnitSystem) -> Any:
        params = {
            "lat": latitude,
            "lon": longitude,
            "units": units.value,
            "exclude": "minutely,hourly,alerts",
        }
        return self._get(f"{self.base_url}/onecall", params)

    def alerts(self, latitude: float, longitude: float) -> Any:
        params = {
            "lat": latitude,
            "lon": longitude,
            "exclude": "current,minutely,hourly,daily",
        }
        return self._get(f"{self.onecall_base_url}/onecall", params)

    def uv_index(self, latitude: float, longitude: float, units: UnitSystem) -> Any:
        params = {
            "lat": latitude,
            "lon": longitude,
            "units": units.value,
            "exclude": "minutely,hourly,daily,alerts",
        }
        return self._get(f"{self.base_url}/onecall", params)

    # helpers ------------------------------------------------------------
    def _get(self, url: str, params: Dict[str, Any]) -> Any:
        if not self.api_key:
            self._log.error("OpenWeather API key is not configured")
            raise ApiError(401, "missing OpenWeather API key")
        response = self._request("GET", url, params={**params, "appid": self.api_key})
        return self._json(response)


__all__ = ["OpenWeatherClient"]
