"""Runtime settings read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .entities import UnitSystem


class ConfigurationError(RuntimeError):
    """Raised when a setting is missing or invalid."""


def env(name: str, default: Optional[str] = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ConfigurationError(f"Environment variable {name} is required")
    return value


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    base_url: str = "https://api.openweathermap.org/data/2.5"
    geo_base_url: str = "https://api.openweathermap.org"
    onecall_base_url: str = "https://api.openweathermap.org/data/3.0"
    unit_system: UnitSystem = UnitSystem.IMPERIAL
    cache_dir: Path = Path(".")
    request_timeout: float = 10.0
    simulated_alerts: bool = False
    log_level: str = "INFO"
    default_city: str = "New York"

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != "YOUR_API_KEY_HERE"

    @classmethod
    def from_env(cls) -> "Settings":
        try:
            unit_system = UnitSystem.parse(env("WEATHER_UNITS", UnitSystem.IMPERIAL.value))
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        raw_timeout = env("WEATHER_REQUEST_TIMEOUT", "10")
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(f"WEATHER_REQUEST_TIMEOUT must be a number, got {raw_timeout!r}") from exc
        if timeout <= 0:
            raise ConfigurationError("WEATHER_REQUEST_TIMEOUT must be positive")

        return cls(
            api_key=env("OPENWEATHER_API_KEY", "").strip(),
            base_url=env("WEATHER_API_BASE_URL", cls.base_url).rstrip("/"),
            geo_base_url=env("WEATHER_GEO_BASE_URL", cls.geo_base_url).rstrip("/"),
            onecall_base_url=env("WEATHER_ONECALL_BASE_URL", cls.onecall_base_url).rstrip("/"),
            unit_system=unit_system,
            cache_dir=Path(env("WEATHER_CACHE_DIR", ".")),
            request_timeout=timeout,
            simulated_alerts=env("WEATHER_SIMULATED_ALERTS", "0") == "1",
            log_level=env("WEATHER_LOG_LEVEL", "INFO").upper(),
            default_city=env("WEATHER_DEFAULT_CITY", cls.default_city),
        )


__all__ = ["ConfigurationError", "Settings", "env"]
