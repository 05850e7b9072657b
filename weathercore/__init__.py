"""Forecast aggregation with offline fallback for weather displays."""
from __future__ import annotations

from .aggregation import group_by_day, window
from .alerts import AlertHistory, AlertService, classify_severity
from .cache import CacheStore, FileCacheStore, MemoryCacheStore
from .config import ConfigurationError, Settings
from .entities import (
    AlertHistoryEntry,
    AlertRecord,
    CacheEntry,
    DailySummary,
    DataKind,
    Provenance,
    RequestState,
    Result,
    Sample,
    Severity,
    Snapshot,
    UnitSystem,
)
from .providers import (
    ApiError,
    EmptyResultError,
    MalformedResponseError,
    NetworkError,
    OpenWeatherClient,
    ProviderError,
)
from .services import WeatherService

__version__ = "0.1.0"

__all__ = [
    "AlertHistory",
    "AlertHistoryEntry",
    "AlertRecord",
    "AlertService",
    "ApiError",
    "CacheEntry",
    "CacheStore",
    "ConfigurationError",
    "DailySummary",
    "DataKind",
    "EmptyResultError",
    "FileCacheStore",
    "MalformedResponseError",
    "MemoryCacheStore",
    "NetworkError",
    "OpenWeatherClient",
    "ProviderError",
    "Provenance",
    "RequestState",
    "Result",
    "Sample",
    "Severity",
    "Settings",
    "Snapshot",
    "UnitSystem",
    "WeatherService",
    "classify_severity",
    "group_by_day",
    "window",
]
