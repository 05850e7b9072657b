from .base import (
    ApiError,
    EmptyResultError,
    MalformedResponseError,
    NetworkError,
    ProviderError,
    QuotaExceeded,
    RequestConfig,
    WeatherProvider,
)
from .openweather import OpenWeatherClient

__all__ = [
    "ApiError",
    "EmptyResultError",
    "MalformedResponseError",
    "NetworkError",
    "OpenWeatherClient",
    "ProviderError",
    "QuotaExceeded",
    "RequestConfig",
    "WeatherProvider",
]
