from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response


class ProviderError(RuntimeError):
    """Base error for anything that makes a whole request unusable."""


class NetworkError(ProviderError):
    """Transport failure or timeout."""


class ApiError(ProviderError):
    """The source answered with a non-success status."""

    def __init__(self, status: int, message: str = "") -> None:
        super().__init__(message or f"HTTP {status}")
        self.status = status


class QuotaExceeded(ApiError):
    """Raised when a provider reports a quota/usage limit issue."""


class MalformedResponseError(ProviderError):
    """The payload is structurally invalid or misses required fields."""


class EmptyResultError(ProviderError):
    """The payload is well-formed but holds zero usable entries."""


@dataclass
class RequestConfig:
    timeout: float = 10.0


class WeatherProvider:
    """Base class for HTTP providers.

    Every failure is mapped onto the provider error taxonomy so callers only
    need to handle :class:`ProviderError`. No retries happen here.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text)
            raise QuotaExceeded(429, "quota exceeded")
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text[:200])
            raise ApiError(response.status_code)
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise NetworkError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise NetworkError("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise MalformedResponseError("invalid json") from exc


__all__ = [
    "ApiError",
    "EmptyResultError",
    "MalformedResponseError",
    "NetworkError",
    "ProviderError",
    "QuotaExceeded",
    "RequestConfig",
    "WeatherProvider",
]
