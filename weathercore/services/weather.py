from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import tzinfo
from typing import Any, Callable, Dict, List, Optional

from ..aggregation import group_by_day, window
from ..alerts import AlertHistory, AlertService
from ..cache import CacheStore, FileCacheStore, MemoryCacheStore
from ..config import Settings
from ..entities import DailySummary, DataKind, Provenance, RequestState, Result, Sample, Snapshot, UnitSystem
from ..parser import parse_coordinates, parse_current, parse_daily, parse_forecast, parse_uv_index
from ..providers.base import EmptyResultError, ProviderError
from ..providers.openweather import OpenWeatherClient

_TERMINAL_STATES = {
    Provenance.LIVE: RequestState.LIVE,
    Provenance.CACHED: RequestState.CACHED_FALLBACK,
    Provenance.EMPTY: RequestState.EMPTY,
}


class WeatherService:
    """Serve current conditions, forecasts and alerts with offline fallback.

    Every public method returns a :class:`Result`; provider failures are turned
    into a cache lookup and, failing that, an explicit empty result.
    """

    def __init__(
        self,
        *,
        client: Any,
        cache: Optional[CacheStore] = None,
        alerts: Optional[AlertService] = None,
        unit_system: UnitSystem = UnitSystem.IMPERIAL,
        tz: Optional[tzinfo] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.cache = cache or MemoryCacheStore()
        self.alerts = alerts or AlertService(client)
        self.unit_system = unit_system
        self.tz = tz
        self._states: Dict[DataKind, RequestState] = {kind: RequestState.IDLE for kind in DataKind}
        self._log = logger or logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WeatherService":
        client = OpenWeatherClient.from_settings(settings)
        return cls(
            client=client,
            cache=FileCacheStore(settings.cache_dir),
            alerts=AlertService(client, simulate=settings.simulated_alerts, history=AlertHistory()),
            unit_system=settings.unit_system,
        )

    # Public API ---------------------------------------------------------
    def get_current(self, location: str) -> Result:
        self._begin(DataKind.CURRENT)
        try:
            self._require_location(location)
            payload = self.client.current(location, self.unit_system)
            sample = parse_current(payload, self.unit_system)
        except ProviderError as exc:
            return self._fallback(DataKind.CURRENT, location, exc, None)
        sample = self._with_uv_index(sample)
        self.cache.write(DataKind.CURRENT, sample)
        return self._finish(DataKind.CURRENT, Result(sample, Provenance.LIVE))

    def get_hourly(self, location: str) -> Result:
        self._begin(DataKind.HOURLY)
        try:
            samples = self._live_forecast(location)
        except ProviderError as exc:
            return self._fallback(DataKind.HOURLY, location, exc, [], window)
        return self._finish(DataKind.HOURLY, Result(window(samples), Provenance.LIVE))

    def get_daily(self, location: str) -> Result:
        self._begin(DataKind.DAILY)
        try:
            summaries = self._live_daily(location)
        except ProviderError as exc:
            self._log.info("Dedicated daily forecast unavailable for %r: %s", location, exc)
        else:
            self.cache.write(DataKind.DAILY, summaries)
            return self._finish(DataKind.DAILY, Result(summaries, Provenance.LIVE))

        try:
            summaries = group_by_day(self._live_forecast(location), self.tz)
            if not summaries:
                raise EmptyResultError("forecast entries could not be placed on calendar days")
        except ProviderError as exc:
            reason = exc
        else:
            self.cache.write(DataKind.DAILY, summaries)
            return self._finish(
                DataKind.DAILY,
                Result(summaries, Provenance.LIVE, message="Daily summaries built from the 3-hour forecast."),
            )

        hourly = self.cache.read(DataKind.HOURLY)
        summaries = group_by_day(hourly.payload, self.tz) if hourly is not None else []
        if summaries:
            self._log.warning("Daily forecast for %r failed (%s), re-aggregating cached hourly data", location, reason)
            return self._finish(
                DataKind.DAILY,
                Result(
                    summaries,
                    Provenance.CACHED,
                    fetched_at=hourly.fetched_at,
                    message=f"Showing cached data: {reason}",
                ),
            )
        return self._fallback(DataKind.DAILY, location, reason, [])

    def get_alerts(self, location: str) -> Result:
        fetched = self.alerts.fetch(location)
        return Result(fetched.alerts, fetched.provenance, message=fetched.message)

    def refresh(self, location: str) -> Snapshot:
        """Run all four requests for ``location`` concurrently."""
        with ThreadPoolExecutor(max_workers=4, thread_name_prefix="weather-refresh") as pool:
            current = pool.submit(self.get_current, location)
            hourly = pool.submit(self.get_hourly, location)
            daily = pool.submit(self.get_daily, location)
            alerts = pool.submit(self.get_alerts, location)
            return Snapshot(
                location=location,
                current=current.result(),
                hourly=hourly.result(),
                daily=daily.result(),
                alerts=alerts.result(),
            )

    def state(self, kind: DataKind) -> RequestState:
        return self._states[kind]

    # Helpers ------------------------------------------------------------
    def _live_forecast(self, location: str) -> List[Sample]:
        self._require_location(location)
        samples = parse_forecast(self.client.forecast(location, self.unit_system), self.unit_system)
        if not samples:
            raise EmptyResultError("forecast contained no usable entries")
        self.cache.write(DataKind.HOURLY, samples)
        return samples

    def _live_daily(self, location: str) -> List[DailySummary]:
        self._require_location(location)
        coordinates = parse_coordinates(self.client.geocode(location))
        if coordinates is None:
            raise EmptyResultError(f"location {location!r} not found")
        latitude, longitude = coordinates
        samples = parse_daily(self.client.daily(latitude, longitude, self.unit_system), self.unit_system)
        if not samples:
            raise EmptyResultError("daily forecast contained no usable entries")
        summaries = group_by_day(samples, self.tz)
        if not summaries:
            raise EmptyResultError("daily forecast entries could not be placed on calendar days")
        return summaries

    def _with_uv_index(self, sample: Sample) -> Sample:
        if sample.latitude is None or sample.longitude is None:
            return sample
        try:
            uv_index = parse_uv_index(self.client.uv_index(sample.latitude, sample.longitude, self.unit_system))
        except ProviderError as exc:
            self._log.warning("Error fetching UV index: %s", exc)
            return sample
        if uv_index is None:
            return sample
        return replace(sample, uv_index=uv_index)

    def _fallback(
        self,
        kind: DataKind,
        location: str,
        error: ProviderError,
        empty: Any,
        transform: Callable[[Any], Any] = lambda value: value,
    ) -> Result:
        entry = self.cache.read(kind)
        if entry is not None:
            self._log.warning("Live %s request for %r failed (%s), serving cache", kind.value, location, error)
            return self._finish(
                kind,
                Result(
                    transform(entry.payload),
                    Provenance.CACHED,
                    fetched_at=entry.fetched_at,
                    message=f"Showing cached data: {error}",
                ),
            )
        self._log.error("Live %s request for %r failed (%s) and nothing is cached", kind.value, location, error)
        return self._finish(kind, Result(empty, Provenance.EMPTY, message=f"No data available: {error}"))

    def _require_location(self, location: str) -> None:
        if not (location or "").strip():
            raise ProviderError("no location given")

    def _begin(self, kind: DataKind) -> None:
        self._states[kind] = RequestState.LOADING

    def _finish(self, kind: DataKind, result: Result) -> Result:
        self._states[kind] = _TERMINAL_STATES[result.provenance]
        return result


__all__ = ["WeatherService"]
