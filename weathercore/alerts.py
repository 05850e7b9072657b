"""Weather alerts: lookup, severity heuristic and a short per-location history."""
from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional

from pydantic import ValidationError

from .entities import AlertHistoryEntry, AlertRecord, Provenance, Severity
from .parser import decode, describe_errors, parse_coordinates
from .providers.base import ApiError, ProviderError
from .schemas import AlertEntry, AlertsPayload


logger = logging.getLogger(__name__)

MAX_HISTORY_ENTRIES = 5
SIMULATED_ALERT_DURATION = 6 * 60 * 60


def classify_severity(title: str) -> Severity:
    """Rough severity from the alert title alone."""
    lower = (title or "").lower()
    if "warning" in lower or "severe" in lower:
        return Severity.HIGH
    if "watch" in lower:
        return Severity.MEDIUM
    return Severity.LOW


def parse_alerts(payload: Any, now: Optional[float] = None) -> List[AlertRecord]:
    """Decode an alerts document. A missing ``alerts`` block means none."""
    document = decode(AlertsPayload, payload, "alerts")
    if not document.alerts:
        return []
    issued = int(now if now is not None else time.time())
    alerts: List[AlertRecord] = []
    for index, raw in enumerate(document.alerts):
        try:
            entry = AlertEntry.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping malformed alert %s: %s", index, describe_errors(exc))
            continue
        start = entry.start if entry.start is not None else issued
        alerts.append(
            AlertRecord(
                id=entry.event,
                type=entry.event,
                title=entry.event,
                description=entry.description,
                severity=classify_severity(entry.event),
                timestamp=start,
                effective_start=start,
                effective_end=entry.end,
                provenance=Provenance.LIVE,
            )
        )
    return alerts


def simulated_alerts(now: Optional[float] = None) -> List[AlertRecord]:
    """Placeholder advisory shown when no live alert data could be obtained."""
    issued = int(now if now is not None else time.time())
    return [
        AlertRecord(
            id="alert-001",
            type="Wind Advisory",
            title="Moderate Wind Advisory",
            description="Winds 25-35 mph expected through tonight. Secure outdoor objects.",
            severity=Severity.MEDIUM,
            timestamp=issued,
            effective_start=issued,
            effective_end=issued + SIMULATED_ALERT_DURATION,
            provenance=Provenance.SIMULATED,
        )
    ]


def normalize_location(location: Optional[str]) -> str:
    return (location or "").strip().lower()


class AlertHistory:
    """Last few alert snapshots per location, newest first."""

    def __init__(
        self,
        max_entries: int = MAX_HISTORY_ENTRIES,
        time_func: Callable[[], float] = time.time,
    ) -> None:
        self.max_entries = max_entries
        self._time_func = time_func
        self._by_location: Dict[str, Deque[AlertHistoryEntry]] = {}

    def record(self, location: str, alerts: List[AlertRecord]) -> Optional[AlertHistoryEntry]:
        key = normalize_location(location)
        if not key:
            return None
        entry = AlertHistoryEntry(
            location_key=key,
            fetched_at=int(self._time_func()),
            snapshot=tuple(alerts),
        )
        entries = self._by_location.setdefault(key, deque())
        entries.appendleft(entry)
        while len(entries) > self.max_entries:
            entries.pop()
        return entry

    def get(self, location: str) -> List[AlertHistoryEntry]:
        entries = self._by_location.get(normalize_location(location))
        if not entries:
            return []
        return list(entries)


class AlertFetchStatus(str, Enum):
    LIVE = "live"
    NO_ALERTS = "no_alerts"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"
    SIMULATED = "simulated"


@dataclass(frozen=True)
class AlertFetchResult:
    status: AlertFetchStatus
    alerts: List[AlertRecord] = field(default_factory=list)
    message: str = ""

    @property
    def provenance(self) -> Provenance:
        if self.status is AlertFetchStatus.SIMULATED:
            return Provenance.SIMULATED
        if self.status in (AlertFetchStatus.LIVE, AlertFetchStatus.NO_ALERTS):
            return Provenance.LIVE
        return Provenance.EMPTY


class AlertService:
    """Resolve a location to coordinates, then ask for active alerts there.

    Failures never escape: they come back as an empty alert list with a
    ``FAILED``/``UNAVAILABLE`` status, or as the simulated placeholder when
    ``simulate`` is on.
    """

    def __init__(
        self,
        client: Any,
        simulate: bool = False,
        history: Optional[AlertHistory] = None,
        time_func: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.simulate = simulate
        self.history = history if history is not None else AlertHistory(time_func=time_func)
        self._time_func = time_func
        self._log = logging.getLogger(self.__class__.__name__)

    def fetch(self, location: str) -> AlertFetchResult:
        result = self._fetch_live(location)
        if not result.alerts and self.simulate:
            self._log.info("No live alerts for %r, serving simulated advisory", location)
            result = AlertFetchResult(
                AlertFetchStatus.SIMULATED,
                simulated_alerts(self._time_func()),
                result.message,
            )
        self.history.record(location, result.alerts)
        return result

    def _fetch_live(self, location: str) -> AlertFetchResult:
        if not normalize_location(location):
            return AlertFetchResult(AlertFetchStatus.FAILED, [], "No location provided.")
        try:
            coordinates = parse_coordinates(self.client.geocode(location))
            if coordinates is None:
                return AlertFetchResult(AlertFetchStatus.NO_ALERTS, [], f"Location {location!r} not found.")
            latitude, longitude = coordinates
            alerts = parse_alerts(self.client.alerts(latitude, longitude), now=self._time_func())
        except ApiError as exc:
            if exc.status == 404:
                self._log.warning("Alerts endpoint unavailable for %r", location)
                return AlertFetchResult(AlertFetchStatus.UNAVAILABLE, [], f"Alerts endpoint unavailable (HTTP {exc.status}).")
            self._log.warning("Alert request for %r failed: %s", location, exc)
            return AlertFetchResult(AlertFetchStatus.FAILED, [], f"Alert request failed (HTTP {exc.status}).")
        except ProviderError as exc:
            self._log.warning("Alert request for %r failed: %s", location, exc)
            return AlertFetchResult(AlertFetchStatus.FAILED, [], f"Alert request failed: {exc}")

        if alerts:
            return AlertFetchResult(AlertFetchStatus.LIVE, alerts, "Live alerts retrieved.")
        return AlertFetchResult(AlertFetchStatus.NO_ALERTS, [], "No active alerts returned.")


__all__ = [
    "AlertFetchResult",
    "AlertFetchStatus",
    "AlertHistory",
    "AlertService",
    "MAX_HISTORY_ENTRIES",
    "classify_severity",
    "normalize_location",
    "parse_alerts",
    "simulated_alerts",
]
