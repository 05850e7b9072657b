"""Last-known-good storage for offline fallback.

One slot per data kind. A write replaces the slot wholesale and stamps the
fetch time; a read hands back the stored value marked ``cached=True``. Nothing
ever expires: the fetch time is exposed as metadata and it is up to the
caller to decide what to make of it.

Slots are keyed by kind only, so fetching another location overwrites the
previous location's entry.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, fields
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .entities import CacheEntry, DailySummary, DataKind, Sample, UnitSystem

DEFAULT_FILENAMES: Mapping[DataKind, str] = {
    DataKind.CURRENT: "cache-weather.json",
    DataKind.HOURLY: "cache-forecast.json",
    DataKind.DAILY: "cache-daily-forecast.json",
}


class CacheStore:
    """Base class: serialization lives here, storage in subclasses."""

    def __init__(self, time_func: Callable[[], float] = time.time) -> None:
        self._time_func = time_func
        self._log = logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def write(self, kind: DataKind, value: Any) -> Optional[CacheEntry]:
        if value is None or (isinstance(value, list) and not value):
            self._log.debug("Not caching empty %s value", kind.value)
            return None
        fetched_at = int(self._time_func())
        record = {"fetched_at": fetched_at, "payload": _encode(kind, value)}
        self._save(kind, record)
        self._log.debug("Cached %s value fetched at %s", kind.value, fetched_at)
        return CacheEntry(fetched_at=fetched_at, payload=value)

    def read(self, kind: DataKind) -> Optional[CacheEntry]:
        record = self._load(kind)
        if record is None:
            return None
        try:
            return CacheEntry(fetched_at=int(record["fetched_at"]), payload=_decode(kind, record["payload"]))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            self._log.warning("Discarding unreadable %s cache entry: %s", kind.value, exc)
            return None

    def clear(self) -> None:
        for kind in DataKind:
            self._delete(kind)

    # Storage ------------------------------------------------------------
    def _save(self, kind: DataKind, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    def _load(self, kind: DataKind) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def _delete(self, kind: DataKind) -> None:
        raise NotImplementedError


class MemoryCacheStore(CacheStore):
    """Keeps serialized records in a dict; nothing survives the process."""

    def __init__(self, time_func: Callable[[], float] = time.time) -> None:
        super().__init__(time_func)
        self._storage: Dict[DataKind, str] = {}

    def _save(self, kind: DataKind, record: Dict[str, Any]) -> None:
        self._storage[kind] = json.dumps(record)

    def _load(self, kind: DataKind) -> Optional[Dict[str, Any]]:
        raw = self._storage.get(kind)
        if raw is None:
            return None
        return json.loads(raw)

    def _delete(self, kind: DataKind) -> None:
        self._storage.pop(kind, None)


class FileCacheStore(CacheStore):
    """One JSON file per kind inside ``directory``."""

    def __init__(
        self,
        directory: Path,
        time_func: Callable[[], float] = time.time,
        filenames: Mapping[DataKind, str] = DEFAULT_FILENAMES,
    ) -> None:
        super().__init__(time_func)
        self.directory = Path(directory)
        self._filenames = dict(filenames)

    def path_for(self, kind: DataKind) -> Path:
        return self.directory / self._filenames[kind]

    def _save(self, kind: DataKind, record: Dict[str, Any]) -> None:
        path = self.path_for(kind)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(record, indent=2), encoding="utf-8")
        except OSError as exc:
            self._log.error("Error saving cache %s: %s", path, exc)

    def _load(self, kind: DataKind) -> Optional[Dict[str, Any]]:
        path = self.path_for(kind)
        if not path.exists():
            return None
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            self._log.error("Error reading cache %s: %s", path, exc)
            return None
        if not text.strip():
            return None
        try:
            record = json.loads(text)
        except ValueError as exc:
            self._log.warning("Ignoring corrupt cache file %s: %s", path, exc)
            return None
        if not isinstance(record, dict):
            self._log.warning("Ignoring cache file %s with unexpected layout", path)
            return None
        return record

    def _delete(self, kind: DataKind) -> None:
        try:
            self.path_for(kind).unlink()
        except FileNotFoundError:
            pass


# serialization ------------------------------------------------------
def _encode(kind: DataKind, value: Any) -> Any:
    if kind is DataKind.CURRENT:
        return _sample_to_dict(value)
    if kind is DataKind.HOURLY:
        return [_sample_to_dict(sample) for sample in value]
    return [_summary_to_dict(summary) for summary in value]


def _decode(kind: DataKind, payload: Any) -> Any:
    if kind is DataKind.CURRENT:
        return _sample_from_dict(payload)
    if not isinstance(payload, list):
        raise TypeError(f"expected a list, got {type(payload).__name__}")
    if kind is DataKind.HOURLY:
        return [_sample_from_dict(item) for item in payload]
    return [_summary_from_dict(item) for item in payload]


def _field_names(cls) -> Tuple[str, ...]:
    return tuple(item.name for item in fields(cls))


def _sample_to_dict(sample: Sample) -> Dict[str, Any]:
    payload = asdict(sample)
    payload["unit_system"] = sample.unit_system.value
    payload.pop("cached", None)
    return payload


def _sample_from_dict(payload: Mapping[str, Any]) -> Sample:
    known = {key: value for key, value in payload.items() if key in _field_names(Sample)}
    known["unit_system"] = UnitSystem.parse(known.get("unit_system"))
    known["cached"] = True
    return Sample(**known)


def _summary_to_dict(summary: DailySummary) -> Dict[str, Any]:
    payload = asdict(summary)
    payload["date"] = summary.date.isoformat()
    payload["unit_system"] = summary.unit_system.value
    payload.pop("cached", None)
    return payload


def _summary_from_dict(payload: Mapping[str, Any]) -> DailySummary:
    known = {key: value for key, value in payload.items() if key in _field_names(DailySummary)}
    known["date"] = date.fromisoformat(known["date"])
    known["unit_system"] = UnitSystem.parse(known.get("unit_system"))
    known["cached"] = True
    return DailySummary(**known)


__all__ = ["CacheStore", "DEFAULT_FILENAMES", "FileCacheStore", "MemoryCacheStore"]
