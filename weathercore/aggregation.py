"""Hourly windowing and per-day aggregation of forecast samples."""
from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from .entities import DailySummary, Sample

logger = logging.getLogger(__name__)

HOURLY_WINDOW_SIZE = 8
MAX_DAYS = 10


def window(samples: Sequence[Sample], size: int = HOURLY_WINDOW_SIZE) -> List[Sample]:
    """Return the leading ``size`` samples (3-hour steps, so roughly a day)."""
    return list(samples[: min(size, len(samples))])


def local_date(timestamp: int, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of ``timestamp`` in ``tz`` (system local time when ``None``)."""
    return datetime.fromtimestamp(timestamp, tz).date()


def group_by_day(
    samples: Iterable[Sample],
    tz: Optional[tzinfo] = None,
    max_days: int = MAX_DAYS,
) -> List[DailySummary]:
    """Group samples by calendar date and reduce each group to a summary.

    The input is sorted by timestamp first, so any ordering of the same
    samples produces the same summaries. At most ``max_days`` summaries are
    returned, earliest date first. Samples whose timestamp cannot be placed on
    a calendar date are dropped.
    """
    ordered = sorted(samples, key=lambda sample: sample.timestamp)
    by_date: Dict[date, List[Sample]] = {}
    for sample in ordered:
        try:
            day = local_date(sample.timestamp, tz)
        except (OverflowError, OSError, ValueError) as exc:
            logger.warning("Skipping sample with unusable timestamp %s: %s", sample.timestamp, exc)
            continue
        by_date.setdefault(day, []).append(sample)

    summaries: List[DailySummary] = []
    for day in sorted(by_date):
        summaries.append(summarize_day(day, by_date[day], tz))
        if len(summaries) >= max_days:
            break
    return summaries


def summarize_day(day: date, samples: Sequence[Sample], tz: Optional[tzinfo] = None) -> DailySummary:
    if not samples:
        raise ValueError("cannot summarize a day without samples")
    group = sorted(samples, key=lambda sample: sample.timestamp)
    first = group[0]
    # the middle entry stands in for the day, roughly midday for a full day
    representative = group[len(group) // 2]

    temp_min = min(sample.temp_min for sample in group)
    temp_max = max(sample.temp_max for sample in group)
    count = len(group)

    return DailySummary(
        date=day,
        day_label=datetime.fromtimestamp(first.timestamp, tz).strftime("%a"),
        timestamp=first.timestamp,
        temp_min=temp_min,
        temp_max=temp_max,
        temperature_midpoint=(temp_min + temp_max) / 2,
        representative_condition=representative.condition,
        description=representative.description,
        icon_code=representative.icon_code,
        avg_humidity=sum(sample.humidity for sample in group) / count,
        avg_wind_speed=sum(sample.wind_speed for sample in group) / count,
        max_precip_probability=max(sample.precip_probability for sample in group),
        total_rain=sum(sample.rain_amount for sample in group),
        total_snow=sum(sample.snow_amount for sample in group),
        unit_system=first.unit_system,
        sample_count=count,
        cached=any(sample.cached for sample in group),
    )


__all__ = ["HOURLY_WINDOW_SIZE", "MAX_DAYS", "group_by_day", "local_date", "summarize_day", "window"]
