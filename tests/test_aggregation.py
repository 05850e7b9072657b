from __future__ import annotations

import random
from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from weathercore.aggregation import group_by_day, window
from weathercore.entities import Sample, UnitSystem

THREE_HOURS = 3 * 60 * 60
DAY_MINS = [10, 11, 10, 12, 11, 13, 10, 12]
DAY_MAXS = [14, 13, 15, 14, 16, 14, 15, 13]


def make_sample(timestamp: int, **overrides) -> Sample:
    values = dict(
        timestamp=timestamp,
        temperature=12.0,
        temp_min=10.0,
        temp_max=14.0,
        feels_like=11.0,
        humidity=50.0,
        wind_speed=4.0,
        condition="Clear",
        description="clear sky",
        icon_code="800",
        precip_probability=0,
        rain_amount=0.0,
        snow_amount=0.0,
        unit_system=UnitSystem.METRIC,
    )
    values.update(overrides)
    return Sample(**values)


def five_day_series(start: int) -> list:
    samples = []
    for index in range(40):
        day, slot = divmod(index, 8)
        samples.append(
            make_sample(
                start + index * THREE_HOURS,
                temp_min=float(DAY_MINS[slot] + day),
                temp_max=float(DAY_MAXS[slot] + day),
            )
        )
    return samples


def utc_ts(*args) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp())


# window -------------------------------------------------------------
def test_window_keeps_leading_eight():
    samples = [make_sample(i) for i in range(20)]

    result = window(samples)

    assert result == samples[:8]


def test_window_with_short_input_returns_everything():
    samples = [make_sample(i) for i in range(3)]

    assert window(samples) == samples
    assert window([]) == []


def test_window_does_not_touch_input():
    samples = [make_sample(i, cached=True) for i in range(10)]
    before = list(samples)

    result = window(samples)
    result.append(make_sample(99))

    assert samples == before
    assert all(sample.cached for sample in result[:8])


# group_by_day -------------------------------------------------------
def test_forty_three_hour_samples_make_five_local_days():
    start = int(datetime(2024, 6, 10, 0, 0).timestamp())

    summaries = group_by_day(five_day_series(start))

    assert len(summaries) == 5
    assert [summary.date for summary in summaries] == [date(2024, 6, 10 + day) for day in range(5)]
    for day, summary in enumerate(summaries):
        assert summary.temp_min == 10 + day
        assert summary.temp_max == 16 + day
        assert summary.sample_count == 8


def test_grouping_is_independent_of_input_order():
    samples = five_day_series(utc_ts(2024, 3, 1))
    shuffled = list(samples)
    random.Random(7).shuffle(shuffled)

    assert group_by_day(shuffled, timezone.utc) == group_by_day(samples, timezone.utc)


def test_regrouping_the_same_samples_is_stable():
    samples = five_day_series(utc_ts(2024, 3, 1))

    first = group_by_day(samples, timezone.utc)
    second = group_by_day(sorted(samples, key=lambda sample: sample.timestamp), timezone.utc)

    assert first == second


def test_midpoint_lies_within_range():
    rng = random.Random(3)
    samples = []
    for index in range(60):
        low = rng.uniform(-20, 30)
        samples.append(make_sample(utc_ts(2024, 1, 1) + index * THREE_HOURS, temp_min=low, temp_max=low + rng.uniform(0, 12)))

    for summary in group_by_day(samples, timezone.utc):
        assert summary.temp_min <= summary.temperature_midpoint <= summary.temp_max
        assert summary.temperature_midpoint == pytest.approx((summary.temp_min + summary.temp_max) / 2)


def test_at_most_ten_days_with_increasing_dates():
    samples = [make_sample(utc_ts(2024, 1, 1, 12) + day * 86400) for day in range(14)]

    summaries = group_by_day(samples, timezone.utc)

    assert len(summaries) == 10
    dates = [summary.date for summary in summaries]
    assert all(earlier < later for earlier, later in zip(dates, dates[1:]))
    assert dates[0] == date(2024, 1, 1)


def test_daily_statistics():
    base = utc_ts(2024, 5, 6)
    samples = [
        make_sample(base, humidity=40, wind_speed=2.0, precip_probability=10, rain_amount=0.5, condition="Clouds"),
        make_sample(base + THREE_HOURS, humidity=60, wind_speed=4.0, precip_probability=80, rain_amount=1.5, snow_amount=0.2, condition="Rain"),
        make_sample(base + 2 * THREE_HOURS, humidity=80, wind_speed=6.0, precip_probability=30, condition="Snow"),
    ]

    (summary,) = group_by_day(samples, timezone.utc)

    assert summary.avg_humidity == pytest.approx(60.0)
    assert summary.avg_wind_speed == pytest.approx(4.0)
    assert summary.max_precip_probability == 80
    assert summary.total_rain == pytest.approx(2.0)
    assert summary.total_snow == pytest.approx(0.2)
    assert summary.representative_condition == "Rain"
    assert summary.day_label == "Mon"
    assert summary.timestamp == base
    assert summary.unit_system is UnitSystem.METRIC


def test_representative_condition_is_middle_of_sorted_group():
    base = utc_ts(2024, 5, 6)
    conditions = ["A", "B", "C", "D"]
    samples = [make_sample(base + i * THREE_HOURS, condition=name) for i, name in enumerate(conditions)]

    (summary,) = group_by_day(list(reversed(samples)), timezone.utc)

    assert summary.representative_condition == "C"


def test_cached_flag_is_or_of_group():
    base = utc_ts(2024, 5, 6)
    samples = [make_sample(base), replace(make_sample(base + THREE_HOURS), cached=True), make_sample(base + 86400)]

    first_day, second_day = group_by_day(samples, timezone.utc)

    assert first_day.cached is True
    assert second_day.cached is False


def test_empty_input_gives_no_summaries():
    assert group_by_day([]) == []


def test_samples_with_unusable_timestamps_are_dropped():
    base = utc_ts(2024, 5, 6)
    samples = [make_sample(base), make_sample(10**20), make_sample(base + 86400)]

    summaries = group_by_day(samples, timezone.utc)

    assert [summary.date for summary in summaries] == [date(2024, 5, 6), date(2024, 5, 7)]
    assert sum(summary.sample_count for summary in summaries) == 2
