"""Tests for the day-equivalent classifier."""

import pytest

from conftest import utc
from services.classifier import classify_day_equivalents


def test_full_saturday_is_one_weekend_unit():
    units = classify_day_equivalents(utc("2026-01-03T00:00"), utc("2026-01-04T00:00"), "UTC")
    assert units.weekday_units == 0.0
    assert units.weekend_units == 1.0


def test_one_weekday_hour_is_a_twenty_fourth():
    units = classify_day_equivalents(utc("2026-01-05T10:00"), utc("2026-01-05T11:00"), "UTC")
    assert units.weekday_units == pytest.approx(1 / 24)
    assert units.weekend_units == 0.0


def test_friday_counts_as_weekend():
    units = classify_day_equivalents(utc("2026-01-09T00:00"), utc("2026-01-10T00:00"), "UTC")
    assert units.weekend_units == 1.0


def test_interval_crossing_thursday_midnight_is_split():
    units = classify_day_equivalents(utc("2026-01-08T22:00"), utc("2026-01-09T02:00"), "UTC")
    assert units.weekday_units == pytest.approx(2 / 24)
    assert units.weekend_units == pytest.approx(2 / 24)


def test_local_calendar_decides_the_day():
    # 03:00-05:00 UTC Friday is 22:00-00:00 Thursday in New York
    units = classify_day_equivalents(utc("2026-01-09T03:00"), utc("2026-01-09T05:00"), "America/New_York")
    assert units.weekday_units == pytest.approx(2 / 24)
    assert units.weekend_units == 0.0


def test_spring_forward_day_is_23_hours():
    # Sunday 2026-03-29, Europe/London skips 01:00-02:00
    units = classify_day_equivalents(utc("2026-03-29T00:00"), utc("2026-03-29T23:00"), "Europe/London")
    assert units.weekend_units == pytest.approx(23 / 24)
    assert units.weekday_units == 0.0


def test_week_long_interval():
    units = classify_day_equivalents(utc("2026-01-05T00:00"), utc("2026-01-12T00:00"), "UTC")
    assert units.weekday_units == pytest.approx(4.0)
    assert units.weekend_units == pytest.approx(3.0)


@pytest.mark.parametrize("end", ["2026-01-05T10:00", "2026-01-05T09:00"])
def test_empty_or_inverted_interval_is_zero(end):
    units = classify_day_equivalents(utc("2026-01-05T10:00"), utc(end), "UTC")
    assert units == (0.0, 0.0)


def test_blank_timezone_means_utc():
    assert classify_day_equivalents(
        utc("2026-01-09T03:00"), utc("2026-01-09T05:00"), ""
    ) == classify_day_equivalents(utc("2026-01-09T03:00"), utc("2026-01-09T05:00"), "UTC")
