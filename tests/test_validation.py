"""Tests for assignment validation and request parsing."""

from datetime import timezone

import pytest

from conftest import utc
from core.validation import (
    clip_to_window,
    is_valid_rate,
    is_valid_timezone,
    parse_instant,
    parse_period,
    validate_intervals,
)


class TestValidateIntervals:
    def test_keeps_well_formed_intervals(self, make_interval):
        interval = make_interval("S1", "2026-01-05T00:00", "2026-01-05T06:00")
        valid, errors = validate_intervals([interval])
        assert valid == [interval]
        assert errors == []

    def test_drops_zero_length_silently(self, make_interval):
        valid, errors = validate_intervals([make_interval("S1", "2026-01-05T06:00", "2026-01-05T06:00")])
        assert valid == []
        assert errors == []

    def test_rejects_inverted_interval(self, make_interval):
        valid, errors = validate_intervals([make_interval("S1", "2026-01-05T06:00", "2026-01-05T05:00")])
        assert valid == []
        assert len(errors) == 1
        assert "ends before it starts" in errors[0]

    def test_rejects_missing_person(self, make_interval):
        valid, errors = validate_intervals(
            [make_interval("S1", "2026-01-05T00:00", "2026-01-05T06:00", person_id="")]
        )
        assert valid == []
        assert "no person id" in errors[0]


class TestClipToWindow:
    def test_trims_overhanging_interval(self, make_interval):
        interval = make_interval("S1", "2026-01-04T18:00", "2026-01-05T06:00")
        clipped = clip_to_window([interval], utc("2026-01-05T00:00"), utc("2026-01-06T00:00"))
        assert len(clipped) == 1
        assert clipped[0].start == utc("2026-01-05T00:00")
        assert clipped[0].end == utc("2026-01-05T06:00")
        assert clipped[0].person_id == interval.person_id

    def test_drops_interval_outside_window(self, make_interval):
        interval = make_interval("S1", "2026-01-03T00:00", "2026-01-04T00:00")
        assert clip_to_window([interval], utc("2026-01-05T00:00"), utc("2026-01-06T00:00")) == []

    def test_returns_inside_interval_unchanged(self, make_interval):
        interval = make_interval("S1", "2026-01-05T01:00", "2026-01-05T02:00")
        assert clip_to_window([interval], utc("2026-01-05T00:00"), utc("2026-01-06T00:00"))[0] is interval


class TestParsePeriod:
    def test_zulu_datetimes(self):
        since, until = parse_period("2026-01-03T00:00:00Z", "2026-01-05T00:00:00Z")
        assert since == utc("2026-01-03T00:00")
        assert until == utc("2026-01-05T00:00")

    def test_dates_mean_midnight_utc(self):
        since, _ = parse_period("2026-01-03", "2026-01-04")
        assert since == utc("2026-01-03T00:00")
        assert since.tzinfo == timezone.utc

    def test_offsets_are_kept(self):
        since = parse_instant("2026-01-03T09:00:00+01:00")
        assert since == utc("2026-01-03T08:00")

    def test_rejects_garbage(self):
        with pytest.raises(ValueError, match="startDate"):
            parse_period("yesterday", "2026-01-04")

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError, match="must be after"):
            parse_period("2026-01-04", "2026-01-04")


class TestIsValidRate:
    @pytest.mark.parametrize("value", [25, 50, 75.0, 200, 99.5])
    def test_valid(self, value):
        assert is_valid_rate(value) is True

    @pytest.mark.parametrize("value", [24.99, 201, -10, "75", float("nan"), None, True])
    def test_invalid(self, value):
        assert is_valid_rate(value) is False


class TestIsValidTimezone:
    @pytest.mark.parametrize("name", ["UTC", "Europe/London", "America/New_York"])
    def test_known(self, name):
        assert is_valid_timezone(name) is True

    @pytest.mark.parametrize("name", ["Mars/Olympus", "", "../etc/passwd"])
    def test_unknown(self, name):
        assert is_valid_timezone(name) is False
