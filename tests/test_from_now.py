"""
Tests for relative-time expressions.
"""
import datetime

import pytest

from jte.builtin_exceptions import RelativeTimeError
from jte.dsl.from_now import format_timestamp, from_now, parse_offset, parse_reference

REFERENCE = "2017-01-19T16:27:20.974Z"


class TestParseOffset:
    def test_single_component(self):
        offset = parse_offset("2 days")
        assert offset["days"] == 2
        assert offset["hours"] == 0

    def test_all_components(self):
        offset = parse_offset("1 year 2 months 3 weeks 4 days 5 hours 6 minutes 7 seconds")
        assert offset == {
            "years": 1, "months": 2, "weeks": 3, "days": 4,
            "hours": 5, "minutes": 6, "seconds": 7,
        }

    def test_abbreviations_without_spaces(self):
        offset = parse_offset("1y2mo3w4d5h6m7s")
        assert [offset[k] for k in ("years", "months", "weeks", "days", "hours", "minutes", "seconds")] == [
            1, 2, 3, 4, 5, 6, 7
        ]

    def test_case_insensitive(self):
        assert parse_offset("3 DAYS")["days"] == 3
        assert parse_offset("1 Hr")["hours"] == 1

    def test_negative_sign_applies_to_all(self):
        offset = parse_offset("- 1 day 2 hours")
        assert offset["days"] == -1
        assert offset["hours"] == -2

    def test_empty_is_zero(self):
        assert all(v == 0 for v in parse_offset("").values())
        assert all(v == 0 for v in parse_offset("   ").values())

    @pytest.mark.parametrize("text", [
        "abc",
        "2 fortnights",
        "3 days 1 year",
        "1 day 1 day",
        "days",
        "1.5 days",
    ])
    def test_invalid(self, text):
        with pytest.raises(RelativeTimeError) as e:
            parse_offset(text)
        assert "isn't a time expression" in str(e.value)


class TestFromNow:
    @pytest.mark.parametrize("offset,expected", [
        ("1 day", "2017-01-20T16:27:20.974Z"),
        ("-1 day", "2017-01-18T16:27:20.974Z"),
        ("+1 day", "2017-01-20T16:27:20.974Z"),
        ("2 hours 30 minutes", "2017-01-19T18:57:20.974Z"),
        ("1w", "2017-01-26T16:27:20.974Z"),
        ("10s", "2017-01-19T16:27:30.974Z"),
        ("1 month", "2017-02-18T16:27:20.974Z"),
        ("1 year", "2018-01-19T16:27:20.974Z"),
        ("", REFERENCE),
    ])
    def test_offsets(self, offset, expected):
        assert from_now(offset, REFERENCE) == expected

    def test_reference_without_fraction(self):
        assert from_now("1 minute", "2017-01-19T16:27:20Z") == "2017-01-19T16:28:20.000Z"

    def test_datetime_reference(self):
        aware = datetime.datetime(2020, 1, 1, 12, 0, tzinfo=datetime.timezone(datetime.timedelta(hours=2)))
        assert from_now("1 hour", aware) == "2020-01-01T11:00:00.000Z"

    def test_default_reference_is_now(self):
        before = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None, microsecond=0)
        result = parse_reference(from_now("0 seconds"))
        assert result >= before - datetime.timedelta(seconds=1)

    def test_invalid_reference(self):
        with pytest.raises(RelativeTimeError):
            from_now("1 day", "yesterday")

    def test_overflow(self):
        with pytest.raises(RelativeTimeError):
            from_now("99999 years", REFERENCE)


def test_format_timestamp_truncates_to_milliseconds():
    moment = datetime.datetime(2017, 1, 19, 16, 27, 20, 974999)
    assert format_timestamp(moment) == "2017-01-19T16:27:20.974Z"
