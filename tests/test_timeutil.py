"""Tests for meta time parsing."""

from datetime import UTC, date, datetime, timedelta, timezone

from pagekit.timeutil import ZERO_TIME, parse_time, to_utc


class TestToUtc:
    def test_naive_is_taken_as_utc(self):
        assert to_utc(datetime(2016, 1, 2, 3)) == datetime(2016, 1, 2, 3, tzinfo=UTC)

    def test_aware_is_converted(self):
        eastern = timezone(timedelta(hours=-5))

        result = to_utc(datetime(2016, 1, 2, 3, tzinfo=eastern))

        assert result == datetime(2016, 1, 2, 8, tzinfo=UTC)
        assert result.tzinfo == UTC


class TestParseTime:
    def test_date(self):
        assert parse_time(date(2016, 1, 2)) == datetime(2016, 1, 2, tzinfo=UTC)

    def test_iso_string_with_z(self):
        assert parse_time("2016-01-02T03:04:05Z") == datetime(2016, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_ansic(self):
        assert parse_time("Mon Jan  2 15:04:05 2006") == datetime(2006, 1, 2, 15, 4, 5, tzinfo=UTC)

    def test_surrounding_whitespace(self):
        assert parse_time("  2016-01-02\n") == datetime(2016, 1, 2, tzinfo=UTC)

    def test_blank_string(self):
        assert parse_time("   ") is None

    def test_non_time_values(self):
        assert parse_time(None) is None
        assert parse_time(["2016-01-02"]) is None
        assert parse_time(20160102) is None

    def test_zero_time_is_oldest(self):
        assert ZERO_TIME < datetime(1, 1, 2, tzinfo=UTC)

    def test_dotted_date(self):
        assert parse_time("2006.01.02") == datetime(2006, 1, 2, tzinfo=UTC)

    def test_datetime_with_zone_abbreviation(self):
        assert parse_time("2006-01-02 15:04:05 MST") == datetime(
            2006, 1, 2, 15, 4, 5, tzinfo=UTC
        )

    def test_go_time_string(self):
        result = parse_time("2006-01-02 15:04:05.123456789 -0700 MST")

        assert result == datetime(2006, 1, 2, 22, 4, 5, 123456, tzinfo=UTC)

    def test_unix_date(self):
        assert parse_time("Mon Jan  2 15:04:05 UTC 2006") == datetime(
            2006, 1, 2, 15, 4, 5, tzinfo=UTC
        )

    def test_rfc822z(self):
        assert parse_time("02 Jan 06 15:04 -0700") == datetime(2006, 1, 2, 22, 4, tzinfo=UTC)

    def test_rfc850(self):
        assert parse_time("Monday, 02-Jan-06 15:04:05 GMT") == datetime(
            2006, 1, 2, 15, 4, 5, tzinfo=UTC
        )

    def test_partial_dates_are_rejected(self):
        assert parse_time("12") is None
        assert parse_time("3") is None
        assert parse_time("May") is None
        assert parse_time("May 3") is None
        assert parse_time("15:04") is None

    def test_result_does_not_depend_on_today(self):
        assert parse_time("Jan 2 15:04:05") is None
