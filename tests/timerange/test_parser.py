"""Tests for the time expression parser."""

import pytest

from hue_scheduler.timerange import (
    ParseResult,
    TimeRange,
    TimeRangeParser,
    first_match,
    matches,
)


@pytest.fixture
def parser():
    """Parser with solar variables defined."""
    return TimeRangeParser({"sunrise": 360, "sunset": 1200})


class Test24HourLiterals:
    """Tests for H[:MM]h windows."""

    def test_whole_hours(self, parser):
        assert parser.parse("Test (10h-20h)") == [TimeRange(600, 1200)]

    def test_with_minutes(self, parser):
        assert parser.parse("Test (12:23h-20h)") == [TimeRange(743, 1200)]
        assert parser.parse("Test (12:23h-20:59h)") == [TimeRange(743, 1259)]

    def test_wrapping_and_zero_width(self, parser):
        """Windows ending before they start wrap past midnight."""
        assert parser.parse("Test (0:01h-0:00h)") == [TimeRange(1, 0)]
        assert parser.parse("Test (0:00h-0:00h)") == [TimeRange(0, 0)]

    def test_single_digit_minutes_rejected(self, parser):
        assert parser.parse("Test (0:1h-0:0h)") == []

    def test_out_of_range_rejected(self, parser):
        assert parser.parse("Test (10h-20:60h)") == []
        assert parser.parse("Test (10h-25h)") == []

    def test_24h_is_end_of_day(self, parser):
        """24h is 1440, not wrapped to 0."""
        assert parser.parse("Late (20h-24h)") == [TimeRange(1200, 1440)]

    def test_24h_with_minutes_rejected(self, parser):
        assert parser.parse("Late (20h-24:30h)") == []

    def test_unbalanced_parentheses(self, parser):
        assert parser.parse("Test (10h-20h") == []
        assert parser.parse("Test 10h-20h)") == []


class Test12HourLiterals:
    """Tests for AM/PM windows."""

    def test_basic(self, parser):
        assert parser.parse("(6AM-6PM)") == [TimeRange(360, 1080)]

    def test_noon_and_midnight(self, parser):
        assert parser.parse("(12AM-12PM)") == [TimeRange(0, 720)]

    def test_minutes_and_lowercase(self, parser):
        assert parser.parse("(7:30am-11:45pm)") == [TimeRange(450, 1425)]

    def test_hour_bound_exceeded(self, parser):
        assert parser.parse("(13PM-6PM)") == []

    def test_mixed_with_24h(self, parser):
        assert parser.parse("(6PM-23:30h)") == [TimeRange(1080, 1410)]


class TestVariables:
    """Tests for symbolic endpoints."""

    def test_sunrise_sunset(self, parser):
        assert parser.parse("(sunrise-sunset)") == [TimeRange(360, 1200)]

    def test_variable_and_literal(self, parser):
        assert parser.parse("Evening (18:23h-sunset)") == [TimeRange(1103, 1200)]

    def test_whitespace_is_trimmed(self, parser):
        assert parser.parse("( sunset - 23h )") == [TimeRange(1200, 1380)]

    def test_undefined_variable(self):
        parser = TimeRangeParser()
        assert parser.parse("(sunrise-sunset)") == []

    def test_define_variables_merges(self):
        parser = TimeRangeParser({"sunrise": 360})
        parser.define_variables({"sunset": 1200})
        assert parser.variables == {"sunrise": 360, "sunset": 1200}
        assert parser.parse("(sunrise-sunset)") == [TimeRange(360, 1200)]

    def test_define_variables_rejects_invalid_minutes(self):
        parser = TimeRangeParser()
        with pytest.raises(ValueError):
            parser.define_variables({"sunset": 2000})

    def test_constructor_rejects_invalid_minutes(self):
        with pytest.raises(ValueError, match="sunset"):
            TimeRangeParser({"sunset": 1500})

    def test_variables_view_is_read_only(self):
        parser = TimeRangeParser({"sunrise": 360})
        view = parser.variables

        with pytest.raises(TypeError):
            view["sunrise"] = 0

        parser.define_variables({"sunset": 1200})
        assert view == {"sunrise": 360, "sunset": 1200}

    def test_out_of_range_literal_does_not_fall_through(self):
        """A malformed literal is not looked up as a variable."""
        parser = TimeRangeParser({"25h": 60})
        assert parser.resolve("25h") is None


class TestMultipleWindows:
    """Tests for several groups and segments in one label."""

    def test_comma_separated_segments(self, parser):
        assert parser.parse("Kitchen (6AM-8AM, 18h-sunset)") == [
            TimeRange(360, 480),
            TimeRange(1080, 1200),
        ]

    def test_multiple_groups(self, parser):
        assert parser.parse("(6h-8h) Kitchen (20h-22h)") == [
            TimeRange(360, 480),
            TimeRange(1200, 1320),
        ]

    def test_bad_segment_does_not_abort_others(self, parser):
        result = parser.parse_with_report("(6h-8h, 13PM-6PM, moonrise-22h, 20h-22h)")
        assert result == ParseResult(
            ranges=[TimeRange(360, 480), TimeRange(1200, 1320)],
            skipped=2,
        )

    def test_segment_without_separator_is_skipped(self, parser):
        result = parser.parse_with_report("(10h)")
        assert result.ranges == []
        assert result.skipped == 1

    def test_no_group(self, parser):
        result = parser.parse_with_report("Living room")
        assert result.ranges == []
        assert result.skipped == 0


class TestMatching:
    """Tests for half-open matching."""

    def test_normal_range(self):
        time_range = TimeRange(600, 1200)
        assert matches(time_range, 600)
        assert matches(time_range, 720)
        assert matches(time_range, 1199)
        assert not matches(time_range, 1200)
        assert not matches(time_range, 599)

    def test_wrapping_range(self):
        time_range = TimeRange(1200, 360)
        assert matches(time_range, 1200)
        assert matches(time_range, 1439)
        assert matches(time_range, 0)
        assert matches(time_range, 359)
        assert not matches(time_range, 360)
        assert not matches(time_range, 1199)
        assert not matches(time_range, 720)

    def test_zero_width_never_matches(self):
        time_range = TimeRange(0, 0)
        assert not any(matches(time_range, minute) for minute in (0, 1, 720, 1439))

    def test_end_of_day(self):
        assert matches(TimeRange(1200, 1440), 1439)

    def test_first_match(self):
        ranges = [TimeRange(360, 480), TimeRange(1080, 1200)]
        assert first_match(ranges, 1100) == TimeRange(1080, 1200)
        assert first_match(ranges, 600) is None


class TestTimeRange:
    """Tests for the TimeRange value type."""

    def test_flags(self):
        assert TimeRange(1200, 360).is_wrapping
        assert not TimeRange(360, 1200).is_wrapping
        assert TimeRange(5, 5).is_empty

    def test_rejects_invalid_minutes(self):
        with pytest.raises(ValueError):
            TimeRange(-1, 10)
        with pytest.raises(ValueError):
            TimeRange(0, 1441)
