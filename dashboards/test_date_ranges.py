"""
Tests for the UTC calendar helpers.
"""
import pytest
from datetime import date, datetime, time, timedelta, timezone as dt_timezone

from dashboards.services.date_ranges import DateRange, month_bounds, utc_date


class TestDateRange:

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            DateRange(date(2025, 4, 2), date(2025, 4, 1))

    def test_bounds_cover_whole_utc_days(self):
        date_range = DateRange(date(2025, 4, 1), date(2025, 4, 3))

        assert date_range.start_at == datetime(2025, 4, 1, tzinfo=dt_timezone.utc)
        assert date_range.end_at == datetime.combine(date(2025, 4, 3), time.max, tzinfo=dt_timezone.utc)
        assert date_range.day_count == 3
        assert date_range.days() == [date(2025, 4, 1), date(2025, 4, 2), date(2025, 4, 3)]

    def test_trailing_window_ends_today(self):
        date_range = DateRange.trailing(date(2025, 3, 3), 10)

        assert date_range == DateRange(date(2025, 2, 22), date(2025, 3, 3))
        assert date_range.day_count == 10

    @pytest.mark.parametrize('start,end,expected', [
        (None, None, DateRange(date(2025, 4, 5), date(2025, 4, 5))),
        (date(2025, 4, 1), None, DateRange(date(2025, 4, 1), date(2025, 4, 1))),
        (None, date(2025, 4, 9), DateRange(date(2025, 4, 5), date(2025, 4, 9))),
        (date(2025, 4, 1), date(2025, 4, 3), DateRange(date(2025, 4, 1), date(2025, 4, 3))),
    ])
    def test_from_bounds_defaults(self, start, end, expected):
        assert DateRange.from_bounds(start, end, today=date(2025, 4, 5)) == expected

    def test_as_dict(self):
        assert DateRange.single_day(date(2025, 4, 5)).as_dict() == {
            'from': '2025-04-05',
            'to': '2025-04-05',
        }


class TestMonthBounds:

    def test_current_month(self):
        start, end = month_bounds(date(2024, 2, 10), 0)

        assert start == datetime(2024, 2, 1, tzinfo=dt_timezone.utc)
        assert end.date() == date(2024, 2, 29)

    def test_crosses_year_boundary(self):
        start, end = month_bounds(date(2025, 1, 15), 2)

        assert start.date() == date(2024, 11, 1)
        assert end.date() == date(2024, 11, 30)


def test_utc_date_converts_offset_timestamps():
    late_evening_west = datetime(2025, 4, 1, 22, 0, tzinfo=dt_timezone(timedelta(hours=-3)))
    assert utc_date(late_evening_west) == date(2025, 4, 2)
