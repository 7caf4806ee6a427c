"""
Tests for reporting periods, chart labels and percent change.
"""
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest

from app.core.exceptions import InvalidRangeError
from app.services.date_ranges import (
    Period,
    RangeType,
    bucket_label,
    calc_percent_change,
    generate_chart_labels,
    get_date_range,
    get_previous_period,
)

TZ = ZoneInfo("Asia/Ho_Chi_Minh")


def at(year: int, month: int, day: int, hour: int = 15) -> datetime:
    return datetime(year, month, day, hour, 30, tzinfo=TZ)


def local_dates(period: Period) -> tuple[date, date]:
    return period.start.astimezone(TZ).date(), period.end.astimezone(TZ).date()


class TestRangeType:
    def test_parse_known_values(self):
        assert RangeType.parse("7") is RangeType.LAST_7_DAYS
        assert RangeType.parse("01") is RangeType.YEAR_TO_DATE
        assert RangeType.parse("02") is RangeType.MONTH_TO_DATE

    @pytest.mark.parametrize("value", ["1", "2", "30", "abc", ""])
    def test_parse_rejects_unknown_values(self, value):
        with pytest.raises(InvalidRangeError) as exc_info:
            RangeType.parse(value)

        assert exc_info.value.status_code == 500
        assert exc_info.value.parameter == "range"
        assert exc_info.value.to_body() == {"success": False, "message": "Internal Server Error"}

    def test_only_year_to_date_is_monthly(self):
        assert RangeType.YEAR_TO_DATE.is_monthly
        assert not RangeType.LAST_7_DAYS.is_monthly
        assert not RangeType.MONTH_TO_DATE.is_monthly


class TestGetDateRange:
    def test_last_7_days_includes_today(self):
        period = get_date_range("7", now=at(2025, 7, 27), tz=TZ)

        assert local_dates(period) == (date(2025, 7, 21), date(2025, 7, 27))

    def test_bounds_cover_whole_days(self):
        period = get_date_range("7", now=at(2025, 7, 27), tz=TZ)

        assert period.start == datetime.combine(date(2025, 7, 21), time.min, tzinfo=TZ)
        assert period.end == datetime.combine(date(2025, 7, 27), time.max, tzinfo=TZ)

    def test_month_to_date(self):
        period = get_date_range("02", now=at(2025, 7, 15), tz=TZ)

        assert local_dates(period) == (date(2025, 7, 1), date(2025, 7, 15))

    def test_year_to_date(self):
        period = get_date_range("01", now=at(2025, 7, 27), tz=TZ)

        assert local_dates(period) == (date(2025, 1, 1), date(2025, 7, 27))

    def test_today_follows_business_timezone(self):
        # 20:00 UTC on the 26th is already the 27th in Ho Chi Minh City
        now = datetime(2025, 7, 26, 20, 0, tzinfo=timezone.utc)

        period = get_date_range("7", now=now, tz=TZ)

        assert local_dates(period)[1] == date(2025, 7, 27)

    def test_utc_bounds(self):
        period = get_date_range("7", now=at(2025, 7, 27), tz=TZ)

        start, end = period.utc_bounds()

        assert start == datetime(2025, 7, 20, 17, 0, tzinfo=timezone.utc)
        assert end.tzinfo == timezone.utc
        assert end.date() == date(2025, 7, 27)

    def test_invalid_range(self):
        with pytest.raises(InvalidRangeError):
            get_date_range("5", now=at(2025, 7, 27), tz=TZ)

    def test_period_rejects_reversed_bounds(self):
        with pytest.raises(ValueError):
            Period(start=at(2025, 7, 27), end=at(2025, 7, 26))


class TestGetPreviousPeriod:
    def test_last_7_days_uses_previous_iso_week(self):
        period = get_date_range("7", now=at(2025, 7, 27), tz=TZ)

        previous = get_previous_period("7", period, tz=TZ)

        assert local_dates(previous) == (date(2025, 7, 14), date(2025, 7, 20))
        assert previous.start.astimezone(TZ).weekday() == 0

    def test_last_7_days_midweek(self):
        # Current window Thu 2025-07-17 .. Wed 2025-07-23, shifted start is Thu 07-10
        period = get_date_range("7", now=at(2025, 7, 23), tz=TZ)

        previous = get_previous_period("7", period, tz=TZ)

        assert local_dates(previous) == (date(2025, 7, 7), date(2025, 7, 13))

    def test_month_to_date_matches_elapsed_days(self):
        period = get_date_range("02", now=at(2025, 7, 15), tz=TZ)

        previous = get_previous_period("02", period, tz=TZ)

        assert local_dates(previous) == (date(2025, 6, 1), date(2025, 6, 15))

    def test_month_to_date_clamped_to_end_of_prior_month(self):
        period = get_date_range("02", now=at(2025, 3, 31), tz=TZ)

        previous = get_previous_period("02", period, tz=TZ)

        assert local_dates(previous) == (date(2025, 2, 1), date(2025, 2, 28))

    def test_month_to_date_in_january_uses_december(self):
        period = get_date_range("02", now=at(2025, 1, 10), tz=TZ)

        previous = get_previous_period("02", period, tz=TZ)

        assert local_dates(previous) == (date(2024, 12, 1), date(2024, 12, 10))

    def test_year_to_date_matches_ordinal_days(self):
        period = get_date_range("01", now=at(2025, 7, 27), tz=TZ)

        previous = get_previous_period("01", period, tz=TZ)

        # Day 208 of 2025 is day 208 of leap year 2024, which is July 26
        assert local_dates(previous) == (date(2024, 1, 1), date(2024, 7, 26))

    def test_year_to_date_clamped_to_end_of_prior_year(self):
        period = get_date_range("01", now=at(2024, 12, 31), tz=TZ)

        previous = get_previous_period("01", period, tz=TZ)

        assert local_dates(previous) == (date(2023, 1, 1), date(2023, 12, 31))

    @pytest.mark.parametrize("range_value", ["7", "01", "02"])
    @pytest.mark.parametrize(
        "now",
        [at(2025, 7, 27), at(2025, 3, 31), at(2024, 12, 31), at(2024, 3, 1), at(2025, 1, 1)],
    )
    def test_previous_period_precedes_current(self, range_value, now):
        period = get_date_range(range_value, now=now, tz=TZ)

        previous = get_previous_period(range_value, period, tz=TZ)

        assert previous.end < period.start
        assert not previous.overlaps(period)


class TestChartLabels:
    def test_daily_labels(self):
        period = get_date_range("7", now=at(2025, 7, 27), tz=TZ)

        labels = generate_chart_labels(period, "7", tz=TZ)

        assert labels == ["21/07", "22/07", "23/07", "24/07", "25/07", "26/07", "27/07"]

    def test_daily_labels_cross_month_boundary(self):
        period = get_date_range("7", now=at(2025, 3, 2), tz=TZ)

        labels = generate_chart_labels(period, "7", tz=TZ)

        assert labels[0] == "24/02"
        assert labels[-1] == "02/03"
        assert len(labels) == 7

    def test_month_to_date_labels(self):
        period = get_date_range("02", now=at(2025, 7, 15), tz=TZ)

        labels = generate_chart_labels(period, "02", tz=TZ)

        assert len(labels) == 15
        assert labels[0] == "01/07"
        assert labels[-1] == "15/07"

    def test_monthly_labels_include_current_month(self):
        period = get_date_range("01", now=at(2025, 3, 15), tz=TZ)

        labels = generate_chart_labels(period, "01", tz=TZ)

        assert labels == ["01/2025", "02/2025", "03/2025"]

    def test_labels_are_unique(self):
        period = get_date_range("01", now=at(2025, 12, 31), tz=TZ)

        labels = generate_chart_labels(period, "01", tz=TZ)

        assert len(labels) == 12
        assert len(set(labels)) == 12


class TestBucketLabel:
    def test_daily_key(self):
        assert bucket_label("2025-07-27", "7") == "27/07"
        assert bucket_label("2025-07-01", "02") == "01/07"

    def test_monthly_key(self):
        assert bucket_label("2025-07", "01") == "07/2025"

    def test_bucket_matches_generated_label(self):
        period = get_date_range("7", now=at(2025, 7, 27), tz=TZ)
        labels = generate_chart_labels(period, "7", tz=TZ)

        first = bucket_label(period.start.astimezone(TZ).strftime("%Y-%m-%d"), "7")
        last = bucket_label(period.end.astimezone(TZ).strftime("%Y-%m-%d"), "7")

        assert first == labels[0]
        assert last == labels[-1]

    def test_monthly_bucket_matches_generated_label(self):
        period = get_date_range("01", now=at(2025, 3, 15), tz=TZ)
        labels = generate_chart_labels(period, "01", tz=TZ)

        assert bucket_label(period.end.astimezone(TZ).strftime("%Y-%m"), "01") == labels[-1]


class TestCalcPercentChange:
    def test_both_zero(self):
        assert calc_percent_change(0, 0) == 0

    def test_previous_zero(self):
        assert calc_percent_change(5, 0) == 100

    def test_increase(self):
        assert calc_percent_change(150, 100) == 50.0

    def test_decrease(self):
        assert calc_percent_change(0, 80) == -100.0

    def test_rounded_to_two_decimals(self):
        assert calc_percent_change(1, 3) == -66.67
        assert calc_percent_change(2, 3) == -33.33
