"""
Reporting periods and chart labels for the dashboard.

All calendar arithmetic happens on local dates in the business timezone and
only the final bounds are turned into timezone-aware datetimes, so month
lengths, leap years and DST transitions never shift a boundary.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from app.core.config import settings
from app.core.exceptions import InvalidRangeError

DAY_LABEL_FORMAT = "%d/%m"
MONTH_LABEL_FORMAT = "%m/%Y"
DAY_KEY_FORMAT = "%Y-%m-%d"
MONTH_KEY_FORMAT = "%Y-%m"


class RangeType(str, Enum):
    """Client-selectable reporting window, keyed by its query-string value."""

    LAST_7_DAYS = "7"
    YEAR_TO_DATE = "01"
    MONTH_TO_DATE = "02"

    @classmethod
    def parse(cls, value: Union["RangeType", str, None]) -> "RangeType":
        """Resolve a raw query value. Absent values must be defaulted by the caller."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            raise InvalidRangeError(value) from e

    @property
    def is_monthly(self) -> bool:
        """Whether charts for this range are bucketed by month instead of by day."""
        return self is RangeType.YEAR_TO_DATE


@dataclass(frozen=True)
class Period:
    """Inclusive `[start, end]` reporting window."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Period start {self.start} is after end {self.end}")

    def utc_bounds(self) -> tuple[datetime, datetime]:
        """Bounds converted to UTC, matching how timestamps are persisted."""
        return self.start.astimezone(timezone.utc), self.end.astimezone(timezone.utc)

    def overlaps(self, other: "Period") -> bool:
        return self.start <= other.end and other.start <= self.end


def business_timezone() -> ZoneInfo:
    return ZoneInfo(settings.business_timezone)


def start_of_day(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def _local_dates(period: Period, tz: ZoneInfo) -> tuple[date, date]:
    return period.start.astimezone(tz).date(), period.end.astimezone(tz).date()


def get_date_range(
    range_type: Union[RangeType, str],
    now: Optional[datetime] = None,
    tz: Optional[ZoneInfo] = None,
) -> Period:
    """
    Resolve the current period for a range selector.

    "Today" is the current date in the business timezone and the period always
    ends at the last instant of today.

    Raises:
        InvalidRangeError: if the selector is not a known range.
    """
    range_type = RangeType.parse(range_type)
    tz = tz or business_timezone()
    today = (now or datetime.now(tz)).astimezone(tz).date()

    if range_type is RangeType.LAST_7_DAYS:
        first_day = today - timedelta(days=6)
    elif range_type is RangeType.MONTH_TO_DATE:
        first_day = today.replace(day=1)
    elif range_type is RangeType.YEAR_TO_DATE:
        first_day = today.replace(month=1, day=1)
    else:
        raise InvalidRangeError(range_type)

    return Period(start=start_of_day(first_day, tz), end=end_of_day(today, tz))


def get_previous_period(
    range_type: Union[RangeType, str],
    period: Period,
    tz: Optional[ZoneInfo] = None,
) -> Period:
    """
    Resolve the period the current one is compared against.

    - last 7 days: the ISO week (Monday to Sunday) containing the current
      start shifted back one week.
    - month to date: the prior month from its first day, covering as many
      days as have elapsed in the current month.
    - year to date: the prior year from Jan 1, covering the same number of
      ordinal days.

    The month and year variants are clamped to the end of the prior month or
    year so the two periods never overlap.
    """
    range_type = RangeType.parse(range_type)
    tz = tz or business_timezone()
    start, end = _local_dates(period, tz)

    if range_type is RangeType.LAST_7_DAYS:
        reference = start - timedelta(weeks=1)
        first_day = reference - timedelta(days=reference.weekday())
        last_day = first_day + timedelta(days=6)
    elif range_type is RangeType.MONTH_TO_DATE:
        first_day = start.replace(day=1) - relativedelta(months=1)
        month_end = first_day + relativedelta(day=31)
        last_day = min(first_day + timedelta(days=end.day - 1), month_end)
    elif range_type is RangeType.YEAR_TO_DATE:
        first_day = date(start.year - 1, 1, 1)
        year_end = date(start.year - 1, 12, 31)
        days_covered = end.timetuple().tm_yday
        last_day = min(first_day + timedelta(days=days_covered - 1), year_end)
    else:
        raise InvalidRangeError(range_type)

    return Period(start=start_of_day(first_day, tz), end=end_of_day(last_day, tz))


def generate_chart_labels(
    period: Period,
    range_type: Union[RangeType, str],
    tz: Optional[ZoneInfo] = None,
) -> list[str]:
    """
    Ordered x-axis labels spanning the period.

    Daily ranges yield one `DD/MM` label per calendar day, year to date yields
    one `MM/YYYY` label per calendar month, both inclusive of the last bucket.
    """
    range_type = RangeType.parse(range_type)
    tz = tz or business_timezone()
    first_day, last_day = _local_dates(period, tz)
    labels: list[str] = []

    if range_type.is_monthly:
        cursor = first_day.replace(day=1)
        while cursor <= last_day:
            labels.append(cursor.strftime(MONTH_LABEL_FORMAT))
            cursor += relativedelta(months=1)
    else:
        cursor = first_day
        while cursor <= last_day:
            labels.append(cursor.strftime(DAY_LABEL_FORMAT))
            cursor += timedelta(days=1)

    return labels


def bucket_label(key: str, range_type: Union[RangeType, str]) -> str:
    """Chart label of a bucket key: `YYYY-MM-DD` becomes `DD/MM`, `YYYY-MM` becomes `MM/YYYY`."""
    range_type = RangeType.parse(range_type)
    if range_type.is_monthly:
        return datetime.strptime(key, MONTH_KEY_FORMAT).strftime(MONTH_LABEL_FORMAT)
    return datetime.strptime(key, DAY_KEY_FORMAT).strftime(DAY_LABEL_FORMAT)


def calc_percent_change(
    current: Union[int, float, Decimal],
    previous: Union[int, float, Decimal],
) -> float:
    """
    Percent change from `previous` to `current`, rounded to 2 decimals.

    Returns 0 when both values are 0 and 100 when only `previous` is 0.
    """
    current = float(current)
    previous = float(previous)
    if previous == 0 and current == 0:
        return 0.0
    if previous == 0:
        return 100.0
    return round((current - previous) / previous * 100, 2)
