"""
SQL expressions for grouping UTC timestamps into business-timezone chart buckets.

Keys are rendered as `YYYY-MM-DD` (daily) or `YYYY-MM` (monthly) strings.
PostgreSQL converts with the named zone; SQLite has no zone database and
shifts by a fixed UTC offset instead.
"""
from datetime import datetime
from typing import Any

from sqlalchemy import String, func, literal, literal_column
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import ColumnElement, FunctionElement

from app.services.date_ranges import RangeType


class _LocalBucket(FunctionElement):
    """Arguments: timestamp, IANA zone name, SQLite offset modifier (e.g. `+420 minutes`)."""

    type = String()
    inherit_cache = True

    pg_format: str
    sqlite_format: str


class local_day(_LocalBucket):
    name = "local_day"
    inherit_cache = True

    pg_format = "YYYY-MM-DD"
    sqlite_format = "%Y-%m-%d"


class local_month(_LocalBucket):
    name = "local_month"
    inherit_cache = True

    pg_format = "YYYY-MM"
    sqlite_format = "%Y-%m"


@compiles(local_day)
@compiles(local_month)
def _compile_sqlite(element: _LocalBucket, compiler: Any, **kw: Any) -> str:
    timestamp, _zone, modifier = list(element.clauses)
    expr = func.strftime(literal_column(f"'{element.sqlite_format}'"), timestamp, modifier)
    return compiler.process(expr, **kw)


@compiles(local_day, "postgresql")
@compiles(local_month, "postgresql")
def _compile_postgresql(element: _LocalBucket, compiler: Any, **kw: Any) -> str:
    timestamp, zone, _modifier = list(element.clauses)
    expr = func.to_char(func.timezone(zone, timestamp), literal_column(f"'{element.pg_format}'"))
    return compiler.process(expr, **kw)


def offset_modifier(moment: datetime) -> str:
    """SQLite date modifier for the UTC offset in effect at `moment`."""
    offset = moment.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset else 0
    return f"{minutes:+d} minutes"


def local_bucket(
    timestamp: ColumnElement,
    range_type: RangeType,
    zone_name: str,
    reference: datetime,
) -> ColumnElement:
    """Bucket key expression for `timestamp` using the offset in effect at `reference`."""
    bucket = local_month if range_type.is_monthly else local_day
    return bucket(
        timestamp,
        literal(zone_name, String()),
        literal(offset_modifier(reference), String()),
    )
