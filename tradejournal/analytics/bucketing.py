"""Time bucketing of nanosecond epoch timestamps.

Trades are bucketed on calendar boundaries of an explicit timezone
anchor, UTC unless the caller says otherwise. Weeks start on Sunday.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_DAY = 86_400 * NANOS_PER_SECOND

UTC = timezone.utc


def to_datetime(timestamp_ns: int, tz: tzinfo = UTC) -> datetime:
    """Convert epoch nanoseconds to an aware datetime in tz."""
    seconds, nanos = divmod(int(timestamp_ns), NANOS_PER_SECOND)
    return datetime.fromtimestamp(seconds, tz) + timedelta(microseconds=nanos // 1000)


def to_date(timestamp_ns: int, tz: tzinfo = UTC) -> date:
    return to_datetime(timestamp_ns, tz).date()


def date_to_nanos(day: date, tz: tzinfo = UTC) -> int:
    """Epoch nanoseconds of midnight at the start of day in tz."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    return int(start.timestamp()) * NANOS_PER_SECOND


def week_start(day: date) -> date:
    """Sunday on or before day."""
    # date.weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_key_for_date(day: date) -> str:
    """Week key ``YYYY-Www`` of the Sunday-started week containing day.

    The year and number come from the week's Sunday, so a week spanning
    New Year has a single key.
    """
    sunday = week_start(day)
    number = (sunday.timetuple().tm_yday - 1) // 7 + 1
    return f"{sunday.year:04d}-W{number:02d}"


def month_key_for_date(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def day_key(timestamp_ns: int, tz: tzinfo = UTC) -> str:
    return to_date(timestamp_ns, tz).isoformat()


def week_key(timestamp_ns: int, tz: tzinfo = UTC) -> str:
    return week_key_for_date(to_date(timestamp_ns, tz))


def month_key(timestamp_ns: int, tz: tzinfo = UTC) -> str:
    return month_key_for_date(to_date(timestamp_ns, tz))


def day_of_month(timestamp_ns: int, month: int, year: int, tz: tzinfo = UTC):
    """Day of month (1-31) if the timestamp falls in month/year, else None."""
    day = to_date(timestamp_ns, tz)
    if day.month == month and day.year == year:
        return day.day
    return None


def week_range(timestamp_ns: int, tz: tzinfo = UTC) -> tuple[int, int]:
    """[start, end) of the week containing the timestamp, in epoch nanoseconds."""
    sunday = week_start(to_date(timestamp_ns, tz))
    return date_to_nanos(sunday, tz), date_to_nanos(sunday + timedelta(days=7), tz)


def previous_week_key(timestamp_ns: int, tz: tzinfo = UTC) -> str:
    sunday = week_start(to_date(timestamp_ns, tz))
    return week_key_for_date(sunday - timedelta(days=7))
