"""Timestamp parsing and date bucketing for the statistics endpoints."""

import calendar
from datetime import datetime, timedelta, timezone

TIME_RANGES = ("day", "week", "month", "year")
DEFAULT_TIME_RANGE = "week"


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse a database timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def shift_months(moment: datetime, months: int) -> datetime:
    """Move by whole calendar months, clamping the day to the target month's length."""
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def window_start(time_range: str, now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    if time_range == "day":
        return now - timedelta(days=1)
    if time_range == "month":
        return shift_months(now, -1)
    if time_range == "year":
        return shift_months(now, -12)
    return now - timedelta(days=7)


def bucket_key(moment: datetime, time_range: str) -> str:
    if time_range == "day":
        return f"{moment.hour}h"
    if time_range == "year":
        return moment.strftime("%Y-%m")
    return moment.strftime("%Y-%m-%d")


def bucket_counts(rows: list[dict], time_range: str, field: str = "created_at") -> list[dict]:
    """Count rows per bucket, in order of first appearance.

    Rows are expected oldest first, so buckets come out chronologically.
    """
    counts: dict[str, int] = {}
    for row in rows:
        key = bucket_key(parse_timestamp(row[field]), time_range)
        counts[key] = counts.get(key, 0) + 1
    return [{"date": key, "count": count} for key, count in counts.items()]


def sunday_first_weekday(moment: datetime) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return (moment.weekday() + 1) % 7


def recent_months(count: int, now: datetime | None = None) -> list[tuple[datetime, datetime]]:
    """``[start, end)`` ranges of the last ``count`` calendar months, oldest first, current month last."""
    now = now or datetime.now(timezone.utc)
    first_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    ranges = []
    for offset in range(count - 1, -1, -1):
        start = shift_months(first_of_month, -offset)
        ranges.append((start, shift_months(start, 1)))
    return ranges
