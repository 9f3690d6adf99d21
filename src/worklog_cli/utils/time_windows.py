"""Epoch-millisecond time helpers.

Everything stored is an integer millisecond timestamp; calendar concepts
(days, weeks, months) only exist at the edges, resolved in a configured
timezone.
"""

from __future__ import annotations

import calendar
import time
from datetime import date, datetime, timedelta, tzinfo
from typing import Literal
from zoneinfo import ZoneInfo

import tzlocal

MS_PER_MINUTE = 60_000
MS_PER_DAY = 86_400_000

CalendarView = Literal["day", "week5", "week7"]


def now_ms() -> int:
    """Current instant as epoch milliseconds."""
    return int(time.time() * 1000)


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA zone name; "local" (or empty) means the system zone."""
    if not name or name.lower() == "local":
        return tzlocal.get_localzone()
    return ZoneInfo(name)


def to_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def from_ms(ms: int, tz: tzinfo) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=tz)


def start_of_day(day: date, tz: tzinfo) -> int:
    """First millisecond of *day* in *tz*."""
    return to_ms(datetime(day.year, day.month, day.day, tzinfo=tz))


def end_of_day(day: date, tz: tzinfo) -> int:
    """Last millisecond of *day* in *tz*."""
    return start_of_day(day + timedelta(days=1), tz) - 1


def day_range(first: date, last: date, tz: tzinfo) -> tuple[int, int]:
    """Closed window from the start of *first* to the end of *last*."""
    return start_of_day(first, tz), end_of_day(last, tz)


def start_of_week(day: date, week_starts_on: int = 0) -> date:
    """Date of the first day of the week containing *day* (0 = Monday)."""
    offset = (day.weekday() - week_starts_on) % 7
    return day - timedelta(days=offset)


def shift_months(day: date, months: int) -> date:
    """Move *day* by whole months, clamping to the last day of short months."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def months_around(day: date, tz: tzinfo, months: int = 1) -> tuple[int, int]:
    """Window from *months* before the start of *day* to *months* after its end."""
    return (
        start_of_day(shift_months(day, -months), tz),
        end_of_day(shift_months(day, months), tz),
    )


def calendar_days(day: date, view: CalendarView, week_starts_on: int = 0) -> list[date]:
    """Days shown by the calendar for a selected day and view."""
    if view == "day":
        return [day]
    first = start_of_week(day, week_starts_on)
    count = 5 if view == "week5" else 7
    return [first + timedelta(days=i) for i in range(count)]


def today(tz: tzinfo) -> date:
    return datetime.now(tz).date()


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD date."""
    return date.fromisoformat(text.strip())


def parse_datetime(text: str, tz: tzinfo) -> int:
    """Parse user input into epoch ms.

    Accepts ISO dates ("2025-03-01"), date and time ("2025-03-01 09:30") and
    full ISO timestamps. Naive values are interpreted in *tz*.
    """
    value = text.strip()
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return to_ms(dt)


def format_ms(ms: int | None, tz: tzinfo, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Format a timestamp for display, "-" when absent."""
    if ms is None:
        return "-"
    return from_ms(ms, tz).strftime(fmt)
