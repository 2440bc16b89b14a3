from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; SQLite hands them back without tzinfo."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sunday_based_weekday(value: date) -> int:
    """0 = Sunday .. 6 = Saturday, the numbering time windows use."""
    return value.isoweekday() % 7


def day_name(day_of_week: int) -> str:
    return DAY_NAMES[day_of_week]


def next_window_occurrence(day_of_week: int, start_time: time, *, tz: str, now: datetime | None = None) -> datetime:
    """
    Next occurrence of a weekly window strictly after today, in UTC.

    A window on today's weekday lands one week out, never later today. The
    wall-clock time is the window's start_time in the given timezone.
    """
    if not 0 <= day_of_week <= 6:
        raise ValueError(f"day_of_week out of range: {day_of_week}")

    tzinfo = ZoneInfo(tz)
    local_now = (now or utcnow()).astimezone(tzinfo)
    today = local_now.date()
    days_ahead = (day_of_week - sunday_based_weekday(today) + 7) % 7 or 7
    target = today + timedelta(days=days_ahead)
    local_start = datetime.combine(target, start_time.replace(tzinfo=None), tzinfo=tzinfo)
    return local_start.astimezone(timezone.utc)


def start_of_month(now: datetime | None = None) -> datetime:
    current = now or utcnow()
    return current.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def months_ago(months: int, now: datetime | None = None) -> datetime:
    return (now or utcnow()) - relativedelta(months=months)


def next_eligible_date(last_donation: datetime, interval_days: int) -> date:
    return as_utc(last_donation).date() + timedelta(days=interval_days)


def format_time(value: time) -> str:
    """12-hour display such as '9:00 AM'."""
    return value.strftime("%I:%M %p").lstrip("0")
