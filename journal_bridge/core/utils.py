from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

# The journal's civil calendar is fixed to UTC+9
JST = timezone(timedelta(hours=9), "JST")


def journal_timezone(utc_offset_hours: int = 9) -> timezone:
    if utc_offset_hours == 9:
        return JST
    return timezone(timedelta(hours=utc_offset_hours))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def journal_today(now: Optional[datetime] = None, tz: timezone = JST) -> date:
    """Returns the civil date of `now` (default: wall clock) in the journal timezone."""
    now = now or utc_now()
    return now.astimezone(tz).date()


def journal_day_window(now: Optional[datetime] = None, tz: timezone = JST) -> Tuple[datetime, datetime]:
    """
    Half-open window [start of today, start of tomorrow) in the journal timezone,
    returned as UTC instants.
    """
    today = journal_today(now, tz)
    start = datetime(today.year, today.month, today.day, tzinfo=tz)
    end = start + timedelta(hours=24)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def journal_month_window(now: Optional[datetime] = None, tz: timezone = JST) -> Tuple[datetime, datetime]:
    """[first day of this month, first day of next month) in the journal timezone."""
    today = journal_today(now, tz)
    start = datetime(today.year, today.month, 1, tzinfo=tz)
    if today.month == 12:
        end = datetime(today.year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(today.year, today.month + 1, 1, tzinfo=tz)
    return start, end


def to_utc_iso(instant: datetime) -> str:
    """Renders an aware datetime as an ISO-8601 UTC string with a Z suffix."""
    return instant.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_instant(value) -> datetime:
    """Parses an ISO-8601 string (Z suffix allowed) into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
