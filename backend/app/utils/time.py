from datetime import datetime, timedelta, timezone


def utc_now_naive() -> datetime:
    """Current UTC time without tzinfo, as stored in DateTime(timezone=False) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    # Weeks start on Sunday.
    days_since_sunday = (now.weekday() + 1) % 7
    return start_of_day(now) - timedelta(days=days_since_sunday)


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)
