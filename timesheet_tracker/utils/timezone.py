from datetime import datetime, date, timezone, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from timesheet_tracker.exceptions import ValidationError

DAY_FORMAT = "%Y-%m-%d"


def utc_now() -> datetime:
    """Current instant as naive UTC, the form instants are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(dt: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def get_zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {tz_name}") from e


def get_local_now(tz_name: str = "UTC") -> datetime:
    """Get current datetime in the given zone."""
    return datetime.now(get_zone(tz_name))


def local_today(tz_name: str = "UTC") -> date:
    """Calendar date of "today" in the given zone."""
    return get_local_now(tz_name).date()


def parse_day(value: str, field: str = "date") -> date:
    """Parse a YYYY-MM-DD string, rejecting anything that is not a real calendar day."""
    if not isinstance(value, str) or len(value) != 10:
        raise ValidationError("date must use the YYYY-MM-DD format", field=field)
    try:
        return datetime.strptime(value, DAY_FORMAT).date()
    except ValueError as e:
        raise ValidationError("date must use the YYYY-MM-DD format", field=field) from e


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def window_start(today: date, days: int) -> date:
    """First day of a trailing window of `days` days that ends on (and includes) today."""
    return today - timedelta(days=days - 1)

