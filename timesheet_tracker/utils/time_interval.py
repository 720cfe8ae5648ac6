import math
from datetime import datetime
from timesheet_tracker.utils.timezone import to_utc_naive


def minutes_between(start: datetime, end: datetime) -> int:
    """
    Whole minutes from start to end.

    Sub-minute remainders are rounded half-up, so each interval contributes an
    integer number of minutes to a day's total.
    """
    seconds = (to_utc_naive(end) - to_utc_naive(start)).total_seconds()
    return int(math.floor(seconds / 60 + 0.5))


def minutes_to_hours(minutes: float) -> float:
    """Hours with one decimal place, rounded half-up (2.25h -> 2.3h)."""
    return math.floor(minutes / 60 * 10 + 0.5) / 10
