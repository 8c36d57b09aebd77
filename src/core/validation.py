"""
Schedule validation at project creation time.
"""

import re
from collections import Counter
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.config import DATE_FORMAT, TIME_FORMAT
from core.errors import MalformedScheduleError
from models.schedule import (
    MultiDaySchedule,
    OneTimeSchedule,
    SameDayMultiAreaSchedule,
    Schedule,
)
from services.slots import time_window

DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_RE = re.compile(r"([01]\d|2[0-3]):[0-5]\d")


def _matches(value, pattern: re.Pattern, fmt: str) -> bool:
    """Exact text shape, and a real calendar date or clock time."""
    if not isinstance(value, str) or not pattern.fullmatch(value):
        return False
    try:
        datetime.strptime(value, fmt)
    except ValueError:
        return False
    return True


def is_valid_date(value) -> bool:
    return _matches(value, DATE_RE, DATE_FORMAT)


def is_valid_time(value) -> bool:
    return _matches(value, TIME_RE, TIME_FORMAT)


def _check_unit(where: str, start_time: str, end_time: str, volunteers: int) -> list[str]:
    """Check the time and capacity fields shared by every bookable unit."""
    errors = []
    if not is_valid_time(start_time):
        errors.append(f"{where}: invalid start time {start_time!r}")
    if not is_valid_time(end_time):
        errors.append(f"{where}: invalid end time {end_time!r}")
    if not isinstance(volunteers, int) or isinstance(volunteers, bool) or volunteers < 1:
        errors.append(f"{where}: volunteers must be a positive integer, got {volunteers!r}")
    return errors


def _check_date(where: str, date: str) -> list[str]:
    if not is_valid_date(date):
        return [f"{where}: invalid date {date!r}"]
    return []


def _check_roles_within_overall(schedule: SameDayMultiAreaSchedule) -> list[str]:
    """Every role must run inside the overall start/end window."""
    times = [schedule.overall_start, schedule.overall_end]
    for role in schedule.roles:
        times += [role.start_time, role.end_time]
    if not is_valid_date(schedule.date) or not all(is_valid_time(t) for t in times):
        return []

    overall_start, overall_end = time_window(
        schedule.date, schedule.overall_start, schedule.overall_end, "UTC"
    )
    errors = []
    for role in schedule.roles:
        role_start, role_end = time_window(schedule.date, role.start_time, role.end_time, "UTC")
        # Roles after midnight in an overnight window belong to the next day
        if overall_end.date() > overall_start.date() and role_start < overall_start:
            role_start += timedelta(days=1)
            role_end += timedelta(days=1)
        if role_start < overall_start or role_end > overall_end:
            errors.append(
                f"role '{role.name}': {role.start_time}-{role.end_time} is outside "
                f"{schedule.overall_start}-{schedule.overall_end}"
            )
    return errors


def validate_schedule(schedule: Schedule) -> None:
    """
    Validate a schedule before it is stored.

    Checks:
    1. Dates are real YYYY-MM-DD dates and times are real HH:MM times
    2. Every unit has a positive volunteer capacity
    3. Multi-day dates are unique
    4. Role names are non-empty and unique (they are schedule ids)
    5. Roles run inside the overall start/end

    Raises:
        MalformedScheduleError: with every problem found
    """
    errors: list[str] = []

    if isinstance(schedule, OneTimeSchedule):
        errors += _check_date("oneTime", schedule.date)
        errors += _check_unit("oneTime", schedule.start_time, schedule.end_time, schedule.volunteers)

    elif isinstance(schedule, MultiDaySchedule):
        for day in schedule.days:
            errors += _check_date(f"day {day.date}", day.date)
            for idx, slot in enumerate(day.slots):
                errors += _check_unit(
                    f"day {day.date} slot {idx}", slot.start_time, slot.end_time, slot.volunteers
                )
        date_counts = Counter(day.date for day in schedule.days)
        for date, count in date_counts.items():
            if count > 1:
                errors.append(f"Date '{date}' appears {count} times")

    elif isinstance(schedule, SameDayMultiAreaSchedule):
        errors += _check_date("sameDayMultiArea", schedule.date)
        for label, value in (("overall start", schedule.overall_start), ("overall end", schedule.overall_end)):
            if not is_valid_time(value):
                errors.append(f"sameDayMultiArea: invalid {label} {value!r}")
        for role in schedule.roles:
            if not role.name or not role.name.strip():
                errors.append("Role name cannot be empty")
            errors += _check_unit(f"role '{role.name}'", role.start_time, role.end_time, role.volunteers)
        name_counts = Counter(role.name for role in schedule.roles)
        for name, count in name_counts.items():
            if name and count > 1:
                errors.append(f"Role name '{name}' is used {count} times")
        errors += _check_roles_within_overall(schedule)

    else:
        errors.append(f"Unsupported schedule type {type(schedule).__name__}")

    if errors:
        raise MalformedScheduleError("; ".join(errors), details=errors)


def validate_timezone(tz: str) -> None:
    """Raise MalformedScheduleError for an unknown IANA zone name."""
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise MalformedScheduleError(f"Unknown timezone '{tz}'")
