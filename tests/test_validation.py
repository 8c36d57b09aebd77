"""Tests for schedule validation."""

import pytest

from core.errors import MalformedScheduleError
from core.validation import validate_schedule, validate_timezone
from models.schedule import (
    MultiDaySchedule,
    MultiDayScheduleDay,
    OneTimeSchedule,
    Role,
    SameDayMultiAreaSchedule,
    TimeSlot,
)


def test_valid_fixtures(one_time_project, multi_day_project, multi_area_project):
    for project in (one_time_project, multi_day_project, multi_area_project):
        validate_schedule(project.schedule)


@pytest.mark.parametrize(
    "schedule",
    [
        OneTimeSchedule("06/01/2025", "09:00", "12:00", 5),
        OneTimeSchedule("2025-06-01", "9am", "12:00", 5),
        OneTimeSchedule("2025-06-01", "09:00", "24:00", 5),
        OneTimeSchedule("2025-06-01", "09:00", "12:00", 0),
        OneTimeSchedule("2025-06-01", "09:00", "12:00", True),
    ],
)
def test_invalid_one_time(schedule):
    with pytest.raises(MalformedScheduleError):
        validate_schedule(schedule)


def test_duplicate_dates_rejected():
    day = MultiDayScheduleDay("2025-06-01", (TimeSlot("09:00", "12:00", 2),))

    with pytest.raises(MalformedScheduleError, match="appears 2 times"):
        validate_schedule(MultiDaySchedule(days=(day, day)))


def test_duplicate_role_names_rejected():
    schedule = SameDayMultiAreaSchedule(
        "2025-06-01",
        "08:00",
        "12:00",
        roles=(Role("Setup", "08:00", "10:00", 2), Role("Setup", "10:00", "12:00", 3)),
    )

    with pytest.raises(MalformedScheduleError, match="Setup"):
        validate_schedule(schedule)


def test_all_problems_reported():
    schedule = SameDayMultiAreaSchedule(
        "2025-6-1",
        "08:00",
        "12:00",
        roles=(Role(" ", "08:00", "10:00", 2), Role("Cleanup", "10:00", "12:00", -1)),
    )

    with pytest.raises(MalformedScheduleError) as exc_info:
        validate_schedule(schedule)

    assert len(exc_info.value.details) == 3


def test_empty_schedules_are_valid():
    validate_schedule(MultiDaySchedule(days=()))
    validate_schedule(SameDayMultiAreaSchedule("2025-06-01", "08:00", "12:00", roles=()))


def test_timezone():
    validate_timezone("Europe/Amsterdam")
    with pytest.raises(MalformedScheduleError):
        validate_timezone("Mars/Olympus_Mons")


@pytest.mark.parametrize(
    "schedule",
    [
        OneTimeSchedule("2025-02-30", "09:00", "12:00", 5),
        OneTimeSchedule("2025-13-01", "09:00", "12:00", 5),
        OneTimeSchedule("2025-06-01", "09:00\n", "12:00", 5),
        OneTimeSchedule("2025-06-01\n", "09:00", "12:00", 5),
    ],
)
def test_dates_and_times_must_exist(schedule):
    with pytest.raises(MalformedScheduleError):
        validate_schedule(schedule)


def test_multi_day_impossible_date():
    day = MultiDayScheduleDay("2025-04-31", (TimeSlot("09:00", "12:00", 2),))

    with pytest.raises(MalformedScheduleError, match="2025-04-31"):
        validate_schedule(MultiDaySchedule(days=(day,)))


def test_roles_must_fit_overall_window():
    schedule = SameDayMultiAreaSchedule(
        "2025-06-01",
        "09:00",
        "10:00",
        roles=(Role("Setup", "09:00", "10:00", 2), Role("Teardown", "14:00", "16:00", 3)),
    )

    with pytest.raises(MalformedScheduleError, match="Teardown") as exc_info:
        validate_schedule(schedule)

    assert len(exc_info.value.details) == 1


def test_overnight_roles_inside_overnight_window():
    schedule = SameDayMultiAreaSchedule(
        "2025-06-01",
        "22:00",
        "04:00",
        roles=(Role("Doors", "22:00", "23:30", 2), Role("Cleanup", "01:00", "04:00", 3)),
    )

    validate_schedule(schedule)
