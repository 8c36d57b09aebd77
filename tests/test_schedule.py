"""Tests for schedule parsing and slot enumeration."""

import pytest

from core.errors import MalformedScheduleError
from models.schedule import (
    EventType,
    MultiDaySchedule,
    MultiDayScheduleDay,
    OneTimeSchedule,
    Role,
    SameDayMultiAreaSchedule,
    TimeSlot,
    parse_schedule,
    schedule_to_record,
)
from services.slots import enumerate_slots, find_slot, slot_window


class TestEnumerateSlots:
    def test_one_time_has_single_slot(self, one_time_project):
        slots = enumerate_slots(one_time_project.schedule, "oneTime")

        assert len(slots) == 1
        assert slots[0].schedule_id == "oneTime"
        assert slots[0].capacity == 5
        assert (slots[0].start_time, slots[0].end_time) == ("09:00", "12:00")

    def test_multi_day_addressing(self):
        schedule = MultiDaySchedule(
            days=(
                MultiDayScheduleDay(
                    date="2025-06-01",
                    slots=(
                        TimeSlot("09:00", "12:00", 4),
                        TimeSlot("13:00", "16:00", 4),
                    ),
                ),
            )
        )

        slots = enumerate_slots(schedule, EventType.MULTI_DAY)

        assert [s.schedule_id for s in slots] == ["2025-06-01-0", "2025-06-01-1"]
        assert [s.label for s in slots] == ["Day 1, Slot 1", "Day 1, Slot 2"]

    def test_multi_day_count_and_uniqueness(self, multi_day_project):
        schedule = multi_day_project.schedule
        slots = enumerate_slots(schedule, "multiDay")

        assert len(slots) == sum(len(day.slots) for day in schedule.days)
        assert len({s.schedule_id for s in slots}) == len(slots)
        assert slots[-1].schedule_id == "2025-06-02-0"

    def test_roles_addressed_by_exact_name(self, multi_area_project):
        slots = enumerate_slots(multi_area_project.schedule, "sameDayMultiArea")

        assert [s.schedule_id for s in slots] == ["Registration", "Cleanup"]
        assert find_slot(slots, "registration") is None
        assert find_slot(slots, "Cleanup").capacity == 6

    def test_duplicate_role_names_are_not_merged(self):
        schedule = SameDayMultiAreaSchedule(
            date="2025-06-01",
            overall_start="08:00",
            overall_end="12:00",
            roles=(Role("Setup", "08:00", "10:00", 2), Role("Setup", "10:00", "12:00", 3)),
        )

        slots = enumerate_slots(schedule, "sameDayMultiArea")

        assert [(s.schedule_id, s.capacity) for s in slots] == [("Setup", 2), ("Setup", 3)]

    def test_empty_schedules(self):
        assert enumerate_slots(MultiDaySchedule(days=()), "multiDay") == []
        empty_roles = SameDayMultiAreaSchedule("2025-06-01", "08:00", "12:00", roles=())
        assert enumerate_slots(empty_roles, "sameDayMultiArea") == []

    def test_mismatched_event_type(self, one_time_project):
        with pytest.raises(MalformedScheduleError):
            enumerate_slots(one_time_project.schedule, "multiDay")

    def test_unknown_event_type(self, one_time_project):
        with pytest.raises(MalformedScheduleError):
            enumerate_slots(one_time_project.schedule, "weekly")

    def test_unsupported_schedule_object(self):
        with pytest.raises(MalformedScheduleError):
            enumerate_slots(object(), "oneTime")


class TestParseSchedule:
    def test_one_time_record(self):
        schedule = parse_schedule(
            "oneTime",
            {"oneTime": {"date": "2025-06-01", "startTime": "09:00", "endTime": "12:00", "volunteers": 5}},
        )

        assert schedule == OneTimeSchedule("2025-06-01", "09:00", "12:00", 5)

    def test_missing_payload_for_event_type(self):
        with pytest.raises(MalformedScheduleError, match="oneTime"):
            parse_schedule("oneTime", {"multiDay": []})

    def test_multiple_payloads_rejected(self):
        record = {
            "oneTime": {"date": "2025-06-01", "startTime": "09:00", "endTime": "12:00", "volunteers": 5},
            "multiDay": [],
        }
        with pytest.raises(MalformedScheduleError, match="multiple"):
            parse_schedule("oneTime", record)

    def test_missing_field(self):
        with pytest.raises(MalformedScheduleError):
            parse_schedule("sameDayMultiArea", {"sameDayMultiArea": {"date": "2025-06-01", "roles": []}})

    def test_non_integer_volunteers(self):
        with pytest.raises(MalformedScheduleError, match="volunteers"):
            parse_schedule(
                "oneTime",
                {"oneTime": {"date": "2025-06-01", "startTime": "09:00", "endTime": "12:00", "volunteers": "many"}},
            )

    def test_record_round_trip(self, multi_day_project, multi_area_project):
        for project in (multi_day_project, multi_area_project):
            record = schedule_to_record(project.schedule)
            assert parse_schedule(project.event_type, record) == project.schedule


def test_overnight_slot_ends_next_day():
    schedule = OneTimeSchedule("2025-06-01", "22:00", "02:00", 3)
    slot = enumerate_slots(schedule, "oneTime")[0]

    start, end = slot_window(slot, "UTC")

    assert start.day == 1
    assert end.day == 2 and end.hour == 2
