"""
Bookable slot enumeration and schedule_id addressing.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from core.config import DATE_FORMAT, ONE_TIME_SCHEDULE_ID, TIME_FORMAT
from core.errors import MalformedScheduleError
from models.schedule import (
    SCHEDULE_TYPES,
    EventType,
    MultiDaySchedule,
    OneTimeSchedule,
    SameDayMultiAreaSchedule,
    Schedule,
    SlotDescriptor,
    coerce_event_type,
)


def multi_day_schedule_id(date: str, slot_index: int) -> str:
    """Schedule id of a multi-day slot, e.g. '2025-06-01-0'."""
    return f"{date}-{slot_index}"


def enumerate_slots(schedule: Schedule, event_type: EventType | str) -> list[SlotDescriptor]:
    """
    List every bookable unit of a schedule, in schedule order.

    - oneTime: a single slot addressed as 'oneTime'
    - multiDay: one slot per (day, slot), addressed as '<date>-<index>'
    - sameDayMultiArea: one slot per role, addressed by the role name

    Duplicate role names are returned as separate descriptors sharing one
    schedule_id; they are never merged here.

    Raises:
        MalformedScheduleError: schedule is not the variant ``event_type`` declares
    """
    event_type = coerce_event_type(event_type)
    if not isinstance(schedule, SCHEDULE_TYPES) or schedule.event_type is not event_type:
        raise MalformedScheduleError(
            f"Event type '{event_type.value}' does not match the schedule payload"
        )

    if isinstance(schedule, OneTimeSchedule):
        return [
            SlotDescriptor(
                schedule_id=ONE_TIME_SCHEDULE_ID,
                date=schedule.date,
                start_time=schedule.start_time,
                end_time=schedule.end_time,
                capacity=schedule.volunteers,
                label="One-time",
            )
        ]

    if isinstance(schedule, MultiDaySchedule):
        slots = []
        for day_idx, day in enumerate(schedule.days, start=1):
            for slot_idx, slot in enumerate(day.slots):
                slots.append(
                    SlotDescriptor(
                        schedule_id=multi_day_schedule_id(day.date, slot_idx),
                        date=day.date,
                        start_time=slot.start_time,
                        end_time=slot.end_time,
                        capacity=slot.volunteers,
                        label=f"Day {day_idx}, Slot {slot_idx + 1}",
                    )
                )
        return slots

    if isinstance(schedule, SameDayMultiAreaSchedule):
        return [
            SlotDescriptor(
                schedule_id=role.name,
                date=schedule.date,
                start_time=role.start_time,
                end_time=role.end_time,
                capacity=role.volunteers,
                label=role.name,
            )
            for role in schedule.roles
        ]

    raise MalformedScheduleError(f"Unsupported schedule type {type(schedule).__name__}")


def find_slot(slots: list[SlotDescriptor], schedule_id: str) -> SlotDescriptor | None:
    """Return the first slot addressed by ``schedule_id``, if any."""
    for slot in slots:
        if slot.schedule_id == schedule_id:
            return slot
    return None


def to_datetime(date: str, time: str, tz: str) -> datetime:
    """Combine 'YYYY-MM-DD' and 'HH:MM' into an aware datetime in zone ``tz``."""
    try:
        naive = datetime.strptime(f"{date} {time}", f"{DATE_FORMAT} {TIME_FORMAT}")
    except (TypeError, ValueError):
        raise MalformedScheduleError(f"Invalid date/time '{date} {time}'")
    return naive.replace(tzinfo=ZoneInfo(tz))


def time_window(date: str, start_time: str, end_time: str, tz: str) -> tuple[datetime, datetime]:
    """Start/end datetimes of a unit; an end before the start rolls to the next day."""
    start = to_datetime(date, start_time, tz)
    end = to_datetime(date, end_time, tz)
    if end < start:
        end += timedelta(days=1)
    return start, end


def slot_window(slot: SlotDescriptor, tz: str) -> tuple[datetime, datetime]:
    return time_window(slot.date, slot.start_time, slot.end_time, tz)
