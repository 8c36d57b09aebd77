"""
Schedule shapes for volunteer projects.

A project's schedule is exactly one of three variants. The variant class is
the discriminant, so a project can never carry a payload that disagrees with
its event type. Stored records keep the camelCase wire shape
(``{"oneTime": {...}}``, ``{"multiDay": [...]}``, ``{"sameDayMultiArea": {...}}``)
and are converted with ``parse_schedule`` / ``schedule_to_record``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from core.errors import MalformedScheduleError


class EventType(str, Enum):
    ONE_TIME = "oneTime"
    MULTI_DAY = "multiDay"
    SAME_DAY_MULTI_AREA = "sameDayMultiArea"


@dataclass(frozen=True)
class TimeSlot:
    """One bookable slot of a multi-day schedule day."""
    start_time: str
    end_time: str
    volunteers: int


@dataclass(frozen=True)
class OneTimeSchedule:
    date: str
    start_time: str
    end_time: str
    volunteers: int

    event_type: ClassVar[EventType] = EventType.ONE_TIME


@dataclass(frozen=True)
class MultiDayScheduleDay:
    date: str
    slots: tuple[TimeSlot, ...] = ()


@dataclass(frozen=True)
class MultiDaySchedule:
    days: tuple[MultiDayScheduleDay, ...] = ()

    event_type: ClassVar[EventType] = EventType.MULTI_DAY


@dataclass(frozen=True)
class Role:
    """A parallel area/role of a same-day multi-area schedule."""
    name: str
    start_time: str
    end_time: str
    volunteers: int


@dataclass(frozen=True)
class SameDayMultiAreaSchedule:
    date: str
    overall_start: str
    overall_end: str
    roles: tuple[Role, ...] = ()

    event_type: ClassVar[EventType] = EventType.SAME_DAY_MULTI_AREA


Schedule = OneTimeSchedule | MultiDaySchedule | SameDayMultiAreaSchedule

SCHEDULE_TYPES = (OneTimeSchedule, MultiDaySchedule, SameDayMultiAreaSchedule)


@dataclass(frozen=True)
class SlotDescriptor:
    """A single bookable unit of a project, addressed by ``schedule_id``."""
    schedule_id: str
    date: str
    start_time: str
    end_time: str
    capacity: int
    label: str = ""


def coerce_event_type(event_type: EventType | str) -> EventType:
    """Convert a stored event type string to ``EventType``."""
    try:
        return EventType(event_type)
    except ValueError:
        raise MalformedScheduleError(f"Unknown event type '{event_type}'")


# =============================================================================
# RECORD CONVERSION
# =============================================================================


def _volunteers(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise MalformedScheduleError(f"{where}: volunteers must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MalformedScheduleError(f"{where}: volunteers must be an integer, got {value!r}")


def _parse_one_time(payload: dict) -> OneTimeSchedule:
    return OneTimeSchedule(
        date=payload["date"],
        start_time=payload["startTime"],
        end_time=payload["endTime"],
        volunteers=_volunteers(payload["volunteers"], "oneTime"),
    )


def _parse_multi_day(payload: list) -> MultiDaySchedule:
    days = []
    for day in payload:
        slots = tuple(
            TimeSlot(
                start_time=slot["startTime"],
                end_time=slot["endTime"],
                volunteers=_volunteers(slot["volunteers"], f"multiDay {day['date']} slot {idx}"),
            )
            for idx, slot in enumerate(day.get("slots") or [])
        )
        days.append(MultiDayScheduleDay(date=day["date"], slots=slots))
    return MultiDaySchedule(days=tuple(days))


def _parse_same_day_multi_area(payload: dict) -> SameDayMultiAreaSchedule:
    roles = tuple(
        Role(
            name=role["name"],
            start_time=role["startTime"],
            end_time=role["endTime"],
            volunteers=_volunteers(role["volunteers"], f"role {role.get('name')!r}"),
        )
        for role in payload.get("roles") or []
    )
    return SameDayMultiAreaSchedule(
        date=payload["date"],
        overall_start=payload["overallStart"],
        overall_end=payload["overallEnd"],
        roles=roles,
    )


_PARSERS = {
    EventType.ONE_TIME: _parse_one_time,
    EventType.MULTI_DAY: _parse_multi_day,
    EventType.SAME_DAY_MULTI_AREA: _parse_same_day_multi_area,
}


def parse_schedule(event_type: EventType | str, record: dict | None) -> Schedule:
    """
    Build the schedule variant for ``event_type`` from a stored record.

    Raises:
        MalformedScheduleError: the record does not hold exactly one payload,
            the payload is not the one ``event_type`` declares, or a required
            field is missing.
    """
    event_type = coerce_event_type(event_type)
    record = record or {}

    populated = [key for key in (t.value for t in EventType) if record.get(key) is not None]
    if len(populated) > 1:
        raise MalformedScheduleError(
            f"Schedule has multiple payloads set: {', '.join(populated)}"
        )
    if event_type.value not in populated:
        raise MalformedScheduleError(
            f"Event type '{event_type.value}' but schedule.{event_type.value} is absent"
        )

    try:
        return _PARSERS[event_type](record[event_type.value])
    except (KeyError, TypeError, AttributeError) as e:
        raise MalformedScheduleError(f"{event_type.value} schedule is missing field {e}")


def schedule_to_record(schedule: Schedule) -> dict:
    """Serialize a schedule variant back to its stored record shape."""
    if isinstance(schedule, OneTimeSchedule):
        return {
            "oneTime": {
                "date": schedule.date,
                "startTime": schedule.start_time,
                "endTime": schedule.end_time,
                "volunteers": schedule.volunteers,
            }
        }
    if isinstance(schedule, MultiDaySchedule):
        return {
            "multiDay": [
                {
                    "date": day.date,
                    "slots": [
                        {
                            "startTime": slot.start_time,
                            "endTime": slot.end_time,
                            "volunteers": slot.volunteers,
                        }
                        for slot in day.slots
                    ],
                }
                for day in schedule.days
            ]
        }
    if isinstance(schedule, SameDayMultiAreaSchedule):
        return {
            "sameDayMultiArea": {
                "date": schedule.date,
                "overallStart": schedule.overall_start,
                "overallEnd": schedule.overall_end,
                "roles": [
                    {
                        "name": role.name,
                        "startTime": role.start_time,
                        "endTime": role.end_time,
                        "volunteers": role.volunteers,
                    }
                    for role in schedule.roles
                ],
            }
        }
    raise MalformedScheduleError(f"Unsupported schedule type {type(schedule).__name__}")
