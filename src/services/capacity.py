"""
Per-slot signup tallies and remaining capacity.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from core.config import CAPACITY_STATUSES
from models.projects import Signup, SignupStatus
from models.schedule import SlotDescriptor


@dataclass(frozen=True)
class SlotCapacity:
    """Capacity accounting for one schedule_id."""
    capacity: int
    confirmed: int
    remaining: int


def _status_values(statuses: Iterable[SignupStatus | str]) -> set[str]:
    return {SignupStatus(s).value for s in statuses}


def count_confirmed_by_schedule(
    signups: Iterable[Signup],
    counted_statuses: Iterable[SignupStatus | str] = CAPACITY_STATUSES,
) -> dict[str, int]:
    """Count signups with a capacity-consuming status, keyed by schedule_id."""
    counted = _status_values(counted_statuses)
    return dict(Counter(s.schedule_id for s in signups if SignupStatus(s.status).value in counted))


def aggregate_capacity(
    slots: list[SlotDescriptor],
    signups: Iterable[Signup],
    counted_statuses: Iterable[SignupStatus | str] = CAPACITY_STATUSES,
) -> dict[str, SlotCapacity]:
    """
    Compute confirmed and remaining capacity for every slot.

    Signups referencing a schedule_id that is not in ``slots`` are ignored
    (see ``find_unmatched_signups``). Slots sharing a schedule_id, i.e.
    duplicate role names, are conflated under that key with their capacities
    summed. Remaining capacity never goes below zero.
    """
    counts = count_confirmed_by_schedule(signups, counted_statuses)

    capacities: dict[str, int] = {}
    for slot in slots:
        capacities[slot.schedule_id] = capacities.get(slot.schedule_id, 0) + slot.capacity

    result = {}
    for schedule_id, capacity in capacities.items():
        confirmed = counts.get(schedule_id, 0)
        result[schedule_id] = SlotCapacity(
            capacity=capacity,
            confirmed=confirmed,
            remaining=max(0, capacity - confirmed),
        )
    return result


def find_unmatched_signups(slots: list[SlotDescriptor], signups: Iterable[Signup]) -> list[Signup]:
    """Signups whose schedule_id no longer matches any slot (stale after an edit)."""
    known = {slot.schedule_id for slot in slots}
    return [s for s in signups if s.schedule_id not in known]
