"""Tests for per-slot capacity aggregation."""

import random

import pytest

from fixtures.generate_signups import generate_signups
from models.schedule import SlotDescriptor
from services.capacity import (
    SlotCapacity,
    aggregate_capacity,
    count_confirmed_by_schedule,
    find_unmatched_signups,
)
from services.slots import enumerate_slots


def test_one_time_counts(one_time_project, make_signup):
    slots = enumerate_slots(one_time_project.schedule, "oneTime")
    signups = [make_signup("proj-one", "oneTime") for _ in range(3)]

    capacity = aggregate_capacity(slots, signups)

    assert capacity == {"oneTime": SlotCapacity(capacity=5, confirmed=3, remaining=2)}


def test_multi_day_slots_tallied_independently(multi_day_project, make_signup):
    slots = enumerate_slots(multi_day_project.schedule, "multiDay")
    signups = [make_signup("proj-multi", "2025-06-01-0") for _ in range(3)]
    signups.append(make_signup("proj-multi", "2025-06-01-1"))

    capacity = aggregate_capacity(slots, signups)

    assert capacity["2025-06-01-0"] == SlotCapacity(4, 3, 1)
    assert capacity["2025-06-01-1"] == SlotCapacity(4, 1, 3)
    assert capacity["2025-06-02-0"] == SlotCapacity(2, 0, 2)


def test_only_capacity_statuses_count(one_time_project, make_signup):
    slots = enumerate_slots(one_time_project.schedule, "oneTime")
    signups = [
        make_signup("proj-one", "oneTime", "approved"),
        make_signup("proj-one", "oneTime", "attended"),
        make_signup("proj-one", "oneTime", "pending"),
        make_signup("proj-one", "oneTime", "rejected"),
    ]

    assert aggregate_capacity(slots, signups)["oneTime"].confirmed == 2
    assert aggregate_capacity(slots, signups, counted_statuses={"approved"})["oneTime"].confirmed == 1


def test_remaining_never_negative(one_time_project, make_signup):
    slots = enumerate_slots(one_time_project.schedule, "oneTime")
    signups = [make_signup("proj-one", "oneTime") for _ in range(8)]

    capacity = aggregate_capacity(slots, signups)["oneTime"]

    assert capacity.confirmed == 8
    assert capacity.remaining == 0


def test_stale_signups_ignored_and_reported(multi_area_project, make_signup):
    slots = enumerate_slots(multi_area_project.schedule, "sameDayMultiArea")
    stale = make_signup("proj-area", "Parking")
    signups = [make_signup("proj-area", "Cleanup"), stale]

    capacity = aggregate_capacity(slots, signups)

    assert set(capacity) == {"Registration", "Cleanup"}
    assert capacity["Cleanup"].confirmed == 1
    assert find_unmatched_signups(slots, signups) == [stale]
    # The raw tally still reports the stale id
    assert count_confirmed_by_schedule(signups) == {"Cleanup": 1, "Parking": 1}


def test_duplicate_schedule_ids_are_conflated(make_signup):
    slots = [
        SlotDescriptor("Setup", "2025-06-01", "08:00", "10:00", 2),
        SlotDescriptor("Setup", "2025-06-01", "10:00", "12:00", 3),
    ]
    signups = [make_signup("p", "Setup") for _ in range(4)]

    assert aggregate_capacity(slots, signups) == {"Setup": SlotCapacity(5, 4, 1)}


@pytest.mark.parametrize("seed", range(5))
def test_random_signup_sets(multi_day_project, seed):
    slots = enumerate_slots(multi_day_project.schedule, "multiDay")
    signups = generate_signups("proj-multi", slots, count=40, seed=seed)

    capacity = aggregate_capacity(slots, signups)
    shuffled = list(signups)
    random.Random(seed).shuffle(shuffled)

    assert set(capacity) == {s.schedule_id for s in slots}
    assert aggregate_capacity(slots, shuffled) == capacity
    for schedule_id, slot_capacity in capacity.items():
        assert slot_capacity.remaining >= 0
        assert slot_capacity.remaining == max(0, slot_capacity.capacity - slot_capacity.confirmed)
        expected = sum(
            1 for s in signups
            if s.schedule_id == schedule_id and s.status.value in ("approved", "attended")
        )
        assert slot_capacity.confirmed == expected
