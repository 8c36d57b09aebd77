"""
Signup admission decisions.

Everything here is a pure decision: nothing is reserved or written. Callers
must run the decision and the signup insert atomically (see
``core.database.reserve_signup``) to avoid double-booking.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from core.config import CAPACITY_STATUSES
from core.errors import (
    CapacityExceededError,
    DuplicateSignupError,
    ProjectCancelledError,
    ProjectCompletedError,
    SignupRejectedError,
    SignupsPausedError,
    SlotEndedError,
    UnknownSlotError,
)
from models.projects import Project, ProjectStatus, Signup, SignupStatus
from services.capacity import SlotCapacity, aggregate_capacity, find_unmatched_signups
from services.slots import enumerate_slots, find_slot, slot_window
from services.status import localize, resolve_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdmissionResult:
    admitted: bool
    remaining_after: int
    schedule_id: str | None = None


def check_admission(
    slot_capacity: SlotCapacity | None,
    requested_count: int = 1,
    status: ProjectStatus | str | None = None,
    signups_paused: bool = False,
    slot_ended: bool = False,
    schedule_id: str | None = None,
) -> AdmissionResult:
    """
    Decide whether ``requested_count`` more signups fit in a slot.

    Checks, in order: the slot exists, the project is not cancelled or
    completed, signups are not paused, the slot has not ended, and enough
    capacity remains.

    Raises:
        ValueError: requested_count is less than 1
        UnknownSlotError, ProjectCancelledError, ProjectCompletedError,
        SignupsPausedError, SlotEndedError, CapacityExceededError
    """
    if requested_count < 1:
        raise ValueError(f"requested_count must be at least 1, got {requested_count}")
    if slot_capacity is None:
        raise UnknownSlotError(schedule_id)

    status = ProjectStatus(status) if status is not None else None
    if status is ProjectStatus.CANCELLED:
        raise ProjectCancelledError()
    if status is ProjectStatus.COMPLETED:
        raise ProjectCompletedError()
    if signups_paused:
        raise SignupsPausedError()
    if slot_ended:
        raise SlotEndedError()
    if slot_capacity.remaining < requested_count:
        raise CapacityExceededError(schedule_id, slot_capacity.remaining, requested_count)

    return AdmissionResult(
        admitted=True,
        remaining_after=slot_capacity.remaining - requested_count,
        schedule_id=schedule_id,
    )


def admit_signup(
    project: Project,
    schedule_id: str,
    signups: Iterable[Signup],
    now: datetime,
    requested_count: int = 1,
    counted_statuses: Iterable[SignupStatus | str] = CAPACITY_STATUSES,
) -> AdmissionResult:
    """
    Run the full admission chain for one project snapshot.

    Resolves status, enumerates slots, tallies the project's signups and
    checks the request against the resulting capacity.
    """
    project_signups = [s for s in signups if s.project_id == project.id]
    status = resolve_status(project, now)
    slots = enumerate_slots(project.schedule, project.event_type)

    unmatched = find_unmatched_signups(slots, project_signups)
    if unmatched:
        logger.warning(
            f"Project {project.id} has {len(unmatched)} signups for unknown schedule ids: "
            f"{sorted({s.schedule_id for s in unmatched})}"
        )

    capacity = aggregate_capacity(slots, project_signups, counted_statuses)

    slot_ended = False
    slot = find_slot(slots, schedule_id)
    if slot is not None:
        _, slot_end = slot_window(slot, project.timezone)
        slot_ended = localize(now, project.timezone) > slot_end

    return check_admission(
        capacity.get(schedule_id),
        requested_count,
        status=status,
        signups_paused=project.pause_signups,
        slot_ended=slot_ended,
        schedule_id=schedule_id,
    )


def check_existing_signup(
    signups: Iterable[Signup],
    schedule_id: str,
    user_id: str | None = None,
    anonymous_id: str | None = None,
) -> None:
    """
    Reject repeat signups by the same volunteer for the same slot.

    Raises:
        SignupRejectedError: the volunteer was rejected for this slot
        DuplicateSignupError: the volunteer already has a pending/approved signup
    """
    if user_id is None and anonymous_id is None:
        return

    mine = [
        s for s in signups
        if s.schedule_id == schedule_id
        and ((user_id is not None and s.user_id == user_id)
             or (anonymous_id is not None and s.anonymous_id == anonymous_id))
    ]
    statuses = {SignupStatus(s.status) for s in mine}
    if SignupStatus.REJECTED in statuses:
        raise SignupRejectedError()
    if statuses & {SignupStatus.PENDING, SignupStatus.APPROVED}:
        raise DuplicateSignupError()
