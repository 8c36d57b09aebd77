"""
Project lifecycle status derived from schedule and time.

Status is a projection, never stored ground truth: the same project and
``now`` always resolve to the same status.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from core.config import DELETION_LOCK_HOURS_AFTER_END, DELETION_LOCK_HOURS_BEFORE_START
from models.projects import Project, ProjectStatus
from models.schedule import SameDayMultiAreaSchedule
from services.slots import enumerate_slots, slot_window, time_window


def localize(now: datetime, tz: str) -> datetime:
    """Naive ``now`` is wall-clock time in the project's zone."""
    if now.tzinfo is None:
        return now.replace(tzinfo=ZoneInfo(tz))
    return now


def project_window(project: Project) -> tuple[datetime, datetime] | None:
    """
    Effective time window of a project: earliest start to latest end.

    Same-day multi-area projects use their overall start/end. Returns None
    when the schedule has no bookable units.
    """
    schedule = project.schedule
    if isinstance(schedule, SameDayMultiAreaSchedule):
        if not schedule.roles:
            return None
        return time_window(schedule.date, schedule.overall_start, schedule.overall_end, project.timezone)

    slots = enumerate_slots(schedule, project.event_type)
    if not slots:
        return None
    windows = [slot_window(slot, project.timezone) for slot in slots]
    return min(start for start, _ in windows), max(end for _, end in windows)


def resolve_status(project: Project, now: datetime) -> ProjectStatus:
    """
    Compute the project's lifecycle status at ``now``.

    Cancellation overrides everything. Both window bounds are inclusive, and
    a schedule without any units stays upcoming.
    """
    if project.cancelled_at is not None:
        return ProjectStatus.CANCELLED

    window = project_window(project)
    if window is None:
        return ProjectStatus.UPCOMING

    start, end = window
    now = localize(now, project.timezone)
    if now < start:
        return ProjectStatus.UPCOMING
    if now <= end:
        return ProjectStatus.IN_PROGRESS
    return ProjectStatus.COMPLETED


def can_cancel_project(project: Project, now: datetime) -> bool:
    """A project can be cancelled until it has completed."""
    return resolve_status(project, now) not in (ProjectStatus.CANCELLED, ProjectStatus.COMPLETED)


def is_in_deletion_restriction(project: Project, now: datetime) -> bool:
    """True from 24h before start until 48h after end (configurable)."""
    window = project_window(project)
    if window is None:
        return False
    start, end = window
    now = localize(now, project.timezone)
    lock_start = start - timedelta(hours=DELETION_LOCK_HOURS_BEFORE_START)
    lock_end = end + timedelta(hours=DELETION_LOCK_HOURS_AFTER_END)
    return lock_start <= now <= lock_end
