"""
Project feed: status stamping, per-slot counts and visibility.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from core.config import CAPACITY_STATUSES
from core.errors import MalformedScheduleError
from models.projects import Project, ProjectStatus, ProjectVisibility, Signup, SignupStatus
from models.schedule import SlotDescriptor
from services.capacity import (
    SlotCapacity,
    aggregate_capacity,
    count_confirmed_by_schedule,
    find_unmatched_signups,
)
from services.slots import enumerate_slots
from services.status import resolve_status

logger = logging.getLogger(__name__)


@dataclass
class ProjectSummary:
    """A project with its derived status and signup counts."""

    project: Project
    status: ProjectStatus
    slots: list[SlotDescriptor] = field(default_factory=list)
    capacity: dict[str, SlotCapacity] = field(default_factory=dict)
    confirmed_signups: dict[str, int] = field(default_factory=dict)
    total_confirmed: int = 0


def summarize_project(
    project: Project,
    signups: Iterable[Signup],
    now: datetime,
    counted_statuses: Iterable[SignupStatus | str] = CAPACITY_STATUSES,
) -> ProjectSummary:
    """Stamp status and tally signups for a single project."""
    counted_statuses = list(counted_statuses)
    project_signups = [s for s in signups if s.project_id == project.id]
    slots = enumerate_slots(project.schedule, project.event_type)

    unmatched = find_unmatched_signups(slots, project_signups)
    if unmatched:
        logger.warning(
            f"Project {project.id}: ignoring {len(unmatched)} signups for stale schedule ids "
            f"{sorted({s.schedule_id for s in unmatched})}"
        )

    confirmed = count_confirmed_by_schedule(project_signups, counted_statuses)
    return ProjectSummary(
        project=project,
        status=resolve_status(project, now),
        slots=slots,
        capacity=aggregate_capacity(slots, project_signups, counted_statuses),
        confirmed_signups=confirmed,
        total_confirmed=sum(confirmed.values()),
    )


def list_active_projects(
    projects: Iterable[Project],
    signups: Iterable[Signup],
    now: datetime,
    status: ProjectStatus | str | None = None,
) -> list[ProjectSummary]:
    """
    Build the public project feed.

    Only public projects are listed; unlisted ones are reachable by direct
    link only. When ``status`` is given, only projects currently in that
    status are returned. Projects whose stored schedule cannot be resolved
    are skipped with a warning.
    """
    wanted = ProjectStatus(status) if status is not None else None

    signups_by_project: dict[str, list[Signup]] = defaultdict(list)
    for signup in signups:
        signups_by_project[signup.project_id].append(signup)

    summaries = []
    for project in projects:
        if ProjectVisibility(project.visibility) is not ProjectVisibility.PUBLIC:
            continue
        try:
            summary = summarize_project(project, signups_by_project.get(project.id, []), now)
        except MalformedScheduleError as e:
            logger.warning(f"Skipping project {project.id} in feed: {e.message}")
            continue
        if wanted is not None and summary.status is not wanted:
            continue
        summaries.append(summary)
    return summaries


def is_project_visible(
    project: Project,
    user_id: str | None = None,
    organization_ids: Iterable[str] = (),
) -> bool:
    """
    Check whether a viewer may see a project.

    Public and unlisted projects are visible to anyone with the link.
    Organization-only projects require membership of the project's
    organization, except for the project's creator.
    """
    if ProjectVisibility(project.visibility) is not ProjectVisibility.ORGANIZATION_ONLY:
        return True
    if user_id is not None and project.creator_id == user_id:
        return True
    return project.organization_id is not None and project.organization_id in set(organization_ids)
