"""
Data models for projects and signups.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from core.config import DEFAULT_PROJECT_TIMEZONE
from models.schedule import EventType, Schedule


class ProjectStatus(str, Enum):
    UPCOMING = "upcoming"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SignupStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ATTENDED = "attended"


class ProjectVisibility(str, Enum):
    PUBLIC = "public"
    UNLISTED = "unlisted"
    ORGANIZATION_ONLY = "organization_only"


@dataclass
class Project:
    """
    Volunteer project.

    Status is never stored here: it is derived from the schedule, the
    cancellation marker and the current time (see ``services.status``).
    """

    id: str
    schedule: Schedule
    title: str = ""
    visibility: ProjectVisibility = ProjectVisibility.PUBLIC
    organization_id: str | None = None
    creator_id: str | None = None
    pause_signups: bool = False
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    timezone: str = DEFAULT_PROJECT_TIMEZONE
    created_at: datetime | None = None

    def __post_init__(self):
        self.visibility = ProjectVisibility(self.visibility)

    @property
    def event_type(self) -> EventType:
        return self.schedule.event_type


@dataclass
class Signup:
    """Volunteer signup for one bookable unit of a project."""

    project_id: str
    schedule_id: str
    status: SignupStatus = SignupStatus.PENDING
    user_id: str | None = None
    anonymous_id: str | None = None
    id: int | None = None
    created_at: datetime | None = None

    def __post_init__(self):
        self.status = SignupStatus(self.status)
        # Exactly one identity reference
        if (self.user_id is None) == (self.anonymous_id is None):
            raise ValueError("Signup needs exactly one of user_id or anonymous_id")
