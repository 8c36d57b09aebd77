"""Pydantic request models for API endpoints."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from core.config import DEFAULT_PROJECT_TIMEZONE

EventTypeName = Literal["oneTime", "multiDay", "sameDayMultiArea"]
VisibilityName = Literal["public", "unlisted", "organization_only"]
SignupStatusName = Literal["pending", "approved", "rejected", "attended"]


class ProjectCreateRequest(BaseModel):
    """
    New project. ``schedule`` uses the stored record shape, e.g.
    ``{"oneTime": {"date": "2025-06-01", "startTime": "09:00", ...}}``.
    """

    id: str | None = None
    title: str = Field(..., min_length=1)
    event_type: EventTypeName
    schedule: dict[str, Any]
    visibility: VisibilityName = "public"
    organization_id: str | None = None
    creator_id: str | None = None
    pause_signups: bool = False
    timezone: str = DEFAULT_PROJECT_TIMEZONE


class VolunteerIdentity(BaseModel):
    user_id: str | None = None
    anonymous_id: str | None = None

    @model_validator(mode="after")
    def check_single_identity(self):
        if (self.user_id is None) == (self.anonymous_id is None):
            raise ValueError("Exactly one of user_id or anonymous_id is required")
        return self


class SignupCreateRequest(VolunteerIdentity):
    schedule_id: str
    # Anonymous signups stay pending until confirmed by email
    status: Literal["pending", "approved"] = "approved"


class SignupRecord(VolunteerIdentity):
    schedule_id: str
    status: SignupStatusName


class CancelProjectRequest(BaseModel):
    reason: str = Field(..., min_length=1)


class AdmissionCheckRequest(BaseModel):
    """Stateless admission check against a posted project snapshot."""

    project: ProjectCreateRequest
    signups: list[SignupRecord] = []
    schedule_id: str
    requested_count: int = Field(1, ge=1)
    cancelled_at: datetime | None = None
    now: datetime | None = None
