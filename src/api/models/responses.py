"""Pydantic response models for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class SlotCapacityResponse(BaseModel):
    """Capacity of one bookable slot."""

    schedule_id: str
    label: str
    date: str
    start_time: str
    end_time: str
    capacity: int
    confirmed: int
    remaining: int


class ProjectResponse(BaseModel):
    id: str
    title: str
    event_type: str
    status: str
    visibility: str
    organization_id: str | None = None
    creator_id: str | None = None
    pause_signups: bool = False
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    timezone: str
    schedule: dict[str, Any]
    confirmed_signups: dict[str, int] = {}
    total_confirmed: int = 0
    slots: list[SlotCapacityResponse] = []


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    limit: int
    offset: int


class SignupResponse(BaseModel):
    id: int
    project_id: str
    schedule_id: str
    status: str
    user_id: str | None = None
    anonymous_id: str | None = None
    remaining_after: int


class AdmissionResponse(BaseModel):
    """Result of a stateless admission check."""

    admitted: bool
    schedule_id: str
    project_status: str
    remaining_after: int


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    MALFORMED_SCHEDULE = "MALFORMED_SCHEDULE"
    UNKNOWN_SLOT = "UNKNOWN_SLOT"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    PROJECT_CANCELLED = "PROJECT_CANCELLED"
    PROJECT_COMPLETED = "PROJECT_COMPLETED"
    SIGNUPS_PAUSED = "SIGNUPS_PAUSED"
    SLOT_ENDED = "SLOT_ENDED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DUPLICATE_SIGNUP = "DUPLICATE_SIGNUP"
    SIGNUP_REJECTED = "SIGNUP_REJECTED"
    PROJECT_DELETION_LOCKED = "PROJECT_DELETION_LOCKED"
