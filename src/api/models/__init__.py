"""API Pydantic models."""

from .requests import (
    AdmissionCheckRequest,
    CancelProjectRequest,
    ProjectCreateRequest,
    SignupCreateRequest,
    SignupRecord,
)
from .responses import (
    AdmissionResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    ProjectListResponse,
    ProjectResponse,
    SignupResponse,
    SlotCapacityResponse,
)

__all__ = [
    "AdmissionCheckRequest",
    "AdmissionResponse",
    "CancelProjectRequest",
    "ErrorCodes",
    "ErrorResponse",
    "HealthResponse",
    "ProjectCreateRequest",
    "ProjectListResponse",
    "ProjectResponse",
    "SignupCreateRequest",
    "SignupRecord",
    "SignupResponse",
    "SlotCapacityResponse",
]
