"""
Scheduling and signup errors.

Every error here is an expected, user-facing condition. The API layer maps
``code`` to an HTTP status and returns ``message`` to the caller.
"""


class SchedulingError(Exception):
    """Base class for all scheduling/signup domain errors."""

    code = "SCHEDULING_ERROR"
    default_message = "Scheduling error"

    def __init__(self, message: str | None = None, details: list[str] | None = None):
        self.message = message or self.default_message
        self.details = details or []
        super().__init__(self.message)


class MalformedScheduleError(SchedulingError):
    """Schedule payload is inconsistent with its event type, or invalid."""

    code = "MALFORMED_SCHEDULE"
    default_message = "Project schedule is malformed"


class UnknownSlotError(SchedulingError):
    code = "UNKNOWN_SLOT"
    default_message = "This time slot is no longer available"

    def __init__(self, schedule_id: str | None = None, message: str | None = None):
        self.schedule_id = schedule_id
        details = [f"schedule_id: {schedule_id}"] if schedule_id is not None else []
        super().__init__(message, details)


class ProjectNotFoundError(SchedulingError):
    code = "PROJECT_NOT_FOUND"
    default_message = "Project not found"


class ProjectCancelledError(SchedulingError):
    code = "PROJECT_CANCELLED"
    default_message = "This project has been cancelled"


class ProjectCompletedError(SchedulingError):
    code = "PROJECT_COMPLETED"
    default_message = "This project has been completed"


class SignupsPausedError(SchedulingError):
    code = "SIGNUPS_PAUSED"
    default_message = "Signups for this project are temporarily paused by the organizer"


class SlotEndedError(SchedulingError):
    code = "SLOT_ENDED"
    default_message = "This time slot has already passed"


class CapacityExceededError(SchedulingError):
    """Slot does not have enough remaining spots for the request."""

    code = "CAPACITY_EXCEEDED"
    default_message = "This slot is full"

    def __init__(self, schedule_id: str | None, remaining: int, requested: int):
        self.schedule_id = schedule_id
        self.remaining = remaining
        self.requested = requested
        super().__init__(
            details=[f"Requested {requested}, remaining {remaining}"],
        )


class DuplicateSignupError(SchedulingError):
    code = "DUPLICATE_SIGNUP"
    default_message = "You have already signed up for this slot"


class SignupRejectedError(SchedulingError):
    code = "SIGNUP_REJECTED"
    default_message = "You have been rejected for this project and cannot sign up again."


class ProjectDeletionLockedError(SchedulingError):
    code = "PROJECT_DELETION_LOCKED"
    default_message = "Projects cannot be deleted 24 hours before start until 48 hours after end"
