"""
SQLite database operations for projects and signups.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from core.config import CAPACITY_STATUSES, DB_PATH
from core.errors import (
    ProjectCancelledError,
    ProjectCompletedError,
    ProjectDeletionLockedError,
    ProjectNotFoundError,
)
from core.validation import validate_schedule, validate_timezone
from models.projects import Project, ProjectStatus, ProjectVisibility, Signup, SignupStatus
from models.schedule import parse_schedule, schedule_to_record
from services.admission import admit_signup, check_existing_signup
from services.status import is_in_deletion_restriction, resolve_status

logger = logging.getLogger(__name__)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL DEFAULT '',
        event_type TEXT NOT NULL CHECK(event_type IN ('oneTime', 'multiDay', 'sameDayMultiArea')),
        schedule TEXT NOT NULL,
        visibility TEXT NOT NULL DEFAULT 'public'
            CHECK(visibility IN ('public', 'unlisted', 'organization_only')),
        organization_id TEXT,
        creator_id TEXT,
        pause_signups INTEGER NOT NULL DEFAULT 0,
        cancelled_at TEXT,
        cancellation_reason TEXT,
        timezone TEXT NOT NULL DEFAULT 'UTC',
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS project_signups (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        project_id TEXT NOT NULL,
        schedule_id TEXT NOT NULL,
        user_id TEXT,
        anonymous_id TEXT,
        status TEXT NOT NULL CHECK(status IN ('pending', 'approved', 'rejected', 'attended')),
        created_at TEXT DEFAULT CURRENT_TIMESTAMP,
        CHECK ((user_id IS NULL) != (anonymous_id IS NULL)),
        FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        project_id TEXT,
        schedule_id TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'admission', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_signups_project ON project_signups(project_id, schedule_id)",
    "CREATE INDEX IF NOT EXISTS idx_projects_visibility ON projects(visibility, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)",
    "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)",
]


@dataclass
class ReservationResult:
    """Signup created by ``reserve_signup`` and the slot's remaining spots."""

    signup: Signup
    remaining_after: int


def get_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Get a database connection."""
    conn = sqlite3.connect(db_path or DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_schema(conn: sqlite3.Connection):
    """Create all tables and indexes if they don't exist."""
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


# =============================================================================
# ROW CONVERSION
# =============================================================================


def _to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        id=row["id"],
        schedule=parse_schedule(row["event_type"], json.loads(row["schedule"])),
        title=row["title"],
        visibility=row["visibility"],
        organization_id=row["organization_id"],
        creator_id=row["creator_id"],
        pause_signups=bool(row["pause_signups"]),
        cancelled_at=_from_iso(row["cancelled_at"]),
        cancellation_reason=row["cancellation_reason"],
        timezone=row["timezone"],
        created_at=_from_iso(row["created_at"]),
    )


def row_to_signup(row: sqlite3.Row) -> Signup:
    return Signup(
        id=row["id"],
        project_id=row["project_id"],
        schedule_id=row["schedule_id"],
        status=row["status"],
        user_id=row["user_id"],
        anonymous_id=row["anonymous_id"],
        created_at=_from_iso(row["created_at"]),
    )


# =============================================================================
# PROJECTS
# =============================================================================


def insert_project(conn: sqlite3.Connection, project: Project) -> Project:
    """Validate and insert a project."""
    validate_schedule(project.schedule)
    validate_timezone(project.timezone)
    created_at = project.created_at or datetime.now(timezone.utc)

    conn.execute(
        """
        INSERT INTO projects (
            id, title, event_type, schedule, visibility, organization_id,
            creator_id, pause_signups, cancelled_at, cancellation_reason,
            timezone, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            project.id,
            project.title,
            project.event_type.value,
            json.dumps(schedule_to_record(project.schedule)),
            ProjectVisibility(project.visibility).value,
            project.organization_id,
            project.creator_id,
            int(project.pause_signups),
            _to_iso(project.cancelled_at),
            project.cancellation_reason,
            project.timezone,
            _to_iso(created_at),
        ),
    )
    conn.commit()
    project.created_at = created_at
    return project


def get_project(conn: sqlite3.Connection, project_id: str) -> Project | None:
    row = conn.execute("SELECT * FROM projects WHERE id = ?", (project_id,)).fetchone()
    return row_to_project(row) if row else None


def list_projects(
    conn: sqlite3.Connection,
    visibility: ProjectVisibility | str | None = ProjectVisibility.PUBLIC,
    organization_id: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Project]:
    """List projects, newest first."""
    query = "SELECT * FROM projects WHERE 1 = 1"
    params: list = []
    if visibility is not None:
        query += " AND visibility = ?"
        params.append(ProjectVisibility(visibility).value)
    if organization_id is not None:
        query += " AND organization_id = ?"
        params.append(organization_id)
    query += " ORDER BY created_at DESC, id"
    if limit is not None:
        query += " LIMIT ? OFFSET ?"
        params += [limit, offset]
    return [row_to_project(row) for row in conn.execute(query, params).fetchall()]


def set_pause_signups(conn: sqlite3.Connection, project_id: str, paused: bool):
    cursor = conn.execute(
        "UPDATE projects SET pause_signups = ? WHERE id = ?", (int(paused), project_id)
    )
    conn.commit()
    if cursor.rowcount == 0:
        raise ProjectNotFoundError()


def cancel_project(
    conn: sqlite3.Connection, project_id: str, reason: str, now: datetime | None = None
) -> Project:
    """
    Cancel a project that has not already ended.

    Raises:
        ProjectNotFoundError, ProjectCancelledError, ProjectCompletedError
        ValueError: reason is empty
    """
    now = now or datetime.now(timezone.utc)
    project = get_project(conn, project_id)
    if project is None:
        raise ProjectNotFoundError()
    if not reason or not reason.strip():
        raise ValueError("Cancellation reason is required")

    status = resolve_status(project, now)
    if status is ProjectStatus.CANCELLED:
        raise ProjectCancelledError()
    if status is ProjectStatus.COMPLETED:
        raise ProjectCompletedError()

    conn.execute(
        "UPDATE projects SET cancelled_at = ?, cancellation_reason = ? WHERE id = ?",
        (_to_iso(now), reason.strip(), project_id),
    )
    conn.commit()
    project.cancelled_at = now
    project.cancellation_reason = reason.strip()
    logger.info(f"Project {project_id} cancelled: {project.cancellation_reason}")
    return project


def delete_project(conn: sqlite3.Connection, project_id: str, now: datetime | None = None):
    """
    Delete a project and its signups.

    Raises:
        ProjectNotFoundError
        ProjectDeletionLockedError: inside the window around the project's dates
    """
    now = now or datetime.now(timezone.utc)
    project = get_project(conn, project_id)
    if project is None:
        raise ProjectNotFoundError()
    if project.cancelled_at is None and is_in_deletion_restriction(project, now):
        raise ProjectDeletionLockedError()

    conn.execute("DELETE FROM project_signups WHERE project_id = ?", (project_id,))
    conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
    conn.commit()


# =============================================================================
# SIGNUPS
# =============================================================================


def get_signups(
    conn: sqlite3.Connection,
    project_ids: list[str],
    statuses: list[SignupStatus | str] | None = None,
) -> list[Signup]:
    """Get signups for the given projects, optionally filtered by status."""
    # Skip the query entirely to avoid an empty IN ()
    if not project_ids:
        return []

    placeholders = ", ".join("?" for _ in project_ids)
    query = f"SELECT * FROM project_signups WHERE project_id IN ({placeholders})"
    params: list = list(project_ids)
    if statuses:
        query += f" AND status IN ({', '.join('?' for _ in statuses)})"
        params += [SignupStatus(s).value for s in statuses]
    query += " ORDER BY id"
    return [row_to_signup(row) for row in conn.execute(query, params).fetchall()]


def _insert_signup_row(conn: sqlite3.Connection, signup: Signup) -> int:
    cursor = conn.execute(
        """
        INSERT INTO project_signups (
            project_id, schedule_id, user_id, anonymous_id, status, created_at
        ) VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            signup.project_id,
            signup.schedule_id,
            signup.user_id,
            signup.anonymous_id,
            SignupStatus(signup.status).value,
            _to_iso(signup.created_at or datetime.now(timezone.utc)),
        ),
    )
    return cursor.lastrowid


def insert_signup(conn: sqlite3.Connection, signup: Signup) -> Signup:
    """
    Insert a signup without any capacity check.

    Use ``reserve_signup`` for volunteer-initiated signups.
    """
    signup.id = _insert_signup_row(conn, signup)
    conn.commit()
    return signup


def update_signup_status(conn: sqlite3.Connection, signup_id: int, status: SignupStatus | str):
    cursor = conn.execute(
        "UPDATE project_signups SET status = ? WHERE id = ?",
        (SignupStatus(status).value, signup_id),
    )
    conn.commit()
    if cursor.rowcount == 0:
        raise LookupError(f"Signup {signup_id} not found")


def delete_signup(conn: sqlite3.Connection, signup_id: int):
    """Delete a signup (volunteer cancellation)."""
    conn.execute("DELETE FROM project_signups WHERE id = ?", (signup_id,))
    conn.commit()


def reserve_signup(
    conn: sqlite3.Connection,
    project_id: str,
    schedule_id: str,
    user_id: str | None = None,
    anonymous_id: str | None = None,
    status: SignupStatus | str = SignupStatus.APPROVED,
    now: datetime | None = None,
) -> ReservationResult:
    """
    Atomically check admission and insert a signup.

    Holds a SQLite write lock (BEGIN IMMEDIATE) from the capacity read to the
    insert, so concurrent reservations for the same slot are serialized and
    can never overbook it. The connection must not be inside a transaction.

    Raises:
        ProjectNotFoundError, DuplicateSignupError, SignupRejectedError and
        every admission error from ``services.admission.admit_signup``
    """
    now = now or datetime.now(timezone.utc)
    signup = Signup(
        project_id=project_id,
        schedule_id=schedule_id,
        status=status,
        user_id=user_id,
        anonymous_id=anonymous_id,
        created_at=now,
    )

    conn.execute("BEGIN IMMEDIATE")
    try:
        project = get_project(conn, project_id)
        if project is None:
            raise ProjectNotFoundError()

        signups = get_signups(conn, [project_id])
        check_existing_signup(signups, schedule_id, user_id=user_id, anonymous_id=anonymous_id)
        admission = admit_signup(project, schedule_id, signups, now)

        signup.id = _insert_signup_row(conn, signup)
        conn.commit()
    except Exception:
        conn.rollback()
        raise

    # Pending signups do not consume capacity yet
    remaining_after = admission.remaining_after
    if signup.status.value not in CAPACITY_STATUSES:
        remaining_after += 1

    logger.info(
        f"Reserved signup {signup.id} on {project_id}/{schedule_id} "
        f"({remaining_after} spots left)"
    )
    return ReservationResult(signup=signup, remaining_after=remaining_after)
