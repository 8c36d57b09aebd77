"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.projects import Project, Signup  # noqa: E402
from models.schedule import (  # noqa: E402
    MultiDaySchedule,
    MultiDayScheduleDay,
    OneTimeSchedule,
    Role,
    SameDayMultiAreaSchedule,
    TimeSlot,
)


@pytest.fixture
def before_start():
    """A moment before every sample project starts."""
    return datetime(2025, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def one_time_project():
    """One-time project: 2025-06-01 09:00-12:00, 5 volunteers."""
    return Project(
        id="proj-one",
        title="Park Cleanup",
        schedule=OneTimeSchedule(
            date="2025-06-01", start_time="09:00", end_time="12:00", volunteers=5
        ),
    )


@pytest.fixture
def multi_day_project():
    """Two days; the first has two 4-volunteer slots."""
    return Project(
        id="proj-multi",
        title="Food Drive",
        schedule=MultiDaySchedule(
            days=(
                MultiDayScheduleDay(
                    date="2025-06-01",
                    slots=(
                        TimeSlot(start_time="09:00", end_time="12:00", volunteers=4),
                        TimeSlot(start_time="13:00", end_time="16:00", volunteers=4),
                    ),
                ),
                MultiDayScheduleDay(
                    date="2025-06-02",
                    slots=(TimeSlot(start_time="10:00", end_time="14:00", volunteers=2),),
                ),
            )
        ),
    )


@pytest.fixture
def multi_area_project():
    """Same-day multi-area project with two parallel roles."""
    return Project(
        id="proj-area",
        title="Community Festival",
        schedule=SameDayMultiAreaSchedule(
            date="2025-06-01",
            overall_start="08:00",
            overall_end="18:00",
            roles=(
                Role(name="Registration", start_time="08:00", end_time="12:00", volunteers=3),
                Role(name="Cleanup", start_time="15:00", end_time="18:00", volunteers=6),
            ),
        ),
    )


@pytest.fixture
def make_signup():
    """Factory for signups with unique user ids."""
    counter = {"n": 0}

    def _make(project_id: str, schedule_id: str, status: str = "approved", **kwargs) -> Signup:
        counter["n"] += 1
        if "user_id" not in kwargs and "anonymous_id" not in kwargs:
            kwargs["user_id"] = f"user-{counter['n']}"
        return Signup(project_id=project_id, schedule_id=schedule_id, status=status, **kwargs)

    return _make


@pytest.fixture
def db_path(tmp_path):
    """Fresh database file with the full schema."""
    from scripts.init_db import create_database

    return create_database(tmp_path / "db" / "volunteer.db")


@pytest.fixture
def db_conn(db_path):
    from core.database import get_connection

    conn = get_connection(db_path)
    yield conn
    conn.close()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr("api.dependencies.VOLUNTEER_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def client(db_path, api_key):
    """TestClient bound to the temporary database, authenticated."""
    from fastapi.testclient import TestClient

    from api.dependencies import get_db_path
    from api.main import app

    app.dependency_overrides[get_db_path] = lambda: db_path
    with TestClient(app, headers={"X-API-Key": api_key}) as test_client:
        yield test_client
    app.dependency_overrides.clear()
