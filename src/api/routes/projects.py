"""Project feed, detail and lifecycle endpoints."""

import asyncio
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import Response

from api.dependencies import get_db_path, verify_api_key
from api.logging import RequestLog, get_client_ip, logged_request
from api.models import (
    CancelProjectRequest,
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    SlotCapacityResponse,
)
from core.config import FEED_PAGE_SIZE
from core.database import (
    cancel_project,
    delete_project,
    get_connection,
    get_project,
    get_signups,
    insert_project,
    list_projects,
    set_pause_signups,
)
from core.errors import ProjectNotFoundError
from models.projects import Project, ProjectVisibility
from models.schedule import parse_schedule, schedule_to_record
from services.projects import (
    ProjectSummary,
    is_project_visible,
    list_active_projects,
    summarize_project,
)

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

StatusFilter = Literal["upcoming", "in-progress", "completed", "cancelled"]


def project_from_request(body: ProjectCreateRequest, cancelled_at: datetime | None = None) -> Project:
    """Build a Project from a request body; the schedule must match event_type."""
    return Project(
        id=body.id or str(uuid.uuid4()),
        schedule=parse_schedule(body.event_type, body.schedule),
        title=body.title,
        visibility=body.visibility,
        organization_id=body.organization_id,
        creator_id=body.creator_id,
        pause_signups=body.pause_signups,
        cancelled_at=cancelled_at,
        timezone=body.timezone,
    )


def summary_to_response(summary: ProjectSummary) -> ProjectResponse:
    project = summary.project
    slots = []
    seen = set()
    for slot in summary.slots:
        if slot.schedule_id in seen:
            continue
        seen.add(slot.schedule_id)
        capacity = summary.capacity[slot.schedule_id]
        slots.append(
            SlotCapacityResponse(
                schedule_id=slot.schedule_id,
                label=slot.label,
                date=slot.date,
                start_time=slot.start_time,
                end_time=slot.end_time,
                capacity=capacity.capacity,
                confirmed=capacity.confirmed,
                remaining=capacity.remaining,
            )
        )

    return ProjectResponse(
        id=project.id,
        title=project.title,
        event_type=project.event_type.value,
        status=summary.status.value,
        visibility=ProjectVisibility(project.visibility).value,
        organization_id=project.organization_id,
        creator_id=project.creator_id,
        pause_signups=project.pause_signups,
        cancelled_at=project.cancelled_at,
        cancellation_reason=project.cancellation_reason,
        timezone=project.timezone,
        schedule=schedule_to_record(project.schedule),
        confirmed_signups=summary.confirmed_signups,
        total_confirmed=summary.total_confirmed,
        slots=slots,
    )


def _load_summary(db_path: Path, project_id: str, now: datetime) -> ProjectSummary:
    conn = get_connection(db_path)
    try:
        project = get_project(conn, project_id)
        if project is None:
            raise ProjectNotFoundError()
        return summarize_project(project, get_signups(conn, [project_id]), now)
    finally:
        conn.close()


def _load_feed(
    db_path: Path,
    now: datetime,
    status_filter: str | None,
    organization_id: str | None,
    limit: int,
    offset: int,
) -> list[ProjectSummary]:
    conn = get_connection(db_path)
    try:
        if status_filter is None:
            projects = list_projects(conn, organization_id=organization_id, limit=limit, offset=offset)
        else:
            # Status is derived, so filter before paging
            projects = list_projects(conn, organization_id=organization_id)
        signups = get_signups(conn, [p.id for p in projects])
    finally:
        conn.close()

    summaries = list_active_projects(projects, signups, now, status=status_filter)
    if status_filter is not None:
        summaries = summaries[offset:offset + limit]
    return summaries


@router.get("/projects", response_model=ProjectListResponse)
async def list_projects_endpoint(
    request: Request,
    status_filter: Annotated[StatusFilter | None, Query(alias="status")] = None,
    organization_id: str | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = FEED_PAGE_SIZE,
    offset: Annotated[int, Query(ge=0)] = 0,
    db_path: Path = Depends(get_db_path),
):
    """Public project feed with derived status and per-slot signup counts."""
    request_log = RequestLog(
        endpoint="/v1/projects", method="GET", client_ip=get_client_ip(request)
    )
    with logged_request(request_log, db_path):
        summaries = await asyncio.to_thread(
            _load_feed,
            db_path,
            datetime.now(timezone.utc),
            status_filter,
            organization_id,
            limit,
            offset,
        )
        return ProjectListResponse(
            projects=[summary_to_response(s) for s in summaries],
            limit=limit,
            offset=offset,
        )


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project_endpoint(
    request: Request,
    project_id: str,
    viewer_user_id: str | None = None,
    viewer_organization_ids: Annotated[list[str], Query()] = [],
    db_path: Path = Depends(get_db_path),
):
    """
    Project detail with status and capacity of every slot.

    Organization-only projects are reported as not found unless the viewer
    belongs to the project's organization.
    """
    request_log = RequestLog(
        endpoint="/v1/projects/{project_id}",
        method="GET",
        client_ip=get_client_ip(request),
        project_id=project_id,
    )
    with logged_request(request_log, db_path):
        summary = await asyncio.to_thread(
            _load_summary, db_path, project_id, datetime.now(timezone.utc)
        )
        if not is_project_visible(summary.project, viewer_user_id, viewer_organization_ids):
            raise ProjectNotFoundError()
        return summary_to_response(summary)


@router.post("/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project_endpoint(
    request: Request,
    body: ProjectCreateRequest,
    db_path: Path = Depends(get_db_path),
):
    """Create a project after validating its schedule."""
    request_log = RequestLog(
        endpoint="/v1/projects", method="POST", client_ip=get_client_ip(request)
    )
    with logged_request(request_log, db_path):
        project = project_from_request(body)
        request_log.project_id = project.id

        def _create() -> ProjectSummary:
            conn = get_connection(db_path)
            try:
                insert_project(conn, project)
            finally:
                conn.close()
            return summarize_project(project, [], datetime.now(timezone.utc))

        summary = await asyncio.to_thread(_create)
        request_log.status_code = status.HTTP_201_CREATED
        return summary_to_response(summary)


@router.post("/projects/{project_id}/cancel", response_model=ProjectResponse)
async def cancel_project_endpoint(
    request: Request,
    project_id: str,
    body: CancelProjectRequest,
    db_path: Path = Depends(get_db_path),
):
    """Cancel a project that has not completed yet."""
    request_log = RequestLog(
        endpoint="/v1/projects/{project_id}/cancel",
        method="POST",
        client_ip=get_client_ip(request),
        project_id=project_id,
    )
    with logged_request(request_log, db_path):
        now = datetime.now(timezone.utc)

        def _cancel() -> ProjectSummary:
            conn = get_connection(db_path)
            try:
                project = cancel_project(conn, project_id, body.reason, now)
                return summarize_project(project, get_signups(conn, [project_id]), now)
            finally:
                conn.close()

        return summary_to_response(await asyncio.to_thread(_cancel))


@router.post("/projects/{project_id}/pause", response_model=ProjectResponse)
async def pause_signups_endpoint(
    request: Request,
    project_id: str,
    paused: bool = True,
    db_path: Path = Depends(get_db_path),
):
    """Pause (or resume with ``paused=false``) new signups for a project."""
    request_log = RequestLog(
        endpoint="/v1/projects/{project_id}/pause",
        method="POST",
        client_ip=get_client_ip(request),
        project_id=project_id,
    )
    with logged_request(request_log, db_path):
        def _pause() -> ProjectSummary:
            conn = get_connection(db_path)
            try:
                set_pause_signups(conn, project_id, paused)
            finally:
                conn.close()
            return _load_summary(db_path, project_id, datetime.now(timezone.utc))

        return summary_to_response(await asyncio.to_thread(_pause))


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_endpoint(
    request: Request,
    project_id: str,
    db_path: Path = Depends(get_db_path),
):
    """Delete a project outside its deletion lock window."""
    request_log = RequestLog(
        endpoint="/v1/projects/{project_id}",
        method="DELETE",
        client_ip=get_client_ip(request),
        project_id=project_id,
    )
    with logged_request(request_log, db_path):
        def _delete():
            conn = get_connection(db_path)
            try:
                delete_project(conn, project_id)
            finally:
                conn.close()

        await asyncio.to_thread(_delete)
        request_log.status_code = status.HTTP_204_NO_CONTENT
        return Response(status_code=status.HTTP_204_NO_CONTENT)
