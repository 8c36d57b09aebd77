"""Signup reservation and admission check endpoints."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, Request, status

from api.dependencies import get_db_path, verify_api_key
from api.logging import RequestLog, get_client_ip, logged_request
from api.models import AdmissionCheckRequest, AdmissionResponse, SignupCreateRequest, SignupResponse
from api.routes.projects import project_from_request
from core.database import ReservationResult, get_connection, reserve_signup
from models.projects import Signup
from services.admission import admit_signup
from services.status import resolve_status

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


@router.post(
    "/projects/{project_id}/signups",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_signup_endpoint(
    request: Request,
    project_id: str,
    body: SignupCreateRequest,
    db_path: Path = Depends(get_db_path),
):
    """
    Sign a volunteer up for one slot of a project.

    Admission and insert run in one database transaction, so a full slot
    can never be overbooked by concurrent requests.
    """
    request_log = RequestLog(
        endpoint="/v1/projects/{project_id}/signups",
        method="POST",
        client_ip=get_client_ip(request),
        project_id=project_id,
        schedule_id=body.schedule_id,
    )
    with logged_request(request_log, db_path):
        def _reserve() -> ReservationResult:
            conn = get_connection(db_path)
            try:
                return reserve_signup(
                    conn,
                    project_id,
                    body.schedule_id,
                    user_id=body.user_id,
                    anonymous_id=body.anonymous_id,
                    status=body.status,
                )
            finally:
                conn.close()

        result = await asyncio.to_thread(_reserve)
        request_log.status_code = status.HTTP_201_CREATED
        request_log.details.append(
            ("admission", f"Signup {result.signup.id} admitted, {result.remaining_after} remaining")
        )
        signup = result.signup
        return SignupResponse(
            id=signup.id,
            project_id=signup.project_id,
            schedule_id=signup.schedule_id,
            status=signup.status.value,
            user_id=signup.user_id,
            anonymous_id=signup.anonymous_id,
            remaining_after=result.remaining_after,
        )


@router.post("/admission/check", response_model=AdmissionResponse)
async def check_admission_endpoint(
    request: Request,
    body: AdmissionCheckRequest,
    db_path: Path = Depends(get_db_path),
):
    """
    Evaluate admission for a posted project snapshot without touching storage.

    Rejections are returned as the same error responses a real signup gets.
    """
    request_log = RequestLog(
        endpoint="/v1/admission/check",
        method="POST",
        client_ip=get_client_ip(request),
        project_id=body.project.id,
        schedule_id=body.schedule_id,
    )
    with logged_request(request_log, db_path):
        project = project_from_request(body.project, cancelled_at=body.cancelled_at)
        now = body.now or datetime.now(timezone.utc)
        signups = [
            Signup(
                project_id=project.id,
                schedule_id=record.schedule_id,
                status=record.status,
                user_id=record.user_id,
                anonymous_id=record.anonymous_id,
            )
            for record in body.signups
        ]

        result = admit_signup(project, body.schedule_id, signups, now, body.requested_count)
        return AdmissionResponse(
            admitted=result.admitted,
            schedule_id=body.schedule_id,
            project_status=resolve_status(project, now).value,
            remaining_after=result.remaining_after,
        )
