"""Client router - a client's view of their program and progress reporting."""
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Response, status

from fitcoach.config.settings import settings
from fitcoach.core.redis import RateLimiter
from fitcoach.domains.auth.dependencies import CurrentClient
from fitcoach.domains.workouts.dependencies import UploadSagaDep, WorkoutServiceDep
from fitcoach.domains.workouts.schemas import (
    AssignmentResponse,
    PerformanceRequest,
    PlanResponse,
    StatusUpdateRequest,
    UploadConfirmRequest,
    UploadUrlRequest,
    UploadUrlResponse,
    WorkoutResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== Program ====================

@router.get("/plans", response_model=list[PlanResponse])
async def list_my_plans(
    current_user: CurrentClient,
    service: WorkoutServiceDep,
    active_only: Annotated[bool, Query()] = False,
) -> list[PlanResponse]:
    """List plans from the client's current trainer."""
    plans = await service.list_my_plans(current_user.id, active_only=active_only)
    return [PlanResponse.model_validate(p) for p in plans]


@router.get("/plans/{plan_id}/workouts", response_model=list[WorkoutResponse])
async def list_my_workouts(
    plan_id: UUID,
    current_user: CurrentClient,
    service: WorkoutServiceDep,
) -> list[WorkoutResponse]:
    workouts = await service.list_my_workouts(current_user.id, plan_id)
    return [WorkoutResponse.model_validate(w) for w in workouts]


@router.get("/workouts/{workout_id}/assignments", response_model=list[AssignmentResponse])
async def list_my_assignments(
    workout_id: UUID,
    current_user: CurrentClient,
    service: WorkoutServiceDep,
) -> list[AssignmentResponse]:
    assignments = await service.list_my_assignments(current_user.id, workout_id)
    return [AssignmentResponse.model_validate(a) for a in assignments]


# ==================== Progress ====================

@router.patch("/assignments/{assignment_id}/status", response_model=AssignmentResponse)
async def update_my_assignment_status(
    assignment_id: UUID,
    request: StatusUpdateRequest,
    current_user: CurrentClient,
    service: WorkoutServiceDep,
) -> AssignmentResponse:
    """Mark an assignment as completed."""
    assignment = await service.update_my_assignment_status(
        current_user.id,
        assignment_id,
        request.status,
        client_notes=request.client_notes,
    )
    return AssignmentResponse.model_validate(assignment)


@router.patch("/assignments/{assignment_id}/performance", response_model=AssignmentResponse)
async def log_performance(
    assignment_id: UUID,
    request: PerformanceRequest,
    current_user: CurrentClient,
    service: WorkoutServiceDep,
) -> AssignmentResponse:
    """Report achieved sets, reps, weight or duration."""
    assignment = await service.log_performance(current_user.id, assignment_id, request)
    return AssignmentResponse.model_validate(assignment)


# ==================== Video uploads ====================

@router.post("/assignments/{assignment_id}/upload-url", response_model=UploadUrlResponse)
async def request_upload_url(
    assignment_id: UUID,
    request: UploadUrlRequest,
    response: Response,
    current_user: CurrentClient,
    saga: UploadSagaDep,
) -> UploadUrlResponse:
    """Get a presigned URL to upload a video straight to storage."""
    if settings.RATE_LIMIT_ENABLED:
        is_allowed, current_count = await RateLimiter.check_rate_limit(
            identifier=str(current_user.id),
            action="upload_url",
            max_requests=settings.UPLOAD_URL_RATE_LIMIT,
        )
        if not is_allowed:
            logger.warning(f"Upload URL rate limit hit by client {current_user.id} ({current_count})")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many upload requests. Try again later.",
            )
        remaining = await RateLimiter.get_remaining(
            identifier=str(current_user.id),
            action="upload_url",
            max_requests=settings.UPLOAD_URL_RATE_LIMIT,
        )
        response.headers["X-RateLimit-Remaining"] = str(remaining)

    target = await saga.request_upload_url(current_user.id, assignment_id, request.content_type)
    return UploadUrlResponse(
        upload_url=target.url,
        object_key=target.object_key,
        expires_in=target.expires_in,
    )


@router.post("/assignments/{assignment_id}/upload-confirm", response_model=AssignmentResponse)
async def confirm_upload(
    assignment_id: UUID,
    request: UploadConfirmRequest,
    current_user: CurrentClient,
    saga: UploadSagaDep,
) -> AssignmentResponse:
    """Confirm a finished upload; the assignment becomes 'submitted'."""
    assignment = await saga.confirm_upload(
        current_user.id,
        assignment_id,
        object_key=request.object_key,
        file_name=request.file_name,
        size=request.size,
        content_type=request.content_type,
    )
    return AssignmentResponse.model_validate(assignment)
