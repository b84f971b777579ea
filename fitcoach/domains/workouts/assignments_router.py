"""Trainer endpoints for exercise assignments and feedback."""
from uuid import UUID

from fastapi import APIRouter, status

from fitcoach.domains.auth.dependencies import CurrentTrainer
from fitcoach.domains.workouts.dependencies import WorkoutServiceDep
from fitcoach.domains.workouts.schemas import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    FeedbackRequest,
)

assignments_router = APIRouter()


@assignments_router.post(
    "/workouts/{workout_id}/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    workout_id: UUID,
    request: AssignmentCreate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> AssignmentResponse:
    """Assign an exercise from the trainer's library to a workout."""
    assignment = await service.create_assignment(current_user.id, workout_id, request)
    return AssignmentResponse.model_validate(assignment)


@assignments_router.get("/workouts/{workout_id}/assignments", response_model=list[AssignmentResponse])
async def list_assignments(
    workout_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> list[AssignmentResponse]:
    assignments = await service.list_assignments(current_user.id, workout_id)
    return [AssignmentResponse.model_validate(a) for a in assignments]


@assignments_router.put(
    "/workouts/{workout_id}/assignments/{assignment_id}",
    response_model=AssignmentResponse,
)
async def update_assignment(
    workout_id: UUID,
    assignment_id: UUID,
    request: AssignmentUpdate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> AssignmentResponse:
    assignment = await service.update_assignment(current_user.id, workout_id, assignment_id, request)
    return AssignmentResponse.model_validate(assignment)


@assignments_router.delete(
    "/workouts/{workout_id}/assignments/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_assignment(
    workout_id: UUID,
    assignment_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> None:
    await service.delete_assignment(current_user.id, workout_id, assignment_id)


@assignments_router.post("/assignments/{assignment_id}/feedback", response_model=AssignmentResponse)
async def submit_feedback(
    assignment_id: UUID,
    request: FeedbackRequest,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> AssignmentResponse:
    """Review a submission: 'reviewed' accepts it, 'assigned' asks for a redo."""
    assignment = await service.submit_feedback(
        current_user.id,
        assignment_id,
        feedback=request.feedback,
        status=request.status,
    )
    return AssignmentResponse.model_validate(assignment)
