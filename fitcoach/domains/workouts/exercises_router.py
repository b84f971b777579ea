"""Exercise library endpoints."""
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from fitcoach.domains.auth.dependencies import CurrentTrainer
from fitcoach.domains.workouts.dependencies import WorkoutServiceDep
from fitcoach.domains.workouts.schemas import ExerciseCreate, ExerciseResponse, ExerciseUpdate

exercises_router = APIRouter()


@exercises_router.get("/exercises", response_model=list[ExerciseResponse])
async def list_exercises(
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
    muscle_group: Annotated[str | None, Query(max_length=100)] = None,
) -> list[ExerciseResponse]:
    """List the trainer's exercise library."""
    exercises = await service.list_exercises(current_user.id, muscle_group=muscle_group)
    return [ExerciseResponse.model_validate(e) for e in exercises]


@exercises_router.post("/exercises", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    request: ExerciseCreate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> ExerciseResponse:
    exercise = await service.create_exercise(current_user.id, request)
    return ExerciseResponse.model_validate(exercise)


@exercises_router.get("/exercises/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> ExerciseResponse:
    exercise = await service.get_exercise(current_user.id, exercise_id)
    return ExerciseResponse.model_validate(exercise)


@exercises_router.put("/exercises/{exercise_id}", response_model=ExerciseResponse)
async def update_exercise(
    exercise_id: UUID,
    request: ExerciseUpdate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> ExerciseResponse:
    exercise = await service.update_exercise(current_user.id, exercise_id, request)
    return ExerciseResponse.model_validate(exercise)


@exercises_router.delete("/exercises/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(
    exercise_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> None:
    """Delete an exercise and every assignment that uses it."""
    await service.delete_exercise(current_user.id, exercise_id)
