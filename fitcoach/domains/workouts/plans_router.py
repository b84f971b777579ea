"""Trainer endpoints for training plans and their workouts."""
from uuid import UUID

from fastapi import APIRouter, status

from fitcoach.domains.auth.dependencies import CurrentTrainer
from fitcoach.domains.workouts.dependencies import WorkoutServiceDep
from fitcoach.domains.workouts.schemas import (
    PlanCreate,
    PlanResponse,
    PlanUpdate,
    WorkoutCreate,
    WorkoutResponse,
    WorkoutUpdate,
)

plans_router = APIRouter()


# ==================== Plans ====================

@plans_router.post(
    "/clients/{client_id}/plans",
    response_model=PlanResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_plan(
    client_id: UUID,
    request: PlanCreate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> PlanResponse:
    """Create a training plan for a managed client."""
    plan = await service.create_plan(current_user.id, client_id, request)
    return PlanResponse.model_validate(plan)


@plans_router.get("/clients/{client_id}/plans", response_model=list[PlanResponse])
async def list_plans_for_client(
    client_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> list[PlanResponse]:
    plans = await service.list_plans_for_client(current_user.id, client_id)
    return [PlanResponse.model_validate(p) for p in plans]


@plans_router.put("/plans/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: UUID,
    request: PlanUpdate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> PlanResponse:
    plan = await service.update_plan(current_user.id, plan_id, request)
    return PlanResponse.model_validate(plan)


@plans_router.delete("/plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(
    plan_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> None:
    """Delete a plan with all of its workouts, assignments and uploads."""
    await service.delete_plan(current_user.id, plan_id)


# ==================== Workouts ====================

@plans_router.post(
    "/plans/{plan_id}/workouts",
    response_model=WorkoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_workout(
    plan_id: UUID,
    request: WorkoutCreate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> WorkoutResponse:
    workout = await service.create_workout(current_user.id, plan_id, request)
    return WorkoutResponse.model_validate(workout)


@plans_router.get("/plans/{plan_id}/workouts", response_model=list[WorkoutResponse])
async def list_workouts(
    plan_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> list[WorkoutResponse]:
    """List a plan's workouts in sequence order."""
    workouts = await service.list_workouts(current_user.id, plan_id)
    return [WorkoutResponse.model_validate(w) for w in workouts]


@plans_router.put("/plans/{plan_id}/workouts/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    plan_id: UUID,
    workout_id: UUID,
    request: WorkoutUpdate,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> WorkoutResponse:
    workout = await service.update_workout(current_user.id, plan_id, workout_id, request)
    return WorkoutResponse.model_validate(workout)


@plans_router.delete(
    "/plans/{plan_id}/workouts/{workout_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_workout(
    plan_id: UUID,
    workout_id: UUID,
    current_user: CurrentTrainer,
    service: WorkoutServiceDep,
) -> None:
    await service.delete_workout(current_user.id, plan_id, workout_id)
