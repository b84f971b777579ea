"""Ownership chain checks for trainers and clients.

Every read or write on a plan, workout or assignment resolves the target and
walks one level up the hierarchy to decide whether the actor owns it:

    User -> TrainingPlan -> Workout -> Assignment -> Upload

Workouts carry ``trainer_id``/``client_id`` copied from their plan, so an
assignment check needs only the assignment and its workout. Nothing is
cached between calls; parents are re-read every time.
"""
import logging
import uuid

from fitcoach.core.exceptions import (
    AccessDeniedError,
    ClientNotFoundError,
    ClientNotManagedError,
    DataConsistencyError,
    NotBelongToClientError,
    NotFoundError,
)
from fitcoach.core.store import EntityStore
from fitcoach.domains.users.models import User, UserRole
from fitcoach.domains.workouts.models import Assignment, Exercise, TrainingPlan, Workout

logger = logging.getLogger(__name__)


class OwnershipChain:
    """Resolves entities and checks that the actor owns them."""

    def __init__(self, store: EntityStore):
        self.store = store

    # Trainer side

    async def authorize_client_managed(self, trainer_id: uuid.UUID, client_id: uuid.UUID) -> User:
        """Resolve a client and check the trainer manages them."""
        client = await self.store.get(User, client_id)
        if client is None or client.role != UserRole.CLIENT:
            raise ClientNotFoundError()
        if client.trainer_id != trainer_id:
            raise ClientNotManagedError()
        return client

    async def authorize_exercise_access(self, trainer_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise:
        exercise = await self.store.get(Exercise, exercise_id)
        if exercise is None:
            raise NotFoundError("Exercise not found")
        if exercise.trainer_id != trainer_id:
            raise AccessDeniedError("Exercise belongs to another trainer")
        return exercise

    async def authorize_plan_access(self, trainer_id: uuid.UUID, plan_id: uuid.UUID) -> TrainingPlan:
        plan = await self.store.get(TrainingPlan, plan_id)
        if plan is None:
            raise NotFoundError("Training plan not found")
        if plan.trainer_id != trainer_id:
            raise AccessDeniedError("Training plan belongs to another trainer")
        return plan

    async def authorize_workout_access(self, trainer_id: uuid.UUID, workout_id: uuid.UUID) -> Workout:
        workout = await self.store.get(Workout, workout_id)
        if workout is None:
            raise NotFoundError("Workout not found")
        if workout.trainer_id != trainer_id:
            raise AccessDeniedError("Workout belongs to another trainer")
        return workout

    async def authorize_assignment_access_by_trainer(
        self,
        trainer_id: uuid.UUID,
        assignment_id: uuid.UUID,
    ) -> tuple[Assignment, Workout]:
        assignment, workout = await self._resolve_assignment(assignment_id)
        if workout.trainer_id != trainer_id:
            raise AccessDeniedError("Assignment belongs to another trainer")
        return assignment, workout

    # Client side

    async def authorize_plan_access_by_client(self, client_id: uuid.UUID, plan_id: uuid.UUID) -> TrainingPlan:
        plan = await self.store.get(TrainingPlan, plan_id)
        if plan is None:
            raise NotFoundError("Training plan not found")
        if plan.client_id != client_id:
            raise NotBelongToClientError("Training plan is not assigned to this client")
        return plan

    async def authorize_workout_access_by_client(self, client_id: uuid.UUID, workout_id: uuid.UUID) -> Workout:
        workout = await self.store.get(Workout, workout_id)
        if workout is None:
            raise NotFoundError("Workout not found")
        if workout.client_id != client_id:
            raise NotBelongToClientError("Workout is not assigned to this client")
        return workout

    async def authorize_assignment_access_by_client(
        self,
        client_id: uuid.UUID,
        assignment_id: uuid.UUID,
    ) -> tuple[Assignment, Workout]:
        assignment, workout = await self._resolve_assignment(assignment_id)
        if workout.client_id != client_id:
            raise NotBelongToClientError("Assignment does not belong to this client")
        return assignment, workout

    async def _resolve_assignment(self, assignment_id: uuid.UUID) -> tuple[Assignment, Workout]:
        assignment = await self.store.get(Assignment, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")

        workout = await self.store.get(Workout, assignment.workout_id)
        if workout is None:
            logger.error(
                f"Assignment {assignment.id} references missing workout {assignment.workout_id}"
            )
            raise DataConsistencyError(f"Workout for assignment {assignment.id} is missing")
        return assignment, workout
