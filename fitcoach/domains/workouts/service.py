"""Training program service.

This is the main entry point that composes the sub-services via mixins:
- ExerciseServiceMixin: exercise library CRUD
- PlanServiceMixin: plan CRUD, active-plan policy, cascading deletes
- ProgressServiceMixin: client reads, status updates, performance logging
Workout and assignment operations are defined directly here.

Every operation resolves its target through the ownership chain before
touching state.
"""
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.core.exceptions import NotFoundError, ParentageChangeError
from fitcoach.core.storage import ObjectStorage
from fitcoach.core.store import EntityStore
from fitcoach.domains.workouts import lifecycle
from fitcoach.domains.workouts.authorization import OwnershipChain
from fitcoach.domains.workouts.exercise_service import ExerciseServiceMixin
from fitcoach.domains.workouts.models import Assignment, AssignmentStatus, Workout
from fitcoach.domains.workouts.plan_service import PlanServiceMixin
from fitcoach.domains.workouts.progress_service import ProgressServiceMixin
from fitcoach.domains.workouts.schemas import (
    AssignmentCreate,
    AssignmentUpdate,
    WorkoutCreate,
    WorkoutUpdate,
)

logger = logging.getLogger(__name__)


class WorkoutService(ExerciseServiceMixin, PlanServiceMixin, ProgressServiceMixin):
    """Service for handling training program operations."""

    def __init__(self, db: AsyncSession, storage: ObjectStorage):
        self.db = db
        self.store = EntityStore(db)
        self.chain = OwnershipChain(self.store)
        self.storage = storage

    # Workout operations

    async def create_workout(
        self,
        trainer_id: uuid.UUID,
        plan_id: uuid.UUID,
        data: WorkoutCreate,
    ) -> Workout:
        """Create a workout in one of the trainer's plans.

        Trainer and client are copied from the plan here and never written
        again (see ``Workout``).
        """
        plan = await self.chain.authorize_plan_access(trainer_id, plan_id)
        workout = Workout(
            plan_id=plan.id,
            trainer_id=plan.trainer_id,
            client_id=plan.client_id,
            **data.model_dump(),
        )
        return await self.store.create(workout)

    async def list_workouts(self, trainer_id: uuid.UUID, plan_id: uuid.UUID) -> list[Workout]:
        plan = await self.chain.authorize_plan_access(trainer_id, plan_id)
        return await self.store.find(
            Workout,
            order_by=[Workout.sequence, Workout.created_at],
            plan_id=plan.id,
        )

    async def update_workout(
        self,
        trainer_id: uuid.UUID,
        plan_id: uuid.UUID,
        workout_id: uuid.UUID,
        data: WorkoutUpdate,
    ) -> Workout:
        workout = await self._authorize_workout_in_plan(trainer_id, plan_id, workout_id)

        for field in ("plan_id", "trainer_id", "client_id"):
            requested = getattr(data, field)
            if requested is not None and requested != getattr(workout, field):
                raise ParentageChangeError(f"Workout {field} cannot be changed")

        values = data.model_dump(exclude_unset=True, exclude={"plan_id", "trainer_id", "client_id"})
        for required in ("name", "sequence"):
            if values.get(required) is None:
                values.pop(required, None)
        return await self.store.update(workout, **values)

    async def delete_workout(
        self,
        trainer_id: uuid.UUID,
        plan_id: uuid.UUID,
        workout_id: uuid.UUID,
    ) -> None:
        """Delete a workout with its assignments and uploads."""
        workout = await self._authorize_workout_in_plan(trainer_id, plan_id, workout_id)
        object_keys = await self._delete_assignments_cascade(workout_id=workout.id)
        removed = await self.store.delete_where(
            Workout, commit=False, id=workout.id, trainer_id=trainer_id
        )
        await self._finish_cascade(removed, object_keys, "Workout not found")

    async def _authorize_workout_in_plan(
        self,
        trainer_id: uuid.UUID,
        plan_id: uuid.UUID,
        workout_id: uuid.UUID,
    ) -> Workout:
        workout = await self.chain.authorize_workout_access(trainer_id, workout_id)
        if workout.plan_id != plan_id:
            raise NotFoundError("Workout not found in this training plan")
        return workout

    # Assignment operations

    async def create_assignment(
        self,
        trainer_id: uuid.UUID,
        workout_id: uuid.UUID,
        data: AssignmentCreate,
    ) -> Assignment:
        """Assign one of the trainer's exercises to a workout."""
        workout = await self.chain.authorize_workout_access(trainer_id, workout_id)
        await self.chain.authorize_exercise_access(trainer_id, data.exercise_id)

        assignment = Assignment(
            workout_id=workout.id,
            status=AssignmentStatus.ASSIGNED,
            **data.model_dump(),
        )
        return await self.store.create(assignment)

    async def list_assignments(self, trainer_id: uuid.UUID, workout_id: uuid.UUID) -> list[Assignment]:
        workout = await self.chain.authorize_workout_access(trainer_id, workout_id)
        return await self.store.find(
            Assignment,
            order_by=[Assignment.sequence, Assignment.created_at],
            workout_id=workout.id,
        )

    async def update_assignment(
        self,
        trainer_id: uuid.UUID,
        workout_id: uuid.UUID,
        assignment_id: uuid.UUID,
        data: AssignmentUpdate,
    ) -> Assignment:
        """Update the prescription; a new exercise must also be the trainer's."""
        assignment = await self._authorize_assignment_in_workout(trainer_id, workout_id, assignment_id)

        if data.workout_id is not None and data.workout_id != assignment.workout_id:
            raise ParentageChangeError("Assignment cannot be moved to another workout")

        values = data.model_dump(exclude_unset=True, exclude={"workout_id"})
        for required in ("exercise_id", "sequence"):
            if values.get(required) is None:
                values.pop(required, None)
        if "exercise_id" in values and values["exercise_id"] != assignment.exercise_id:
            await self.chain.authorize_exercise_access(trainer_id, values["exercise_id"])

        return await self.store.update(assignment, **values)

    async def delete_assignment(
        self,
        trainer_id: uuid.UUID,
        workout_id: uuid.UUID,
        assignment_id: uuid.UUID,
    ) -> None:
        """Delete an assignment and its uploads.

        Assignments carry no trainer id; the workout filter is the owner gate
        because a workout's trainer never changes.
        """
        assignment = await self._authorize_assignment_in_workout(trainer_id, workout_id, assignment_id)
        object_keys = await self._delete_uploads([assignment.id])
        removed = await self.store.delete_where(
            Assignment, commit=False, id=assignment.id, workout_id=workout_id
        )
        await self._finish_cascade(removed, object_keys, "Assignment not found")

    async def submit_feedback(
        self,
        trainer_id: uuid.UUID,
        assignment_id: uuid.UUID,
        feedback: str,
        status: AssignmentStatus,
    ) -> Assignment:
        """Record trainer feedback and set the review outcome."""
        assignment, _ = await self.chain.authorize_assignment_access_by_trainer(trainer_id, assignment_id)
        new_status = lifecycle.trainer_feedback_status(status)
        return await self.store.update(assignment, feedback=feedback, status=new_status)

    async def _authorize_assignment_in_workout(
        self,
        trainer_id: uuid.UUID,
        workout_id: uuid.UUID,
        assignment_id: uuid.UUID,
    ) -> Assignment:
        assignment, _ = await self.chain.authorize_assignment_access_by_trainer(trainer_id, assignment_id)
        if assignment.workout_id != workout_id:
            raise NotFoundError("Assignment not found in this workout")
        return assignment
