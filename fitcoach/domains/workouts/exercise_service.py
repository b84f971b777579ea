"""Exercise library operations."""
import uuid

from fitcoach.core.store import EntityStore
from fitcoach.domains.workouts.authorization import OwnershipChain
from fitcoach.domains.workouts.models import Exercise
from fitcoach.domains.workouts.schemas import ExerciseCreate, ExerciseUpdate


class ExerciseServiceMixin:
    """Mixin providing exercise-related operations for WorkoutService."""

    store: EntityStore
    chain: OwnershipChain

    # Defined on PlanServiceMixin:
    # _delete_assignments_cascade, _finish_cascade

    async def create_exercise(self, trainer_id: uuid.UUID, data: ExerciseCreate) -> Exercise:
        """Add an exercise to the trainer's library."""
        exercise = Exercise(trainer_id=trainer_id, **data.model_dump())
        return await self.store.create(exercise)

    async def list_exercises(
        self,
        trainer_id: uuid.UUID,
        muscle_group: str | None = None,
    ) -> list[Exercise]:
        """List the trainer's exercises, optionally by muscle group."""
        filters = {"trainer_id": trainer_id}
        if muscle_group:
            filters["muscle_group"] = muscle_group
        return await self.store.find(Exercise, order_by=[Exercise.name], **filters)

    async def get_exercise(self, trainer_id: uuid.UUID, exercise_id: uuid.UUID) -> Exercise:
        return await self.chain.authorize_exercise_access(trainer_id, exercise_id)

    async def update_exercise(
        self,
        trainer_id: uuid.UUID,
        exercise_id: uuid.UUID,
        data: ExerciseUpdate,
    ) -> Exercise:
        exercise = await self.chain.authorize_exercise_access(trainer_id, exercise_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") is None:
            values.pop("name", None)
        return await self.store.update(exercise, **values)

    async def delete_exercise(self, trainer_id: uuid.UUID, exercise_id: uuid.UUID) -> None:
        """Delete an exercise together with the assignments that use it."""
        exercise = await self.chain.authorize_exercise_access(trainer_id, exercise_id)
        object_keys = await self._delete_assignments_cascade(exercise_id=exercise.id)
        removed = await self.store.delete_where(
            Exercise, commit=False, id=exercise.id, trainer_id=trainer_id
        )
        await self._finish_cascade(removed, object_keys, "Exercise not found")
