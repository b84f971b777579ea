"""Training plan operations and cascading deletes."""
import logging
import uuid

from fitcoach.core.exceptions import (
    GatewayError,
    NotFoundError,
    ParentageChangeError,
    ValidationFailedError,
)
from fitcoach.core.observability import capture_exception
from fitcoach.core.storage import ObjectStorage
from fitcoach.core.store import EntityStore
from fitcoach.domains.workouts.authorization import OwnershipChain
from fitcoach.domains.workouts.models import Assignment, TrainingPlan, Upload, Workout
from fitcoach.domains.workouts.schemas import PlanCreate, PlanUpdate

logger = logging.getLogger(__name__)


class PlanServiceMixin:
    """Mixin providing plan-related operations for WorkoutService."""

    store: EntityStore
    chain: OwnershipChain
    storage: ObjectStorage

    async def create_plan(
        self,
        trainer_id: uuid.UUID,
        client_id: uuid.UUID,
        data: PlanCreate,
    ) -> TrainingPlan:
        """Create a plan for a client the trainer manages.

        An active plan deactivates the client's other active plans.
        """
        await self.chain.authorize_client_managed(trainer_id, client_id)

        plan = TrainingPlan(trainer_id=trainer_id, client_id=client_id, **data.model_dump())
        await self.store.create(plan, commit=False)
        if plan.is_active:
            await self._deactivate_other_plans(plan)
        await self.store.commit()

        logger.info(f"Trainer {trainer_id} created plan {plan.id} for client {client_id}")
        return plan

    async def list_plans_for_client(self, trainer_id: uuid.UUID, client_id: uuid.UUID) -> list[TrainingPlan]:
        """List the plans a trainer has created for one of their clients."""
        await self.chain.authorize_client_managed(trainer_id, client_id)
        return await self.store.find(
            TrainingPlan,
            order_by=[TrainingPlan.created_at.desc()],
            trainer_id=trainer_id,
            client_id=client_id,
        )

    async def update_plan(
        self,
        trainer_id: uuid.UUID,
        plan_id: uuid.UUID,
        data: PlanUpdate,
    ) -> TrainingPlan:
        plan = await self.chain.authorize_plan_access(trainer_id, plan_id)

        if data.trainer_id is not None and data.trainer_id != plan.trainer_id:
            raise ParentageChangeError("A plan cannot be moved to another trainer")
        if data.client_id is not None and data.client_id != plan.client_id:
            raise ParentageChangeError("A plan cannot be moved to another client")

        values = data.model_dump(exclude_unset=True, exclude={"trainer_id", "client_id"})
        for required in ("name", "is_active"):
            if values.get(required) is None:
                values.pop(required, None)

        start_date = values.get("start_date", plan.start_date)
        end_date = values.get("end_date", plan.end_date)
        if start_date and end_date and end_date < start_date:
            raise ValidationFailedError("end_date must not be before start_date")

        await self.store.update(plan, commit=False, **values)
        if values.get("is_active"):
            await self._deactivate_other_plans(plan)
        await self.store.commit()
        return plan

    async def delete_plan(self, trainer_id: uuid.UUID, plan_id: uuid.UUID) -> None:
        """Delete a plan with its workouts, assignments and uploads."""
        plan = await self.chain.authorize_plan_access(trainer_id, plan_id)

        workouts = await self.store.find(Workout, plan_id=plan.id)
        workout_ids = [workout.id for workout in workouts]
        object_keys: list[str] = []
        if workout_ids:
            object_keys = await self._delete_assignments_cascade(workout_id=workout_ids)
            await self.store.delete_where(Workout, commit=False, id=workout_ids)

        removed = await self.store.delete_where(
            TrainingPlan, commit=False, id=plan.id, trainer_id=trainer_id
        )
        await self._finish_cascade(removed, object_keys, "Training plan not found")
        logger.info(f"Trainer {trainer_id} deleted plan {plan_id} ({len(workout_ids)} workouts)")

    async def _deactivate_other_plans(self, plan: TrainingPlan) -> None:
        others = await self.store.find(
            TrainingPlan,
            trainer_id=plan.trainer_id,
            client_id=plan.client_id,
            is_active=True,
        )
        for other in others:
            if other.id != plan.id:
                await self.store.update(other, commit=False, is_active=False)

    # Cascade helpers. Writes are staged in the session and committed
    # together by _finish_cascade.

    async def _delete_assignments_cascade(self, **filters) -> list[str]:
        """Delete matching assignments and their uploads.

        Returns the object keys of the removed uploads.
        """
        assignments = await self.store.find(Assignment, **filters)
        if not assignments:
            return []
        assignment_ids = [assignment.id for assignment in assignments]

        object_keys = await self._delete_uploads(assignment_ids)
        await self.store.delete_where(Assignment, commit=False, id=assignment_ids)
        return object_keys

    async def _delete_uploads(self, assignment_ids: list[uuid.UUID]) -> list[str]:
        uploads = await self.store.find(Upload, assignment_id=assignment_ids)
        if uploads:
            await self.store.delete_where(Upload, commit=False, assignment_id=assignment_ids)
        return [upload.object_key for upload in uploads]

    async def _finish_cascade(self, removed: int, object_keys: list[str], not_found_message: str) -> None:
        """Commit a cascade if the owner-gated delete matched, else roll it back."""
        if removed == 0:
            await self.store.rollback()
            raise NotFoundError(not_found_message)
        await self.store.commit()
        await self._purge_objects(object_keys)

    async def _purge_objects(self, object_keys: list[str]) -> None:
        """Best-effort removal of stored videos after their records are gone."""
        for key in object_keys:
            try:
                await self.storage.delete(key)
            except GatewayError as e:
                logger.error(f"Failed to delete stored object '{key}' during cascade: {e}")
                capture_exception(e, extra={"object_key": key}, tags={"operation": "cascade_delete"})
