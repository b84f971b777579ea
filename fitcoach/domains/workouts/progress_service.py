"""Client-side reads and progress reporting."""
import uuid

from fitcoach.core.exceptions import NotBelongToClientError
from fitcoach.core.store import EntityStore
from fitcoach.domains.users.models import User
from fitcoach.domains.workouts import lifecycle
from fitcoach.domains.workouts.authorization import OwnershipChain
from fitcoach.domains.workouts.models import (
    Assignment,
    AssignmentStatus,
    TrainingPlan,
    Workout,
)
from fitcoach.domains.workouts.schemas import PerformanceRequest


class ProgressServiceMixin:
    """Mixin providing the client's view of their program."""

    store: EntityStore
    chain: OwnershipChain

    async def list_my_plans(self, client_id: uuid.UUID, active_only: bool = False) -> list[TrainingPlan]:
        """List plans from the client's current trainer."""
        client = await self.store.get(User, client_id)
        if client is None or client.trainer_id is None:
            return []

        filters = {"client_id": client_id, "trainer_id": client.trainer_id}
        if active_only:
            filters["is_active"] = True
        return await self.store.find(
            TrainingPlan,
            order_by=[TrainingPlan.created_at.desc()],
            **filters,
        )

    async def list_my_workouts(self, client_id: uuid.UUID, plan_id: uuid.UUID) -> list[Workout]:
        """List a plan's workouts; plans from a previous trainer are refused."""
        plan = await self.chain.authorize_plan_access_by_client(client_id, plan_id)
        await self._ensure_current_trainer(client_id, plan.trainer_id)
        return await self.store.find(
            Workout,
            order_by=[Workout.sequence, Workout.created_at],
            plan_id=plan.id,
        )

    async def list_my_assignments(self, client_id: uuid.UUID, workout_id: uuid.UUID) -> list[Assignment]:
        """List a workout's assignments; same trainer rule as ``list_my_workouts``."""
        workout = await self.chain.authorize_workout_access_by_client(client_id, workout_id)
        await self._ensure_current_trainer(client_id, workout.trainer_id)
        return await self.store.find(
            Assignment,
            order_by=[Assignment.sequence, Assignment.created_at],
            workout_id=workout.id,
        )

    async def _ensure_current_trainer(self, client_id: uuid.UUID, trainer_id: uuid.UUID) -> None:
        # Mirrors list_my_plans, which only shows the current trainer's plans
        client = await self.store.get(User, client_id)
        if client is None or client.trainer_id != trainer_id:
            raise NotBelongToClientError("Program belongs to a previous trainer")

    async def update_my_assignment_status(
        self,
        client_id: uuid.UUID,
        assignment_id: uuid.UUID,
        status: AssignmentStatus,
        client_notes: str | None = None,
    ) -> Assignment:
        """Let the client mark an assignment as completed."""
        assignment, _ = await self.chain.authorize_assignment_access_by_client(client_id, assignment_id)
        values = {"status": lifecycle.client_update_status(assignment.status, status)}
        if client_notes is not None:
            values["client_notes"] = client_notes
        return await self.store.update(assignment, **values)

    async def log_performance(
        self,
        client_id: uuid.UUID,
        assignment_id: uuid.UUID,
        data: PerformanceRequest,
    ) -> Assignment:
        """Record achieved metrics; completes an assignment that is still open."""
        assignment, _ = await self.chain.authorize_assignment_access_by_client(client_id, assignment_id)
        values = data.model_dump(exclude_unset=True)
        values["status"] = lifecycle.status_after_performance_log(assignment.status)
        return await self.store.update(assignment, **values)
