"""Tests for the client's view of their program."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.core.exceptions import InvalidTransitionError, NotBelongToClientError
from fitcoach.domains.users.models import User
from fitcoach.domains.workouts.models import (
    Assignment,
    AssignmentStatus,
    TrainingPlan,
    Workout,
)
from fitcoach.domains.workouts.schemas import PerformanceRequest, PlanCreate
from fitcoach.domains.workouts.service import WorkoutService


@pytest.fixture
def service(db_session: AsyncSession, storage) -> WorkoutService:
    return WorkoutService(db_session, storage)


class TestClientReads:
    """Clients read only their own program."""

    async def test_list_my_plans(self, service, client_user: User, plan: TrainingPlan):
        plans = await service.list_my_plans(client_user.id)

        assert [p.id for p in plans] == [plan.id]

    async def test_active_only(self, service, trainer: User, client_user: User, plan: TrainingPlan):
        await service.create_plan(trainer.id, client_user.id, PlanCreate(name="Future block"))

        all_plans = await service.list_my_plans(client_user.id)
        active = await service.list_my_plans(client_user.id, active_only=True)

        assert len(all_plans) == 2
        assert [p.id for p in active] == [plan.id]

    async def test_plans_of_previous_trainer_hidden(
        self, service, db_session, client_user: User, plan: TrainingPlan, other_trainer: User
    ):
        client_user.trainer_id = other_trainer.id
        await db_session.commit()

        assert await service.list_my_plans(client_user.id) == []

    async def test_unassigned_client_has_no_plans(self, service, db_session, client_user: User, plan: TrainingPlan):
        client_user.trainer_id = None
        await db_session.commit()

        assert await service.list_my_plans(client_user.id) == []

    async def test_list_my_workouts(self, service, client_user: User, plan: TrainingPlan, workout: Workout):
        workouts = await service.list_my_workouts(client_user.id, plan.id)

        assert [w.id for w in workouts] == [workout.id]

    async def test_foreign_plan_workouts(self, service, other_client: User, plan: TrainingPlan):
        with pytest.raises(NotBelongToClientError):
            await service.list_my_workouts(other_client.id, plan.id)

    async def test_list_my_assignments(
        self, service, client_user: User, workout: Workout, assignment: Assignment
    ):
        assignments = await service.list_my_assignments(client_user.id, workout.id)

        assert [a.id for a in assignments] == [assignment.id]

    async def test_foreign_workout_assignments(self, service, other_client: User, workout: Workout):
        with pytest.raises(NotBelongToClientError):
            await service.list_my_assignments(other_client.id, workout.id)

    async def test_previous_trainer_workouts_refused(
        self, service, db_session, client_user: User, plan: TrainingPlan, workout: Workout, other_trainer: User
    ):
        client_user.trainer_id = other_trainer.id
        await db_session.commit()

        with pytest.raises(NotBelongToClientError):
            await service.list_my_workouts(client_user.id, plan.id)

    async def test_previous_trainer_assignments_refused(
        self, service, db_session, client_user: User, assignment: Assignment, workout: Workout
    ):
        client_user.trainer_id = None
        await db_session.commit()

        with pytest.raises(NotBelongToClientError):
            await service.list_my_assignments(client_user.id, workout.id)


class TestUpdateMyAssignmentStatus:
    """Clients may only mark assignments completed."""

    async def test_mark_completed_with_notes(self, service, client_user: User, assignment: Assignment):
        updated = await service.update_my_assignment_status(
            client_user.id, assignment.id, AssignmentStatus.COMPLETED, client_notes="Felt strong"
        )

        assert updated.status == AssignmentStatus.COMPLETED
        assert updated.client_notes == "Felt strong"

    async def test_cannot_self_review(self, service, client_user: User, assignment: Assignment):
        with pytest.raises(InvalidTransitionError):
            await service.update_my_assignment_status(client_user.id, assignment.id, AssignmentStatus.REVIEWED)

    async def test_foreign_client(self, service, other_client: User, assignment: Assignment):
        with pytest.raises(NotBelongToClientError):
            await service.update_my_assignment_status(
                other_client.id, assignment.id, AssignmentStatus.COMPLETED
            )


class TestLogPerformance:
    """Performance logs record metrics and complete open assignments."""

    async def test_log_completes_assigned(self, service, client_user: User, assignment: Assignment):
        updated = await service.log_performance(
            client_user.id,
            assignment.id,
            PerformanceRequest(achieved_sets=5, achieved_reps="5", achieved_weight="120kg"),
        )

        assert updated.status == AssignmentStatus.COMPLETED
        assert updated.achieved_sets == 5
        assert updated.achieved_weight == "120kg"

    async def test_log_keeps_submitted(self, service, db_session, client_user: User, assignment: Assignment):
        assignment.status = AssignmentStatus.SUBMITTED
        await db_session.commit()

        updated = await service.log_performance(
            client_user.id, assignment.id, PerformanceRequest(client_performance_notes="Left knee sore")
        )

        assert updated.status == AssignmentStatus.SUBMITTED
        assert updated.client_performance_notes == "Left knee sore"
