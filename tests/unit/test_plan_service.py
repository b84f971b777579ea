"""Tests for plan operations and cascading deletes."""
import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.core.exceptions import (
    AccessDeniedError,
    ClientNotManagedError,
    NotFoundError,
    ParentageChangeError,
    ValidationFailedError,
)
from fitcoach.domains.users.models import User
from fitcoach.domains.workouts.models import Assignment, TrainingPlan, Upload, Workout
from fitcoach.domains.workouts.schemas import PlanCreate, PlanUpdate
from fitcoach.domains.workouts.service import WorkoutService
from fitcoach.domains.workouts.uploads import UploadSaga


@pytest.fixture
def service(db_session: AsyncSession, storage) -> WorkoutService:
    return WorkoutService(db_session, storage)


async def count_rows(db_session: AsyncSession, model) -> int:
    result = await db_session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


# =============================================================================
# Create / update
# =============================================================================


class TestCreatePlan:
    """Tests for create_plan."""

    async def test_create_plan_for_managed_client(self, service, trainer: User, client_user: User):
        plan = await service.create_plan(trainer.id, client_user.id, PlanCreate(name="Hypertrophy Block"))

        assert plan.trainer_id == trainer.id
        assert plan.client_id == client_user.id
        assert plan.is_active is False

    async def test_create_plan_for_unmanaged_client(self, service, other_trainer: User, client_user: User):
        with pytest.raises(ClientNotManagedError):
            await service.create_plan(other_trainer.id, client_user.id, PlanCreate(name="Sneaky"))

    async def test_active_plan_deactivates_others(
        self, service, db_session, trainer: User, client_user: User, plan: TrainingPlan
    ):
        assert plan.is_active is True

        new_plan = await service.create_plan(
            trainer.id, client_user.id, PlanCreate(name="Phase 2: Power", is_active=True)
        )

        await db_session.refresh(plan)
        assert new_plan.is_active is True
        assert plan.is_active is False

    async def test_inactive_plan_leaves_others(
        self, service, db_session, trainer: User, client_user: User, plan: TrainingPlan
    ):
        await service.create_plan(trainer.id, client_user.id, PlanCreate(name="Draft"))

        await db_session.refresh(plan)
        assert plan.is_active is True

    async def test_plan_dates_validated(self):
        with pytest.raises(ValueError):
            PlanCreate(name="Backwards", start_date="2026-03-01", end_date="2026-02-01")


class TestListPlansForClient:
    async def test_lists_only_this_trainers_plans(self, service, trainer: User, client_user: User, plan: TrainingPlan):
        plans = await service.list_plans_for_client(trainer.id, client_user.id)

        assert [p.id for p in plans] == [plan.id]

    async def test_unmanaged_client(self, service, other_trainer: User, client_user: User):
        with pytest.raises(ClientNotManagedError):
            await service.list_plans_for_client(other_trainer.id, client_user.id)


class TestUpdatePlan:
    """Tests for update_plan."""

    async def test_update_fields(self, service, trainer: User, plan: TrainingPlan):
        updated = await service.update_plan(
            trainer.id, plan.id, PlanUpdate(name="Phase 1b", description="Deload week added")
        )

        assert updated.name == "Phase 1b"
        assert updated.description == "Deload week added"

    async def test_foreign_trainer(self, service, other_trainer: User, plan: TrainingPlan):
        with pytest.raises(AccessDeniedError):
            await service.update_plan(other_trainer.id, plan.id, PlanUpdate(name="Mine now"))

    async def test_cannot_move_to_another_client(
        self, service, trainer: User, plan: TrainingPlan, other_client: User
    ):
        with pytest.raises(ParentageChangeError):
            await service.update_plan(trainer.id, plan.id, PlanUpdate(client_id=other_client.id))

    async def test_cannot_move_to_another_trainer(
        self, service, trainer: User, other_trainer: User, plan: TrainingPlan
    ):
        with pytest.raises(ParentageChangeError):
            await service.update_plan(trainer.id, plan.id, PlanUpdate(trainer_id=other_trainer.id))

    async def test_same_parent_ids_are_accepted(self, service, trainer: User, client_user: User, plan: TrainingPlan):
        updated = await service.update_plan(
            trainer.id,
            plan.id,
            PlanUpdate(name="Renamed", trainer_id=trainer.id, client_id=client_user.id),
        )

        assert updated.name == "Renamed"

    async def test_end_before_existing_start(self, service, db_session, trainer: User, plan: TrainingPlan):
        with pytest.raises(ValidationFailedError):
            await service.update_plan(
                trainer.id, plan.id, PlanUpdate(start_date="2026-03-01", end_date="2026-01-01")
            )

    async def test_activation_deactivates_others(
        self, service, db_session, trainer: User, client_user: User, plan: TrainingPlan
    ):
        other = await service.create_plan(trainer.id, client_user.id, PlanCreate(name="Next block"))

        await service.update_plan(trainer.id, other.id, PlanUpdate(is_active=True))

        await db_session.refresh(plan)
        assert plan.is_active is False
        assert other.is_active is True


# =============================================================================
# Cascading deletes
# =============================================================================


class TestDeletePlan:
    """Deleting a plan removes everything below it."""

    async def test_cascade_removes_children_and_objects(
        self,
        service,
        storage,
        db_session,
        trainer: User,
        client_user: User,
        plan: TrainingPlan,
        assignment: Assignment,
    ):
        saga = UploadSaga(db_session, storage)
        target = await saga.request_upload_url(client_user.id, assignment.id, "video/mp4")
        await saga.confirm_upload(
            client_user.id, assignment.id, target.object_key, "clip.mp4", 2048, "video/mp4"
        )

        await service.delete_plan(trainer.id, plan.id)

        assert await count_rows(db_session, TrainingPlan) == 0
        assert await count_rows(db_session, Workout) == 0
        assert await count_rows(db_session, Assignment) == 0
        assert await count_rows(db_session, Upload) == 0
        assert storage.deleted == [target.object_key]

    async def test_empty_plan(self, service, db_session, trainer: User, plan: TrainingPlan):
        await service.delete_plan(trainer.id, plan.id)

        assert await count_rows(db_session, TrainingPlan) == 0

    async def test_foreign_trainer_cannot_delete(
        self, service, db_session, other_trainer: User, plan: TrainingPlan, assignment: Assignment
    ):
        with pytest.raises(AccessDeniedError):
            await service.delete_plan(other_trainer.id, plan.id)

        assert await count_rows(db_session, Assignment) == 1

    async def test_missing_plan(self, service, trainer: User):
        with pytest.raises(NotFoundError):
            await service.delete_plan(trainer.id, uuid.uuid4())

    async def test_object_purge_failure_does_not_fail_delete(
        self,
        service,
        storage,
        db_session,
        trainer: User,
        client_user: User,
        plan: TrainingPlan,
        assignment: Assignment,
    ):
        saga = UploadSaga(db_session, storage)
        target = await saga.request_upload_url(client_user.id, assignment.id, "video/mp4")
        await saga.confirm_upload(
            client_user.id, assignment.id, target.object_key, "clip.mp4", 2048, "video/mp4"
        )
        storage.fail_delete = True

        await service.delete_plan(trainer.id, plan.id)

        assert await count_rows(db_session, Upload) == 0
