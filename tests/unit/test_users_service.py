"""Tests for registration and the trainer/client link."""
import uuid

import bcrypt
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.core.exceptions import (
    AlreadyAssignedError,
    DuplicateEmailError,
    NotFoundError,
    WrongRoleError,
)
from fitcoach.domains.users.models import User, UserRole
from fitcoach.domains.users.service import UserService


@pytest.fixture
def service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


class TestRegisterUser:
    """Tests for register_user."""

    async def test_register_client(self, service):
        user = await service.register_user("New.Client@Example.com", "secret123", " Nina ", UserRole.CLIENT)

        assert user.email == "new.client@example.com"
        assert user.name == "Nina"
        assert user.role == UserRole.CLIENT
        assert user.trainer_id is None
        assert bcrypt.checkpw(b"secret123", user.password_hash.encode("utf-8"))

    async def test_duplicate_email_case_insensitive(self, service):
        await service.register_user("dup@example.com", "secret123", "First", UserRole.TRAINER)

        with pytest.raises(DuplicateEmailError):
            await service.register_user("DUP@example.com", "secret123", "Second", UserRole.CLIENT)


class TestLookups:
    async def test_get_user_by_id(self, service, trainer: User):
        assert (await service.get_user_by_id(trainer.id)).email == trainer.email

    async def test_get_nonexistent_user(self, service):
        assert await service.get_user_by_id(uuid.uuid4()) is None

    async def test_email_is_case_insensitive(self, service, trainer: User):
        user = await service.get_user_by_email(trainer.email.upper())

        assert user is not None
        assert user.id == trainer.id


class TestAddClientByEmail:
    """Tests for add_client_by_email."""

    async def test_links_unassigned_client(self, service, db_session, trainer: User):
        client = await service.register_user("solo@example.com", "secret123", "Solo", UserRole.CLIENT)

        linked = await service.add_client_by_email(trainer.id, "solo@example.com")

        assert linked.id == client.id
        assert linked.trainer_id == trainer.id

    async def test_idempotent_for_same_trainer(self, service, trainer: User, client_user: User):
        linked = await service.add_client_by_email(trainer.id, client_user.email)

        assert linked.trainer_id == trainer.id

    async def test_client_of_another_trainer(self, service, other_trainer: User, client_user: User):
        with pytest.raises(AlreadyAssignedError):
            await service.add_client_by_email(other_trainer.id, client_user.email)

    async def test_unknown_email(self, service, trainer: User):
        with pytest.raises(NotFoundError):
            await service.add_client_by_email(trainer.id, "nobody@example.com")

    async def test_trainer_cannot_be_added(self, service, trainer: User, other_trainer: User):
        with pytest.raises(WrongRoleError):
            await service.add_client_by_email(trainer.id, other_trainer.email)


class TestListClients:
    async def test_only_own_clients_sorted(
        self, service, trainer: User, client_user: User, other_client: User
    ):
        second = await service.register_user("aaron@example.com", "secret123", "Aaron", UserRole.CLIENT)
        await service.add_client_by_email(trainer.id, second.email)

        clients = await service.list_clients(trainer.id)

        assert [c.name for c in clients] == ["Aaron", "Carla Client"]
