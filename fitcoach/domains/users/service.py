"""User service: registration and the trainer/client link."""
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.core.exceptions import (
    AlreadyAssignedError,
    DuplicateEmailError,
    NotFoundError,
    WrongRoleError,
)
from fitcoach.core.security import hash_password
from fitcoach.core.store import EntityStore
from fitcoach.domains.users.models import User, UserRole

logger = logging.getLogger(__name__)


class UserService:
    """Service for handling user operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.store = EntityStore(db)

    async def get_user_by_id(self, user_id: uuid.UUID) -> User | None:
        """Get a user by ID."""
        return await self.store.get(User, user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email (case-insensitive)."""
        return await self.store.find_one(User, email=email.strip().lower())

    async def register_user(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole,
    ) -> User:
        """Create a new trainer or client account.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        if await self.get_user_by_email(email):
            raise DuplicateEmailError()

        user = User(
            email=email.strip().lower(),
            password_hash=hash_password(password),
            name=name.strip(),
            role=role,
        )
        user = await self.store.create(user)
        logger.info(f"Registered {role.value} {user.id}")
        return user

    async def add_client_by_email(self, trainer_id: uuid.UUID, email: str) -> User:
        """Link an existing client account to a trainer.

        Idempotent when the client is already managed by this trainer.

        Raises:
            NotFoundError: No user with this email
            WrongRoleError: The user is not a client
            AlreadyAssignedError: The client belongs to another trainer
        """
        client = await self.get_user_by_email(email)
        if client is None:
            raise NotFoundError("No user found with this email")
        if not client.is_client:
            raise WrongRoleError("User is not a client")
        if client.trainer_id == trainer_id:
            return client
        if client.trainer_id is not None:
            raise AlreadyAssignedError()

        client = await self.store.update(client, trainer_id=trainer_id)
        logger.info(f"Trainer {trainer_id} now manages client {client.id}")
        return client

    async def list_clients(self, trainer_id: uuid.UUID) -> list[User]:
        """List the clients managed by a trainer."""
        return await self.store.find(
            User,
            order_by=[User.name],
            trainer_id=trainer_id,
            role=UserRole.CLIENT,
        )
