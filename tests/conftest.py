"""Test configuration and fixtures for FitCoach API."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fitcoach.config.database import Base, get_db
from fitcoach.core.redis import use_memory_fallback
from fitcoach.core.storage import StorageError, get_object_storage
from fitcoach.domains.users.models import User, UserRole
from fitcoach.domains.workouts.models import (
    Assignment,
    AssignmentStatus,
    Exercise,
    TrainingPlan,
    Workout,
)
from fitcoach.main import create_app

# Test database URL - use SQLite in-memory for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Object storage test double
# =============================================================================


class FakeObjectStorage:
    """In-memory ObjectStorage that records every call."""

    def __init__(self):
        self.put_requests: list[tuple[str, str, int]] = []
        self.get_requests: list[str] = []
        self.deleted: list[str] = []
        self.fail_delete = False

    async def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        self.put_requests.append((key, content_type, expires_in))
        return f"https://storage.test/put/{key}?expires={expires_in}"

    async def presign_get(self, key: str, expires_in: int) -> str:
        self.get_requests.append(key)
        return f"https://storage.test/get/{key}?expires={expires_in}"

    async def delete(self, key: str) -> None:
        if self.fail_delete:
            raise StorageError(f"Failed to delete object: {key}")
        self.deleted.append(key)


# =============================================================================
# Database & app
# =============================================================================


@pytest.fixture(autouse=True)
def memory_rate_limiter():
    """Keep the rate limiter off Redis during tests."""
    use_memory_fallback()


@pytest.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )

    # Import all models to register them
    from fitcoach.domains import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture(scope="function")
async def client(test_engine, db_session, storage) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database and storage overrides."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_storage] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# =============================================================================
# Users
# =============================================================================


async def create_user(
    db_session: AsyncSession,
    role: UserRole,
    name: str,
    trainer_id: uuid.UUID | None = None,
) -> User:
    user_id = uuid.uuid4()
    user = User(
        id=user_id,
        email=f"{name.lower().replace(' ', '.')}-{user_id.hex[:8]}@example.com",
        name=name,
        password_hash="$2b$12$test.hash.password",  # Not a real hash
        role=role,
        trainer_id=trainer_id,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def trainer(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.TRAINER, "Tina Trainer")


@pytest.fixture
async def other_trainer(db_session: AsyncSession) -> User:
    return await create_user(db_session, UserRole.TRAINER, "Oscar Other")


@pytest.fixture
async def client_user(db_session: AsyncSession, trainer: User) -> User:
    """A client managed by ``trainer``."""
    return await create_user(db_session, UserRole.CLIENT, "Carla Client", trainer_id=trainer.id)


@pytest.fixture
async def other_client(db_session: AsyncSession, other_trainer: User) -> User:
    """A client managed by ``other_trainer``."""
    return await create_user(db_session, UserRole.CLIENT, "Otto Client", trainer_id=other_trainer.id)


# =============================================================================
# Program data
# =============================================================================


@pytest.fixture
async def exercise(db_session: AsyncSession, trainer: User) -> Exercise:
    exercise = Exercise(
        trainer_id=trainer.id,
        name="Back Squat",
        muscle_group="Legs",
        difficulty="Medium",
    )
    db_session.add(exercise)
    await db_session.commit()
    await db_session.refresh(exercise)
    return exercise


@pytest.fixture
async def plan(db_session: AsyncSession, trainer: User, client_user: User) -> TrainingPlan:
    plan = TrainingPlan(
        trainer_id=trainer.id,
        client_id=client_user.id,
        name="Phase 1: Strength",
        is_active=True,
    )
    db_session.add(plan)
    await db_session.commit()
    await db_session.refresh(plan)
    return plan


@pytest.fixture
async def workout(db_session: AsyncSession, plan: TrainingPlan) -> Workout:
    workout = Workout(
        plan_id=plan.id,
        trainer_id=plan.trainer_id,
        client_id=plan.client_id,
        name="Day 1: Lower Body",
        sequence=0,
    )
    db_session.add(workout)
    await db_session.commit()
    await db_session.refresh(workout)
    return workout


@pytest.fixture
async def assignment(db_session: AsyncSession, workout: Workout, exercise: Exercise) -> Assignment:
    assignment = Assignment(
        workout_id=workout.id,
        exercise_id=exercise.id,
        sets=5,
        reps="5",
        sequence=0,
        status=AssignmentStatus.ASSIGNED,
    )
    db_session.add(assignment)
    await db_session.commit()
    await db_session.refresh(assignment)
    return assignment
