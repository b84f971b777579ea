"""Training program models: exercises, plans, workouts, assignments, uploads."""
import enum
import uuid
from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fitcoach.config.database import Base
from fitcoach.core.models import TimestampMixin, UUIDMixin, utcnow


class AssignmentStatus(str, enum.Enum):
    """Lifecycle states of an exercise assignment."""

    ASSIGNED = "assigned"  # Initial state, also used when the trainer asks for a redo
    SUBMITTED = "submitted"  # Client confirmed a video upload
    REVIEWED = "reviewed"  # Trainer gave feedback
    COMPLETED = "completed"  # Client marked it done


class Exercise(Base, UUIDMixin, TimestampMixin):
    """Exercise definition in a trainer's library."""

    __tablename__ = "exercises"

    trainer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    muscle_group: Mapped[str | None] = mapped_column(String(100), nullable=True)
    execution_technique: Mapped[str | None] = mapped_column(Text, nullable=True)
    applicability: Mapped[str | None] = mapped_column(String(100), nullable=True)  # e.g. "Home", "Gym"
    difficulty: Mapped[str | None] = mapped_column(String(50), nullable=True)
    video_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Exercise {self.name}>"


class TrainingPlan(Base, UUIDMixin, TimestampMixin):
    """A program a trainer defines for one of their clients."""

    __tablename__ = "training_plans"

    trainer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<TrainingPlan {self.name}>"


class Workout(Base, UUIDMixin, TimestampMixin):
    """One session within a training plan.

    ``trainer_id`` and ``client_id`` are copies of the parent plan's values,
    written once when the workout is created so that ownership checks need
    no extra lookup of the plan. They are a materialized view of the plan,
    not independent data: nothing may update them afterwards, and a workout
    never moves to another plan.
    """

    __tablename__ = "workouts"
    __table_args__ = (Index("ix_workouts_plan_sequence", "plan_id", "sequence"),)

    plan_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("training_plans.id", ondelete="CASCADE"),
        nullable=False,
    )
    trainer_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), index=True, nullable=False)
    client_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    day_of_week: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1 (Mon) - 7 (Sun)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    sequence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Workout {self.name}>"


class Assignment(Base, UUIDMixin, TimestampMixin):
    """An exercise placed into a workout with prescribed parameters.

    Trainer and client are not stored here; they come from the workout.
    """

    __tablename__ = "assignments"
    __table_args__ = (Index("ix_assignments_workout_sequence", "workout_id", "sequence"),)

    workout_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
    )
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("exercises.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    # Prescription
    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps: Mapped[str | None] = mapped_column(String(50), nullable=True)  # e.g. "8-12", "AMRAP"
    rest: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tempo: Mapped[str | None] = mapped_column(String(50), nullable=True)
    weight: Mapped[str | None] = mapped_column(String(50), nullable=True)  # e.g. "10kg", "RPE 8"
    duration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sequence: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    trainer_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Tracking
    status: Mapped[AssignmentStatus] = mapped_column(
        Enum(AssignmentStatus, name="assignment_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=AssignmentStatus.ASSIGNED,
        nullable=False,
    )
    client_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Plain column: uploads already reference assignments through a foreign key
    upload_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Performance reported by the client
    achieved_sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    achieved_reps: Mapped[str | None] = mapped_column(String(50), nullable=True)
    achieved_weight: Mapped[str | None] = mapped_column(String(50), nullable=True)
    achieved_duration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    client_performance_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Assignment {self.id} ({self.status.value})>"


class Upload(Base, UUIDMixin, TimestampMixin):
    """Metadata for a client video stored in object storage.

    Only one upload per assignment is current; a re-submission retires the
    previous record by clearing ``is_current``.
    """

    __tablename__ = "uploads"
    __table_args__ = (
        Index(
            "uq_uploads_current_assignment",
            "assignment_id",
            unique=True,
            sqlite_where=text("is_current = 1"),
            postgresql_where=text("is_current"),
        ),
    )

    assignment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("assignments.id", ondelete="CASCADE"),
        nullable=False,
    )
    client_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), index=True, nullable=False)
    trainer_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), index=True, nullable=False)
    object_key: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    is_current: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Upload {self.object_key}>"
