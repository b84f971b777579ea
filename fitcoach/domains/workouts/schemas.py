"""Training program schemas for request/response validation."""
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fitcoach.domains.workouts.models import AssignmentStatus


# Exercise schemas

class ExerciseCreate(BaseModel):
    """Create exercise request."""

    name: str = Field(min_length=2, max_length=255)
    description: str | None = None
    muscle_group: str | None = Field(None, max_length=100)
    execution_technique: str | None = None
    applicability: str | None = Field(None, max_length=100)
    difficulty: str | None = Field(None, max_length=50)
    video_url: str | None = Field(None, max_length=500)


class ExerciseUpdate(BaseModel):
    """Update exercise request."""

    name: str | None = Field(None, min_length=2, max_length=255)
    description: str | None = None
    muscle_group: str | None = Field(None, max_length=100)
    execution_technique: str | None = None
    applicability: str | None = Field(None, max_length=100)
    difficulty: str | None = Field(None, max_length=50)
    video_url: str | None = Field(None, max_length=500)


class ExerciseResponse(BaseModel):
    """Exercise response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trainer_id: UUID
    name: str
    description: str | None = None
    muscle_group: str | None = None
    execution_technique: str | None = None
    applicability: str | None = None
    difficulty: str | None = None
    video_url: str | None = None
    created_at: datetime
    updated_at: datetime


# Training plan schemas

class PlanCreate(BaseModel):
    """Create training plan request. The client comes from the path."""

    name: str = Field(min_length=2, max_length=255)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool = False

    @model_validator(mode="after")
    def check_dates(self) -> "PlanCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PlanUpdate(BaseModel):
    """Update training plan request.

    ``trainer_id`` and ``client_id`` are accepted only so that an attempt to
    re-parent the plan can be rejected explicitly.
    """

    name: str | None = Field(None, min_length=2, max_length=255)
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None
    trainer_id: UUID | None = None
    client_id: UUID | None = None


class PlanResponse(BaseModel):
    """Training plan response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trainer_id: UUID
    client_id: UUID
    name: str
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# Workout schemas

class WorkoutCreate(BaseModel):
    """Create workout request."""

    name: str = Field(min_length=1, max_length=255)
    day_of_week: int | None = Field(None, ge=1, le=7)
    notes: str | None = None
    sequence: int = Field(default=0, ge=0)


class WorkoutUpdate(BaseModel):
    """Update workout request."""

    name: str | None = Field(None, min_length=1, max_length=255)
    day_of_week: int | None = Field(None, ge=1, le=7)
    notes: str | None = None
    sequence: int | None = Field(None, ge=0)
    plan_id: UUID | None = None
    trainer_id: UUID | None = None
    client_id: UUID | None = None


class WorkoutResponse(BaseModel):
    """Workout response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plan_id: UUID
    trainer_id: UUID
    client_id: UUID
    name: str
    day_of_week: int | None = None
    notes: str | None = None
    sequence: int
    created_at: datetime
    updated_at: datetime


# Assignment schemas

class AssignmentCreate(BaseModel):
    """Assign an exercise to a workout."""

    exercise_id: UUID
    sets: int | None = Field(None, ge=0, le=100)
    reps: str | None = Field(None, max_length=50)
    rest: str | None = Field(None, max_length=50)
    tempo: str | None = Field(None, max_length=50)
    weight: str | None = Field(None, max_length=50)
    duration: str | None = Field(None, max_length=50)
    sequence: int = Field(default=0, ge=0)
    trainer_notes: str | None = None


class AssignmentUpdate(BaseModel):
    """Update assignment prescription. ``exercise_id`` swaps the exercise."""

    exercise_id: UUID | None = None
    workout_id: UUID | None = None
    sets: int | None = Field(None, ge=0, le=100)
    reps: str | None = Field(None, max_length=50)
    rest: str | None = Field(None, max_length=50)
    tempo: str | None = Field(None, max_length=50)
    weight: str | None = Field(None, max_length=50)
    duration: str | None = Field(None, max_length=50)
    sequence: int | None = Field(None, ge=0)
    trainer_notes: str | None = None


class AssignmentResponse(BaseModel):
    """Assignment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workout_id: UUID
    exercise_id: UUID
    sets: int | None = None
    reps: str | None = None
    rest: str | None = None
    tempo: str | None = None
    weight: str | None = None
    duration: str | None = None
    sequence: int
    trainer_notes: str | None = None
    assigned_at: datetime
    status: AssignmentStatus
    client_notes: str | None = None
    upload_id: UUID | None = None
    feedback: str | None = None
    achieved_sets: int | None = None
    achieved_reps: str | None = None
    achieved_weight: str | None = None
    achieved_duration: str | None = None
    client_performance_notes: str | None = None
    updated_at: datetime


class FeedbackRequest(BaseModel):
    """Trainer feedback on an assignment."""

    feedback: str = Field(min_length=1)
    status: AssignmentStatus = AssignmentStatus.REVIEWED


class StatusUpdateRequest(BaseModel):
    """Client status change for an assignment."""

    status: AssignmentStatus
    client_notes: str | None = None


class PerformanceRequest(BaseModel):
    """Achieved metrics reported by the client."""

    achieved_sets: int | None = Field(None, ge=0)
    achieved_reps: str | None = Field(None, max_length=50)
    achieved_weight: str | None = Field(None, max_length=50)
    achieved_duration: str | None = Field(None, max_length=50)
    client_performance_notes: str | None = None


# Upload schemas

class UploadUrlRequest(BaseModel):
    content_type: str = Field(min_length=1, max_length=100)


class UploadUrlResponse(BaseModel):
    """Presigned upload target for a client video."""

    upload_url: str
    object_key: str
    expires_in: int


class UploadConfirmRequest(BaseModel):
    """Metadata reported by the client after uploading."""

    object_key: str = Field(min_length=1, max_length=500)
    file_name: str = Field(max_length=255)
    size: int
    content_type: str = Field(max_length=100)


class VideoUrlResponse(BaseModel):
    url: str
    expires_in: int
