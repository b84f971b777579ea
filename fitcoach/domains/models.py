"""Import all models to register them with SQLAlchemy metadata."""
from fitcoach.domains.users.models import User, UserRole
from fitcoach.domains.workouts.models import (
    Assignment,
    AssignmentStatus,
    Exercise,
    TrainingPlan,
    Upload,
    Workout,
)

__all__ = [
    "User",
    "UserRole",
    "Exercise",
    "TrainingPlan",
    "Workout",
    "Assignment",
    "AssignmentStatus",
    "Upload",
]
