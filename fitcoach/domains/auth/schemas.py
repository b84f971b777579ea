from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from fitcoach.domains.users.models import UserRole


class RegisterRequest(BaseModel):
    """User registration request."""

    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=2, max_length=100)
    role: UserRole = Field(
        default=UserRole.CLIENT,
        description="'trainer' for coaches, 'client' for trainees",
    )


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
    trainer_id: UUID | None = None
    created_at: datetime
