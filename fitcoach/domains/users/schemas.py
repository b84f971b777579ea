"""Trainer/client relationship schemas."""
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr


class AddClientRequest(BaseModel):
    """Link an existing client account to the requesting trainer."""

    email: EmailStr


class ClientResponse(BaseModel):
    """Client as seen by their trainer."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    is_active: bool
    trainer_id: UUID | None = None
