"""Trainer router - trainer-centric API for managing clients and their programs."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.database import get_db
from fitcoach.domains.auth.dependencies import CurrentTrainer
from fitcoach.domains.users.schemas import AddClientRequest, ClientResponse
from fitcoach.domains.users.service import UserService
from fitcoach.domains.workouts.router import assignments_router, plans_router

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== Clients ====================

@router.post("/clients", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def add_client(
    request: AddClientRequest,
    current_user: CurrentTrainer,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ClientResponse:
    """Start managing an existing client account, found by email."""
    client = await UserService(db).add_client_by_email(current_user.id, request.email)
    return ClientResponse.model_validate(client)


@router.get("/clients", response_model=list[ClientResponse])
async def list_clients(
    current_user: CurrentTrainer,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ClientResponse]:
    """Get list of the trainer's clients."""
    clients = await UserService(db).list_clients(current_user.id)
    return [ClientResponse.model_validate(c) for c in clients]


# ==================== Programs ====================

router.include_router(plans_router)
router.include_router(assignments_router)
