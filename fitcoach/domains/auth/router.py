"""Authentication router: account registration and the current user.

Access tokens are issued by the identity provider and only verified here.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.database import get_db
from fitcoach.domains.auth.dependencies import CurrentUser
from fitcoach.domains.auth.schemas import RegisterRequest, UserResponse
from fitcoach.domains.users.service import UserService

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Register a new trainer or client account."""
    user = await UserService(db).register_user(
        email=request.email,
        password=request.password,
        name=request.name,
        role=request.role,
    )
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get current authenticated user information."""
    return UserResponse.model_validate(current_user)
