"""Authentication dependencies for route handlers."""
import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.database import get_db
from fitcoach.core.observability import set_user_context
from fitcoach.core.security import decode_token
from fitcoach.domains.users.models import User, UserRole
from fitcoach.domains.users.service import UserService

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Resolve the active user behind a bearer access token."""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    token_data = decode_token(credentials.credentials)
    if token_data is None:
        raise unauthorized

    try:
        user_id = uuid.UUID(token_data.user_id)
    except ValueError:
        raise unauthorized from None

    user = await UserService(db).get_user_by_id(user_id)
    if user is None:
        raise unauthorized
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    set_user_context(str(user.id), role=user.role.value)
    return user


async def get_current_trainer(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    if current_user.role != UserRole.TRAINER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Trainer role required",
        )
    return current_user


async def get_current_client(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    if current_user.role != UserRole.CLIENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Client role required",
        )
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentTrainer = Annotated[User, Depends(get_current_trainer)]
CurrentClient = Annotated[User, Depends(get_current_client)]
