"""Service wiring for route handlers."""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.database import get_db
from fitcoach.core.storage import ObjectStorage, get_object_storage
from fitcoach.domains.workouts.service import WorkoutService
from fitcoach.domains.workouts.uploads import UploadSaga


def get_workout_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_object_storage)],
) -> WorkoutService:
    return WorkoutService(db, storage)


def get_upload_saga(
    db: Annotated[AsyncSession, Depends(get_db)],
    storage: Annotated[ObjectStorage, Depends(get_object_storage)],
) -> UploadSaga:
    return UploadSaga(db, storage)


WorkoutServiceDep = Annotated[WorkoutService, Depends(get_workout_service)]
UploadSagaDep = Annotated[UploadSaga, Depends(get_upload_saga)]
