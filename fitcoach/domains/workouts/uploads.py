"""Video upload saga.

Video bytes never pass through the API. The flow is:

1. ``request_upload_url``: the client gets a short-lived presigned PUT URL
   and the object key it points at. Nothing is persisted.
2. The client uploads straight to object storage.
3. ``confirm_upload``: the client reports the key and file metadata. The
   saga records an Upload (stage) and then links it to the assignment
   (commit). If linking fails, ``compensate_orphaned_upload`` removes the
   staged record and its object and the caller gets
   ``ConfirmationFailedError``.
   Confirming the current key again only re-links it; a retired key is
   refused.

Reported size and content type are trusted as sent; the key is checked to
lie under the caller's own ``uploads/<client>/<assignment>/`` prefix.
"""
import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from fitcoach.config.settings import settings
from fitcoach.core.exceptions import (
    ConfirmationFailedError,
    DataConsistencyError,
    GatewayError,
    UploadMissingError,
    ValidationFailedError,
)
from fitcoach.core.observability import capture_exception, capture_message
from fitcoach.core.storage import (
    ObjectStorage,
    build_upload_key,
    is_video_content_type,
    upload_key_prefix,
)
from fitcoach.core.store import EntityStore
from fitcoach.domains.users.models import User
from fitcoach.domains.workouts import lifecycle
from fitcoach.domains.workouts.authorization import OwnershipChain
from fitcoach.domains.workouts.models import Assignment, AssignmentStatus, Upload

logger = structlog.get_logger(__name__)


@dataclass
class PresignedTarget:
    """A presigned URL together with the object key it grants access to."""

    url: str
    object_key: str
    expires_in: int


class UploadSaga:
    """Coordinates uploads between the entity store and object storage."""

    def __init__(self, db: AsyncSession, storage: ObjectStorage):
        self.store = EntityStore(db)
        self.storage = storage
        self.chain = OwnershipChain(self.store)

    async def request_upload_url(
        self,
        client_id: uuid.UUID,
        assignment_id: uuid.UUID,
        content_type: str,
    ) -> PresignedTarget:
        """Issue a presigned PUT URL for a new assignment video."""
        if not is_video_content_type(content_type):
            raise ValidationFailedError("Content type must be a video MIME type")

        assignment, _ = await self.chain.authorize_assignment_access_by_client(client_id, assignment_id)
        lifecycle.ensure_upload_allowed(assignment.status)

        key = build_upload_key(client_id, assignment.id, content_type)
        expires_in = settings.PRESIGNED_URL_EXPIRE_SECONDS
        url = await self.storage.presign_put(key, content_type, expires_in)

        logger.info("upload_url_issued", client_id=str(client_id), assignment_id=str(assignment.id), key=key)
        return PresignedTarget(url=url, object_key=key, expires_in=expires_in)

    async def confirm_upload(
        self,
        client_id: uuid.UUID,
        assignment_id: uuid.UUID,
        object_key: str,
        file_name: str,
        size: int,
        content_type: str,
    ) -> Assignment:
        """Record an uploaded video and mark the assignment as submitted."""
        self._validate_upload_metadata(client_id, assignment_id, object_key, file_name, size, content_type)
        assignment, workout = await self.chain.authorize_assignment_access_by_client(client_id, assignment_id)

        existing = await self.store.find_one(Upload, object_key=object_key)
        if existing is not None:
            if not existing.is_current:
                raise ValidationFailedError("Object key was already used")
            return await self._relink_current_upload(assignment, existing)

        # Stage: retire the current upload (if any) and record the new one
        superseded = await self.store.find_one(Upload, assignment_id=assignment.id, is_current=True)
        superseded_id = superseded.id if superseded else None
        upload = Upload(
            id=uuid.uuid4(),
            assignment_id=assignment.id,
            client_id=client_id,
            trainer_id=workout.trainer_id,
            object_key=object_key,
            file_name=file_name.strip(),
            content_type=content_type.strip().lower(),
            size=size,
            is_current=True,
        )
        upload_id = upload.id
        try:
            if superseded is not None:
                await self.store.update(superseded, commit=False, is_current=False)
            await self.store.create(upload, commit=False)
            await self.store.commit()
        except GatewayError as e:
            logger.error("upload_stage_failed", assignment_id=str(assignment_id), error=str(e))
            raise ConfirmationFailedError() from e

        # Commit: point the assignment at the new upload
        try:
            assignment = await self._link_upload(assignment, upload_id)
        except GatewayError as e:
            logger.error(
                "upload_link_failed",
                assignment_id=str(assignment_id),
                upload_id=str(upload_id),
                error=str(e),
            )
            await self.compensate_orphaned_upload(upload_id, object_key, superseded_id)
            raise ConfirmationFailedError() from e

        logger.info(
            "upload_confirmed",
            client_id=str(client_id),
            assignment_id=str(assignment_id),
            upload_id=str(upload_id),
            replaced=str(superseded_id) if superseded_id else None,
        )
        return assignment

    async def _link_upload(self, assignment: Assignment, upload_id: uuid.UUID) -> Assignment:
        return await self.store.update(
            assignment,
            upload_id=upload_id,
            status=lifecycle.status_after_upload(assignment.status),
        )

    async def _relink_current_upload(self, assignment: Assignment, upload: Upload) -> Assignment:
        # Repeated confirm of the current key: nothing to stage
        if assignment.upload_id != upload.id or assignment.status != AssignmentStatus.SUBMITTED:
            try:
                assignment = await self._link_upload(assignment, upload.id)
            except GatewayError as e:
                logger.error(
                    "upload_link_failed",
                    assignment_id=str(assignment.id),
                    upload_id=str(upload.id),
                    error=str(e),
                )
                raise ConfirmationFailedError() from e

        logger.info("upload_confirm_repeated", assignment_id=str(assignment.id), upload_id=str(upload.id))
        return assignment

    async def compensate_orphaned_upload(
        self,
        upload_id: uuid.UUID,
        object_key: str,
        superseded_id: uuid.UUID | None = None,
    ) -> bool:
        """Undo a staged upload that no assignment references.

        Deletes the Upload record, restores the upload it replaced, and
        removes the stored object. Failures are logged and reported, never
        raised. Returns True if every step succeeded.
        """
        succeeded = True

        try:
            await self.store.delete_where(Upload, commit=False, id=upload_id)
            if superseded_id is not None:
                superseded = await self.store.get(Upload, superseded_id)
                if superseded is not None:
                    await self.store.update(superseded, commit=False, is_current=True)
            await self.store.commit()
        except GatewayError as e:
            succeeded = False
            logger.error("upload_compensation_failed", step="record", upload_id=str(upload_id), error=str(e))
            capture_exception(e, extra={"upload_id": str(upload_id), "object_key": object_key})

        try:
            await self.storage.delete(object_key)
        except GatewayError as e:
            succeeded = False
            logger.error("upload_compensation_failed", step="object", upload_id=str(upload_id), error=str(e))
            capture_exception(e, extra={"upload_id": str(upload_id), "object_key": object_key})

        if succeeded:
            logger.warning("upload_compensated", upload_id=str(upload_id), object_key=object_key)
        else:
            capture_message(
                f"Orphaned upload {upload_id} could not be fully cleaned up",
                level="error",
                extra={"object_key": object_key},
            )
        return succeeded

    async def get_download_url(self, viewer: User, assignment_id: uuid.UUID) -> PresignedTarget:
        """Issue a presigned GET URL for the assignment's current video.

        Trainers must own the workout; clients must be its assignee.
        """
        if viewer.is_trainer:
            assignment, _ = await self.chain.authorize_assignment_access_by_trainer(viewer.id, assignment_id)
        else:
            assignment, _ = await self.chain.authorize_assignment_access_by_client(viewer.id, assignment_id)

        if assignment.upload_id is None:
            raise UploadMissingError()

        upload = await self.store.get(Upload, assignment.upload_id)
        if upload is None:
            raise DataConsistencyError(
                f"Assignment {assignment.id} references missing upload {assignment.upload_id}"
            )

        expires_in = settings.PRESIGNED_URL_EXPIRE_SECONDS
        url = await self.storage.presign_get(upload.object_key, expires_in)
        return PresignedTarget(url=url, object_key=upload.object_key, expires_in=expires_in)

    def _validate_upload_metadata(
        self,
        client_id: uuid.UUID,
        assignment_id: uuid.UUID,
        object_key: str,
        file_name: str,
        size: int,
        content_type: str,
    ) -> None:
        if not file_name or not file_name.strip():
            raise ValidationFailedError("File name is required")
        if size <= 0:
            raise ValidationFailedError("File size must be positive")
        if size > settings.MAX_VIDEO_SIZE:
            raise ValidationFailedError("File exceeds the maximum video size")
        if not is_video_content_type(content_type):
            raise ValidationFailedError("Content type must be a video MIME type")
        prefix = upload_key_prefix(client_id, assignment_id)
        if not object_key.startswith(prefix) or ".." in object_key or len(object_key) == len(prefix):
            raise ValidationFailedError("Object key does not belong to this assignment")
