"""Object storage gateway for client video uploads.

Supports:
- AWS S3
- Cloudflare R2 / MinIO (S3-compatible, via S3_ENDPOINT_URL)
- Local filesystem (for development)

Uploads never pass through the API: clients receive a presigned PUT URL,
send the bytes straight to the bucket, and later fetch them with a
presigned GET URL. Expiry of those URLs is enforced by the storage provider.
"""
import logging
import re
import uuid
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

import aioboto3
import aiofiles
import aiofiles.os
from botocore.exceptions import BotoCoreError, ClientError

from fitcoach.config.settings import settings
from fitcoach.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

UPLOAD_KEY_PREFIX = "uploads"

_EXTENSIONS = {
    "video/mp4": "mp4",
    "video/quicktime": "mov",
    "video/webm": "webm",
    "video/x-msvideo": "avi",
    "video/mpeg": "mpeg",
    "video/x-matroska": "mkv",
}
_SAFE_EXTENSION = re.compile(r"[a-z0-9]{1,16}")


class StorageError(GatewayError):
    """Object storage provider reported an error."""

    code = "storage_failure"
    default_message = "Object storage failure"


def is_video_content_type(content_type: str | None) -> bool:
    """Check that a MIME type denotes a video."""
    if not content_type:
        return False
    return content_type.strip().lower().startswith("video/")


def get_extension_from_content_type(content_type: str) -> str:
    """Get file extension from content type."""
    content_type = content_type.strip().lower()
    if content_type in _EXTENSIONS:
        return _EXTENSIONS[content_type]
    _, _, subtype = content_type.partition("/")
    subtype = subtype.split(";")[0].strip()
    # Subtypes end up in object keys; anything unusual becomes "bin"
    if _SAFE_EXTENSION.fullmatch(subtype):
        return subtype
    return "bin"


def upload_key_prefix(client_id: uuid.UUID, assignment_id: uuid.UUID) -> str:
    return f"{UPLOAD_KEY_PREFIX}/{client_id.hex}/{assignment_id.hex}/"


def build_upload_key(client_id: uuid.UUID, assignment_id: uuid.UUID, content_type: str) -> str:
    """Generate a unique object key for one client upload."""
    extension = get_extension_from_content_type(content_type)
    return f"{upload_key_prefix(client_id, assignment_id)}{uuid.uuid4().hex}.{extension}"


class ObjectStorage(Protocol):
    """Capabilities the core needs from an object storage backend."""

    async def presign_put(self, key: str, content_type: str, expires_in: int) -> str: ...

    async def presign_get(self, key: str, expires_in: int) -> str: ...

    async def delete(self, key: str) -> None: ...


class S3ObjectStorage:
    """Object storage backed by S3 or an S3-compatible provider."""

    def __init__(
        self,
        bucket_name: str,
        region_name: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: str | None = None,
    ):
        self.bucket_name = bucket_name
        self.endpoint_url = endpoint_url or None
        self._session = aioboto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region_name,
        )

    def _client(self):
        return self._session.client("s3", endpoint_url=self.endpoint_url)

    async def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        """Get a presigned URL the client uses to PUT the object directly."""
        try:
            async with self._client() as s3:
                return await s3.generate_presigned_url(
                    "put_object",
                    Params={
                        "Bucket": self.bucket_name,
                        "Key": key,
                        "ContentType": content_type,
                    },
                    ExpiresIn=expires_in,
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to generate presigned PUT URL for key '{key}': {e}")
            raise StorageError("Failed to generate upload URL") from e

    async def presign_get(self, key: str, expires_in: int) -> str:
        """Get a presigned URL for downloading/viewing the object."""
        try:
            async with self._client() as s3:
                return await s3.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket_name, "Key": key},
                    ExpiresIn=expires_in,
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to generate presigned GET URL for key '{key}': {e}")
            raise StorageError("Failed to generate download URL") from e

    async def delete(self, key: str) -> None:
        """Remove an object from the bucket."""
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete object '{key}' from bucket '{self.bucket_name}': {e}")
            raise StorageError(f"Failed to delete object: {e}") from e

        logger.info(f"Deleted object '{key}' from bucket '{self.bucket_name}'")


class LocalObjectStorage:
    """Filesystem storage for development.

    "Presigned" URLs point at the development file route served by the
    API itself; nothing expires.
    """

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _url(self, key: str) -> str:
        return f"{self.base_url}/{quote(key)}"

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError(f"Invalid object key: {key}")
        return path

    async def presign_put(self, key: str, content_type: str, expires_in: int) -> str:
        await aiofiles.os.makedirs(self._path(key).parent, exist_ok=True)
        return self._url(key)

    async def presign_get(self, key: str, expires_in: int) -> str:
        return self._url(key)

    async def write(self, key: str, content: bytes) -> None:
        """Store bytes received on the development upload route."""
        path = self._path(key)
        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        async with aiofiles.open(path, "wb") as f:
            await f.write(content)
        logger.info(f"Uploaded file to local storage: {key}")

    def resolve(self, key: str) -> Path:
        return self._path(key)

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            if await aiofiles.os.path.exists(path):
                await aiofiles.os.remove(path)
                logger.info(f"Deleted local file: {key}")
        except OSError as e:
            logger.error(f"Failed to delete local file '{key}': {e}")
            raise StorageError(f"Failed to delete object: {e}") from e


_object_storage: ObjectStorage | None = None


def get_object_storage() -> ObjectStorage:
    """Dependency returning the configured storage backend."""
    global _object_storage
    if _object_storage is None:
        if settings.STORAGE_PROVIDER == "local":
            _object_storage = LocalObjectStorage(
                root=settings.LOCAL_STORAGE_PATH,
                base_url=settings.LOCAL_STORAGE_URL,
            )
        else:
            _object_storage = S3ObjectStorage(
                bucket_name=settings.S3_BUCKET_NAME,
                region_name=settings.AWS_REGION,
                access_key_id=settings.AWS_ACCESS_KEY_ID,
                secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                endpoint_url=settings.S3_ENDPOINT_URL,
            )
    return _object_storage


def get_local_storage() -> LocalObjectStorage:
    """Dependency for the development file routes of the local backend."""
    storage = get_object_storage()
    if not isinstance(storage, LocalObjectStorage):
        raise StorageError("Local storage backend is not configured")
    return storage
