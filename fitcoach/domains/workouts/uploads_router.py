"""Video access shared by trainers and clients."""
from uuid import UUID

from fastapi import APIRouter

from fitcoach.domains.auth.dependencies import CurrentUser
from fitcoach.domains.workouts.dependencies import UploadSagaDep
from fitcoach.domains.workouts.schemas import VideoUrlResponse

uploads_router = APIRouter()


@uploads_router.get("/{assignment_id}/video", response_model=VideoUrlResponse)
async def get_video_url(
    assignment_id: UUID,
    current_user: CurrentUser,
    saga: UploadSagaDep,
) -> VideoUrlResponse:
    """Get a short-lived download URL for an assignment's video.

    Available to the owning trainer and to the assigned client.
    """
    target = await saga.get_download_url(current_user, assignment_id)
    return VideoUrlResponse(url=target.url, expires_in=target.expires_in)
