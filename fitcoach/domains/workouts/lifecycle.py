"""Assignment status rules.

    assigned <-> submitted <-> reviewed
    assigned  -> completed

There is no terminal state: a reviewed assignment can go back to
``assigned`` for a redo, and a new upload is accepted after review or
completion.
"""
from fitcoach.core.exceptions import InvalidTransitionError, UploadNotAllowedError
from fitcoach.domains.workouts.models import AssignmentStatus

TRAINER_SETTABLE = frozenset({AssignmentStatus.REVIEWED, AssignmentStatus.ASSIGNED})
CLIENT_SETTABLE = frozenset({AssignmentStatus.COMPLETED})
UPLOAD_ALLOWED = frozenset(
    {AssignmentStatus.ASSIGNED, AssignmentStatus.REVIEWED, AssignmentStatus.COMPLETED}
)


def trainer_feedback_status(target: AssignmentStatus) -> AssignmentStatus:
    """Validate the status a trainer sets together with feedback."""
    if target not in TRAINER_SETTABLE:
        raise InvalidTransitionError(
            f"Trainer may only set status to 'reviewed' or 'assigned', not '{target.value}'"
        )
    return target


def client_update_status(current: AssignmentStatus, target: AssignmentStatus) -> AssignmentStatus:
    """Validate an explicit status change requested by the client.

    Only ``completed`` is client-settable, from any current state.
    """
    if target not in CLIENT_SETTABLE:
        raise InvalidTransitionError(
            f"Client may only mark an assignment as 'completed', not '{target.value}'"
        )
    return target


def status_after_upload(current: AssignmentStatus) -> AssignmentStatus:
    """A confirmed upload always moves the assignment to ``submitted``."""
    return AssignmentStatus.SUBMITTED


def status_after_performance_log(current: AssignmentStatus) -> AssignmentStatus:
    """Logging performance completes a still-``assigned`` assignment, nothing else."""
    if current == AssignmentStatus.ASSIGNED:
        return AssignmentStatus.COMPLETED
    return current


def ensure_upload_allowed(current: AssignmentStatus) -> None:
    """Block new uploads while a submission is waiting for review."""
    if current not in UPLOAD_ALLOWED:
        raise UploadNotAllowedError(
            f"Cannot upload while assignment status is '{current.value}'"
        )
