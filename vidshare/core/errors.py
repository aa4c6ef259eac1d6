"""Service-layer exceptions shared by all domains.

Services raise these; the application maps ``code`` to an HTTP status in a
single exception handler (see ``vidshare.main``).
"""

from cassandra import DriverException, OperationTimedOut, RequestExecutionException
from cassandra.cluster import NoHostAvailable
from fastapi import status


class VidshareError(Exception):
    """Base service error."""

    def __init__(self, message: str, code: str = "vidshare_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(VidshareError):
    """Referenced entity does not exist."""

    def __init__(self, message: str = "Not found", code: str = "not_found"):
        super().__init__(message, code)


class VideoNotFoundError(NotFoundError):
    def __init__(self, video_id: object):
        self.video_id = video_id
        super().__init__(f"Video {video_id} not found!", "video_not_found")


class ChannelNotFoundError(NotFoundError):
    def __init__(self, channel_id: object):
        self.channel_id = channel_id
        super().__init__("Channel does not exist!", "channel_not_found")


class CommentNotFoundError(NotFoundError):
    def __init__(self, comment_id: object):
        self.comment_id = comment_id
        super().__init__(f"Comment {comment_id} not found!", "comment_not_found")


class ValidationFailedError(VidshareError):
    """Malformed input to a create/update operation."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, "validation_failed")


class PermissionDeniedError(VidshareError):
    """Acting channel may not touch the resource."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, "permission_denied")


class ConflictRaceError(VidshareError):
    """Concurrent writers kept moving a reaction away from the planned state."""

    def __init__(self, channel_id: object, video_id: object, attempts: int):
        self.channel_id = channel_id
        self.video_id = video_id
        self.attempts = attempts
        super().__init__(
            f"Reaction on video {video_id} changed concurrently, try again",
            "conflict_race",
        )


class StoreError(VidshareError):
    """A store read or write failed.

    ``step`` names the operation that failed so a partially applied sequence
    can be reconciled afterwards.
    """

    def __init__(self, step: str, cause: BaseException | None = None, **details):
        self.step = step
        self.details = details
        message = f"Store operation '{step}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, "store_error")


# Driver failures a service wraps into StoreError
STORE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    DriverException,
    RequestExecutionException,
    NoHostAvailable,
    OperationTimedOut,
)


STATUS_BY_CODE = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "video_not_found": status.HTTP_404_NOT_FOUND,
    "channel_not_found": status.HTTP_404_NOT_FOUND,
    "comment_not_found": status.HTTP_404_NOT_FOUND,
    "validation_failed": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "permission_denied": status.HTTP_403_FORBIDDEN,
    "conflict_race": status.HTTP_409_CONFLICT,
    "store_error": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: VidshareError) -> int:
    """HTTP status code for a service error."""
    return STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
