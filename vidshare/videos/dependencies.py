"""FastAPI dependencies for videos."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import VideoService


async def get_video_service(request: Request) -> VideoService:
    """Get video service from app state."""
    service = getattr(request.app.state, "video_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Video service not available",
        )
    return service


VideoServiceDep = Annotated[VideoService, Depends(get_video_service)]
