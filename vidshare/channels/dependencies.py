"""FastAPI dependencies for channels."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import ChannelService


async def get_channel_service(request: Request) -> ChannelService:
    """Get channel service from app state."""
    service = getattr(request.app.state, "channel_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Channel service not available",
        )
    return service


ChannelServiceDep = Annotated[ChannelService, Depends(get_channel_service)]
