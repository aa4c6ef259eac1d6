"""Channel endpoints."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from vidshare.auth.dependencies import CurrentChannel

from .dependencies import ChannelServiceDep
from .schemas import ChannelResponse, RegisterChannelRequest


router = APIRouter(prefix="/v1/channels", tags=["channels"])


@router.post(
    "",
    response_model=ChannelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register channel profile",
)
async def register_channel(
    data: RegisterChannelRequest,
    response: Response,
    channel_service: ChannelServiceDep,
    channel: CurrentChannel,
) -> ChannelResponse:
    """Create the profile of the authenticated channel.

    Idempotent: an existing profile is returned unchanged with 200.
    """
    profile, created = await channel_service.register_channel(
        channel.id, data.username, data.avatar
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return ChannelResponse.from_channel(profile)


@router.get("/me", response_model=ChannelResponse, summary="Get own channel")
async def get_own_channel(
    channel_service: ChannelServiceDep,
    channel: CurrentChannel,
) -> ChannelResponse:
    """Profile of the authenticated channel, with liked/disliked videos."""
    return ChannelResponse.from_channel(await channel_service.get_channel(channel.id))


@router.get("/{channel_id}", response_model=ChannelResponse, summary="Get channel")
async def get_channel(
    channel_id: UUID,
    channel_service: ChannelServiceDep,
) -> ChannelResponse:
    """Channel profile by id."""
    return ChannelResponse.from_channel(await channel_service.get_channel(channel_id))
