"""FastAPI dependencies for authentication.

The acting channel is resolved from the bearer token; channel existence is
checked by the services that need it.
"""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError

from vidshare.core.context import set_channel_id

from .security import decode_access_token


@dataclass(frozen=True)
class ChannelPrincipal:
    """Channel acting in the current request."""

    id: UUID


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    expected_parts = 2
    parts = auth_header.split()
    if len(parts) != expected_parts or parts[0].lower() != "bearer":
        return None

    return parts[1]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_channel(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> ChannelPrincipal:
    """Get the acting channel from the JWT access token.

    Raises:
        HTTPException(401): If token is missing, invalid, or expired
    """
    if not token:
        raise _unauthorized("Access token not provided")

    try:
        payload = decode_access_token(token)
        channel_id = UUID(str(payload["sub"]))
    except (JWTError, ValueError) as e:
        raise _unauthorized("Invalid or expired token") from e

    set_channel_id(channel_id)
    return ChannelPrincipal(id=channel_id)


CurrentChannel = Annotated[ChannelPrincipal, Depends(get_current_channel)]
