"""Authentication helpers: bearer token decoding and the acting channel."""

from .dependencies import ChannelPrincipal, CurrentChannel, get_current_channel
from .security import create_access_token, decode_access_token


__all__ = [
    "ChannelPrincipal",
    "CurrentChannel",
    "create_access_token",
    "decode_access_token",
    "get_current_channel",
]
