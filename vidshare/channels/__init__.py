"""Channel module: profiles, owned videos and reaction sets.

Note: Router is not exported here to avoid circular imports.
Import directly from vidshare.channels.router when needed.
"""

from .models import CHANNELS_TABLES_CQL, Channel, ChannelSummary
from .service import ChannelService


__all__ = [
    "CHANNELS_TABLES_CQL",
    "Channel",
    "ChannelService",
    "ChannelSummary",
]
