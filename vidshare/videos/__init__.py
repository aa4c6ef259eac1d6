"""Videos module.

Note: Router is not exported here to avoid circular imports.
Import directly from vidshare.videos.router when needed.
"""

from .catalog import CatalogEntry, VideoCatalog
from .models import VIDEOS_TABLES_CQL, Video
from .service import VideoDetail, VideoPage, VideoService


__all__ = [
    "VIDEOS_TABLES_CQL",
    "CatalogEntry",
    "Video",
    "VideoCatalog",
    "VideoDetail",
    "VideoPage",
    "VideoService",
]
