# Core infrastructure
from vidshare.core.context import (
    RequestContext,
    clear_context,
    get_channel_id,
    get_context,
    get_request_id,
    set_channel_id,
    set_request_id,
)
from vidshare.core.logging import configure_structlog, get_logger
from vidshare.core.middleware import RequestContextMiddleware


__all__ = [
    "RequestContext",
    "RequestContextMiddleware",
    "clear_context",
    "configure_structlog",
    "get_channel_id",
    "get_context",
    "get_logger",
    "get_request_id",
    "set_channel_id",
    "set_request_id",
]
