"""Recompute like/dislike counters from the reaction rows.

Counter drift appears when a reaction write was applied but the counter
update after it failed; such videos are queued in the Redis set
``engagement:dirty``. This script repairs given videos, or drains that set.

Usage:
    python -m scripts.reconcile_engagement <video_id> [<video_id> ...]
    python -m scripts.reconcile_engagement --dirty [--limit 500]
"""

import argparse
import asyncio
import sys
from pathlib import Path
from uuid import UUID

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra_asyncio.cluster import Cluster

from vidshare.config.settings import get_settings
from vidshare.core.redis import init_redis, shutdown_redis
from vidshare.reactions.models import ReconciliationReport
from vidshare.reactions.service import EngagementService


logger = structlog.get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("video_ids", nargs="*", type=UUID, help="Videos to repair")
    parser.add_argument(
        "--dirty",
        action="store_true",
        help="Repair the videos queued in engagement:dirty",
    )
    parser.add_argument(
        "--limit", type=int, default=100, help="Max dirty videos to process"
    )
    args = parser.parse_args(argv)
    if not args.video_ids and not args.dirty:
        parser.error("pass video ids or --dirty")
    return args


async def reconcile(
    service: EngagementService,
    video_ids: list[UUID],
    dirty: bool = False,
    limit: int = 100,
) -> list[ReconciliationReport]:
    """Reconcile the given videos, then the dirty set when requested.

    Returns:
        One report per processed video
    """
    reports = [await service.reconcile(video_id) for video_id in video_ids]
    if dirty:
        reports.extend(await service.reconcile_dirty(limit=limit))
    return reports


async def run(args: argparse.Namespace) -> int:
    """Connect, reconcile and report. Returns the process exit code."""
    settings = get_settings()
    keyspace = settings.cassandra_keyspace

    logger.info(
        "reconciliation_starting",
        keyspace=keyspace,
        hosts=settings.cassandra_hosts,
        videos=len(args.video_ids),
        dirty=args.dirty,
    )

    auth_provider = None
    if settings.cassandra_username and settings.cassandra_password:
        auth_provider = PlainTextAuthProvider(
            username=settings.cassandra_username,
            password=settings.cassandra_password,
        )

    cluster = Cluster(
        contact_points=settings.cassandra_hosts,
        port=settings.cassandra_port,
        auth_provider=auth_provider,
        protocol_version=settings.cassandra_protocol_version,
    )
    session = cluster.connect()
    session.set_keyspace(keyspace)

    redis_client = await init_redis() if args.dirty else None

    try:
        service = EngagementService(session=session, keyspace=keyspace, redis=redis_client)
        reports = await reconcile(service, args.video_ids, args.dirty, args.limit)
        repaired = sum(1 for report in reports if report.repaired)
        logger.info(
            "reconciliation_completed", processed=len(reports), repaired=repaired
        )
    finally:
        if redis_client is not None:
            await shutdown_redis()
        session.shutdown()
        cluster.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run(parse_args())))
