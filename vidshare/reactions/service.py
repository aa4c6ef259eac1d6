"""Engagement service: like/dislike toggles and counter reconciliation.

A toggle runs as a sequence of store calls with no lock held between them:

    check_video -> check_channel -> read_membership
        -> write_membership (compare-and-set) -> adjust_counters

The counter only moves when the conditional membership write reports it was
applied. A write that was not applied returns the row's current reaction;
when that already equals the planned target, a concurrent identical toggle
did the work and this call reports the same action without touching the
counters. Otherwise the toggle is re-planned from the observed reaction.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog

from vidshare.core.errors import (
    STORE_EXCEPTIONS,
    ChannelNotFoundError,
    ConflictRaceError,
    StoreError,
    VideoNotFoundError,
)
from vidshare.core.redis import ENGAGEMENT_DIRTY_KEY, engagement_cache_key

from .models import (
    EngagementCounts,
    ReactionKind,
    ReconciliationReport,
    ToggleResult,
    ToggleTransition,
    parse_reaction,
    plan_toggle,
)


if TYPE_CHECKING:
    from cassandra.cluster import Session
    from redis.asyncio import Redis


logger = structlog.get_logger(__name__)


class EngagementService:
    """Keeps channel reaction sets and video counters consistent."""

    MAX_TOGGLE_ATTEMPTS = 3
    CACHE_TTL_SECONDS = 3600

    def __init__(
        self,
        session: "Session",
        keyspace: str,
        redis: "Redis | None" = None,
        max_attempts: int | None = None,
        cache_ttl: int | None = None,
    ):
        """Initialize with Cassandra session and optional Redis."""
        self.session = session
        self.keyspace = keyspace
        self.redis = redis
        self.max_attempts = max_attempts or self.MAX_TOGGLE_ATTEMPTS
        self.cache_ttl = cache_ttl or self.CACHE_TTL_SECONDS
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._video_exists = self.session.prepare(f"""
            SELECT video_id FROM {self.keyspace}.videos
            WHERE video_id = ?
        """)

        self._channel_exists = self.session.prepare(f"""
            SELECT channel_id FROM {self.keyspace}.channels
            WHERE channel_id = ?
        """)

        # Membership (source of truth)
        self._get_reaction = self.session.prepare(f"""
            SELECT reaction FROM {self.keyspace}.channel_reactions
            WHERE channel_id = ? AND video_id = ?
        """)

        self._insert_reaction = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.channel_reactions
            (channel_id, video_id, reaction, reacted_at)
            VALUES (?, ?, ?, ?)
            IF NOT EXISTS
        """)

        self._swap_reaction = self.session.prepare(f"""
            UPDATE {self.keyspace}.channel_reactions
            SET reaction = ?, reacted_at = ?
            WHERE channel_id = ? AND video_id = ?
            IF reaction = ?
        """)

        self._delete_reaction = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.channel_reactions
            WHERE channel_id = ? AND video_id = ?
            IF reaction = ?
        """)

        self._get_reactions_by_channel = self.session.prepare(f"""
            SELECT video_id, reaction FROM {self.keyspace}.channel_reactions
            WHERE channel_id = ?
        """)

        self._get_reactions_by_video = self.session.prepare(f"""
            SELECT channel_id, reaction FROM {self.keyspace}.channel_reactions
            WHERE video_id = ?
        """)

        # Counters (derived)
        self._adjust_engagement = self.session.prepare(f"""
            UPDATE {self.keyspace}.video_engagement
            SET likes = likes + ?, dislikes = dislikes + ?
            WHERE video_id = ?
        """)

        self._get_engagement = self.session.prepare(f"""
            SELECT likes, dislikes FROM {self.keyspace}.video_engagement
            WHERE video_id = ?
        """)

        self._delete_engagement = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.video_engagement
            WHERE video_id = ?
        """)

    async def _run(self, step: str, statement: Any, params: list[Any], **details):
        """Execute a statement, wrapping driver failures into StoreError."""
        try:
            return await self.session.aexecute(statement, params)
        except STORE_EXCEPTIONS as e:
            logger.error("engagement_store_failed", step=step, error=str(e), **details)
            raise StoreError(step, e, **details) from e

    # ==========================================================================
    # Toggles
    # ==========================================================================

    async def toggle_like(self, channel_id: UUID, video_id: UUID) -> ToggleResult:
        """Toggle the channel's like on a video."""
        return await self.toggle(channel_id, video_id, ReactionKind.LIKE)

    async def toggle_dislike(self, channel_id: UUID, video_id: UUID) -> ToggleResult:
        """Toggle the channel's dislike on a video."""
        return await self.toggle(channel_id, video_id, ReactionKind.DISLIKE)

    async def toggle(
        self,
        channel_id: UUID,
        video_id: UUID,
        kind: ReactionKind,
    ) -> ToggleResult:
        """Flip ``kind`` for (channel, video) and move the matching counter.

        Setting a reaction clears the opposite one in the same conditional
        write, so a pair never holds both.

        Raises:
            VideoNotFoundError: before any channel read or write
            ChannelNotFoundError: acting channel does not exist
            ConflictRaceError: state kept changing under concurrent writers
            StoreError: a store call failed; ``step`` tells which one
        """
        ids = {"channel_id": str(channel_id), "video_id": str(video_id)}

        result = await self._run("check_video", self._video_exists, [video_id], **ids)
        if result.one() is None:
            raise VideoNotFoundError(video_id)

        result = await self._run(
            "check_channel", self._channel_exists, [channel_id], **ids
        )
        if result.one() is None:
            raise ChannelNotFoundError(channel_id)

        current = await self.get_reaction(channel_id, video_id)

        for attempt in range(1, self.max_attempts + 1):
            transition = plan_toggle(current, kind)
            applied, observed = await self._write_membership(
                channel_id, video_id, transition
            )

            if applied:
                await self._adjust_counters(channel_id, video_id, transition)
                await self._invalidate_cache(video_id)
                logger.info(
                    "reaction_toggled",
                    reaction=kind.value,
                    action=transition.action.value,
                    cleared=transition.cleared.value if transition.cleared else None,
                    attempt=attempt,
                    **ids,
                )
                return ToggleResult(
                    video_id=video_id,
                    reaction=kind,
                    action=transition.action,
                    changed=True,
                    cleared=transition.cleared,
                )

            if observed is transition.target:
                logger.info(
                    "reaction_toggle_already_applied",
                    reaction=kind.value,
                    action=transition.action.value,
                    **ids,
                )
                return ToggleResult(
                    video_id=video_id,
                    reaction=kind,
                    action=transition.action,
                    changed=False,
                )

            logger.debug(
                "reaction_toggle_retry",
                expected=transition.source.value if transition.source else None,
                observed=observed.value if observed else None,
                attempt=attempt,
                **ids,
            )
            current = observed

        logger.warning(
            "reaction_toggle_conflict",
            reaction=kind.value,
            attempts=self.max_attempts,
            **ids,
        )
        raise ConflictRaceError(channel_id, video_id, self.max_attempts)

    async def _write_membership(
        self,
        channel_id: UUID,
        video_id: UUID,
        transition: ToggleTransition,
    ) -> tuple[bool, ReactionKind | None]:
        """Apply the membership change only if the row still holds ``source``.

        Returns:
            (applied, observed): ``observed`` is the reaction found in the row
            when the condition did not hold
        """
        now = datetime.now(UTC)
        ids = {"channel_id": str(channel_id), "video_id": str(video_id)}

        if transition.source is None:
            statement = self._insert_reaction
            params = [channel_id, video_id, transition.kind.value, now]
        elif transition.target is None:
            statement = self._delete_reaction
            params = [channel_id, video_id, transition.source.value]
        else:
            statement = self._swap_reaction
            params = [
                transition.target.value,
                now,
                channel_id,
                video_id,
                transition.source.value,
            ]

        result = await self._run("write_membership", statement, params, **ids)
        if result.was_applied:
            return True, transition.target

        row = result.one()
        return False, parse_reaction(getattr(row, "reaction", None))

    async def _adjust_counters(
        self,
        channel_id: UUID,
        video_id: UUID,
        transition: ToggleTransition,
    ) -> None:
        """Move the counters after a confirmed membership change.

        A failure here leaves membership ahead of the counters: the video is
        queued for reconciliation before the error propagates.
        """
        ids = {"channel_id": str(channel_id), "video_id": str(video_id)}
        try:
            await self._run(
                "adjust_counters",
                self._adjust_engagement,
                [transition.likes_delta, transition.dislikes_delta, video_id],
                likes_delta=transition.likes_delta,
                dislikes_delta=transition.dislikes_delta,
                **ids,
            )
        except StoreError:
            logger.error(
                "engagement_counter_drift",
                likes_delta=transition.likes_delta,
                dislikes_delta=transition.dislikes_delta,
                **ids,
            )
            await self._mark_dirty(video_id)
            raise

    # ==========================================================================
    # Reads
    # ==========================================================================

    async def get_reaction(
        self, channel_id: UUID, video_id: UUID
    ) -> ReactionKind | None:
        """Current reaction of a channel to a video, if any."""
        result = await self._run(
            "read_membership",
            self._get_reaction,
            [channel_id, video_id],
            channel_id=str(channel_id),
            video_id=str(video_id),
        )
        row = result.one()
        return parse_reaction(row.reaction) if row else None

    async def get_channel_reactions(
        self, channel_id: UUID
    ) -> dict[ReactionKind, list[UUID]]:
        """Video ids the channel liked and disliked."""
        rows = await self._run(
            "read_membership",
            self._get_reactions_by_channel,
            [channel_id],
            channel_id=str(channel_id),
        )
        reactions: dict[ReactionKind, list[UUID]] = {kind: [] for kind in ReactionKind}
        for row in rows:
            kind = parse_reaction(row.reaction)
            if kind is not None:
                reactions[kind].append(row.video_id)
        return reactions

    async def get_engagement(self, video_id: UUID) -> EngagementCounts:
        """Like/dislike counters of a video (cached in Redis)."""
        key = engagement_cache_key(video_id)
        if self.redis:
            try:
                cached = await self.redis.hgetall(key)
                if cached:
                    return EngagementCounts(
                        video_id=video_id,
                        likes=int(cached.get("likes", 0)),
                        dislikes=int(cached.get("dislikes", 0)),
                    )
            except Exception as e:
                logger.warning(
                    "engagement_cache_read_failed", video_id=str(video_id), error=str(e)
                )

        result = await self._run(
            "read_counters", self._get_engagement, [video_id], video_id=str(video_id)
        )
        counts = EngagementCounts.from_row(video_id, result.one())

        if self.redis:
            try:
                await self.redis.hset(
                    key,
                    mapping={
                        "likes": str(counts.likes),
                        "dislikes": str(counts.dislikes),
                    },
                )
                await self.redis.expire(key, self.cache_ttl)
            except Exception as e:
                logger.warning(
                    "engagement_cache_write_failed",
                    video_id=str(video_id),
                    error=str(e),
                )

        return counts

    # ==========================================================================
    # Reconciliation
    # ==========================================================================

    async def _tally(self, video_id: UUID) -> tuple[int, int]:
        """Count the like and dislike rows of a video."""
        rows = await self._run(
            "read_membership",
            self._get_reactions_by_video,
            [video_id],
            video_id=str(video_id),
        )
        likes = dislikes = 0
        for row in rows:
            kind = parse_reaction(row.reaction)
            if kind is ReactionKind.LIKE:
                likes += 1
            elif kind is ReactionKind.DISLIKE:
                dislikes += 1
        return likes, dislikes

    async def _stored_counts(self, video_id: UUID) -> tuple[int, int]:
        result = await self._run(
            "read_counters", self._get_engagement, [video_id], video_id=str(video_id)
        )
        row = result.one()
        if row is None:
            return 0, 0
        return row.likes or 0, row.dislikes or 0

    async def reconcile(self, video_id: UUID) -> ReconciliationReport:
        """Recount a video's reactions and repair its counters.

        The reaction rows are authoritative; any difference is applied to
        the counter row as a delta. The tally and the counter are two
        separate reads, so a toggle landing between them skews the delta.
        Run it while the video is quiet: after repairing, both are read
        again and a remaining difference re-queues the video in
        ``engagement:dirty``.
        """
        ids = {"video_id": str(video_id)}
        likes, dislikes = await self._tally(video_id)
        stored_likes, stored_dislikes = await self._stored_counts(video_id)
        report = ReconciliationReport(
            video_id=video_id,
            stored_likes=stored_likes,
            stored_dislikes=stored_dislikes,
            likes=likes,
            dislikes=dislikes,
        )

        if not report.repaired:
            logger.info("engagement_consistent", likes=likes, dislikes=dislikes, **ids)
            return report

        await self._run(
            "adjust_counters",
            self._adjust_engagement,
            [report.likes_drift, report.dislikes_drift, video_id],
            **ids,
        )
        await self._invalidate_cache(video_id)
        logger.warning(
            "engagement_reconciled",
            likes_drift=report.likes_drift,
            dislikes_drift=report.dislikes_drift,
            likes=likes,
            dislikes=dislikes,
            **ids,
        )

        tally = await self._tally(video_id)
        stored = await self._stored_counts(video_id)
        if tally != stored:
            logger.warning(
                "engagement_drift_remaining",
                likes=tally[0],
                dislikes=tally[1],
                stored_likes=stored[0],
                stored_dislikes=stored[1],
                **ids,
            )
            await self._mark_dirty(video_id)

        return report

    async def reconcile_dirty(self, limit: int = 100) -> list[ReconciliationReport]:
        """Reconcile videos queued after a failed counter update."""
        if not self.redis:
            return []

        reports = []
        for raw_id in await self.redis.spop(ENGAGEMENT_DIRTY_KEY, limit) or []:
            try:
                video_id = UUID(str(raw_id))
            except ValueError:
                logger.warning("engagement_dirty_id_invalid", value=str(raw_id))
                continue
            reports.append(await self.reconcile(video_id))
        return reports

    # ==========================================================================
    # Cleanup (video deletion)
    # ==========================================================================

    async def purge_video(self, video_id: UUID) -> int:
        """Remove every reaction row and the counter row of a video.

        Returns:
            Number of reaction rows removed
        """
        ids = {"video_id": str(video_id)}
        rows = await self._run(
            "read_membership", self._get_reactions_by_video, [video_id], **ids
        )
        removed = 0
        for row in rows:
            result = await self._run(
                "write_membership",
                self._delete_reaction,
                [row.channel_id, video_id, row.reaction],
                channel_id=str(row.channel_id),
                **ids,
            )
            if result.was_applied:
                removed += 1

        await self._run("delete_counters", self._delete_engagement, [video_id], **ids)
        await self._invalidate_cache(video_id)
        return removed

    # ==========================================================================
    # Cache helpers
    # ==========================================================================

    async def _invalidate_cache(self, video_id: UUID) -> None:
        # Stale entries expire after cache_ttl
        if not self.redis:
            return
        try:
            await self.redis.delete(engagement_cache_key(video_id))
        except Exception as e:
            logger.warning(
                "engagement_cache_invalidate_failed",
                video_id=str(video_id),
                error=str(e),
            )

    async def _mark_dirty(self, video_id: UUID) -> None:
        if not self.redis:
            return
        try:
            await self.redis.sadd(ENGAGEMENT_DIRTY_KEY, str(video_id))
        except Exception as e:
            logger.error(
                "engagement_dirty_mark_failed", video_id=str(video_id), error=str(e)
            )
