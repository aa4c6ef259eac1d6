"""Data model for video reactions (likes and dislikes).

Two independently stored aggregates are kept in step:

- ``channel_reactions``: one row per (channel, video) holding the reaction
  kind. This is the source of truth. A pair can hold ``like`` or ``dislike``,
  never both.
- ``video_engagement``: counter row per video with ``likes``/``dislikes``.
  Derived state, only moved after a confirmed membership change and
  repairable by recounting ``channel_reactions``.

Every write to ``channel_reactions`` is a lightweight transaction
(compare-and-set), so the counter never moves on a stale read.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID


class ReactionKind(str, Enum):
    """Reaction a channel can apply to a video."""

    LIKE = "like"
    DISLIKE = "dislike"

    @property
    def opposite(self) -> "ReactionKind":
        return ReactionKind.DISLIKE if self is ReactionKind.LIKE else ReactionKind.LIKE


class ToggleAction(str, Enum):
    """Direction a toggle moved the requested reaction."""

    INCREMENT = "increment"
    DECREMENT = "decrement"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

# Reaction membership, partitioned by channel so a channel's liked/disliked
# sets are a single-partition read
CHANNEL_REACTIONS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.channel_reactions (
    channel_id UUID,
    video_id UUID,
    reaction TEXT,
    reacted_at TIMESTAMP,
    PRIMARY KEY ((channel_id), video_id)
)
"""

# Reconciliation and video deletion look reactions up by video
CHANNEL_REACTIONS_VIDEO_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS channel_reactions_video_idx
ON {keyspace}.channel_reactions (video_id)
"""

VIDEO_ENGAGEMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.video_engagement (
    video_id UUID PRIMARY KEY,
    likes COUNTER,
    dislikes COUNTER
)
"""

REACTIONS_TABLES_CQL = [
    CHANNEL_REACTIONS_TABLE_CQL,
    CHANNEL_REACTIONS_VIDEO_INDEX_CQL,
    VIDEO_ENGAGEMENT_TABLE_CQL,
]


# ==============================================================================
# Toggle planning
# ==============================================================================


@dataclass(frozen=True)
class ToggleTransition:
    """Planned change of one (channel, video) reaction.

    ``source`` is the reaction the conditional write expects to find and
    ``target`` the reaction it leaves behind (``None`` = no reaction).
    """

    kind: ReactionKind
    source: ReactionKind | None
    target: ReactionKind | None
    action: ToggleAction
    likes_delta: int
    dislikes_delta: int

    @property
    def cleared(self) -> ReactionKind | None:
        """Opposite reaction removed by this transition, if any."""
        if self.source is not None and self.source is not self.kind:
            return self.source
        return None


def _delta(kind: ReactionKind, amount: int) -> tuple[int, int]:
    return (amount, 0) if kind is ReactionKind.LIKE else (0, amount)


def plan_toggle(current: ReactionKind | None, kind: ReactionKind) -> ToggleTransition:
    """Plan the toggle of ``kind`` given the pair's current reaction.

    - same reaction present: remove it
    - nothing present: add it
    - opposite reaction present: swap it for the requested one
    """
    if current is kind:
        likes, dislikes = _delta(kind, -1)
        return ToggleTransition(
            kind, current, None, ToggleAction.DECREMENT, likes, dislikes
        )

    likes, dislikes = _delta(kind, 1)
    if current is not None:
        cleared_likes, cleared_dislikes = _delta(current, -1)
        likes += cleared_likes
        dislikes += cleared_dislikes
    return ToggleTransition(kind, current, kind, ToggleAction.INCREMENT, likes, dislikes)


# ==============================================================================
# Entity Classes
# ==============================================================================


def parse_reaction(value: str | None) -> ReactionKind | None:
    """Reaction stored in a row, ``None`` when absent or unknown."""
    if not value:
        return None
    try:
        return ReactionKind(value)
    except ValueError:
        return None


@dataclass
class ToggleResult:
    """Outcome of a toggle as seen by the caller."""

    video_id: UUID
    reaction: ReactionKind
    action: ToggleAction
    changed: bool
    cleared: ReactionKind | None = None


@dataclass
class EngagementCounts:
    """Like/dislike counters of a video, never negative."""

    video_id: UUID
    likes: int = 0
    dislikes: int = 0

    @classmethod
    def from_row(cls, video_id: UUID, row: Any) -> "EngagementCounts":
        """Create counts from a ``video_engagement`` row (or ``None``)."""
        if row is None:
            return cls(video_id=video_id)
        return cls(
            video_id=video_id,
            likes=max(0, row.likes or 0),
            dislikes=max(0, row.dislikes or 0),
        )


@dataclass
class ReconciliationReport:
    """Counter values before and after recounting a video's reactions."""

    video_id: UUID
    stored_likes: int
    stored_dislikes: int
    likes: int
    dislikes: int

    @property
    def likes_drift(self) -> int:
        return self.likes - self.stored_likes

    @property
    def dislikes_drift(self) -> int:
        return self.dislikes - self.stored_dislikes

    @property
    def repaired(self) -> bool:
        return bool(self.likes_drift or self.dislikes_drift)
