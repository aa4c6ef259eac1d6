"""In-memory stand-in for the Cassandra session used by EngagementService.

Statements are routed on their CQL text. Every ``aexecute`` yields to the
event loop first, so tasks started with ``asyncio.gather`` interleave between
store calls the way concurrent requests do, and conditional writes
(``IF NOT EXISTS`` / ``IF reaction = ?``) are evaluated atomically.

``result_of`` builds mock result sets for services tested with a mocked session.
"""

import asyncio
import re
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock
from uuid import UUID


@dataclass
class FakeStatement:
    name: str
    cql: str


class FakeResult:
    def __init__(self, rows: list[Any] | None = None, was_applied: bool = True):
        self._rows = rows or []
        self.was_applied = was_applied

    def one(self) -> Any:
        return self._rows[0] if self._rows else None

    def __iter__(self):
        return iter(self._rows)


# (name, regex on normalised CQL); first match wins
ROUTES = [
    ("video_exists", r"^SELECT video_id FROM \w+\.videos WHERE video_id"),
    ("channel_exists", r"^SELECT channel_id FROM \w+\.channels WHERE"),
    ("get_reaction", r"^SELECT reaction FROM \w+\.channel_reactions"),
    ("insert_reaction", r"^INSERT INTO \w+\.channel_reactions .* IF NOT EXISTS$"),
    ("swap_reaction", r"^UPDATE \w+\.channel_reactions .* IF reaction = \?$"),
    ("delete_reaction", r"^DELETE FROM \w+\.channel_reactions .* IF reaction = \?$"),
    ("reactions_by_channel", r"^SELECT video_id, reaction FROM \w+\.channel_reactions"),
    ("reactions_by_video", r"^SELECT channel_id, reaction FROM \w+\.channel_reactions"),
    ("adjust_engagement", r"^UPDATE \w+\.video_engagement SET likes = likes \+ \?"),
    ("get_engagement", r"^SELECT likes, dislikes FROM \w+\.video_engagement"),
    ("delete_engagement", r"^DELETE FROM \w+\.video_engagement"),
]


@dataclass
class FakeCassandra:
    """Tables touched by the engagement path, plus a call log."""

    videos: set[UUID] = field(default_factory=set)
    channels: set[UUID] = field(default_factory=set)
    reactions: dict[tuple[UUID, UUID], str] = field(default_factory=dict)
    counters: dict[UUID, dict[str, int]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    # statement name -> exception raised instead of executing
    failures: dict[str, BaseException] = field(default_factory=dict)

    def prepare(self, cql: str) -> FakeStatement:
        text = " ".join(cql.split())
        for name, pattern in ROUTES:
            if re.search(pattern, text):
                return FakeStatement(name, text)
        msg = f"Unrouted statement: {text}"
        raise AssertionError(msg)

    async def aexecute(self, statement: FakeStatement, params: list[Any] | None = None):
        await asyncio.sleep(0)
        self.calls.append(statement.name)
        if statement.name in self.failures:
            raise self.failures[statement.name]
        handler = getattr(self, f"_{statement.name}")
        return handler(*(params or []))

    # -- helpers for tests ---------------------------------------------------

    def count(self, video_id: UUID) -> dict[str, int]:
        return self.counters.get(video_id, {"likes": 0, "dislikes": 0})

    def liked(self, channel_id: UUID) -> set[UUID]:
        return self._members(channel_id, "like")

    def disliked(self, channel_id: UUID) -> set[UUID]:
        return self._members(channel_id, "dislike")

    def _members(self, channel_id: UUID, reaction: str) -> set[UUID]:
        return {
            video_id
            for (owner, video_id), value in self.reactions.items()
            if owner == channel_id and value == reaction
        }

    # -- statement handlers --------------------------------------------------

    def _video_exists(self, video_id):
        rows = [SimpleNamespace(video_id=video_id)] if video_id in self.videos else []
        return FakeResult(rows)

    def _channel_exists(self, channel_id):
        found = channel_id in self.channels
        return FakeResult([SimpleNamespace(channel_id=channel_id)] if found else [])

    def _get_reaction(self, channel_id, video_id):
        value = self.reactions.get((channel_id, video_id))
        return FakeResult([SimpleNamespace(reaction=value)] if value else [])

    def _insert_reaction(self, channel_id, video_id, reaction, _reacted_at):
        key = (channel_id, video_id)
        if key in self.reactions:
            row = SimpleNamespace(
                channel_id=channel_id, video_id=video_id, reaction=self.reactions[key]
            )
            return FakeResult([row], was_applied=False)
        self.reactions[key] = reaction
        return FakeResult(was_applied=True)

    def _swap_reaction(self, reaction, _reacted_at, channel_id, video_id, expected):
        key = (channel_id, video_id)
        current = self.reactions.get(key)
        if current != expected:
            return FakeResult([SimpleNamespace(reaction=current)], was_applied=False)
        self.reactions[key] = reaction
        return FakeResult(was_applied=True)

    def _delete_reaction(self, channel_id, video_id, expected):
        key = (channel_id, video_id)
        current = self.reactions.get(key)
        if current is None:
            # Cassandra returns only [applied] when the row is missing
            return FakeResult([SimpleNamespace()], was_applied=False)
        if current != expected:
            return FakeResult([SimpleNamespace(reaction=current)], was_applied=False)
        del self.reactions[key]
        return FakeResult(was_applied=True)

    def _reactions_by_channel(self, channel_id):
        return FakeResult([
            SimpleNamespace(video_id=video_id, reaction=value)
            for (owner, video_id), value in self.reactions.items()
            if owner == channel_id
        ])

    def _reactions_by_video(self, video_id):
        return FakeResult([
            SimpleNamespace(channel_id=owner, reaction=value)
            for (owner, target), value in self.reactions.items()
            if target == video_id
        ])

    def _adjust_engagement(self, likes_delta, dislikes_delta, video_id):
        row = self.counters.setdefault(video_id, {"likes": 0, "dislikes": 0})
        row["likes"] += likes_delta
        row["dislikes"] += dislikes_delta
        return FakeResult()

    def _get_engagement(self, video_id):
        row = self.counters.get(video_id)
        return FakeResult([SimpleNamespace(**row)] if row else [])

    def _delete_engagement(self, video_id):
        self.counters.pop(video_id, None)
        return FakeResult()


def result_of(*rows: Any) -> MagicMock:
    """Mock driver result set holding ``rows``."""
    result = MagicMock()
    result.one.return_value = rows[0] if rows else None
    result.__iter__.side_effect = lambda: iter(rows)
    return result
