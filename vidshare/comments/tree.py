"""Comment hierarchy builder.

Turns the flat comment list of one video into top-level comments, each
carrying the ids of its direct replies. Nesting is fixed at two levels.

A reply whose parent is not among the top-level comments (deleted parent,
bad reference, or a reply pointing at another reply) is an orphan: it is
left out of every ``children`` list and reported in ``CommentTree.orphans``.
Building never raises on bad data, one broken record must not fail a read.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from .models import Comment


class OrphanReason(str, Enum):
    """Why a reply could not be attached to a top-level comment."""

    PARENT_MISSING = "parent_missing"
    PARENT_IS_REPLY = "parent_is_reply"


@dataclass
class CommentNode:
    """Top-level comment plus the ids of its direct replies."""

    comment: Comment
    children: list[UUID] = field(default_factory=list)

    @property
    def comment_id(self) -> UUID:
        return self.comment.comment_id


@dataclass(frozen=True)
class OrphanedComment:
    """Reply left out of the tree."""

    comment_id: UUID
    parent_id: UUID
    reason: OrphanReason


@dataclass
class CommentTree:
    """Result of building the hierarchy of one video's comments."""

    roots: list[CommentNode] = field(default_factory=list)
    replies: dict[UUID, Comment] = field(default_factory=dict)
    orphans: list[OrphanedComment] = field(default_factory=list)

    @property
    def has_orphans(self) -> bool:
        return bool(self.orphans)

    def __len__(self) -> int:
        return len(self.roots)


def build_comment_tree(comments: Iterable[Comment]) -> CommentTree:
    """Build the two-level comment tree.

    Args:
        comments: Comments of one video in store order

    Returns:
        Roots in first-seen order with ordered ``children`` ids, the attached replies
        by id, and the orphaned replies
    """
    roots: list[CommentNode] = []
    roots_by_id: dict[UUID, CommentNode] = {}
    replies: list[Comment] = []
    reply_ids: set[UUID] = set()

    for comment in comments:
        if comment.parent_id is None:
            if comment.comment_id not in roots_by_id:
                node = CommentNode(comment)
                roots.append(node)
                roots_by_id[comment.comment_id] = node
        elif comment.comment_id not in reply_ids:
            replies.append(comment)
            reply_ids.add(comment.comment_id)

    attached: dict[UUID, Comment] = {}
    orphans: list[OrphanedComment] = []

    for reply in replies:
        parent = roots_by_id.get(reply.parent_id)
        if parent is None:
            reason = (
                OrphanReason.PARENT_IS_REPLY
                if reply.parent_id in reply_ids
                else OrphanReason.PARENT_MISSING
            )
            orphans.append(OrphanedComment(reply.comment_id, reply.parent_id, reason))
            continue
        parent.children.append(reply.comment_id)
        attached[reply.comment_id] = reply

    return CommentTree(roots=roots, replies=attached, orphans=orphans)
