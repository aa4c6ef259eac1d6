"""Video comments module.

Provides two-level comments (top-level comments and replies) with:
- Creation rules that keep replies one level deep
- A pure tree builder that reports orphaned replies as data

Note: Router is not exported here to avoid circular imports.
Import directly from vidshare.comments.router when needed.
"""

from .models import COMMENTS_TABLES_CQL, Comment, CommentLookup
from .service import CommentService
from .tree import (
    CommentNode,
    CommentTree,
    OrphanedComment,
    OrphanReason,
    build_comment_tree,
)


__all__ = [
    "COMMENTS_TABLES_CQL",
    "Comment",
    "CommentLookup",
    "CommentNode",
    "CommentService",
    "CommentTree",
    "OrphanReason",
    "OrphanedComment",
    "build_comment_tree",
]
