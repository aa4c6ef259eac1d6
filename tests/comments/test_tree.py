"""Tests for the comment hierarchy builder."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from vidshare.comments.models import Comment
from vidshare.comments.tree import OrphanReason, build_comment_tree


VIDEO_ID = uuid4()
START = datetime(2024, 1, 1, tzinfo=UTC)


def make_comment(
    parent_id: UUID | None = None,
    comment_id: UUID | None = None,
    minute: int = 0,
) -> Comment:
    return Comment(
        comment_id=comment_id or uuid4(),
        video_id=VIDEO_ID,
        channel_id=uuid4(),
        author_name="author",
        author_avatar=None,
        content="text",
        parent_id=parent_id,
        likes=0,
        dislikes=0,
        created_at=START + timedelta(minutes=minute),
    )


class TestBuildCommentTree:
    def test_empty_input(self):
        tree = build_comment_tree([])

        assert tree.roots == []
        assert tree.orphans == []
        assert len(tree) == 0

    def test_replies_attach_in_order(self):
        """A(root), B(reply to A), C(reply to missing X)."""
        a = make_comment(minute=0)
        b = make_comment(parent_id=a.comment_id, minute=1)
        missing = uuid4()
        c = make_comment(parent_id=missing, minute=2)

        tree = build_comment_tree([a, b, c])

        assert [node.comment_id for node in tree.roots] == [a.comment_id]
        assert tree.roots[0].children == [b.comment_id]
        assert tree.replies == {b.comment_id: b}
        assert len(tree.orphans) == 1
        orphan = tree.orphans[0]
        assert orphan.comment_id == c.comment_id
        assert orphan.parent_id == missing
        assert orphan.reason is OrphanReason.PARENT_MISSING

    def test_reply_to_reply_is_orphan(self):
        root = make_comment()
        reply = make_comment(parent_id=root.comment_id)
        nested = make_comment(parent_id=reply.comment_id)

        tree = build_comment_tree([root, reply, nested])

        assert tree.roots[0].children == [reply.comment_id]
        assert [(o.comment_id, o.reason) for o in tree.orphans] == [
            (nested.comment_id, OrphanReason.PARENT_IS_REPLY)
        ]

    def test_reply_before_parent_still_attaches(self):
        root = make_comment(minute=5)
        early = make_comment(parent_id=root.comment_id, minute=1)

        tree = build_comment_tree([early, root])

        assert tree.roots[0].children == [early.comment_id]
        assert tree.has_orphans is False

    def test_roots_keep_first_seen_order(self):
        roots = [make_comment(minute=i) for i in range(4)]
        replies = [make_comment(parent_id=roots[2].comment_id, minute=10 + i) for i in range(3)]

        tree = build_comment_tree([*roots, *replies])

        assert [n.comment_id for n in tree.roots] == [r.comment_id for r in roots]
        assert tree.roots[2].children == [r.comment_id for r in replies]
        assert all(not n.children for i, n in enumerate(tree.roots) if i != 2)

    def test_duplicates_are_kept_once(self):
        root = make_comment()
        reply = make_comment(parent_id=root.comment_id)

        tree = build_comment_tree([root, reply, root, reply])

        assert len(tree) == 1
        assert tree.roots[0].children == [reply.comment_id]

    def test_every_reply_in_one_place(self):
        """Each reply is either a child of exactly one root or an orphan."""
        roots = [make_comment() for _ in range(3)]
        replies = [make_comment(parent_id=roots[i % 3].comment_id) for i in range(6)]
        strays = [make_comment(parent_id=uuid4()) for _ in range(2)]

        tree = build_comment_tree([*roots, *replies, *strays])

        placed = [child for node in tree.roots for child in node.children]
        orphaned = [o.comment_id for o in tree.orphans]
        assert sorted(placed + orphaned) == sorted(
            c.comment_id for c in [*replies, *strays]
        )
        assert len(set(placed)) == len(placed)

    def test_is_repeatable(self):
        root = make_comment()
        comments = [root, make_comment(parent_id=root.comment_id), make_comment(uuid4())]

        first = build_comment_tree(comments)
        second = build_comment_tree(comments)

        assert [n.children for n in first.roots] == [n.children for n in second.roots]
        assert first.orphans == second.orphans
