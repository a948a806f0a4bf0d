"""
Inkpost Backend — Comment Tree Builder Tests
=============================================

build_comment_tree() is pure: it takes comment-shaped objects and returns
nested CommentNode models, so these tests need no database.
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from inkpost.services.comment_service import build_comment_tree

BASE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
POST_ID = uuid.uuid4()
AUTHOR = SimpleNamespace(id=uuid.uuid4(), name="Ann", username="ann", avatar=None)


def make_comment(content, minutes, parent=None):
    created = BASE_TIME + timedelta(minutes=minutes)
    return SimpleNamespace(
        id=uuid.uuid4(),
        content=content,
        author_id=AUTHOR.id,
        post_id=POST_ID,
        parent_id=parent.id if parent else None,
        created_at=created,
        updated_at=created,
        author=AUTHOR,
    )


class TestBuildCommentTree:

    def test_empty(self):
        assert build_comment_tree([], max_depth=3) == []

    def test_roots_newest_first_replies_oldest_first(self):
        old_root = make_comment("old root", 0)
        new_root = make_comment("new root", 10)
        late_reply = make_comment("late reply", 5, parent=old_root)
        early_reply = make_comment("early reply", 1, parent=old_root)

        tree = build_comment_tree([late_reply, old_root, early_reply, new_root], max_depth=3)

        assert [n.content for n in tree] == ["new root", "old root"]
        assert [n.content for n in tree[1].replies] == ["early reply", "late reply"]
        assert tree[0].replies == []

    def test_nodes_below_max_depth_are_cut(self):
        level0 = make_comment("0", 0)
        level1 = make_comment("1", 1, parent=level0)
        level2 = make_comment("2", 2, parent=level1)

        tree = build_comment_tree([level0, level1, level2], max_depth=1)

        assert tree[0].replies[0].content == "1"
        assert tree[0].replies[0].replies == []

    def test_orphans_are_left_out(self):
        ghost_parent = make_comment("gone", 0)
        orphan = make_comment("orphan", 1, parent=ghost_parent)

        assert build_comment_tree([orphan], max_depth=3) == []

    def test_nodes_serialize_camel_case(self):
        root = make_comment("root", 0)

        node = build_comment_tree([root], max_depth=3)[0]
        data = node.model_dump(by_alias=True)

        assert data["postId"] == POST_ID
        assert data["author"]["username"] == "ann"
        assert data["replies"] == []
