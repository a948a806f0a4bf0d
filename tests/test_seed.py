"""
Inkpost Backend — Seed Script Tests
====================================

What we test:
    ✅ Admin account created with role ADMIN and a working password
    ✅ --demo content: categories, tags, posts with a reply thread
    ✅ Re-running promotes instead of duplicating, skips existing demo rows
"""

import pytest
from sqlalchemy import func, select

from inkpost.models import Comment, Post, Role, User
from inkpost.security import verify_password
from inkpost.seed import DEMO_POSTS, _parse_args, seed


class TestSeed:

    @pytest.mark.asyncio
    async def test_creates_admin(self, session_factory):
        counts = await seed(session_factory, "root@example.com", "rootpass", "root")

        assert counts == {"admins": 1}
        async with session_factory() as db:
            admin = (await db.execute(select(User).where(User.email == "root@example.com"))).scalar_one()
        assert admin.role == Role.ADMIN
        assert verify_password("rootpass", admin.password)

    @pytest.mark.asyncio
    async def test_demo_content_is_idempotent(self, session_factory):
        first = await seed(session_factory, "root@example.com", "rootpass", demo=True)
        second = await seed(session_factory, "root@example.com", "rootpass", demo=True)

        assert first["posts"] == len(DEMO_POSTS)
        assert first["comments"] == 2 * len(DEMO_POSTS)
        assert second == {"admins": 0, "categories": 0, "tags": 0, "posts": 0, "comments": 0}
        async with session_factory() as db:
            assert await db.scalar(select(func.count(Post.id))) == len(DEMO_POSTS)
            replies = await db.scalar(
                select(func.count(Comment.id)).where(Comment.parent_id.is_not(None))
            )
        assert replies == len(DEMO_POSTS)

    @pytest.mark.asyncio
    async def test_existing_user_is_promoted(self, session_factory, register_user):
        _, user = await register_user(email="promote@example.com")

        counts = await seed(session_factory, "promote@example.com", "ignored")

        assert counts == {"admins": 0}
        async with session_factory() as db:
            promoted = (await db.execute(select(User).where(User.email == "promote@example.com"))).scalar_one()
        assert promoted.role == Role.ADMIN

    def test_parse_args_defaults(self):
        args = _parse_args([])

        assert args.admin_email == "admin@example.com"
        assert args.admin_username == "admin"
        assert args.demo is False
        assert _parse_args(["--demo"]).demo is True
