"""
Inkpost Backend — Database Seeding
===================================

What:  Creates the first admin account and, optionally, demo content.
Who:   Operators after `alembic upgrade head`:

    python -m inkpost.seed --admin-email admin@example.com --admin-password s3cret
    python -m inkpost.seed --demo

Re-running is safe: an existing admin email is promoted rather than
duplicated, and demo rows whose slug already exists are skipped.
"""

import argparse
import asyncio
import logging
import sys
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inkpost.config import settings
from inkpost.models import Category, Comment, Post, Role, Tag, User
from inkpost.security import hash_password, make_slug

logger = logging.getLogger("inkpost.seed")

DEMO_CATEGORIES = {
    "Technology": "Software, hardware and the web",
    "Travel": "Places worth the trip",
    "Food": "Recipes and restaurants",
    "Science": "Research explained",
}

DEMO_TAGS = ["python", "web development", "databases", "tutorial", "opinion", "beginner"]

DEMO_POSTS = [
    {
        "title": "Getting Started with Async Python",
        "category": "Technology",
        "tags": ["python", "tutorial", "beginner"],
        "featured": True,
        "content": (
            "Coroutines, event loops and why awaiting a database call frees the "
            "server to handle other requests in the meantime."
        ),
    },
    {
        "title": "Designing Relational Schemas for Blogs",
        "category": "Technology",
        "tags": ["databases", "web development"],
        "featured": False,
        "content": (
            "Users, posts, categories, tags and threaded comments: which "
            "relationships cascade and which should set null."
        ),
    },
    {
        "title": "A Weekend in Lisbon",
        "category": "Travel",
        "tags": ["opinion"],
        "featured": False,
        "content": "Trams, tiles and far too many pastries.",
    },
]


async def _ensure_admin(db: AsyncSession, email: str, password: str, username: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    admin = result.scalar_one_or_none()
    if admin is not None:
        if admin.role != Role.ADMIN:
            admin.role = Role.ADMIN
            logger.info("Promoted existing user %s to ADMIN", email)
        else:
            logger.info("Admin %s already exists", email)
        return admin

    admin = User(
        email=email,
        username=username,
        password=hash_password(password),
        name="Admin User",
        bio="System administrator and blogger",
        role=Role.ADMIN,
    )
    db.add(admin)
    await db.flush()
    logger.info("Created admin %s (%s)", email, admin.id)
    return admin


async def _seed_demo(db: AsyncSession, author: User) -> Dict[str, int]:
    created = {"categories": 0, "tags": 0, "posts": 0, "comments": 0}

    categories: Dict[str, Category] = {}
    for name, description in DEMO_CATEGORIES.items():
        slug = make_slug(name)
        category = (await db.execute(select(Category).where(Category.slug == slug))).scalar_one_or_none()
        if category is None:
            category = Category(name=name, slug=slug, description=description)
            db.add(category)
            created["categories"] += 1
        categories[name] = category

    tags: Dict[str, Tag] = {}
    for name in DEMO_TAGS:
        slug = make_slug(name)
        tag = (await db.execute(select(Tag).where(Tag.slug == slug))).scalar_one_or_none()
        if tag is None:
            tag = Tag(name=name, slug=slug)
            db.add(tag)
            created["tags"] += 1
        tags[name] = tag
    await db.flush()

    for entry in DEMO_POSTS:
        slug = make_slug(entry["title"])
        if (await db.execute(select(Post.id).where(Post.slug == slug))).first() is not None:
            continue
        post = Post(
            title=entry["title"],
            slug=slug,
            content=entry["content"],
            excerpt=entry["content"][:120],
            published=True,
            featured=entry["featured"],
            author_id=author.id,
            category_id=categories[entry["category"]].id,
            tags=[tags[name] for name in entry["tags"]],
        )
        db.add(post)
        await db.flush()
        created["posts"] += 1

        top = Comment(content="This is a great post!", author_id=author.id, post_id=post.id)
        db.add(top)
        await db.flush()
        db.add(Comment(
            content="Following up on my own comment.",
            author_id=author.id,
            post_id=post.id,
            parent_id=top.id,
        ))
        created["comments"] += 2

    await db.flush()
    return created


async def seed(
    session_factory: async_sessionmaker,
    admin_email: str,
    admin_password: str,
    admin_username: str = "admin",
    demo: bool = False,
) -> Dict[str, int]:
    """
    Run the seed in one transaction.

    Returns:
        Counts of rows created, e.g. {"admins": 1, "posts": 3, ...}
    """
    async with session_factory() as db:
        try:
            existed = (
                await db.execute(select(User.id).where(User.email == admin_email))
            ).first() is not None
            admin = await _ensure_admin(db, admin_email, admin_password, admin_username)
            counts = {"admins": 0 if existed else 1}
            if demo:
                counts.update(await _seed_demo(db, admin))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
    return counts


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m inkpost.seed",
        description="Create the admin account and optional demo content.",
    )
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--demo", action="store_true", help="Also create sample categories, tags and posts")
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> Dict[str, int]:
    from inkpost.database import async_session_factory, dispose_engine

    try:
        return await seed(
            async_session_factory,
            admin_email=args.admin_email,
            admin_password=args.admin_password,
            admin_username=args.admin_username,
            demo=args.demo,
        )
    finally:
        await dispose_engine()


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    args = _parse_args(argv)
    counts = asyncio.run(_main(args))
    logger.info("Seed completed: %s", ", ".join(f"{k}={v}" for k, v in counts.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
