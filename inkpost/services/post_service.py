"""
Inkpost Backend — Post Service
===============================

What:  Post CRUD, filtered listing and the detail view with its thread.
Who:   Called by routes/posts.py.

Detail fetch (GET /posts/{slug}):
    ┌─────────────────────┐    ┌──────────────┐    ┌──────────────────┐
    │ UPDATE views+1      │───▶│ SELECT post  │───▶│ SELECT comments  │──▶ tree
    │ WHERE slug = :slug  │    │ + relations  │    │ WHERE post_id    │
    └─────────────────────┘    └──────────────┘    └──────────────────┘
    The increment runs first, so the response already includes this view
    (a new post reports views == 1 on its first fetch).

Slugs:
    Derived from the title on create and on title change. Collisions are
    not pre-checked; the unique constraint rejects them and the flush error
    becomes a 409.
"""

import logging
import uuid
from typing import Dict, List, Sequence

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkpost.config import settings
from inkpost.exceptions import ConflictError, ForbiddenError, NotFoundError
from inkpost.models import Category, Comment, Post, Tag, User
from inkpost.schemas import (
    CreatePostRequest,
    MessageResponse,
    Pagination,
    PostDetail,
    PostFilters,
    PostListResponse,
    PostSummary,
    UpdatePostRequest,
)
from inkpost.schemas.common import AuthorDetail, CategoryRef, PostBase, TagRef
from inkpost.security import make_slug
from inkpost.services.comment_service import build_comment_tree

logger = logging.getLogger(__name__)

# Columns an update may set to null; the rest ignore an explicit null.
NULLABLE_FIELDS = {"excerpt", "category_id"}


def _summary_options():
    return (
        selectinload(Post.author),
        selectinload(Post.category),
        selectinload(Post.tags),
    )


class PostService:
    """
    Business logic for posts.

    Ownership: only the author may update or delete a post (→ 403
    "Access denied"). Admins get no bypass here.
    """

    async def create(
        self,
        db: AsyncSession,
        author: User,
        data: CreatePostRequest,
    ) -> PostSummary:
        """
        Create a post owned by `author`.

        What:    Inserts the post, links its category and tag set.
        Who:     Called by POST /posts.

        Workflow Steps:
            1. Derive the slug from the title
            2. Check the category and every tag id exist (→ 404)
            3. Flush; a slug already in use surfaces as IntegrityError (→ 409)
            4. Reload with author/category/tags for the response

        Raises:
            NotFoundError: Unknown categoryId or tag id
            ConflictError: Another post already has this slug
        """
        post = Post(
            title=data.title,
            slug=make_slug(data.title),
            content=data.content,
            excerpt=data.excerpt,
            published=data.published,
            featured=data.featured,
            author_id=author.id,
        )
        if data.category_id is not None:
            await self._ensure_category(db, data.category_id)
            post.category_id = data.category_id
        if data.tag_ids:
            post.tags = await self._load_tags(db, data.tag_ids)

        db.add(post)
        await self._flush_or_conflict(db, post.slug)

        logger.info("Post created: %s (%s) by %s", post.slug, post.id, author.id)
        return await self._summary(db, post.id)

    async def find_all(self, db: AsyncSession, filters: PostFilters) -> PostListResponse:
        """
        Filtered, paginated listing ordered newest first.

        Filters combine with AND; `search` is a case-insensitive substring
        match over title OR content. `%` and `_` in the term match literally.

        Query plan:
            SELECT count(*) FROM posts WHERE <filters>
            SELECT posts ... ORDER BY created_at DESC LIMIT :limit OFFSET :offset
            SELECT post_id, count(*) FROM comments WHERE post_id IN (...) GROUP BY post_id
        """
        conditions = []
        if filters.search:
            conditions.append(
                or_(
                    Post.title.icontains(filters.search, autoescape=True),
                    Post.content.icontains(filters.search, autoescape=True),
                )
            )
        if filters.category_id is not None:
            conditions.append(Post.category_id == filters.category_id)
        if filters.tag_id is not None:
            conditions.append(Post.tags.any(Tag.id == filters.tag_id))
        if filters.author_id is not None:
            conditions.append(Post.author_id == filters.author_id)
        if filters.published is not None:
            conditions.append(Post.published == filters.published)
        if filters.featured is not None:
            conditions.append(Post.featured == filters.featured)

        total = await db.scalar(select(func.count(Post.id)).where(*conditions)) or 0
        pagination = Pagination.build(filters.page, filters.limit, total)

        result = await db.execute(
            select(Post)
            .options(*_summary_options())
            .where(*conditions)
            .order_by(Post.created_at.desc())
            .offset(pagination.offset)
            .limit(filters.limit)
        )
        posts = result.scalars().all()
        counts = await self._comment_counts(db, [p.id for p in posts])

        return PostListResponse(
            posts=[self._to_summary(p, counts.get(p.id, 0)) for p in posts],
            pagination=pagination,
        )

    async def find_one(self, db: AsyncSession, slug: str) -> PostDetail:
        """
        Detail by slug; counts one view per call.

        Raises:
            NotFoundError: No post with this slug (→ 404)
        """
        bumped = await db.execute(
            update(Post)
            .where(Post.slug == slug)
            .values(views=Post.views + 1, updated_at=Post.updated_at)
            .execution_options(synchronize_session=False)
        )
        if bumped.rowcount == 0:
            raise NotFoundError(resource="post")

        result = await db.execute(
            select(Post)
            .options(
                selectinload(Post.author),
                selectinload(Post.category),
                selectinload(Post.tags),
            )
            .where(Post.slug == slug)
            .execution_options(populate_existing=True)
        )
        post = result.scalar_one()

        comments = (
            await db.execute(
                select(Comment)
                .options(selectinload(Comment.author))
                .where(Comment.post_id == post.id)
            )
        ).scalars().all()

        return PostDetail(
            **PostBase.model_validate(post).model_dump(),
            author=AuthorDetail.model_validate(post.author),
            category=CategoryRef.model_validate(post.category) if post.category else None,
            tags=[TagRef.model_validate(t) for t in post.tags],
            comments=build_comment_tree(comments, settings.comment_max_depth),
            comment_count=len(comments),
        )

    async def update(
        self,
        db: AsyncSession,
        post_id: uuid.UUID,
        user: User,
        data: UpdatePostRequest,
    ) -> PostSummary:
        """
        Partial update by the author.

        Omitted fields are untouched. An explicit null clears excerpt and
        categoryId and is ignored elsewhere. tagIds replaces the whole tag
        set; a new title regenerates the slug.

        Raises:
            NotFoundError:  Unknown post, category or tag (→ 404)
            ForbiddenError: Caller is not the author (→ 403)
            ConflictError:  The new slug is taken (→ 409)
        """
        result = await db.execute(
            select(Post).options(selectinload(Post.tags)).where(Post.id == post_id)
        )
        post = result.scalar_one_or_none()
        if post is None:
            raise NotFoundError(resource="post")
        if post.author_id != user.id:
            raise ForbiddenError()

        changes = data.model_dump(exclude_unset=True)
        tag_ids = changes.pop("tag_ids", None)
        changes = {
            field: value for field, value in changes.items()
            if value is not None or field in NULLABLE_FIELDS
        }

        if changes.get("category_id") is not None:
            await self._ensure_category(db, changes["category_id"])
        if "title" in changes:
            post.slug = make_slug(changes["title"])
        for field, value in changes.items():
            setattr(post, field, value)
        if tag_ids is not None:
            post.tags = await self._load_tags(db, tag_ids)

        await self._flush_or_conflict(db, post.slug)
        logger.info("Post %s updated: %s", post_id, ", ".join(sorted(changes)) or "tags")
        return await self._summary(db, post_id)

    async def remove(
        self,
        db: AsyncSession,
        post_id: uuid.UUID,
        user: User,
    ) -> MessageResponse:
        post = await db.get(Post, post_id)
        if post is None:
            raise NotFoundError(resource="post")
        if post.author_id != user.id:
            raise ForbiddenError()

        # comments and post_tags rows go with it (ON DELETE CASCADE)
        await db.execute(delete(Post).where(Post.id == post_id))
        logger.info("Post deleted: %s by %s", post_id, user.id)
        return MessageResponse(message="Post deleted successfully")

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _summary(self, db: AsyncSession, post_id: uuid.UUID) -> PostSummary:
        result = await db.execute(
            select(Post)
            .options(*_summary_options())
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        post = result.scalar_one()
        counts = await self._comment_counts(db, [post_id])
        return self._to_summary(post, counts.get(post_id, 0))

    @staticmethod
    def _to_summary(post: Post, comment_count: int) -> PostSummary:
        return PostSummary.model_validate(post).model_copy(
            update={"comment_count": comment_count}
        )

    @staticmethod
    async def _comment_counts(
        db: AsyncSession,
        post_ids: Sequence[uuid.UUID],
    ) -> Dict[uuid.UUID, int]:
        if not post_ids:
            return {}
        result = await db.execute(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(post_ids))
            .group_by(Comment.post_id)
        )
        return {post_id: count for post_id, count in result.all()}

    @staticmethod
    async def _ensure_category(db: AsyncSession, category_id: uuid.UUID) -> None:
        if await db.get(Category, category_id) is None:
            raise NotFoundError(resource="category", resource_id=str(category_id))

    @staticmethod
    async def _load_tags(db: AsyncSession, tag_ids: List[uuid.UUID]) -> List[Tag]:
        wanted = set(tag_ids)
        if not wanted:
            return []
        result = await db.execute(select(Tag).where(Tag.id.in_(wanted)))
        tags = list(result.scalars().all())
        missing = wanted - {t.id for t in tags}
        if missing:
            raise NotFoundError(resource="tag", resource_id=str(next(iter(missing))))
        return tags

    @staticmethod
    async def _flush_or_conflict(db: AsyncSession, slug: str) -> None:
        try:
            await db.flush()
        except IntegrityError:
            logger.warning("Post slug collision: %s", slug)
            raise ConflictError(
                "A post with this title already exists",
                context={"slug": slug},
            )


post_service = PostService()
