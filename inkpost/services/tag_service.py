"""
Inkpost Backend — Tag Service
==============================

What:  Tag CRUD, sorted/searchable listing and the popular-tags view.
       Any authenticated user may create a tag; update and delete are
       admin-only (declared on the routes).

Post counts come from the post_tags association table and include drafts.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkpost.exceptions import ConflictError, NotFoundError
from inkpost.models import Post, Tag, post_tags
from inkpost.schemas import (
    CreateTagRequest,
    MessageResponse,
    TagDetail,
    TagListResponse,
    TagQuery,
    TagRead,
    UpdateTagRequest,
)
from inkpost.schemas.common import PostCard
from inkpost.security import make_slug

logger = logging.getLogger(__name__)

DETAIL_POSTS_LIMIT = 20


def _post_count():
    return (
        select(func.count())
        .select_from(post_tags)
        .where(post_tags.c.tag_id == Tag.id)
        .correlate(Tag)
        .scalar_subquery()
        .label("post_count")
    )


def _with_post_count() -> Select:
    return select(Tag, _post_count())


class TagService:

    async def find_all(self, db: AsyncSession, query: TagQuery) -> TagListResponse:
        """
        List every tag with its post count.

        What:    Backs GET /tags (search, sortBy, sortOrder).
        How:     One SELECT with a correlated count subquery; ties on the sort
                 key fall back to name ascending so the order is stable.

        `search` is a case-insensitive substring match on the name; LIKE
        wildcards in it are escaped.
        """
        post_count = _post_count()
        statement = select(Tag, post_count)
        if query.search:
            statement = statement.where(Tag.name.icontains(query.search, autoescape=True))

        sort_column = {
            "name": Tag.name,
            "createdAt": Tag.created_at,
            "postCount": post_count,
        }[query.sort_by]
        order = sort_column.desc() if query.sort_order == "desc" else sort_column.asc()

        result = await db.execute(statement.order_by(order, Tag.name.asc()))
        return TagListResponse(data=[self._to_read(tag, count) for tag, count in result.all()])

    async def find_popular(self, db: AsyncSession, limit: int = 10) -> TagListResponse:
        """Most used tags first; tags on no post still appear once the used ones run out."""
        post_count = _post_count()
        result = await db.execute(
            select(Tag, post_count)
            .order_by(post_count.desc(), Tag.name.asc())
            .limit(limit)
        )
        return TagListResponse(data=[self._to_read(tag, count) for tag, count in result.all()])

    async def find_one(self, db: AsyncSession, tag_id: uuid.UUID) -> TagDetail:
        result = await db.execute(_with_post_count().where(Tag.id == tag_id))
        row = result.first()
        if row is None:
            raise NotFoundError(resource="tag", resource_id=str(tag_id))
        tag, count = row

        posts = await db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.tags.any(Tag.id == tag_id), Post.published.is_(True))
            .order_by(Post.created_at.desc())
            .limit(DETAIL_POSTS_LIMIT)
        )
        return TagDetail(
            **self._to_read(tag, count).model_dump(),
            posts=[PostCard.model_validate(p) for p in posts.scalars().all()],
        )

    async def create(self, db: AsyncSession, data: CreateTagRequest) -> TagRead:
        """
        Create a tag from its display name.

        Raises:
            ConflictError: A tag with the same slug exists (→ 409)
        """
        slug = make_slug(data.name)
        await self._ensure_slug_free(db, slug)

        tag = Tag(name=data.name, slug=slug)
        db.add(tag)
        await db.flush()

        logger.info("Tag created: %s (%s)", slug, tag.id)
        return self._to_read(tag, 0)

    async def update(
        self,
        db: AsyncSession,
        tag_id: uuid.UUID,
        data: UpdateTagRequest,
    ) -> TagRead:
        tag = await db.get(Tag, tag_id)
        if tag is None:
            raise NotFoundError(resource="tag", resource_id=str(tag_id))

        if data.name is not None:
            slug = make_slug(data.name)
            await self._ensure_slug_free(db, slug, exclude_id=tag_id)
            tag.name = data.name
            tag.slug = slug
            await db.flush()
            await db.refresh(tag)

        count = await db.scalar(
            select(func.count()).select_from(post_tags).where(post_tags.c.tag_id == tag_id)
        )
        return self._to_read(tag, count)

    async def remove(self, db: AsyncSession, tag_id: uuid.UUID) -> MessageResponse:
        result = await db.execute(delete(Tag).where(Tag.id == tag_id))
        if result.rowcount == 0:
            raise NotFoundError(resource="tag", resource_id=str(tag_id))
        logger.info("Tag deleted: %s", tag_id)
        return MessageResponse(message="Tag deleted successfully")

    @staticmethod
    def _to_read(tag: Tag, post_count: Optional[int]) -> TagRead:
        return TagRead.model_validate(tag).model_copy(update={"post_count": post_count or 0})

    @staticmethod
    async def _ensure_slug_free(
        db: AsyncSession,
        slug: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        query = select(Tag.id).where(Tag.slug == slug)
        if exclude_id is not None:
            query = query.where(Tag.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise ConflictError("Tag with this name already exists")


tag_service = TagService()
