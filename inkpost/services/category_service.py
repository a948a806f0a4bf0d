"""
Inkpost Backend — Category Service
===================================

What:  Category CRUD with post counts. Writes are admin-only; the guard is
       declared on the routes (policies.ADMIN_ONLY).
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkpost.exceptions import ConflictError, NotFoundError
from inkpost.models import Category, Post
from inkpost.schemas import (
    CategoryDetail,
    CategoryListResponse,
    CategoryRead,
    CreateCategoryRequest,
    MessageResponse,
    UpdateCategoryRequest,
)
from inkpost.schemas.common import PostCard
from inkpost.security import make_slug

logger = logging.getLogger(__name__)

# Published posts embedded in a category detail response.
DETAIL_POSTS_LIMIT = 10


def _with_post_count() -> Select:
    post_count = (
        select(func.count(Post.id))
        .where(Post.category_id == Category.id)
        .correlate(Category)
        .scalar_subquery()
    )
    return select(Category, post_count.label("post_count"))


class CategoryService:
    """
    Business logic for categories.

    Post counts:
        Computed per row by a correlated subquery (_with_post_count), so
        listing N categories is still one statement:
            SELECT categories.*, (SELECT count(posts.id) FROM posts
                                  WHERE posts.category_id = categories.id)
            FROM categories ORDER BY name
    """

    async def find_all(self, db: AsyncSession) -> CategoryListResponse:
        result = await db.execute(_with_post_count().order_by(Category.name.asc()))
        return CategoryListResponse(
            data=[self._to_read(category, count) for category, count in result.all()]
        )

    async def find_one(self, db: AsyncSession, category_id: uuid.UUID) -> CategoryDetail:
        """Category with its post count and latest published posts (drafts excluded)."""
        result = await db.execute(_with_post_count().where(Category.id == category_id))
        row = result.first()
        if row is None:
            raise NotFoundError(resource="category", resource_id=str(category_id))
        category, count = row

        posts = await db.execute(
            select(Post)
            .options(selectinload(Post.author))
            .where(Post.category_id == category_id, Post.published.is_(True))
            .order_by(Post.created_at.desc())
            .limit(DETAIL_POSTS_LIMIT)
        )
        return CategoryDetail(
            **self._to_read(category, count).model_dump(),
            posts=[PostCard.model_validate(p) for p in posts.scalars().all()],
        )

    async def create(self, db: AsyncSession, data: CreateCategoryRequest) -> CategoryRead:
        slug = make_slug(data.name)
        await self._ensure_slug_free(db, slug)

        category = Category(name=data.name, slug=slug, description=data.description)
        db.add(category)
        await db.flush()

        logger.info("Category created: %s (%s)", slug, category.id)
        return self._to_read(category, 0)

    async def update(
        self,
        db: AsyncSession,
        category_id: uuid.UUID,
        data: UpdateCategoryRequest,
    ) -> CategoryRead:
        """
        Rename and/or re-describe a category.

        A new name regenerates the slug. `description` may be cleared by
        sending null; omitting it leaves it unchanged.

        Raises:
            NotFoundError: Unknown category (→ 404)
            ConflictError: Another category already uses the new slug (→ 409)
        """
        category = await db.get(Category, category_id)
        if category is None:
            raise NotFoundError(resource="category", resource_id=str(category_id))

        if data.name is not None:
            slug = make_slug(data.name)
            await self._ensure_slug_free(db, slug, exclude_id=category_id)
            category.name = data.name
            category.slug = slug
        if "description" in data.model_fields_set:
            category.description = data.description

        await db.flush()
        await db.refresh(category)
        count = await db.scalar(
            select(func.count(Post.id)).where(Post.category_id == category_id)
        )
        logger.info("Category updated: %s", category_id)
        return self._to_read(category, count or 0)

    async def remove(self, db: AsyncSession, category_id: uuid.UUID) -> MessageResponse:
        """Delete the category; its posts keep existing with category_id = NULL."""
        result = await db.execute(delete(Category).where(Category.id == category_id))
        if result.rowcount == 0:
            raise NotFoundError(resource="category", resource_id=str(category_id))
        logger.info("Category deleted: %s", category_id)
        return MessageResponse(message="Category deleted successfully")

    @staticmethod
    def _to_read(category: Category, post_count: Optional[int]) -> CategoryRead:
        return CategoryRead.model_validate(category).model_copy(
            update={"post_count": post_count or 0}
        )

    @staticmethod
    async def _ensure_slug_free(
        db: AsyncSession,
        slug: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        query = select(Category.id).where(Category.slug == slug)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise ConflictError("Category with this name already exists")


category_service = CategoryService()
