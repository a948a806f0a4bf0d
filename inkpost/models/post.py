"""
Inkpost Backend — Post SQLAlchemy Model
========================================

What:  ORM model for the `posts` table and the `post_tags` association table.
Who:   Used by the posts service; referenced by comments, categories, tags.

Table Design:
    - slug: unique, derived from the title at create/update time. Not
      de-duplicated before insert; a collision is reported as 409 by the
      IntegrityError handler.
    - views: counter incremented with an atomic UPDATE on every detail fetch
    - author_id: ON DELETE CASCADE (deleting a user deletes their posts)
    - category_id: optional, ON DELETE SET NULL

Query Patterns:
    - List newest first, filtered by published/category/author
      → idx_posts_created_at, idx_posts_published, FK indexes
    - Detail by slug → unique index on slug
"""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.database import Base
from inkpost.models.common import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from inkpost.models.category import Category
    from inkpost.models.comment import Comment
    from inkpost.models.tag import Tag
    from inkpost.models.user import User


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Post(IdMixin, TimestampMixin, Base):
    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    author: Mapped["User"] = relationship(back_populates="posts")
    category: Mapped[Optional["Category"]] = relationship(back_populates="posts")
    tags: Mapped[List["Tag"]] = relationship(
        secondary=post_tags,
        back_populates="posts",
        passive_deletes=True,
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
        Index("idx_posts_published", "published"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, slug='{self.slug}', published={self.published})>"
