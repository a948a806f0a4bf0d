"""
Inkpost Backend — Category SQLAlchemy Model
============================================

What:  ORM model for the `categories` table. A post belongs to at most one
       category; deleting a category leaves its posts uncategorized
       (ON DELETE SET NULL on posts.category_id).
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.database import Base
from inkpost.models.common import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from inkpost.models.post import Post


class Category(IdMixin, TimestampMixin, Base):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(80), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    posts: Mapped[List["Post"]] = relationship(
        back_populates="category",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}')>"
