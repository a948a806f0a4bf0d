"""
Inkpost Backend — Tag SQLAlchemy Model
=======================================

What:  ORM model for the `tags` table, linked to posts through the
       `post_tags` association table (defined in models/post.py).
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.database import Base
from inkpost.models.common import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from inkpost.models.post import Post


class Tag(IdMixin, TimestampMixin, Base):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(30), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    posts: Mapped[List["Post"]] = relationship(
        secondary="post_tags",
        back_populates="tags",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, slug='{self.slug}')>"
