"""
Inkpost Backend — Comment SQLAlchemy Model
===========================================

What:  ORM model for the `comments` table.

Threading:
    Comments form an adjacency list through parent_id. The comments service
    enforces two invariants on insert:
        1. a parent, if present, belongs to the same post
        2. a reply is at most settings.comment_max_depth levels below its
           top-level ancestor
    A comment that still has replies is never hard-deleted; its content is
    replaced with DELETED_MARKER so the thread stays intact.
"""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.constants import DELETED_MARKER
from inkpost.database import Base
from inkpost.models.common import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from inkpost.models.post import Post
    from inkpost.models.user import User


class Comment(IdMixin, TimestampMixin, Base):
    __tablename__ = "comments"

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    author: Mapped["User"] = relationship(back_populates="comments")
    post: Mapped["Post"] = relationship(back_populates="comments")
    parent: Mapped[Optional["Comment"]] = relationship(
        back_populates="replies",
        remote_side="Comment.id",
    )
    replies: Mapped[List["Comment"]] = relationship(
        back_populates="parent",
        passive_deletes=True,
        order_by="Comment.created_at",
    )

    __table_args__ = (
        Index("idx_comments_post_created_at", "post_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id}, parent_id={self.parent_id})>"
