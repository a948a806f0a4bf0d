"""
Inkpost Backend — User SQLAlchemy Model
========================================

What:  ORM model representing the `users` table.
Who:   Used by the auth and users services, and as the author side of
       posts and comments.

Table Design:
    - email and username are each unique (enforced by the database; the
      services check first to return a friendly 409)
    - password holds the bcrypt hash, never the plain text
    - role is USER or ADMIN; admins manage categories and tags
    - posts and comments cascade at the database level (ON DELETE CASCADE
      on their author_id foreign keys)
"""

import enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.database import Base
from inkpost.models.common import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from inkpost.models.comment import Comment
    from inkpost.models.post import Post


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(IdMixin, TimestampMixin, Base):
    """A registered account. Authors posts and comments."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role"),
        nullable=False,
        default=Role.USER,
    )

    # passive_deletes: the database removes children; the ORM never loads them
    posts: Mapped[List["Post"]] = relationship(
        back_populates="author",
        passive_deletes=True,
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="author",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role.value}')>"
