"""
Inkpost Backend — ORM Models
=============================

Importing this package registers every table with Base.metadata, which
Alembic autogenerate and the test suite's create_all() rely on.
"""

from inkpost.models.category import Category
from inkpost.models.comment import DELETED_MARKER, Comment
from inkpost.models.post import Post, post_tags
from inkpost.models.tag import Tag
from inkpost.models.user import Role, User

__all__ = [
    "Category",
    "Comment",
    "DELETED_MARKER",
    "Post",
    "Role",
    "Tag",
    "User",
    "post_tags",
]
