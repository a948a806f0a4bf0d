"""
Inkpost Backend — Shared Pydantic Schemas
==========================================

What:  Base model, pagination envelope, error/message bodies, and the small
       nested "reference" shapes (author, tag, category, post) embedded in
       larger responses.

Wire format:
    Python attributes are snake_case; JSON keys are camelCase through the
    alias generator (authorId, createdAt, ...). populate_by_name lets
    services and tests build models with either spelling.
"""

import math
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from inkpost.models import Role


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class Pagination(CamelModel):
    """Offset pagination state returned alongside every paginated list."""
    page: int = Field(description="Current page (1-based)")
    limit: int = Field(description="Items per page")
    total: int = Field(description="Total number of items matching the filters")
    pages: int = Field(description="Total number of pages, ceil(total / limit)")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class MessageResponse(CamelModel):
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "User already exists",
            "details": {"field": "email"},
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Nested references
# ══════════════════════════════════════════════════════════════════════════


class AuthorSummary(CamelModel):
    id: uuid.UUID
    name: Optional[str] = None
    username: str
    avatar: Optional[str] = None


class AuthorDetail(AuthorSummary):
    bio: Optional[str] = None


class UserPublic(CamelModel):
    """A user as returned by the API; the password hash is never included."""
    id: uuid.UUID
    email: str
    username: str
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    role: Role
    created_at: datetime
    updated_at: datetime


class TagRef(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime


class CategoryRef(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PostRef(CamelModel):
    id: uuid.UUID
    title: str
    slug: str


class PostBase(CamelModel):
    id: uuid.UUID
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    published: bool
    featured: bool
    views: int
    author_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class PostCard(PostBase):
    """Post with its author, used in category and tag detail listings."""
    author: AuthorSummary
