"""Category request bodies and responses."""

from typing import List, Optional

from pydantic import Field

from inkpost.schemas.common import CamelModel, CategoryRef, PostCard


class CreateCategoryRequest(CamelModel):
    name: str = Field(min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)


class UpdateCategoryRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)


class CategoryRead(CategoryRef):
    post_count: int = 0


class CategoryDetail(CategoryRead):
    """Category plus its most recent published posts."""
    posts: List[PostCard] = Field(default_factory=list)


class CategoryListResponse(CamelModel):
    data: List[CategoryRead]
