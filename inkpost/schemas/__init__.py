"""Pydantic request/response schemas. JSON keys are camelCase on the wire."""

from inkpost.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from inkpost.schemas.category import (
    CategoryDetail,
    CategoryListResponse,
    CategoryRead,
    CreateCategoryRequest,
    UpdateCategoryRequest,
)
from inkpost.schemas.comment import (
    CommentFilters,
    CommentListResponse,
    CommentNode,
    CommentRead,
    CreateCommentRequest,
    RepliesResponse,
    ReplyCommentRequest,
    UpdateCommentRequest,
)
from inkpost.schemas.common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    Pagination,
    UserPublic,
)
from inkpost.schemas.post import (
    CreatePostRequest,
    PostDetail,
    PostFilters,
    PostListResponse,
    PostSummary,
    UpdatePostRequest,
)
from inkpost.schemas.tag import (
    CreateTagRequest,
    TagDetail,
    TagListResponse,
    TagQuery,
    TagRead,
    UpdateTagRequest,
)
from inkpost.schemas.user import (
    ChangePasswordRequest,
    UpdateUserRequest,
    UserCounts,
    UserProfile,
)

__all__ = [
    "AuthResponse", "LoginRequest", "RegisterRequest",
    "CategoryDetail", "CategoryListResponse", "CategoryRead",
    "CreateCategoryRequest", "UpdateCategoryRequest",
    "CommentFilters", "CommentListResponse", "CommentNode", "CommentRead",
    "CreateCommentRequest", "RepliesResponse", "ReplyCommentRequest",
    "UpdateCommentRequest",
    "ErrorResponse", "HealthResponse", "MessageResponse", "Pagination", "UserPublic",
    "CreatePostRequest", "PostDetail", "PostFilters", "PostListResponse",
    "PostSummary", "UpdatePostRequest",
    "CreateTagRequest", "TagDetail", "TagListResponse", "TagQuery", "TagRead",
    "UpdateTagRequest",
    "ChangePasswordRequest", "UpdateUserRequest", "UserCounts", "UserProfile",
]
