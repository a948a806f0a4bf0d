"""
Inkpost Backend — Comment Service
==================================

What:  Threaded comments: create/reply with thread invariants, listings,
       author-only edits and soft/hard deletion.
Who:   Called by routes/comments.py; build_comment_tree() is also used by
       the post service for the post detail thread.

Thread invariants (checked on insert):
    1. The parent, if any, belongs to the same post       → 400
    2. depth(new comment) <= settings.comment_max_depth   → 400
       (a top-level comment has depth 0)

Deletion:
    has replies  → content replaced with DELETED_MARKER, row kept
    no replies   → row deleted
"""

import logging
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkpost.config import settings
from inkpost.constants import (
    COMMENT_DELETED_MESSAGE,
    COMMENT_SOFT_DELETED_MESSAGE,
    DELETED_MARKER,
)
from inkpost.exceptions import ForbiddenError, NotFoundError, ValidationError
from inkpost.models import Comment, Post, User
from inkpost.schemas import (
    CommentFilters,
    CommentListResponse,
    CommentNode,
    CommentRead,
    CreateCommentRequest,
    MessageResponse,
    Pagination,
    RepliesResponse,
    ReplyCommentRequest,
    UpdateCommentRequest,
)
from inkpost.schemas.comment import CommentBase

logger = logging.getLogger(__name__)


def build_comment_tree(comments: Iterable, max_depth: int) -> List[CommentNode]:
    """
    Nest a flat list of a post's comments into a thread.

    Top-level comments are ordered newest first, replies oldest first.
    Nodes deeper than max_depth and replies whose parent is not in the
    list are left out.

    Args:
        comments:  Comment rows (or objects with the same attributes) whose
                   `author` is already loaded
        max_depth: Deepest reply level to include
    """
    children: Dict[Optional[uuid.UUID], list] = defaultdict(list)
    for comment in comments:
        children[comment.parent_id].append(comment)

    def to_node(comment, depth: int) -> CommentNode:
        replies: List[CommentNode] = []
        if depth < max_depth:
            replies = [
                to_node(reply, depth + 1)
                for reply in sorted(children.get(comment.id, []), key=lambda c: c.created_at)
            ]
        base = CommentBase.model_validate(comment).model_dump()
        return CommentNode(**base, replies=replies)

    roots = sorted(children.get(None, []), key=lambda c: c.created_at, reverse=True)
    return [to_node(root, 0) for root in roots]


def _read_options():
    return (
        selectinload(Comment.author),
        selectinload(Comment.post),
        selectinload(Comment.parent).selectinload(Comment.author),
        selectinload(Comment.replies).selectinload(Comment.author),
    )


class CommentService:
    """
    Business logic for comments.

    What:    Every comment operation the API exposes.
    Who:     Called by routes/comments.py.

    Ownership: only the author may edit or delete a comment (→ 403).
    Admins get no bypass here, matching posts.
    """

    # ── Writes ────────────────────────────────────────────────────────────

    async def create(
        self,
        db: AsyncSession,
        author: User,
        data: CreateCommentRequest,
    ) -> CommentRead:
        """
        Add a comment, or a reply when parent_id is given.

        Raises:
            NotFoundError:   Post or parent comment missing (→ 404)
            ValidationError: Parent on another post, or thread too deep (→ 400)
        """
        post = await db.get(Post, data.post_id)
        if post is None:
            raise NotFoundError(resource="post")

        if data.parent_id is not None:
            parent = await db.get(Comment, data.parent_id)
            if parent is None:
                raise NotFoundError(resource="parent comment")
            if parent.post_id != data.post_id:
                raise ValidationError(
                    "Parent comment must belong to the same post",
                    field="parentId",
                )
            depth = await self._depth(db, parent) + 1
            if depth > settings.comment_max_depth:
                raise ValidationError(
                    f"Replies cannot be nested more than "
                    f"{settings.comment_max_depth} levels deep",
                    field="parentId",
                    context={"depth": depth},
                )

        comment = Comment(
            content=data.content,
            post_id=data.post_id,
            parent_id=data.parent_id,
            author_id=author.id,
        )
        db.add(comment)
        await db.flush()

        logger.info(
            "Comment %s created on post %s by %s (parent=%s)",
            comment.id, data.post_id, author.id, data.parent_id,
        )
        return await self._read(db, comment.id)

    async def reply(
        self,
        db: AsyncSession,
        author: User,
        data: ReplyCommentRequest,
    ) -> CommentRead:
        return await self.create(db, author, CreateCommentRequest(**data.model_dump()))

    async def update(
        self,
        db: AsyncSession,
        comment_id: uuid.UUID,
        user: User,
        data: UpdateCommentRequest,
    ) -> CommentRead:
        comment = await self._get_owned(db, comment_id, user)
        if data.content is not None:
            comment.content = data.content
            await db.flush()
        return await self._read(db, comment_id)

    async def remove(
        self,
        db: AsyncSession,
        comment_id: uuid.UUID,
        user: User,
    ) -> MessageResponse:
        """
        Delete a comment by its author.

        Behavior:
            1. Load the comment and check ownership (→ 404 / 403)
            2. Count its direct replies
            3. Replies exist → overwrite content with DELETED_MARKER and keep
               the row, answering COMMENT_SOFT_DELETED_MESSAGE
            4. No replies    → DELETE the row, answering COMMENT_DELETED_MESSAGE

        The two messages are part of the wire contract: inkpost.client's
        CommentsStore picks its local update by comparing against them.
        """
        comment = await self._get_owned(db, comment_id, user)

        reply_count = await db.scalar(
            select(func.count(Comment.id)).where(Comment.parent_id == comment_id)
        )
        if reply_count:
            comment.content = DELETED_MARKER
            await db.flush()
            logger.info("Comment %s soft-deleted (%d replies kept)", comment_id, reply_count)
            return MessageResponse(message=COMMENT_SOFT_DELETED_MESSAGE)

        await db.execute(delete(Comment).where(Comment.id == comment_id))
        logger.info("Comment %s deleted", comment_id)
        return MessageResponse(message=COMMENT_DELETED_MESSAGE)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self, db: AsyncSession, filters: CommentFilters) -> CommentListResponse:
        conditions = []
        if filters.post_id is not None:
            conditions.append(Comment.post_id == filters.post_id)
        if filters.author_id is not None:
            conditions.append(Comment.author_id == filters.author_id)
        if not filters.include_replies:
            conditions.append(Comment.parent_id.is_(None))

        sort_column = Comment.updated_at if filters.sort_by == "updatedAt" else Comment.created_at
        order = sort_column.asc() if filters.sort_order == "asc" else sort_column.desc()

        total = await db.scalar(select(func.count(Comment.id)).where(*conditions)) or 0
        pagination = Pagination.build(filters.page, filters.limit, total)

        result = await db.execute(
            select(Comment)
            .options(*_read_options())
            .where(*conditions)
            .order_by(order)
            .offset(pagination.offset)
            .limit(filters.limit)
        )
        comments = [CommentRead.model_validate(c) for c in result.scalars().all()]
        return CommentListResponse(comments=comments, pagination=pagination)

    async def find_by_post(
        self,
        db: AsyncSession,
        post_id: uuid.UUID,
        filters: CommentFilters,
    ) -> CommentListResponse:
        if await db.get(Post, post_id) is None:
            raise NotFoundError(resource="post")
        return await self.find_all(db, filters.model_copy(update={"post_id": post_id}))

    async def find_by_user(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        filters: CommentFilters,
    ) -> CommentListResponse:
        if await db.get(User, user_id) is None:
            raise NotFoundError(resource="user")
        return await self.find_all(db, filters.model_copy(update={"author_id": user_id}))

    async def find_one(self, db: AsyncSession, comment_id: uuid.UUID) -> CommentRead:
        return await self._read(db, comment_id)

    async def find_replies(
        self,
        db: AsyncSession,
        comment_id: uuid.UUID,
        page: int = 1,
        limit: int = 20,
    ) -> RepliesResponse:
        """Direct replies of a comment, oldest first."""
        if await db.get(Comment, comment_id) is None:
            raise NotFoundError(resource="comment")

        condition = Comment.parent_id == comment_id
        total = await db.scalar(select(func.count(Comment.id)).where(condition)) or 0
        pagination = Pagination.build(page, limit, total)

        result = await db.execute(
            select(Comment)
            .options(*_read_options())
            .where(condition)
            .order_by(Comment.created_at.asc())
            .offset(pagination.offset)
            .limit(limit)
        )
        replies = [CommentRead.model_validate(c) for c in result.scalars().all()]
        return RepliesResponse(replies=replies, pagination=pagination)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _read(self, db: AsyncSession, comment_id: uuid.UUID) -> CommentRead:
        result = await db.execute(
            select(Comment)
            .options(*_read_options())
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError(resource="comment")
        return CommentRead.model_validate(comment)

    async def _get_owned(self, db: AsyncSession, comment_id: uuid.UUID, user: User) -> Comment:
        comment = await db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError(resource="comment")
        if comment.author_id != user.id:
            raise ForbiddenError()
        return comment

    @staticmethod
    async def _depth(db: AsyncSession, comment: Comment) -> int:
        """Number of ancestors above `comment` (0 for a top-level comment)."""
        depth = 0
        parent_id = comment.parent_id
        while parent_id is not None:
            depth += 1
            parent_id = await db.scalar(
                select(Comment.parent_id).where(Comment.id == parent_id)
            )
        return depth


comment_service = CommentService()
