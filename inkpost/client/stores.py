"""
Inkpost Client — State Stores
==============================

What:  Per-entity state containers holding what the client has fetched,
       plus `is_loading` / `error` flags.

Action contract:
    fetch_* actions   record a display message in `error` and return
                      normally on failure
    mutating actions  record the message and re-raise the ApiError

Stores apply whatever response arrives last; concurrent actions are not
cancelled.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from inkpost.client.api import ApiClient, ApiError
from inkpost.client.services import (
    AuthService,
    CategoriesService,
    CommentsService,
    PostsService,
    TagsService,
    UsersService,
)
from inkpost.constants import COMMENT_SOFT_DELETED_MESSAGE, DELETED_MARKER

logger = logging.getLogger(__name__)

JSON = Dict[str, Any]


def _empty_pagination(limit: int) -> JSON:
    return {"page": 1, "limit": limit, "total": 0, "pages": 0}


class Store:
    """Loading/error bookkeeping shared by every store."""

    def __init__(self) -> None:
        self.is_loading = False
        self.error: Optional[str] = None

    def clear_error(self) -> None:
        self.error = None

    @asynccontextmanager
    async def _fetching(self, failure: str) -> AsyncIterator[None]:
        self.is_loading = True
        self.error = None
        try:
            yield
        except ApiError as e:
            self.error = e.message or failure
            logger.warning("%s: %s", failure, e.message)
        finally:
            self.is_loading = False

    @asynccontextmanager
    async def _mutating(self, failure: str) -> AsyncIterator[None]:
        self.is_loading = True
        self.error = None
        try:
            yield
        except ApiError as e:
            self.error = e.message or failure
            logger.warning("%s: %s", failure, e.message)
            raise
        finally:
            self.is_loading = False


# ══════════════════════════════════════════════════════════════════════════
# Auth
# ══════════════════════════════════════════════════════════════════════════


class AuthStore(Store):
    """
    Sign-in state. The token and user live in api.session, so the transport
    sees a new token as soon as login/register completes.
    """

    def __init__(self, api: ApiClient):
        super().__init__()
        self.api = api
        self.service = AuthService(api)

    @property
    def session(self):
        return self.api.session

    @property
    def user(self) -> Optional[JSON]:
        return self.session.user

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    async def login(self, email: str, password: str) -> None:
        async with self._mutating("Login failed"):
            response = await self.service.login(email, password)
            self.session.set(response["access_token"], response["user"])

    async def register(self, data: JSON) -> None:
        async with self._mutating("Registration failed"):
            response = await self.service.register(data)
            self.session.set(response["access_token"], response["user"])

    def logout(self) -> None:
        self.session.clear()
        self.error = None

    def update_user(self, user: JSON) -> None:
        self.session.update_user(user)

    async def initialize(self) -> bool:
        """
        Rehydrate the session from storage and confirm the token with the
        server. A rejected token clears the session.

        Returns:
            True when a verified session is active.
        """
        if not self.session.load():
            return False

        self.is_loading = True
        try:
            user = await self.service.me()
        except ApiError as e:
            logger.info("Stored session rejected (%s); signing out", e.message)
            self.session.clear()
            return False
        finally:
            self.is_loading = False

        self.session.update_user(user)
        return True


# ══════════════════════════════════════════════════════════════════════════
# Posts
# ══════════════════════════════════════════════════════════════════════════


class PostsStore(Store):
    def __init__(self, api: ApiClient):
        super().__init__()
        self.service = PostsService(api)
        self.posts: List[JSON] = []
        self.current_post: Optional[JSON] = None
        self.featured_posts: List[JSON] = []
        self.pagination: JSON = _empty_pagination(10)

    async def fetch_posts(self, **filters: Any) -> None:
        async with self._fetching("Failed to fetch posts"):
            response = await self.service.get_posts(**filters)
            self.posts = response["posts"]
            self.pagination = response["pagination"]

    async def fetch_post_by_slug(self, slug: str) -> None:
        if not slug:
            self.error = "Invalid post slug"
            return
        async with self._fetching("Failed to fetch post"):
            self.current_post = None
            self.current_post = await self.service.get_post_by_slug(slug)

    async def fetch_featured_posts(self) -> None:
        async with self._fetching("Failed to fetch featured posts"):
            self.featured_posts = await self.service.get_featured_posts()

    async def create_post(self, data: JSON) -> JSON:
        async with self._mutating("Failed to create post"):
            post = await self.service.create_post(data)
            self.posts = [post] + self.posts
        return post

    async def update_post(self, post_id: str, data: JSON) -> JSON:
        async with self._mutating("Failed to update post"):
            updated = await self.service.update_post(post_id, data)
            self.posts = [updated if p["id"] == post_id else p for p in self.posts]
            if self.current_post and self.current_post["id"] == post_id:
                # keep the thread; the update response carries no comments
                self.current_post = {**self.current_post, **updated}
        return updated

    async def delete_post(self, post_id: str) -> None:
        async with self._mutating("Failed to delete post"):
            await self.service.delete_post(post_id)
            self.posts = [p for p in self.posts if p["id"] != post_id]
            if self.current_post and self.current_post["id"] == post_id:
                self.current_post = None

    def clear_current_post(self) -> None:
        self.current_post = None


# ══════════════════════════════════════════════════════════════════════════
# Comments
# ══════════════════════════════════════════════════════════════════════════


class CommentsStore(Store):
    def __init__(self, api: ApiClient, page_size: int = 10):
        super().__init__()
        self.service = CommentsService(api)
        self.page_size = page_size
        self.comments: List[JSON] = []
        self.pagination: JSON = _empty_pagination(page_size)

    async def fetch_comments_by_post(self, post_id: str, page: int = 1) -> None:
        async with self._fetching("Failed to fetch comments"):
            response = await self.service.get_comments_by_post(
                post_id, page=page, limit=self.page_size
            )
            self.comments = response["comments"]
            self.pagination = response["pagination"]

    async def create_comment(self, data: JSON) -> JSON:
        async with self._mutating("Failed to create comment"):
            comment = await self.service.create_comment(data)
            self.comments = [comment] + self.comments
        return comment

    async def reply_to_comment(self, data: JSON) -> JSON:
        async with self._mutating("Failed to create reply"):
            reply = await self.service.reply_to_comment(data)
            self.comments = [reply] + self.comments
        return reply

    async def update_comment(self, comment_id: str, content: str) -> JSON:
        async with self._mutating("Failed to update comment"):
            updated = await self.service.update_comment(comment_id, content)
            self.comments = [updated if c["id"] == comment_id else c for c in self.comments]
        return updated

    async def delete_comment(self, comment_id: str) -> None:
        """A soft-deleted comment stays in the list with the deletion marker."""
        async with self._mutating("Failed to delete comment"):
            response = await self.service.delete_comment(comment_id)
            if response and response.get("message") == COMMENT_SOFT_DELETED_MESSAGE:
                self.comments = [
                    {**c, "content": DELETED_MARKER} if c["id"] == comment_id else c
                    for c in self.comments
                ]
            else:
                self.comments = [c for c in self.comments if c["id"] != comment_id]

    def clear_comments(self) -> None:
        self.comments = []
        self.pagination = _empty_pagination(self.page_size)


# ══════════════════════════════════════════════════════════════════════════
# Categories & Tags
# ══════════════════════════════════════════════════════════════════════════


class CategoriesStore(Store):
    def __init__(self, api: ApiClient):
        super().__init__()
        self.service = CategoriesService(api)
        self.categories: List[JSON] = []
        self.current_category: Optional[JSON] = None

    async def fetch_categories(self) -> None:
        async with self._fetching("Failed to fetch categories"):
            self.categories = await self.service.get_categories()

    async def fetch_category(self, category_id: str) -> None:
        async with self._fetching("Failed to fetch category"):
            self.current_category = await self.service.get_category(category_id)

    async def create_category(self, data: JSON) -> JSON:
        async with self._mutating("Failed to create category"):
            category = await self.service.create_category(data)
            self.categories = sorted(self.categories + [category], key=lambda c: c["name"])
        return category

    async def update_category(self, category_id: str, data: JSON) -> JSON:
        async with self._mutating("Failed to update category"):
            updated = await self.service.update_category(category_id, data)
            self.categories = [updated if c["id"] == category_id else c for c in self.categories]
        return updated

    async def delete_category(self, category_id: str) -> None:
        async with self._mutating("Failed to delete category"):
            await self.service.delete_category(category_id)
            self.categories = [c for c in self.categories if c["id"] != category_id]
            if self.current_category and self.current_category["id"] == category_id:
                self.current_category = None


class TagsStore(Store):
    def __init__(self, api: ApiClient):
        super().__init__()
        self.service = TagsService(api)
        self.tags: List[JSON] = []
        self.popular_tags: List[JSON] = []
        self.current_tag: Optional[JSON] = None

    async def fetch_tags(
        self,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> None:
        async with self._fetching("Failed to fetch tags"):
            self.tags = await self.service.get_tags(search, sort_by, sort_order)

    async def fetch_popular_tags(self, limit: int = 10) -> None:
        async with self._fetching("Failed to fetch popular tags"):
            self.popular_tags = await self.service.get_popular_tags(limit)

    async def fetch_tag(self, tag_id: str) -> None:
        async with self._fetching("Failed to fetch tag"):
            self.current_tag = await self.service.get_tag(tag_id)

    async def create_tag(self, name: str) -> JSON:
        async with self._mutating("Failed to create tag"):
            tag = await self.service.create_tag(name)
            self.tags = self.tags + [tag]
        return tag

    async def update_tag(self, tag_id: str, name: str) -> JSON:
        async with self._mutating("Failed to update tag"):
            updated = await self.service.update_tag(tag_id, name)
            self.tags = [updated if t["id"] == tag_id else t for t in self.tags]
        return updated

    async def delete_tag(self, tag_id: str) -> None:
        async with self._mutating("Failed to delete tag"):
            await self.service.delete_tag(tag_id)
            self.tags = [t for t in self.tags if t["id"] != tag_id]
            self.popular_tags = [t for t in self.popular_tags if t["id"] != tag_id]


# ══════════════════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════════════════


class UsersStore(Store):
    def __init__(self, api: ApiClient):
        super().__init__()
        self.service = UsersService(api)
        self.users: List[JSON] = []
        self.user: Optional[JSON] = None

    async def fetch_users(self, **params: Any) -> None:
        async with self._fetching("Failed to fetch users"):
            self.users = await self.service.get_users(**params)

    async def fetch_user(self, user_id: str) -> None:
        async with self._fetching("Failed to fetch user"):
            self.user = await self.service.get_user(user_id)

    async def fetch_user_by_username(self, username: str) -> None:
        async with self._fetching("Failed to fetch user"):
            self.user = await self.service.get_user_by_username(username)

    async def update_user(self, user_id: str, data: JSON) -> JSON:
        async with self._mutating("Failed to update user"):
            updated = await self.service.update_user(user_id, data)
            if self.user and self.user["id"] == user_id:
                self.user = {**self.user, **updated}
            self.users = [{**u, **updated} if u["id"] == user_id else u for u in self.users]
        return updated

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        async with self._mutating("Failed to change password"):
            await self.service.change_password(user_id, current_password, new_password)

    async def delete_user(self, user_id: str) -> None:
        async with self._mutating("Failed to delete user"):
            await self.service.delete_user(user_id)
            self.users = [u for u in self.users if u["id"] != user_id]
            if self.user and self.user["id"] == user_id:
                self.user = None
