"""
Inkpost Client — Entity Services
=================================

One wrapper per REST resource. Methods take Python arguments, build the
camelCase query/body the server expects, and return decoded JSON.
Request bodies are passed through as wire-format dicts
({"title": ..., "tagIds": [...]}).
"""

from typing import Any, Dict, List, Optional

from inkpost.client.api import ApiClient

JSON = Dict[str, Any]


class AuthService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def register(self, data: JSON) -> JSON:
        return await self.api.post("/auth/register", data)

    async def login(self, email: str, password: str) -> JSON:
        return await self.api.post("/auth/login", {"email": email, "password": password})

    async def me(self) -> JSON:
        return await self.api.get("/auth/me")


class PostsService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_posts(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        category_id: Optional[str] = None,
        tag_id: Optional[str] = None,
        author_id: Optional[str] = None,
        published: Optional[bool] = None,
        featured: Optional[bool] = None,
    ) -> JSON:
        """Returns {"posts": [...], "pagination": {...}}."""
        return await self.api.get(
            "/posts",
            params={
                "page": page,
                "limit": limit,
                "search": search,
                "categoryId": category_id,
                "tagId": tag_id,
                "authorId": author_id,
                "published": published,
                "featured": featured,
            },
        )

    async def get_featured_posts(self, limit: int = 10) -> List[JSON]:
        response = await self.get_posts(limit=limit, published=True, featured=True)
        return response["posts"]

    async def get_post_by_slug(self, slug: str) -> JSON:
        return await self.api.get(f"/posts/{slug}")

    async def create_post(self, data: JSON) -> JSON:
        return await self.api.post("/posts", data)

    async def update_post(self, post_id: str, data: JSON) -> JSON:
        return await self.api.patch(f"/posts/{post_id}", data)

    async def delete_post(self, post_id: str) -> JSON:
        return await self.api.delete(f"/posts/{post_id}")


class CommentsService:
    def __init__(self, api: ApiClient):
        self.api = api

    @staticmethod
    def _filters(
        page: int,
        limit: int,
        sort_by: Optional[str],
        sort_order: Optional[str],
        include_replies: Optional[bool],
    ) -> JSON:
        return {
            "page": page,
            "limit": limit,
            "sortBy": sort_by,
            "sortOrder": sort_order,
            "includeReplies": include_replies,
        }

    async def get_comments(
        self,
        page: int = 1,
        limit: int = 20,
        post_id: Optional[str] = None,
        author_id: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        include_replies: Optional[bool] = None,
    ) -> JSON:
        params = self._filters(page, limit, sort_by, sort_order, include_replies)
        params.update({"postId": post_id, "authorId": author_id})
        return await self.api.get("/comments", params=params)

    async def get_comments_by_post(
        self,
        post_id: str,
        page: int = 1,
        limit: int = 10,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        include_replies: Optional[bool] = None,
    ) -> JSON:
        return await self.api.get(
            f"/comments/post/{post_id}",
            params=self._filters(page, limit, sort_by, sort_order, include_replies),
        )

    async def get_comments_by_user(self, user_id: str, page: int = 1, limit: int = 20) -> JSON:
        return await self.api.get(
            f"/comments/user/{user_id}",
            params={"page": page, "limit": limit},
        )

    async def get_comment(self, comment_id: str) -> JSON:
        return await self.api.get(f"/comments/{comment_id}")

    async def get_replies(self, comment_id: str, page: int = 1, limit: int = 20) -> JSON:
        return await self.api.get(
            f"/comments/{comment_id}/replies",
            params={"page": page, "limit": limit},
        )

    async def create_comment(self, data: JSON) -> JSON:
        return await self.api.post("/comments", data)

    async def reply_to_comment(self, data: JSON) -> JSON:
        return await self.api.post("/comments/reply", data)

    async def update_comment(self, comment_id: str, content: str) -> JSON:
        return await self.api.patch(f"/comments/{comment_id}", {"content": content})

    async def delete_comment(self, comment_id: str) -> JSON:
        return await self.api.delete(f"/comments/{comment_id}")


class CategoriesService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_categories(self) -> List[JSON]:
        response = await self.api.get("/categories")
        return response["data"]

    async def get_category(self, category_id: str) -> JSON:
        return await self.api.get(f"/categories/{category_id}")

    async def create_category(self, data: JSON) -> JSON:
        return await self.api.post("/categories", data)

    async def update_category(self, category_id: str, data: JSON) -> JSON:
        return await self.api.patch(f"/categories/{category_id}", data)

    async def delete_category(self, category_id: str) -> JSON:
        return await self.api.delete(f"/categories/{category_id}")


class TagsService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_tags(
        self,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> List[JSON]:
        response = await self.api.get(
            "/tags",
            params={"search": search, "sortBy": sort_by, "sortOrder": sort_order},
        )
        return response["data"]

    async def get_popular_tags(self, limit: int = 10) -> List[JSON]:
        response = await self.api.get("/tags/popular", params={"limit": limit})
        return response["data"]

    async def get_tag(self, tag_id: str) -> JSON:
        return await self.api.get(f"/tags/{tag_id}")

    async def create_tag(self, name: str) -> JSON:
        return await self.api.post("/tags", {"name": name})

    async def update_tag(self, tag_id: str, name: str) -> JSON:
        return await self.api.patch(f"/tags/{tag_id}", {"name": name})

    async def delete_tag(self, tag_id: str) -> JSON:
        return await self.api.delete(f"/tags/{tag_id}")


class UsersService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> List[JSON]:
        return await self.api.get(
            "/users",
            params={"page": page, "limit": limit, "search": search, "role": role},
        )

    async def get_user(self, user_id: str) -> JSON:
        return await self.api.get(f"/users/{user_id}")

    async def get_user_by_username(self, username: str) -> JSON:
        return await self.api.get(f"/users/username/{username}")

    async def update_user(self, user_id: str, data: JSON) -> JSON:
        return await self.api.patch(f"/users/{user_id}", data)

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> JSON:
        return await self.api.post(
            f"/users/{user_id}/change-password",
            {"currentPassword": current_password, "newPassword": new_password},
        )

    async def delete_user(self, user_id: str) -> None:
        await self.api.delete(f"/users/{user_id}")
