"""
Inkpost Client
==============

Python client for the Inkpost REST API: an httpx transport (ApiClient),
per-resource service wrappers, state stores and a persisted Session.

    session = Session(JsonFileStorage("session.json"))
    async with ApiClient("http://localhost:3333", session=session) as api:
        auth = AuthStore(api)
        await auth.initialize()
        posts = PostsStore(api)
        await posts.fetch_posts(published=True)
"""

from inkpost.client.api import ApiClient, ApiError
from inkpost.client.pagination import Pagination
from inkpost.client.session import JsonFileStorage, MemoryStorage, Session, SessionStorage
from inkpost.client.stores import (
    AuthStore,
    CategoriesStore,
    CommentsStore,
    PostsStore,
    TagsStore,
    UsersStore,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthStore",
    "CategoriesStore",
    "CommentsStore",
    "JsonFileStorage",
    "MemoryStorage",
    "Pagination",
    "PostsStore",
    "Session",
    "SessionStorage",
    "TagsStore",
    "UsersStore",
]
