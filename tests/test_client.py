"""
Inkpost Client — Store & Session Tests
=======================================

The stores talk to the real FastAPI app in-process through
httpx.ASGITransport, backed by the per-test SQLite database.

What we test:
    ✅ Session persistence (memory and JSON file storage)
    ✅ AuthStore: login/register/logout/initialize
    ✅ Fetch actions record errors; mutating actions record and re-raise
    ✅ Posts/comments/categories/tags/users stores keep their lists in sync
    ✅ ApiClient error mapping and parameter encoding
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from inkpost.client import (
    ApiClient,
    ApiError,
    AuthStore,
    CategoriesStore,
    CommentsStore,
    JsonFileStorage,
    MemoryStorage,
    PostsStore,
    Session,
    TagsStore,
    UsersStore,
)
from inkpost.client.api import _encode_params
from inkpost.constants import (
    COMMENT_DELETED_MESSAGE,
    COMMENT_SOFT_DELETED_MESSAGE,
    DELETED_MARKER,
)


@pytest_asyncio.fixture
async def api(test_client):
    """ApiClient bound to the app; depends on test_client for the DB override."""
    from inkpost.main import app

    client = ApiClient(
        base_url="http://test",
        session=Session(MemoryStorage()),
        transport=ASGITransport(app=app),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def signed_in(api, register_user):
    """An AuthStore already logged in as a fresh user."""
    await register_user(email="client@example.com", password="client-pass")
    store = AuthStore(api)
    await store.login("client@example.com", "client-pass")
    return store


class TestSession:

    def test_set_and_clear_write_through(self):
        storage = MemoryStorage()
        session = Session(storage)

        session.set("tok", {"id": "u1", "username": "ann"})

        assert session.is_authenticated
        assert session.user_id == "u1"
        assert storage.load() == {"token": "tok", "user": {"id": "u1", "username": "ann"}}

        session.clear()
        assert not session.is_authenticated
        assert storage.load() is None

    def test_json_file_storage_survives_new_session(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        Session(JsonFileStorage(path)).set("tok", {"id": "u1"})

        restored = Session(JsonFileStorage(path))

        assert restored.load() is True
        assert restored.token == "tok"
        assert restored.user == {"id": "u1"}

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")

        assert Session(JsonFileStorage(path)).load() is False

    def test_clear_without_file(self, tmp_path):
        JsonFileStorage(tmp_path / "missing.json").clear()


class TestApiClient:

    def test_encode_params_drops_none_and_stringifies_uuid(self):
        value = uuid.uuid4()

        assert _encode_params({"a": None, "b": value, "c": 2}) == {"b": str(value), "c": 2}

    @pytest.mark.asyncio
    async def test_error_carries_server_message(self, api):
        with pytest.raises(ApiError) as exc_info:
            await api.get("/posts/missing-slug")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Post not found"
        assert exc_info.value.error == "not_found"

    @pytest.mark.asyncio
    async def test_network_failure_is_status_zero(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = ApiClient(base_url="http://test", transport=httpx.MockTransport(refuse))
        try:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/health")
        finally:
            await client.aclose()

        assert exc_info.value.status_code == 0
        assert exc_info.value.message == "Network error occurred"


class TestAuthStore:

    @pytest.mark.asyncio
    async def test_register_signs_in(self, api):
        store = AuthStore(api)

        await store.register({
            "email": "new@example.com",
            "username": "newbie",
            "password": "secret123",
            "name": "New Person",
        })

        assert store.is_authenticated
        assert store.user["username"] == "newbie"
        assert store.error is None
        assert store.is_loading is False

    @pytest.mark.asyncio
    async def test_failed_login_records_and_raises(self, api):
        store = AuthStore(api)

        with pytest.raises(ApiError):
            await store.login("nobody@example.com", "nope")

        assert store.error == "Invalid credentials"
        assert not store.is_authenticated

    @pytest.mark.asyncio
    async def test_initialize_verifies_stored_token(self, api, signed_in):
        token = signed_in.token
        storage = MemoryStorage({"token": token, "user": {"id": "stale"}})
        api.session = Session(storage)

        ok = await AuthStore(api).initialize()

        assert ok is True
        assert api.session.user["email"] == "client@example.com"

    @pytest.mark.asyncio
    async def test_initialize_clears_rejected_token(self, api):
        storage = MemoryStorage({"token": "bogus", "user": {"id": "x"}})
        api.session = Session(storage)

        ok = await AuthStore(api).initialize()

        assert ok is False
        assert api.session.token is None
        assert storage.load() is None

    @pytest.mark.asyncio
    async def test_initialize_without_stored_session(self, api):
        assert await AuthStore(api).initialize() is False

    @pytest.mark.asyncio
    async def test_logout(self, signed_in):
        signed_in.logout()

        assert not signed_in.is_authenticated
        assert signed_in.user is None


class TestPostsStore:

    @pytest.mark.asyncio
    async def test_create_fetch_update_delete(self, api, signed_in):
        store = PostsStore(api)

        created = await store.create_post({"title": "Client Post", "content": "Body", "published": True})
        assert store.posts[0]["id"] == created["id"]

        await store.fetch_post_by_slug(created["slug"])
        assert store.current_post["views"] == 1

        updated = await store.update_post(created["id"], {"title": "Client Post Edited"})
        assert store.posts[0]["slug"] == updated["slug"] == "client-post-edited"
        assert store.current_post["title"] == "Client Post Edited"
        assert "comments" in store.current_post

        await store.delete_post(created["id"])
        assert store.posts == []
        assert store.current_post is None

    @pytest.mark.asyncio
    async def test_fetch_posts_and_featured(self, api, signed_in):
        store = PostsStore(api)
        await store.create_post({"title": "Plain", "content": "x", "published": True})
        await store.create_post({"title": "Star", "content": "x", "published": True, "featured": True})

        await store.fetch_posts(page=1, limit=10)
        await store.fetch_featured_posts()

        assert store.pagination["total"] == 2
        assert [p["title"] for p in store.featured_posts] == ["Star"]

    @pytest.mark.asyncio
    async def test_fetch_missing_slug_records_error(self, api):
        store = PostsStore(api)

        await store.fetch_post_by_slug("nope")

        assert store.error == "Post not found"
        assert store.current_post is None
        assert store.is_loading is False

    @pytest.mark.asyncio
    async def test_empty_slug_is_rejected_locally(self, api):
        store = PostsStore(api)

        await store.fetch_post_by_slug("")

        assert store.error == "Invalid post slug"

    @pytest.mark.asyncio
    async def test_unauthenticated_create_raises(self, api):
        store = PostsStore(api)

        with pytest.raises(ApiError) as exc_info:
            await store.create_post({"title": "Anon", "content": "x"})

        assert exc_info.value.status_code == 401
        assert store.error
        store.clear_error()
        assert store.error is None


class TestCommentsStore:

    @pytest.mark.asyncio
    async def test_soft_delete_keeps_marker(self, api, signed_in):
        post = await PostsStore(api).create_post({"title": "Discussed", "content": "x", "published": True})
        store = CommentsStore(api)

        root = await store.create_comment({"content": "root", "postId": post["id"]})
        reply = await store.reply_to_comment({"content": "reply", "postId": post["id"], "parentId": root["id"]})
        await store.update_comment(reply["id"], "edited reply")

        await store.delete_comment(root["id"])

        by_id = {c["id"]: c for c in store.comments}
        assert by_id[root["id"]]["content"] == DELETED_MARKER
        assert by_id[reply["id"]]["content"] == "edited reply"

        await store.delete_comment(reply["id"])
        assert reply["id"] not in {c["id"] for c in store.comments}

    @pytest.mark.asyncio
    async def test_delete_branches_on_server_message(self):
        store = CommentsStore(MagicMock())
        store.comments = [{"id": "a", "content": "kept"}, {"id": "b", "content": "gone"}]
        store.service = MagicMock()
        store.service.delete_comment = AsyncMock(
            side_effect=[
                {"message": COMMENT_SOFT_DELETED_MESSAGE},
                {"message": COMMENT_DELETED_MESSAGE},
            ]
        )

        await store.delete_comment("a")
        await store.delete_comment("b")

        assert store.comments == [{"id": "a", "content": DELETED_MARKER}]

    @pytest.mark.asyncio
    async def test_fetch_by_post(self, api, signed_in):
        post = await PostsStore(api).create_post({"title": "Busy", "content": "x", "published": True})
        store = CommentsStore(api, page_size=1)
        await store.create_comment({"content": "a", "postId": post["id"]})
        await store.create_comment({"content": "b", "postId": post["id"]})
        store.clear_comments()

        await store.fetch_comments_by_post(post["id"], page=2)

        assert [c["content"] for c in store.comments] == ["a"]
        assert store.pagination["pages"] == 2


class TestCategoriesAndTagsStores:

    @pytest.mark.asyncio
    async def test_category_admin_error_is_recorded(self, api, signed_in):
        store = CategoriesStore(api)

        with pytest.raises(ApiError):
            await store.create_category({"name": "Nope"})

        assert store.error == "Admin access required"

    @pytest.mark.asyncio
    async def test_categories_fetch(self, api, test_client, admin):
        token, _ = admin
        await test_client.post(
            "/api/categories", json={"name": "Books"}, headers={"Authorization": f"Bearer {token}"}
        )
        store = CategoriesStore(api)

        await store.fetch_categories()
        await store.fetch_category(store.categories[0]["id"])

        assert [c["name"] for c in store.categories] == ["Books"]
        assert store.current_category["posts"] == []

    @pytest.mark.asyncio
    async def test_tags_create_and_fetch(self, api, signed_in):
        store = TagsStore(api)

        tag = await store.create_tag("asyncio")
        await store.fetch_tags(search="async", sort_by="name", sort_order="asc")
        await store.fetch_popular_tags(limit=3)
        await store.fetch_tag(tag["id"])

        assert [t["name"] for t in store.tags] == ["asyncio"]
        assert store.popular_tags[0]["postCount"] == 0
        assert store.current_tag["id"] == tag["id"]


class TestUsersStore:

    @pytest.mark.asyncio
    async def test_profile_update_and_password(self, api, signed_in):
        store = UsersStore(api)
        user_id = signed_in.user["id"]

        await store.fetch_user(user_id)
        await store.update_user(user_id, {"bio": "Client-side bio"})
        assert store.user["bio"] == "Client-side bio"

        with pytest.raises(ApiError):
            await store.change_password(user_id, "wrong", "new-pass-1")
        assert store.error == "Current password is incorrect"
        assert signed_in.is_authenticated

        await store.change_password(user_id, "client-pass", "new-pass-1")
        assert store.error is None

    @pytest.mark.asyncio
    async def test_fetch_users_and_delete_self(self, api, signed_in):
        store = UsersStore(api)
        user_id = signed_in.user["id"]

        await store.fetch_users(search="client")
        await store.fetch_user_by_username(signed_in.user["username"])
        assert [u["id"] for u in store.users] == [user_id]

        await store.delete_user(user_id)

        assert store.users == []
        assert store.user is None
