"""
Inkpost Backend — Comment Tests
================================

What we test:
    ✅ Create / reply, including the /comments/reply endpoint
    ✅ Thread rules: parent on the same post, depth limit
    ✅ Listings: by post, by user, top-level only, direct replies oldest first
    ✅ Author-only edit and delete; soft delete keeps replied-to comments
    ✅ Service-level checks against a mocked session
"""

import uuid
from unittest.mock import MagicMock

import pytest

from conftest import auth_headers
from inkpost.config import settings
from inkpost.constants import DELETED_MARKER
from inkpost.exceptions import ForbiddenError, NotFoundError
from inkpost.schemas import CreateCommentRequest
from inkpost.services.comment_service import comment_service


async def _comment(client, token, post_id, content="text", parent_id=None):
    payload = {"content": content, "postId": post_id}
    if parent_id:
        payload["parentId"] = parent_id
    response = await client.post("/api/comments", json=payload, headers=auth_headers(token))
    return response


class TestCreateComment:

    @pytest.mark.asyncio
    async def test_top_level_comment(self, test_client, post_factory):
        post, token = await post_factory()

        response = await _comment(test_client, token, post["id"], "First!")

        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "First!"
        assert body["postId"] == post["id"]
        assert body["parentId"] is None
        assert body["post"]["slug"] == post["slug"]
        assert body["replies"] == []
        assert body["replyCount"] == 0

    @pytest.mark.asyncio
    async def test_reply_links_parent(self, test_client, post_factory):
        post, token = await post_factory()
        parent = (await _comment(test_client, token, post["id"], "parent")).json()

        response = await test_client.post(
            "/api/comments/reply",
            json={"content": "child", "postId": post["id"], "parentId": parent["id"]},
            headers=auth_headers(token),
        )

        assert response.status_code == 201
        assert response.json()["parent"]["id"] == parent["id"]
        refreshed = (await test_client.get(f"/api/comments/{parent['id']}")).json()
        assert refreshed["replyCount"] == 1

    @pytest.mark.asyncio
    async def test_reply_endpoint_requires_parent(self, test_client, post_factory):
        post, token = await post_factory()

        response = await test_client.post(
            "/api/comments/reply",
            json={"content": "orphan", "postId": post["id"]},
            headers=auth_headers(token),
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_post_is_404(self, test_client, register_user):
        token, _ = await register_user()

        response = await _comment(test_client, token, str(uuid.uuid4()))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_parent_is_404(self, test_client, post_factory):
        post, token = await post_factory()

        response = await _comment(test_client, token, post["id"], parent_id=str(uuid.uuid4()))

        assert response.status_code == 404
        assert response.json()["message"] == "Parent comment not found"

    @pytest.mark.asyncio
    async def test_parent_on_other_post_is_400(self, test_client, post_factory):
        post_a, token = await post_factory()
        post_b, _ = await post_factory(token=token)
        parent = (await _comment(test_client, token, post_a["id"])).json()

        response = await _comment(test_client, token, post_b["id"], parent_id=parent["id"])

        assert response.status_code == 400
        assert response.json()["message"] == "Parent comment must belong to the same post"

    @pytest.mark.asyncio
    async def test_depth_limit(self, test_client, post_factory):
        """Replies may nest comment_max_depth levels below a top-level comment."""
        post, token = await post_factory()
        parent_id = (await _comment(test_client, token, post["id"], "depth 0")).json()["id"]
        for depth in range(1, settings.comment_max_depth + 1):
            response = await _comment(test_client, token, post["id"], f"depth {depth}", parent_id)
            assert response.status_code == 201
            parent_id = response.json()["id"]

        too_deep = await _comment(test_client, token, post["id"], "too deep", parent_id)

        assert too_deep.status_code == 400
        assert too_deep.json()["details"]["field"] == "parentId"

    @pytest.mark.asyncio
    async def test_content_length_validated(self, test_client, post_factory):
        post, token = await post_factory()

        response = await _comment(test_client, token, post["id"], "x" * 1001)

        assert response.status_code == 400


class TestListComments:

    @pytest.mark.asyncio
    async def test_by_post_newest_first(self, test_client, post_factory):
        post, token = await post_factory()
        for text in ("one", "two", "three"):
            await _comment(test_client, token, post["id"], text)

        response = await test_client.get(f"/api/comments/post/{post['id']}")

        body = response.json()
        assert [c["content"] for c in body["comments"]] == ["three", "two", "one"]
        assert body["pagination"]["total"] == 3

    @pytest.mark.asyncio
    async def test_by_post_path_wins_over_query(self, test_client, post_factory):
        post, token = await post_factory()
        other, _ = await post_factory(token=token)
        await _comment(test_client, token, post["id"], "here")
        await _comment(test_client, token, other["id"], "elsewhere")

        response = await test_client.get(
            f"/api/comments/post/{post['id']}", params={"postId": other["id"]}
        )

        assert response.status_code == 200
        assert [c["content"] for c in response.json()["comments"]] == ["here"]

    @pytest.mark.asyncio
    async def test_by_unknown_post_is_404(self, test_client):
        response = await test_client.get(f"/api/comments/post/{uuid.uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_top_level_only(self, test_client, post_factory):
        post, token = await post_factory()
        root = (await _comment(test_client, token, post["id"], "root")).json()
        await _comment(test_client, token, post["id"], "reply", root["id"])

        response = await test_client.get(
            "/api/comments", params={"postId": post["id"], "includeReplies": "false"}
        )

        assert [c["content"] for c in response.json()["comments"]] == ["root"]

    @pytest.mark.asyncio
    async def test_by_user(self, test_client, post_factory, register_user):
        post, author_token = await post_factory()
        token, user = await register_user()
        await _comment(test_client, token, post["id"], "mine")
        await _comment(test_client, author_token, post["id"], "theirs")

        response = await test_client.get(f"/api/comments/user/{user['id']}")

        assert [c["content"] for c in response.json()["comments"]] == ["mine"]

    @pytest.mark.asyncio
    async def test_by_unknown_user_is_404(self, test_client):
        response = await test_client.get(f"/api/comments/user/{uuid.uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_replies_oldest_first(self, test_client, post_factory):
        post, token = await post_factory()
        root = (await _comment(test_client, token, post["id"], "root")).json()
        for text in ("a", "b", "c"):
            await _comment(test_client, token, post["id"], text, root["id"])

        response = await test_client.get(
            f"/api/comments/{root['id']}/replies", params={"limit": 2}
        )

        body = response.json()
        assert [r["content"] for r in body["replies"]] == ["a", "b"]
        assert body["pagination"]["pages"] == 2


class TestEditDeleteComment:

    @pytest.mark.asyncio
    async def test_author_can_edit(self, test_client, post_factory):
        post, token = await post_factory()
        comment = (await _comment(test_client, token, post["id"], "typo")).json()

        response = await test_client.patch(
            f"/api/comments/{comment['id']}", json={"content": "fixed"}, headers=auth_headers(token)
        )

        assert response.status_code == 200
        assert response.json()["content"] == "fixed"

    @pytest.mark.asyncio
    async def test_other_user_cannot_edit(self, test_client, post_factory, register_user):
        post, token = await post_factory()
        comment = (await _comment(test_client, token, post["id"])).json()
        other, _ = await register_user()

        response = await test_client.patch(
            f"/api/comments/{comment['id']}", json={"content": "mine now"}, headers=auth_headers(other)
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_leaf_removes_row(self, test_client, post_factory):
        post, token = await post_factory()
        comment = (await _comment(test_client, token, post["id"])).json()

        response = await test_client.delete(f"/api/comments/{comment['id']}", headers=auth_headers(token))

        assert response.json() == {"message": "Comment deleted successfully"}
        assert (await test_client.get(f"/api/comments/{comment['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_with_replies_is_soft(self, test_client, post_factory):
        post, token = await post_factory()
        root = (await _comment(test_client, token, post["id"], "original")).json()
        reply = (await _comment(test_client, token, post["id"], "answer", root["id"])).json()

        response = await test_client.delete(f"/api/comments/{root['id']}", headers=auth_headers(token))

        assert response.json() == {"message": "Comment content deleted successfully"}
        kept = (await test_client.get(f"/api/comments/{root['id']}")).json()
        assert kept["content"] == DELETED_MARKER
        assert kept["replies"][0]["id"] == reply["id"]


class TestCommentServiceUnit:
    """Guard clauses checked against a mocked session (no database)."""

    @pytest.mark.asyncio
    async def test_missing_post_raises(self, mock_db_session):
        mock_db_session.get.return_value = None
        user = MagicMock(id=uuid.uuid4())

        with pytest.raises(NotFoundError):
            await comment_service.create(
                mock_db_session, user, CreateCommentRequest(content="hi", post_id=uuid.uuid4())
            )
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_by_non_author_raises(self, mock_db_session):
        mock_db_session.get.return_value = MagicMock(author_id=uuid.uuid4())

        with pytest.raises(ForbiddenError):
            await comment_service.update(
                mock_db_session, uuid.uuid4(), MagicMock(id=uuid.uuid4()), MagicMock(content="x")
            )
        mock_db_session.flush.assert_not_awaited()
