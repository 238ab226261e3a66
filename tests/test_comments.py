"""
Comment endpoint tests - covers listing, creating, editing, deleting and
liking comments, plus the status codes for each rejection:
404 (missing or wrong parent post), 400 (not owner/admin, or self-like),
409 (duplicate like / unlike without a like).
"""
import pytest
from httpx import AsyncClient


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_post(client: AsyncClient, headers: dict, title: str = "A post") -> int:
    resp = await client.post("/api/posts", json={"title": title, "content": "Body"}, headers=headers)
    assert resp.status_code == 200
    return resp.json()["id"]


async def _create_comment(client: AsyncClient, post_id: int, headers: dict, content: str = "Hi") -> int:
    resp = await client.post(
        f"/api/posts/{post_id}/comments", json={"content": content}, headers=headers
    )
    assert resp.status_code == 200
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# List / create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_comments_empty(async_client: AsyncClient, alice_headers):
    post_id = await _create_post(async_client, alice_headers)
    resp = await async_client.get(f"/api/posts/{post_id}/comments")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_list_comments_unknown_post(async_client: AsyncClient):
    resp = await async_client.get("/api/posts/99999/comments")
    assert resp.status_code == 404
    assert resp.json()["statusCode"] == 404


@pytest.mark.asyncio
async def test_create_comment(async_client: AsyncClient, alice_headers, bob_headers):
    """Posting a comment returns 200 with the comment view."""
    post_id = await _create_post(async_client, alice_headers)

    resp = await async_client.post(
        f"/api/posts/{post_id}/comments", json={"content": "Great post!"}, headers=bob_headers
    )
    assert resp.status_code == 200
    comment = resp.json()
    assert comment["content"] == "Great post!"
    assert comment["username"] == "bobby"
    assert comment["post_id"] == post_id
    assert comment["like_count"] == 0
    assert "id" in comment
    assert "created_at" in comment


@pytest.mark.asyncio
async def test_create_comment_requires_auth(async_client: AsyncClient, alice_headers):
    post_id = await _create_post(async_client, alice_headers)
    resp = await async_client.post(f"/api/posts/{post_id}/comments", json={"content": "anon"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_create_comment_on_unknown_post(async_client: AsyncClient, alice_headers):
    resp = await async_client.post(
        "/api/posts/99999/comments", json={"content": "Ghost"}, headers=alice_headers
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_create_comment_missing_content(async_client: AsyncClient, alice_headers):
    post_id = await _create_post(async_client, alice_headers)
    resp = await async_client.post(f"/api/posts/{post_id}/comments", json={}, headers=alice_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_comments_in_creation_order(async_client: AsyncClient, alice_headers, bob_headers):
    post_id = await _create_post(async_client, alice_headers)
    for i in range(3):
        await _create_comment(async_client, post_id, bob_headers, f"Comment {i}")

    resp = await async_client.get(f"/api/posts/{post_id}/comments")
    assert [c["content"] for c in resp.json()] == ["Comment 0", "Comment 1", "Comment 2"]


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_own_comment(async_client: AsyncClient, alice_headers, bob_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, bob_headers)

    resp = await async_client.put(
        f"/api/posts/{post_id}/comments/{comment_id}", json={"content": "Edited"}, headers=bob_headers
    )
    assert resp.status_code == 200
    assert resp.json()["content"] == "Edited"
    assert resp.json()["modified_at"] is not None


@pytest.mark.asyncio
async def test_update_someone_elses_comment(async_client: AsyncClient, alice_headers, bob_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, bob_headers)

    resp = await async_client.put(
        f"/api/posts/{post_id}/comments/{comment_id}", json={"content": "Mine now"}, headers=alice_headers
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["statusCode"] == 400
    assert body["message"]


@pytest.mark.asyncio
async def test_admin_updates_any_comment(async_client: AsyncClient, alice_headers, admin_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, alice_headers)

    resp = await async_client.put(
        f"/api/posts/{post_id}/comments/{comment_id}", json={"content": "Moderated"}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["content"] == "Moderated"


@pytest.mark.asyncio
async def test_update_comment_through_wrong_post(async_client: AsyncClient, alice_headers):
    home = await _create_post(async_client, alice_headers, "Home")
    other = await _create_post(async_client, alice_headers, "Other")
    comment_id = await _create_comment(async_client, home, alice_headers)

    resp = await async_client.put(
        f"/api/posts/{other}/comments/{comment_id}", json={"content": "x"}, headers=alice_headers
    )
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_own_comment(async_client: AsyncClient, alice_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, alice_headers)

    resp = await async_client.delete(f"/api/posts/{post_id}/comments/{comment_id}", headers=alice_headers)
    assert resp.status_code == 200
    assert resp.json()["statusCode"] == 200

    listing = await async_client.get(f"/api/posts/{post_id}/comments")
    assert listing.json() == []


@pytest.mark.asyncio
async def test_delete_someone_elses_comment(async_client: AsyncClient, alice_headers, bob_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, alice_headers)

    resp = await async_client.delete(f"/api/posts/{post_id}/comments/{comment_id}", headers=bob_headers)
    assert resp.status_code == 400

    listing = await async_client.get(f"/api/posts/{post_id}/comments")
    assert len(listing.json()) == 1


@pytest.mark.asyncio
async def test_admin_deletes_any_comment(async_client: AsyncClient, alice_headers, admin_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, alice_headers)

    resp = await async_client.delete(f"/api/posts/{post_id}/comments/{comment_id}", headers=admin_headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_delete_unknown_comment(async_client: AsyncClient, alice_headers):
    post_id = await _create_post(async_client, alice_headers)
    resp = await async_client.delete(f"/api/posts/{post_id}/comments/99999", headers=alice_headers)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_like_and_unlike_comment(async_client: AsyncClient, alice_headers, bob_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, alice_headers)
    url = f"/api/posts/{post_id}/comments/{comment_id}/like"

    resp = await async_client.post(url, headers=bob_headers)
    assert resp.status_code == 200
    assert resp.json()["like_count"] == 1

    resp = await async_client.post(url, headers=bob_headers)
    assert resp.status_code == 409
    assert resp.json()["statusCode"] == 409

    resp = await async_client.delete(url, headers=bob_headers)
    assert resp.status_code == 200
    assert resp.json()["like_count"] == 0

    resp = await async_client.delete(url, headers=bob_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_like_own_comment(async_client: AsyncClient, alice_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, alice_headers)

    resp = await async_client.post(
        f"/api/posts/{post_id}/comments/{comment_id}/like", headers=alice_headers
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_like_comment_through_wrong_post(async_client: AsyncClient, alice_headers, bob_headers):
    home = await _create_post(async_client, alice_headers, "Home")
    other = await _create_post(async_client, alice_headers, "Other")
    comment_id = await _create_comment(async_client, home, alice_headers)

    resp = await async_client.post(f"/api/posts/{other}/comments/{comment_id}/like", headers=bob_headers)
    assert resp.status_code == 404
    resp = await async_client.delete(f"/api/posts/{other}/comments/{comment_id}/like", headers=bob_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_comment_like_count_visible_in_post_detail(async_client: AsyncClient, alice_headers, bob_headers):
    post_id = await _create_post(async_client, alice_headers)
    comment_id = await _create_comment(async_client, post_id, alice_headers)
    await async_client.post(f"/api/posts/{post_id}/comments/{comment_id}/like", headers=bob_headers)

    detail = await async_client.get(f"/api/posts/{post_id}")
    assert detail.json()["comments"][0]["like_count"] == 1
