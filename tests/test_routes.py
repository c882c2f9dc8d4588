import uuid

import jwt
import pytest
from conftest import auth

from app.models.enums import UserRole


@pytest.mark.asyncio
async def test_health(async_client) -> None:
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "forum"}


@pytest.mark.asyncio
async def test_missing_token_is_401_with_envelope(async_client) -> None:
    resp = await async_client.post(
        "/api/v1/posts",
        json={"title": "t", "content_md": "b"},
        headers={"X-Request-ID": "req-123"},
    )
    assert resp.status_code == 401
    assert resp.headers["X-Request-ID"] == "req-123"
    assert resp.json() == {
        "error": {"code": "unauthenticated", "message": "Unauthorized"},
        "request_id": "req-123",
    }


@pytest.mark.asyncio
async def test_bad_signature_is_401(async_client, make_user) -> None:
    user = await make_user()
    token = jwt.encode({"sub": str(user.id)}, "wrong-secret", algorithm="HS256")
    resp = await async_client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_unknown_user_is_401(async_client) -> None:
    token = jwt.encode({"sub": str(uuid.uuid4())}, "test-secret", algorithm="HS256")
    resp = await async_client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_missing_post_is_404(async_client) -> None:
    resp = await async_client.get(f"/api/v1/posts/{uuid.uuid4()}")
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == {"code": "not_found", "message": "Post not found"}
    assert body["request_id"]


@pytest.mark.asyncio
async def test_post_lifecycle(async_client, make_user) -> None:
    author = await make_user()
    fan = await make_user()

    created = await async_client.post(
        "/api/v1/posts", json={"title": "First", "content_md": "Hello"}, headers=auth(author)
    )
    assert created.status_code == 201
    post_id = created.json()["id"]

    await async_client.post(
        f"/api/v1/posts/{post_id}/reaction", json={"value": -1}, headers=auth(fan)
    )
    await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"content_md": "nice"}, headers=auth(fan)
    )

    detail = await async_client.get(f"/api/v1/posts/{post_id}", headers=auth(fan))
    assert detail.status_code == 200
    body = detail.json()
    assert body["counts"] == {"comments": 1, "likes": 0, "dislikes": 1}
    assert body["viewer_reaction"] == -1

    edited = await async_client.put(
        f"/api/v1/posts/{post_id}",
        json={"title": "First!", "content_md": "Hello again"},
        headers=auth(author),
    )
    assert edited.status_code == 200
    assert edited.json()["title"] == "First!"

    forbidden = await async_client.put(
        f"/api/v1/posts/{post_id}", json={"title": "x", "content_md": "y"}, headers=auth(fan)
    )
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_list_posts_search_and_pagination(async_client, make_user, make_post) -> None:
    user = await make_user()
    await make_post(user, title="Apples")
    await make_post(user, title="Bananas")
    await make_post(user, title="Apple pie")

    resp = await async_client.get("/api/v1/posts", params={"page_size": 2})
    body = resp.json()
    assert body["total"] == 3
    assert body["pages"] == 2
    assert [p["title"] for p in body["items"]] == ["Apple pie", "Bananas"]

    resp = await async_client.get("/api/v1/posts", params={"search": "apple"})
    assert [p["title"] for p in resp.json()["items"]] == ["Apple pie", "Apples"]

    resp = await async_client.get("/api/v1/posts", params={"page_size": 51})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_ban_comment_unban_flow(async_client, make_user, make_post, clock) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    user = await make_user()
    post = await make_post(admin)
    url = f"/api/v1/posts/{post.id}/comments"

    banned = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={"ban_hours": 1}, headers=auth(admin)
    )
    assert banned.status_code == 200
    assert banned.json()["blocked"] is True

    rejected = await async_client.post(url, json={"content_md": "hi"}, headers=auth(user))
    assert rejected.status_code == 403
    assert rejected.json()["error"]["message"] == "Account banned"

    unbanned = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={"unban": True}, headers=auth(admin)
    )
    assert unbanned.json()["blocked"] is False

    accepted = await async_client.post(url, json={"content_md": "hi"}, headers=auth(user))
    assert accepted.status_code == 201

    tree = await async_client.get(url)
    roots = tree.json()["items"]
    assert [c["id"] for c in roots] == [accepted.json()["id"]]
    assert roots[0]["parent_id"] is None


@pytest.mark.asyncio
async def test_timed_ban_lapses_on_its_own(async_client, make_user, make_post, clock) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    user = await make_user()
    post = await make_post(admin)

    await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={"ban_hours": 1}, headers=auth(admin)
    )
    clock.advance(hours=1, seconds=1)

    resp = await async_client.post(
        f"/api/v1/posts/{post.id}/comments", json={"content_md": "back"}, headers=auth(user)
    )
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_muted_user_cannot_react(async_client, make_user, make_post) -> None:
    user = await make_user(muted_forever=True)
    post = await make_post(user)
    resp = await async_client.post(
        f"/api/v1/posts/{post.id}/reaction", json={"value": 1}, headers=auth(user)
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Account muted"


@pytest.mark.asyncio
async def test_moderation_route_errors(async_client, make_user) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    other_admin = await make_user(role=UserRole.ADMIN)
    user = await make_user()

    resp = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={"ban_permanent": True}, headers=auth(user)
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Admin only"

    resp = await async_client.patch(
        f"/api/v1/admin/users/{other_admin.id}", json={"ban_permanent": True}, headers=auth(admin)
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Cannot moderate admin"

    resp = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={}, headers=auth(admin)
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "invalid_state"

    resp = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={"ban_hours": 0}, headers=auth(admin)
    )
    assert resp.status_code == 422

    resp = await async_client.patch(
        f"/api/v1/admin/users/{uuid.uuid4()}", json={"unban": True}, headers=auth(admin)
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_deactivation_toggle_and_listing(async_client, make_user) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    user = await make_user()

    resp = await async_client.patch(
        f"/api/v1/admin/users/{user.id}/deactivate", headers=auth(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["deactivated_at"] is not None

    # Deactivated accounts browse anonymously and cannot write.
    resp = await async_client.post(
        "/api/v1/posts", json={"title": "t", "content_md": "b"}, headers=auth(user)
    )
    assert resp.status_code == 403
    assert resp.json()["error"]["message"] == "Account deactivated"
    assert (await async_client.get("/api/v1/posts", headers=auth(user))).status_code == 200

    listing = await async_client.get("/api/v1/admin/users", headers=auth(admin))
    rows = {row["id"]: row for row in listing.json()["items"]}
    assert rows[str(user.id)]["deactivated_at"] is not None

    resp = await async_client.patch(
        f"/api/v1/admin/users/{user.id}/deactivate", headers=auth(admin)
    )
    assert resp.json()["deactivated_at"] is None


@pytest.mark.asyncio
async def test_me(async_client, make_user) -> None:
    user = await make_user(muted_forever=True)
    resp = await async_client.get("/api/v1/users/me", headers=auth(user))
    assert resp.status_code == 200
    access = resp.json()["access"]
    assert access["status"] == "active"
    assert access["can_write"] is True
    assert access["can_react"] is False
    assert access["muted_permanently"] is True


@pytest.mark.asyncio
async def test_self_deactivation(async_client, make_user) -> None:
    user = await make_user(password="s3cret-pass")

    wrong = await async_client.request(
        "DELETE", "/api/v1/users/me", json={"password": "nope"}, headers=auth(user)
    )
    assert wrong.status_code == 403

    ok = await async_client.request(
        "DELETE", "/api/v1/users/me", json={"password": "s3cret-pass"}, headers=auth(user)
    )
    assert ok.status_code == 200
    assert ok.json()["access"]["status"] == "deactivated"

    # One way: the account can no longer act, not even read its own profile.
    again = await async_client.request(
        "DELETE", "/api/v1/users/me", json={"password": "s3cret-pass"}, headers=auth(user)
    )
    assert again.status_code == 403
    me = await async_client.get("/api/v1/users/me", headers=auth(user))
    assert me.status_code == 403
    assert me.json()["error"]["message"] == "Account deactivated"


@pytest.mark.asyncio
async def test_self_deactivation_without_password(async_client, make_user) -> None:
    user = await make_user(password=None)
    resp = await async_client.request(
        "DELETE", "/api/v1/users/me", json={"password": "anything"}, headers=auth(user)
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["message"] == "Account has no password"


@pytest.mark.asyncio
async def test_deactivated_account_cannot_read_me(async_client, make_user, clock) -> None:
    user = await make_user(deactivated_at=clock.now())
    resp = await async_client.get("/api/v1/users/me", headers=auth(user))
    assert resp.status_code == 403
    assert resp.json()["error"] == {"code": "forbidden", "message": "Account deactivated"}


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["ban_hours", "mute_hours"])
async def test_restriction_hours_are_bounded(async_client, make_user, field) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    user = await make_user()

    resp = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={field: 1_000_000_000}, headers=auth(admin)
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "invalid_state"

    resp = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={field: 24 * 365 * 100}, headers=auth(admin)
    )
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_permanent_ban_comment_unban_flow(async_client, make_user, make_post) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    user = await make_user()
    post = await make_post(admin)
    url = f"/api/v1/posts/{post.id}/comments"

    banned = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={"ban_permanent": True}, headers=auth(admin)
    )
    assert banned.json()["is_banned"] is True
    assert banned.json()["banned_until"] is None

    rejected = await async_client.post(url, json={"content_md": "hi"}, headers=auth(user))
    assert rejected.status_code == 403
    assert rejected.json()["error"]["message"] == "Account banned"

    unbanned = await async_client.patch(
        f"/api/v1/admin/users/{user.id}", json={"unban": True}, headers=auth(admin)
    )
    assert unbanned.json()["is_banned"] is False

    accepted = await async_client.post(url, json={"content_md": "hi"}, headers=auth(user))
    assert accepted.status_code == 201

    roots = (await async_client.get(url)).json()["items"]
    assert [c["id"] for c in roots] == [accepted.json()["id"]]
    assert roots[0]["parent_id"] is None


@pytest.mark.asyncio
async def test_post_search_matches_wildcards_literally(async_client, make_user, make_post) -> None:
    user = await make_user()
    await make_post(user, title="50% off")
    await make_post(user, title="500 items")
    await make_post(user, title="snake_case")
    await make_post(user, title="snakeXcase")

    resp = await async_client.get("/api/v1/posts", params={"search": "50%"})
    assert [p["title"] for p in resp.json()["items"]] == ["50% off"]

    resp = await async_client.get("/api/v1/posts", params={"search": "e_c"})
    assert [p["title"] for p in resp.json()["items"]] == ["snake_case"]


@pytest.mark.asyncio
async def test_admin_user_search_matches_wildcards_literally(async_client, make_user) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    await make_user()

    resp = await async_client.get(
        "/api/v1/admin/users", params={"search": "_"}, headers=auth(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["items"] == []

    resp = await async_client.get(
        "/api/v1/admin/users", params={"search": "user2"}, headers=auth(admin)
    )
    assert [row["name"] for row in resp.json()["items"]] == ["user2"]
