import uuid

import pytest
from conftest import auth
from sqlalchemy import func, select
from sqlalchemy import inspect as sa_inspect

from app.access.evaluator import evaluate_access
from app.deletion.service import delete_comment, delete_post, delete_subject
from app.models import Comment, Post, Reaction
from app.models.enums import SubjectKind, UserRole
from app.reactions import service as reactions
from app.subjects import SubjectAccessDeniedError, SubjectNotFoundError
from shared.database.postgres import unit_of_work


async def _count(db, model, *where) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*where))
    return result.scalar_one()


async def _thread(session_factory, make_user, make_post, make_comment):
    """A post with two comments and a reaction on each of the three subjects."""
    author = await make_user()
    fan = await make_user()
    post = await make_post(author)
    c1 = await make_comment(post, author)
    c2 = await make_comment(post, fan, parent=c1)
    async with unit_of_work(session_factory) as session:
        await reactions.set_reaction(SubjectKind.POST, post.id, fan.id, 1, session)
        await reactions.set_reaction(SubjectKind.COMMENT, c1.id, fan.id, -1, session)
        await reactions.set_reaction(SubjectKind.COMMENT, c2.id, author.id, 1, session)
    return author, fan, post, c1, c2


@pytest.mark.asyncio
async def test_soft_delete_post_cascades(
    db_session, session_factory, make_user, make_post, make_comment, clock
) -> None:
    author, _, post, c1, c2 = await _thread(session_factory, make_user, make_post, make_comment)

    await delete_post(post.id, evaluate_access(author, clock.now()), db_session, clock)

    assert await _count(db_session, Reaction) == 0
    assert await _count(db_session, Comment, Comment.deleted_at.is_(None)) == 0
    assert await _count(db_session, Comment) == 2
    stored = await db_session.get(Post, post.id)
    assert stored.deleted_at is not None
    with pytest.raises(SubjectNotFoundError):
        await delete_post(post.id, evaluate_access(author, clock.now()), db_session, clock)


@pytest.mark.asyncio
async def test_hard_delete_post_removes_rows(
    db_session, session_factory, make_user, make_post, make_comment, clock
) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    _, _, post, _, _ = await _thread(session_factory, make_user, make_post, make_comment)

    await delete_subject(
        SubjectKind.POST, post.id, evaluate_access(admin, clock.now()), db_session, clock, hard=True
    )

    assert await _count(db_session, Reaction) == 0
    assert await _count(db_session, Comment) == 0
    assert await _count(db_session, Post, Post.id == post.id) == 0


@pytest.mark.asyncio
async def test_post_deletion_rolls_back_as_a_unit(
    session_factory, make_user, make_post, make_comment, clock
) -> None:
    author, _, post, _, _ = await _thread(session_factory, make_user, make_post, make_comment)

    with pytest.raises(RuntimeError):
        async with unit_of_work(session_factory) as session:
            await delete_post(post.id, evaluate_access(author, clock.now()), session, clock)
            raise RuntimeError("fail after the cascade")

    async with session_factory() as session:
        assert await _count(session, Reaction) == 3
        assert await _count(session, Comment, Comment.deleted_at.is_(None)) == 2
        assert await _count(session, Post, Post.deleted_at.is_(None)) == 1


@pytest.mark.asyncio
async def test_comment_delete_is_soft_and_keeps_reactions(
    db_session, session_factory, make_user, make_post, make_comment, clock
) -> None:
    author, _, _, c1, c2 = await _thread(session_factory, make_user, make_post, make_comment)

    await delete_comment(c1.id, evaluate_access(author, clock.now()), db_session, clock)

    assert await _count(db_session, Reaction) == 3
    assert (await db_session.get(Comment, c1.id)).deleted_at is not None
    assert (await db_session.get(Comment, c2.id)).deleted_at is None


@pytest.mark.asyncio
async def test_only_author_or_admin_may_delete(
    db_session, make_user, make_post, clock
) -> None:
    author = await make_user()
    stranger = await make_user()
    admin = await make_user(role=UserRole.ADMIN)
    post = await make_post(author)

    with pytest.raises(SubjectAccessDeniedError):
        await delete_post(post.id, evaluate_access(stranger, clock.now()), db_session, clock)

    await delete_post(post.id, evaluate_access(admin, clock.now()), db_session, clock)
    assert (await db_session.get(Post, post.id)).deleted_at is not None


@pytest.mark.asyncio
async def test_missing_subject(db_session, make_user, clock) -> None:
    user = await make_user()
    with pytest.raises(SubjectNotFoundError):
        await delete_comment(uuid.uuid4(), evaluate_access(user, clock.now()), db_session, clock)


@pytest.mark.asyncio
async def test_banned_author_can_still_delete(async_client, make_user, make_post) -> None:
    author = await make_user(is_banned=True)
    post = await make_post(author)

    resp = await async_client.delete(f"/api/v1/posts/{post.id}", headers=auth(author))
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    resp = await async_client.get(f"/api/v1/posts/{post.id}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_stranger_gets_403(async_client, make_user, make_post) -> None:
    author = await make_user()
    stranger = await make_user()
    post = await make_post(author)

    resp = await async_client.delete(f"/api/v1/posts/{post.id}", headers=auth(stranger))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "forbidden"


@pytest.mark.asyncio
async def test_admin_route_hard_deletes(
    async_client, session_factory, make_user, make_post, make_comment
) -> None:
    admin = await make_user(role=UserRole.ADMIN)
    _, _, post, _, _ = await _thread(session_factory, make_user, make_post, make_comment)

    resp = await async_client.delete(f"/api/v1/admin/posts/{post.id}", headers=auth(admin))
    assert resp.status_code == 200

    async with session_factory() as session:
        assert await session.get(Post, post.id) is None
        assert await _count(session, Reaction) == 0


def test_cascades_are_explicit_not_orm_relationships() -> None:
    # Deletion walks comments by query; nothing relies on mapped relationships.
    assert not sa_inspect(Post).relationships
    assert not sa_inspect(Comment).relationships
