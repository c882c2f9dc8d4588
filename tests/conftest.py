from collections.abc import AsyncGenerator, Awaitable, Callable

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.clock import FrozenClock, get_clock
from app.config import Settings
from app.database import get_db
from app.dependencies import get_settings
from app.main import create_app
from app.models import Comment, Post, User
from app.models.enums import UserRole
from app.users.utils import hash_password
from shared.database.postgres import Base, get_async_engine, unit_of_work

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_JWT_SECRET = "test-secret"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = get_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url=TEST_DATABASE_URL, jwt_secret=TEST_JWT_SECRET)


def token_for(user: User, secret: str = TEST_JWT_SECRET) -> str:
    return jwt.encode({"sub": str(user.id)}, secret, algorithm="HS256")


def auth(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def make_user(session_factory) -> Callable[..., Awaitable[User]]:
    counter = {"n": 0}

    async def _make(
        role: UserRole = UserRole.USER,
        password: str | None = "password123",
        **fields,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=f"user{n}@example.com",
            name=f"user{n}",
            role=role,
            password_hash=hash_password(password) if password else None,
            **fields,
        )
        async with unit_of_work(session_factory) as session:
            session.add(user)
        return user

    return _make


@pytest.fixture
def make_post(session_factory, clock) -> Callable[..., Awaitable[Post]]:
    async def _make(author: User, title: str = "Hello", content_md: str = "body") -> Post:
        now = clock.now()
        post = Post(
            author_id=author.id,
            title=title,
            content_md=content_md,
            created_at=now,
            updated_at=now,
        )
        async with unit_of_work(session_factory) as session:
            session.add(post)
        clock.advance(seconds=1)
        return post

    return _make


@pytest.fixture
def make_comment(session_factory, clock) -> Callable[..., Awaitable[Comment]]:
    async def _make(post: Post, author: User, parent: Comment | None = None, content_md: str = "c") -> Comment:
        now = clock.now()
        comment = Comment(
            post_id=post.id,
            author_id=author.id,
            parent_id=parent.id if parent is not None else None,
            content_md=content_md,
            created_at=now,
            updated_at=now,
        )
        async with unit_of_work(session_factory) as session:
            session.add(comment)
        clock.advance(seconds=1)
        return comment

    return _make


@pytest_asyncio.fixture
async def async_client(session_factory, clock, settings) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with unit_of_work(session_factory) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_settings] = lambda: settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
