import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.comments.router import router as comments_router
from app.database import init_db
from app.dependencies import get_settings
from app.moderation.router import router as moderation_router
from app.posts.router import router as posts_router
from app.reactions.router import router as reactions_router
from app.users.router import router as users_router
from shared.middleware import (
    error_envelope_middleware,
    register_exception_handlers,
    request_id_middleware,
)

# Swagger tag groups displayed in the OpenAPI docs sidebar
_OPENAPI_TAGS = [
    {
        "name": "Posts",
        "description": (
            "Create, edit, read and list posts. Reads carry comment and reaction "
            "counts plus the caller's own reaction."
        ),
    },
    {
        "name": "Comments",
        "description": (
            "Threaded comments. The thread is returned as a forest; replies whose "
            "parent was deleted move to the top level."
        ),
    },
    {
        "name": "Reactions",
        "description": (
            "Like/dislike toggles on posts and comments. Sending the value you "
            "already hold removes it."
        ),
    },
    {
        "name": "Users",
        "description": "The caller's own account: profile, access verdict, self-deactivation.",
    },
    {
        "name": "admin",
        "description": (
            "Moderation: timed or permanent bans and mutes, account deactivation, "
            "content removal. Admin accounts are immune to moderation."
        ),
    },
    {
        "name": "Health",
        "description": "Liveness probe.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    init_db(settings.database_url)
    logging.getLogger(__name__).info("Forum service started (env=%s)", settings.env_name)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Forum Service",
        description=(
            "Discussion forum core: access evaluation with lazily expiring bans and "
            "mutes, a reaction ledger, threaded comments, moderation and cascading "
            "deletion."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=_OPENAPI_TAGS,
        lifespan=lifespan,
    )

    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    register_exception_handlers(app)

    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(comments_router, prefix="/api/v1")
    app.include_router(reactions_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(moderation_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        """Lightweight liveness probe. Does not hit the database."""
        return {"status": "ok", "service": "forum"}

    return app


app = create_app()
