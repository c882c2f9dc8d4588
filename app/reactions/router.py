"""Reactions router: like/dislike toggles for posts and comments.

Zero business logic: delegates entirely to controller.
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.database import get_db
from app.dependencies import require_contributor
from app.models.enums import SubjectKind
from app.reactions import controller
from app.reactions.schemas import ReactionResponse, SetReactionRequest

router = APIRouter(tags=["Reactions"])

_RESPONSES = {
    401: {"description": "Not authenticated"},
    403: {"description": "Account deactivated, banned or muted"},
    404: {"description": "Subject not found"},
    422: {"description": "Value is not 1 or -1"},
}


@router.post(
    "/posts/{post_id}/reaction",
    response_model=ReactionResponse,
    summary="Like or dislike a post",
    description=(
        "Toggle semantics: repeating your current value removes it, "
        "the opposite value replaces it."
    ),
    responses=_RESPONSES,
)
async def react_to_post(
    post_id: UUID,
    payload: SetReactionRequest,
    state: AccessState = Depends(require_contributor),
    db: AsyncSession = Depends(get_db),
) -> ReactionResponse:
    return await controller.set_reaction(SubjectKind.POST, post_id, state.user_id, payload.value, db)


@router.post(
    "/comments/{comment_id}/reaction",
    response_model=ReactionResponse,
    summary="Like or dislike a comment",
    responses=_RESPONSES,
)
async def react_to_comment(
    comment_id: UUID,
    payload: SetReactionRequest,
    state: AccessState = Depends(require_contributor),
    db: AsyncSession = Depends(get_db),
) -> ReactionResponse:
    return await controller.set_reaction(
        SubjectKind.COMMENT, comment_id, state.user_id, payload.value, db
    )
