"""Comments domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateCommentRequest(BaseModel):
    content_md: str = Field(..., min_length=1, description="Comment body, stored as markdown.")
    parent_id: UUID | None = Field(
        default=None,
        description="Comment being replied to. Must be a live comment on the same post.",
    )


class UpdateCommentRequest(BaseModel):
    content_md: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    author_id: UUID
    parent_id: UUID | None
    content_md: str
    created_at: datetime
    updated_at: datetime


class CommentNodeResponse(BaseModel):
    """One comment in a thread, with its replies in creation order."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    author_id: UUID
    parent_id: UUID | None
    content_md: str
    created_at: datetime
    updated_at: datetime
    likes: int
    dislikes: int
    viewer_reaction: int = Field(description="The viewer's own reaction: 1, -1 or 0.")
    replies: list[CommentNodeResponse] = Field(default_factory=list)


class CommentTreeResponse(BaseModel):
    items: list[CommentNodeResponse] = Field(
        description="Root comments, oldest first. Replies to deleted comments appear here."
    )


CommentNodeResponse.model_rebuild()
