"""Posts domain Pydantic V2 schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostWriteRequest(BaseModel):
    """Request body for creating or editing a post."""

    title: str = Field(..., min_length=1, max_length=120)
    content_md: str = Field(..., min_length=1, description="Post body, stored as markdown.")


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    title: str
    content_md: str
    created_at: datetime
    updated_at: datetime


class PostCounts(BaseModel):
    comments: int = Field(description="Live comments on the post.")
    likes: int
    dislikes: int


class PostDetailResponse(PostResponse):
    counts: PostCounts
    viewer_reaction: int = Field(
        default=0, description="The viewer's own reaction: 1, -1 or 0 (always 0 when anonymous)."
    )
