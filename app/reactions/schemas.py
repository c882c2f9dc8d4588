"""Reactions domain Pydantic V2 schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class SetReactionRequest(BaseModel):
    """Request body for reacting to a post or comment."""

    value: Literal[1, -1] = Field(
        description=(
            "1 to like, -1 to dislike. Sending the value you already hold removes it; "
            "sending the opposite value switches it."
        ),
    )


class ReactionResponse(BaseModel):
    """Reaction state after a toggle."""

    value: int = Field(description="The caller's reaction after this call: 1, -1 or 0.")
    likes: int
    dislikes: int
