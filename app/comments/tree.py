"""Flat comment rows → reply forest.

Input must already be filtered to live comments and sorted by creation time.
A single pass links every node under its parent when the parent is in the
input; anything else becomes a root. Because deleted comments never reach this
function, replies to a deleted comment surface as roots instead of vanishing
with their parent. Order is never recomputed: roots and each ``replies`` list
keep the order of the input.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class CommentNode:
    id: uuid.UUID
    post_id: uuid.UUID
    author_id: uuid.UUID
    parent_id: uuid.UUID | None
    content_md: str
    created_at: datetime
    updated_at: datetime
    likes: int = 0
    dislikes: int = 0
    viewer_reaction: int = 0
    replies: list[CommentNode] = field(default_factory=list)


def assemble_forest(nodes: Iterable[CommentNode]) -> list[CommentNode]:
    by_id: dict[uuid.UUID, CommentNode] = {}
    for node in nodes:
        node.replies = []
        by_id[node.id] = node

    roots: list[CommentNode] = []
    for node in by_id.values():
        parent = by_id.get(node.parent_id) if node.parent_id is not None else None
        if parent is not None and parent is not node:
            parent.replies.append(node)
        else:
            roots.append(node)
    return roots
