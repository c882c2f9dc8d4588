"""Offset pagination for list endpoints."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

MAX_PAGE_SIZE = 50


class OffsetPage(BaseModel, Generic[T]):
    items: list[T]
    total: int = Field(description="Total number of matching records.")
    page: int = Field(description="Current page number (1-indexed).")
    page_size: int = Field(description="Number of items per page.")
    pages: int = Field(description="Total number of pages.")

    @classmethod
    def build(cls, items: list[T], total: int, page: int, page_size: int) -> "OffsetPage[T]":
        pages = max(1, math.ceil(total / page_size)) if total else 1
        return cls(items=items, total=total, page=page, page_size=page_size, pages=pages)


def offset_for(page: int, page_size: int) -> int:
    return (page - 1) * page_size


LIKE_ESCAPE = "\\"


def contains_pattern(search: str) -> str:
    """``%search%`` for ILIKE, with the user's own ``%`` and ``_`` matched literally."""
    escaped = (
        search.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
