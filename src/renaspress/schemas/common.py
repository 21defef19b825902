"""Shared response pieces."""

import math

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Pagination block attached to list responses."""

    page: int = Field(description="Current page (1-based)")
    per_page: int = Field(description="Items per page")
    total: int = Field(description="Total matching items")
    total_pages: int = Field(description="Number of pages")
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, per_page: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / per_page) if per_page else 0
        return cls(
            page=page,
            per_page=per_page,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class MessageResponse(BaseModel):
    """Success response carrying only a message."""

    success: bool = True
    message: str
