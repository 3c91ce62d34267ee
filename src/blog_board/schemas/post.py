# src/blog_board/schemas/post.py
"""Post-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_board.schemas.common import require_text


class PostDetailCreate(BaseModel):
    """Detail supplied together with a new post."""

    created_by: str = Field(..., min_length=1, max_length=255, description="Author name")

    @field_validator("created_by")
    @classmethod
    def _check_created_by(cls, value: str) -> str:
        return require_text(value)


class PostCreate(BaseModel):
    """Schema for creating a new post with its detail record."""

    title: str = Field(..., min_length=1, description="Post title")
    detail: PostDetailCreate

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        return require_text(value)


class PostUpdate(BaseModel):
    """Schema for replacing the title of an existing post."""

    title: str = Field(..., min_length=1, description="New post title")
    expected_version: int | None = Field(
        None,
        ge=1,
        description="Version the caller last saw; a mismatch is a conflict",
    )

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        return require_text(value)


class PostDetailOut(BaseModel):
    """Detail record as returned to callers."""

    created_by: str
    created_on: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)


class PostOut(BaseModel):
    """Post with its detail, tag names and comment count."""

    id: int
    title: str
    version: int
    detail: PostDetailOut
    tags: list[str] = Field(default_factory=list)
    comment_count: int = 0

    model_config = ConfigDict(frozen=True)
