# src/blog_board/schemas/comment.py
"""Comment-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_board.schemas.common import require_text


class CommentCreate(BaseModel):
    """Schema for adding a comment to a post."""

    body: str = Field(..., min_length=1, description="Comment text")

    @field_validator("body")
    @classmethod
    def _check_body(cls, value: str) -> str:
        return require_text(value)


class CommentUpdate(CommentCreate):
    """Schema for replacing the text of a comment."""


class CommentOut(BaseModel):
    """Comment information returned to callers."""

    id: int
    post_id: int
    body: str

    model_config = ConfigDict(from_attributes=True, frozen=True)
