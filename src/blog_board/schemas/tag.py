# src/blog_board/schemas/tag.py
"""Tag-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_board.schemas.common import require_text


class TagCreate(BaseModel):
    """Schema for creating a tag by name."""

    name: str = Field(..., min_length=1, description="Unique tag name")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return require_text(value).strip()


class TagOut(BaseModel):
    """Tag information returned to callers."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True, frozen=True)
