"""Review Schemas - product review request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    user_name: str = Field(min_length=1, max_length=100)
    rating: int = Field(5, ge=1, le=5)
    comment: str = Field("", max_length=2000)
    image_url: str | None = Field(None, max_length=500)

    @field_validator("user_name")
    @classmethod
    def strip_user_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("user_name cannot be empty or whitespace")
        return v


class ReviewResponse(BaseModel):
    id: UUID
    product_id: UUID
    user_name: str
    rating: int
    comment: str
    image_url: str | None = None
    created_at: datetime
