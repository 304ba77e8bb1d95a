"""Pydantic schemas for Post API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a Post."""

    text: str = Field(..., min_length=1, max_length=5000)


class CommentCreate(BaseModel):
    """Schema for adding a Comment."""

    text: str = Field(..., min_length=1, max_length=2000)


class LikeResponse(BaseModel):
    """Schema for a like entry."""

    model_config = ConfigDict(from_attributes=True)

    account_id: UUID
    created_at: datetime


class CommentResponse(BaseModel):
    """Schema for a comment entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    author_name: str | None = None
    author_avatar: str | None = None
    text: str
    created_at: datetime


class PostResponse(BaseModel):
    """Schema for Post response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "789e4567-e89b-12d3-a456-426614174000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "author_name": "Ada",
                "author_avatar": None,
                "text": "Shipped the new parser today",
                "likes": [],
                "comments": [],
                "created_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    author_id: UUID
    author_name: str | None = None
    author_avatar: str | None = None
    text: str
    likes: list[LikeResponse]
    comments: list[CommentResponse]
    created_at: datetime


class PostDetailResponse(BaseModel):
    """Schema for single Post."""

    data: PostResponse


class PostListResponse(BaseModel):
    """Schema for list of Posts."""

    data: list[PostResponse]


class LikeListResponse(BaseModel):
    """Schema for a post's likes, newest first."""

    data: list[LikeResponse]


class CommentListResponse(BaseModel):
    """Schema for a post's comments, newest first."""

    data: list[CommentResponse]
