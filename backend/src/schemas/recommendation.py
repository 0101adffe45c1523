"""Pydantic schemas for recommendation endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RecommendationCreate(BaseModel):
    """
    Schema for creating a new recommendation.

    Every field is optional here, so a missing or null value reaches the validators and gets
    its own error code (INVALID_TITLE, INVALID_GENRE, ...) instead of a generic 422.
    Sanitization and those errors come from services/validation.py.
    """

    title: str | None = None
    genre: str | None = None
    link: str | None = None
    blurb: str | None = None


class RecommendationResponse(BaseModel):
    """Schema for a recommendation in the feed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    genre: str
    link: str
    blurb: str
    user_id: str
    author_name: str
    is_staff_pick: bool
    created_at: datetime


class GenreListResponse(BaseModel):
    """Schema for the allowed genre list."""

    genres: list[str]
