"""Pydantic schemas for user endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Schema for a provisioned user."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    email: str
    role: str
    created_at: datetime


class IsAdminResponse(BaseModel):
    """Schema for the admin check."""

    is_admin: bool
