"""Pydantic schemas for the user profile endpoints."""

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    password: str | None = None
    new_password: str | None = Field(default=None, min_length=1)


class UserProfile(BaseModel):
    id: str
    name: str | None = None
    email: str
    role: str
    image: str | None = None
    created_at: str
    updated_at: str
