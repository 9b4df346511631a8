"""Pydantic schemas for user endpoints."""

from typing import Optional

from pydantic import BaseModel

from filestore.repositories.user_repository import User


class RegisterRequest(BaseModel):
    """Request model for user registration. Presence is checked by the service."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a user."""
    id: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.user_id, email=user.email)
