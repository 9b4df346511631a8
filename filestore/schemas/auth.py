"""Pydantic schemas for session endpoints."""

from pydantic import BaseModel


class ConnectResponse(BaseModel):
    """Response model for a successful connect."""
    token: str
