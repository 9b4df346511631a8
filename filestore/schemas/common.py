"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str


class StatusResponse(BaseModel):
    """Liveness of the session store and metadata store."""
    redis: bool
    db: bool


class StatsResponse(BaseModel):
    """Row counts of the metadata store."""
    users: int
    files: int
