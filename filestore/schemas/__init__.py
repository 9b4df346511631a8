"""Pydantic schemas for API requests and responses."""

from filestore.schemas.auth import ConnectResponse
from filestore.schemas.users import RegisterRequest, UserResponse
from filestore.schemas.files import UploadRequest, FileNodeResponse
from filestore.schemas.common import ErrorResponse, StatusResponse, StatsResponse

__all__ = [
    "ConnectResponse",
    "RegisterRequest",
    "UserResponse",
    "UploadRequest",
    "FileNodeResponse",
    "ErrorResponse",
    "StatusResponse",
    "StatsResponse",
]
