"""Service layer for business logic."""

from filestore.services.auth_service import AuthService
from filestore.services.file_service import FileService
from filestore.services.status_service import StatusService

__all__ = [
    "AuthService",
    "FileService",
    "StatusService",
]
