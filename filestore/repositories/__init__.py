"""Repository layer for data access."""

from filestore.repositories.user_repository import User, UserRepository
from filestore.repositories.file_repository import FileNode, FileRepository

__all__ = [
    "User",
    "UserRepository",
    "FileNode",
    "FileRepository",
]
