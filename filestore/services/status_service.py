"""Liveness and row-count reporting for the stores."""

import sqlite3
from typing import Dict

from common.logging_config import get_logger
from filestore.database import Database
from filestore.repositories.file_repository import FileRepository
from filestore.repositories.user_repository import UserRepository
from filestore.session_store import SessionStore

logger = get_logger(__name__)


class StatusService:
    """
    Store failures degrade to False / 0 instead of failing the request.
    """

    def __init__(
        self,
        database: Database,
        sessions: SessionStore,
        user_repo: UserRepository,
        file_repo: FileRepository,
    ):
        self.database = database
        self.sessions = sessions
        self.user_repo = user_repo
        self.file_repo = file_repo

    def status(self) -> Dict[str, bool]:
        return {"redis": self.sessions.is_alive(), "db": self.database.is_alive()}

    def stats(self) -> Dict[str, int]:
        return {"users": self._safe_count(self.user_repo), "files": self._safe_count(self.file_repo)}

    @staticmethod
    def _safe_count(repo) -> int:
        try:
            return repo.count()
        except sqlite3.Error as e:
            logger.warning(f"Count failed on {type(repo).__name__}: {e}")
            return 0
