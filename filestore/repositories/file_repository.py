"""File node repository for database operations."""

import sqlite3
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional

from common.constants import FOLDER, PAGE_SIZE
from common.logging_config import get_logger
from filestore.database import Database

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileNode:
    file_id: str
    owner_id: str
    name: str
    kind: str
    is_public: bool
    parent_id: str
    local_path: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def is_folder(self) -> bool:
        return self.kind == FOLDER

    def visible_to(self, requester_id: Optional[str]) -> bool:
        return self.is_public or (requester_id is not None and requester_id == self.owner_id)


_COLUMNS = "file_id, owner_id, name, kind, is_public, parent_id, local_path, created_at, updated_at"


def _row_to_node(row: sqlite3.Row) -> FileNode:
    return FileNode(
        file_id=row["file_id"],
        owner_id=row["owner_id"],
        name=row["name"],
        kind=row["kind"],
        is_public=bool(row["is_public"]),
        parent_id=row["parent_id"],
        local_path=row["local_path"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class FileRepository:
    def __init__(self, database: Database):
        self.database = database

    def create(self, node: FileNode) -> FileNode:
        logger.debug(f"Inserting {node.kind} node [file_id={node.file_id}] [owner_id={node.owner_id}]")
        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"""
                    INSERT INTO files ({_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        node.file_id,
                        node.owner_id,
                        node.name,
                        node.kind,
                        int(node.is_public),
                        node.parent_id,
                        node.local_path,
                        node.created_at.isoformat(),
                        node.updated_at.isoformat(),
                    )
                )
                conn.commit()
            except Exception as e:
                logger.error(f"Failed to insert node [file_id={node.file_id}]: {e}", exc_info=True)
                raise

        return node

    def get_by_id(self, file_id: str) -> Optional[FileNode]:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_COLUMNS} FROM files WHERE file_id = ?", (file_id,))
            row = cursor.fetchone()

        if row is None:
            return None

        return _row_to_node(row)

    def get_owned(self, file_id: str, owner_id: str) -> Optional[FileNode]:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM files WHERE file_id = ? AND owner_id = ?",
                (file_id, owner_id)
            )
            row = cursor.fetchone()

        if row is None:
            return None

        return _row_to_node(row)

    def list_children(self, owner_id: str, parent_id: str, page: int) -> List[FileNode]:
        """
        One page of the owner's nodes under parent_id, in insertion order.
        """
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_COLUMNS} FROM files
                WHERE owner_id = ? AND parent_id = ?
                ORDER BY seq
                LIMIT ? OFFSET ?
                """,
                (owner_id, parent_id, PAGE_SIZE, page * PAGE_SIZE)
            )
            rows = cursor.fetchall()

        return [_row_to_node(row) for row in rows]

    def set_public(self, node: FileNode, is_public: bool, updated_at: datetime) -> FileNode:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE files SET is_public = ?, updated_at = ? WHERE file_id = ? AND owner_id = ?",
                (int(is_public), updated_at.isoformat(), node.file_id, node.owner_id)
            )
            conn.commit()

        logger.info(f"Node visibility set [file_id={node.file_id}] is_public={is_public}")
        return replace(node, is_public=is_public, updated_at=updated_at)

    def count(self) -> int:
        with self.database.connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM files").fetchone()
        return row["n"]
