"""User repository for database operations."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from common.logging_config import get_logger
from filestore.database import Database

logger = get_logger(__name__)


@dataclass
class User:
    user_id: str
    email: str
    password_hash: str
    created_at: datetime


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        user_id=row["user_id"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class UserRepository:
    def __init__(self, database: Database):
        self.database = database

    def create_user(
        self,
        user_id: str,
        email: str,
        password_hash: str,
        created_at: datetime,
    ) -> User:
        """
        Insert a user row.

        Raises:
            sqlite3.IntegrityError: If the email is already registered
        """
        logger.debug(f"Creating user: {email} [user_id={user_id}]")

        with self.database.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO users (user_id, email, password_hash, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (user_id, email, password_hash, created_at.isoformat())
                )
                conn.commit()
                logger.info(f"User created successfully: {email} [user_id={user_id}]")
            except sqlite3.IntegrityError:
                logger.warning(f"User insert rejected, email already present: {email}")
                raise
            except Exception as e:
                logger.error(f"Failed to create user {email}: {e}", exc_info=True)
                raise

        return User(
            user_id=user_id,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def get_by_email(self, email: str) -> Optional[User]:
        logger.debug(f"Fetching user by email: {email}")
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT user_id, email, password_hash, created_at FROM users WHERE email = ?",
                (email,)
            )
            row = cursor.fetchone()

        if row is None:
            logger.debug(f"User not found: {email}")
            return None

        return _row_to_user(row)

    def get_by_user_id(self, user_id: str) -> Optional[User]:
        logger.debug(f"Fetching user by user_id: {user_id}")
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT user_id, email, password_hash, created_at FROM users WHERE user_id = ?",
                (user_id,)
            )
            row = cursor.fetchone()

        if row is None:
            logger.debug(f"User not found: {user_id}")
            return None

        return _row_to_user(row)

    def count(self) -> int:
        with self.database.connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()
        return row["n"]
