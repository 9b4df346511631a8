"""Authentication service for business logic."""

from typing import Optional
import sqlite3

from common.logging_config import get_logger
from filestore.auth import generate_token, hash_password, parse_basic_credentials, verify_password
from filestore.exceptions import MissingFieldError, UnauthorizedError, UserAlreadyExistsError
from filestore.repositories.user_repository import User, UserRepository
from filestore.session_store import SessionStore
from filestore.utils import generate_uuid, utcnow

logger = get_logger(__name__)


class AuthService:
    def __init__(self, user_repo: UserRepository, sessions: SessionStore):
        self.user_repo = user_repo
        self.sessions = sessions

    def register(self, email: Optional[str], password: Optional[str]) -> User:
        if not email:
            raise MissingFieldError("email")
        if not password:
            raise MissingFieldError("password")

        logger.info(f"Attempting to register user: {email}")
        if self.user_repo.get_by_email(email) is not None:
            logger.warning(f"Registration failed: email '{email}' already exists")
            raise UserAlreadyExistsError()

        try:
            user = self.user_repo.create_user(
                user_id=generate_uuid(),
                email=email,
                password_hash=hash_password(password),
                created_at=utcnow(),
            )
        except sqlite3.IntegrityError:
            logger.warning(f"Registration failed due to integrity error: email '{email}'")
            raise UserAlreadyExistsError()

        logger.info(f"Successfully registered user: {email} [user_id={user.user_id}]")
        return user

    def authenticate(self, authorization: Optional[str]) -> str:
        """
        Exchange a Basic Authorization header for a new session token.
        """
        email, password = parse_basic_credentials(authorization)

        logger.info(f"Login attempt for user: {email}")
        user = self.user_repo.get_by_email(email)
        if user is None:
            logger.warning(f"Login failed: email '{email}' not found")
            raise UnauthorizedError()

        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed: invalid password for email '{email}'")
            raise UnauthorizedError()

        token = generate_token()
        self.sessions.create(token, user.user_id)
        logger.info(f"Session opened [user_id={user.user_id}]")
        return token

    def resolve_identity(self, token: Optional[str]) -> str:
        if not token:
            raise UnauthorizedError()

        user_id = self.sessions.get_user_id(token)
        if user_id is None:
            logger.debug("Token did not resolve to a session")
            raise UnauthorizedError()
        return user_id

    def resolve_optional_identity(self, token: Optional[str]) -> Optional[str]:
        """
        Like resolve_identity, but an absent or stale token means anonymous.
        """
        if not token:
            return None
        return self.sessions.get_user_id(token)

    def revoke(self, token: Optional[str]) -> None:
        user_id = self.resolve_identity(token)
        if not self.sessions.delete(token):
            raise UnauthorizedError()
        logger.info(f"Session closed [user_id={user_id}]")

    def get_user(self, user_id: str) -> User:
        user = self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UnauthorizedError()
        return user
