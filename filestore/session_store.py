"""Redis-backed session store mapping tokens to user ids."""

from typing import Optional

import redis

from common.constants import SESSION_KEY_PREFIX
from common.logging_config import get_logger

logger = get_logger(__name__)


class SessionStore:
    """
    Thin wrapper over a redis client.

    Each session is one key, auth_<token>, holding the user id with a TTL
    that Redis enforces. Losing the Redis data only forces users to log in
    again.
    """

    def __init__(self, client: redis.Redis, ttl_seconds: int):
        self.client = client
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int) -> "SessionStore":
        return cls(redis.Redis.from_url(url, decode_responses=True), ttl_seconds)

    @staticmethod
    def _key(token: str) -> str:
        return f"{SESSION_KEY_PREFIX}{token}"

    def create(self, token: str, user_id: str) -> None:
        self.client.set(self._key(token), user_id, ex=self.ttl_seconds)

    def get_user_id(self, token: str) -> Optional[str]:
        value = self.client.get(self._key(token))
        if isinstance(value, bytes):
            value = value.decode('utf-8')
        return value

    def delete(self, token: str) -> bool:
        """
        Remove a session. Returns False if no session existed.
        """
        return self.client.delete(self._key(token)) > 0

    def is_alive(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis liveness check failed: {e}")
            return False
