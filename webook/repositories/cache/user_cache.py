"""Read-through cache of user snapshots keyed by id."""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

import redis

from webook.core.errors import CacheMissError, TransientError
from webook.domain.user import User

logger = logging.getLogger(__name__)

DEFAULT_EXPIRATION_SECONDS = 15 * 60


class UserCache(ABC):
    @abstractmethod
    def get(self, uid: int) -> User:
        """Return the cached user; raise CacheMissError if absent."""

    @abstractmethod
    def set(self, user: User) -> None:
        """Store the snapshot, overwriting any previous entry."""


class RedisUserCache(UserCache):
    def __init__(self, client: redis.Redis, expiration_seconds: int = DEFAULT_EXPIRATION_SECONDS) -> None:
        self.client = client
        self.expiration_seconds = expiration_seconds

    @staticmethod
    def key(uid: int) -> str:
        return f"user:info:{uid}"

    def get(self, uid: int) -> User:
        try:
            data = self.client.get(self.key(uid))
        except redis.RedisError as exc:
            raise TransientError(f"user cache get failed: {exc}") from exc
        if data is None:
            raise CacheMissError()
        try:
            return User.from_dict(json.loads(data))
        except (ValueError, TypeError, AttributeError) as exc:
            raise TransientError(f"corrupt user cache entry: {exc}") from exc

    def set(self, user: User) -> None:
        data = json.dumps(user.to_dict(), ensure_ascii=False)
        try:
            self.client.set(self.key(user.id), data, ex=self.expiration_seconds)
        except redis.RedisError as exc:
            raise TransientError(f"user cache set failed: {exc}") from exc
