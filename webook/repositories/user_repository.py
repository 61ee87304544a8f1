"""
User repository: one lookup surface over the SQL store and the user cache.

Only ``find_by_id`` goes through the cache. Writes are not propagated to the
cache, so a profile update becomes visible there once the entry expires.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from datetime import date, datetime, timezone
from typing import Optional

from webook.core.errors import WebookError
from webook.db import models
from webook.domain.user import User, WechatInfo
from webook.repositories.cache.user_cache import UserCache
from webook.repositories.user_dao import UserDAO

logger = logging.getLogger(__name__)


class UserRepository(ABC):
    @abstractmethod
    def create(self, user: User) -> None: ...

    @abstractmethod
    def find_by_email(self, email: str) -> User: ...

    @abstractmethod
    def find_by_id(self, uid: int) -> User: ...

    @abstractmethod
    def find_by_phone(self, phone: str) -> User: ...

    @abstractmethod
    def find_by_wechat(self, open_id: str) -> User: ...

    @abstractmethod
    def update_non_zero_fields(self, user: User) -> None: ...


def _date_to_millis(value: Optional[date]) -> Optional[int]:
    if value is None:
        return None
    midnight = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return int(midnight.timestamp() * 1000)


def _millis_to_date(value: Optional[int]) -> Optional[date]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()


def _millis_to_datetime(value: Optional[int]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


class CachedUserRepository(UserRepository):
    """
    Repository backed by ``UserDAO`` with a read-through ``UserCache``.

    When ``refresh_executor`` is given, repopulating the cache after a miss is
    submitted to it and the caller returns without waiting; otherwise the
    cache is written inline. Either way a failed write is logged and dropped.
    """

    def __init__(self, dao: UserDAO, cache: UserCache, refresh_executor: Executor | None = None) -> None:
        self.dao = dao
        self.cache = cache
        self.refresh_executor = refresh_executor

    def create(self, user: User) -> None:
        self.dao.insert(self._to_entity(user))

    def find_by_email(self, email: str) -> User:
        return self._to_domain(self.dao.find_by_email(email))

    def find_by_phone(self, phone: str) -> User:
        return self._to_domain(self.dao.find_by_phone(phone))

    def find_by_wechat(self, open_id: str) -> User:
        return self._to_domain(self.dao.find_by_wechat(open_id))

    def update_non_zero_fields(self, user: User) -> None:
        self.dao.update_by_id(self._to_entity(user))

    def find_by_id(self, uid: int) -> User:
        try:
            return self.cache.get(uid)
        except WebookError as exc:
            # A transient cache failure is treated the same as a miss.
            logger.debug("User cache miss", extra={"uid": uid, "reason": exc.kind.value})

        user = self._to_domain(self.dao.find_by_id(uid))
        self._refresh_cache(user)
        return user

    # -------------------------- cache refresh --------------------------
    def _refresh_cache(self, user: User) -> None:
        if self.refresh_executor is None:
            self._write_cache(user)
            return
        try:
            self.refresh_executor.submit(self._write_cache, user)
        except RuntimeError as exc:
            # executor already shut down
            logger.warning("User cache refresh dropped", extra={"uid": user.id, "error": str(exc)})

    def _write_cache(self, user: User) -> None:
        try:
            self.cache.set(user)
        except WebookError as exc:
            logger.warning("User cache refresh failed", extra={"uid": user.id, "error": exc.message})

    # -------------------------- translation --------------------------
    @staticmethod
    def _to_domain(row: models.User) -> User:
        return User(
            id=row.id,
            email=row.email or "",
            password=row.password or "",
            nickname=row.nickname or "",
            birthday=_millis_to_date(row.birthday),
            about_me=row.about_me or "",
            phone=row.phone or "",
            wechat_info=WechatInfo(
                open_id=row.wechat_open_id or "",
                union_id=row.wechat_union_id or "",
            ),
            ctime=_millis_to_datetime(row.ctime),
        )

    @staticmethod
    def _to_entity(user: User) -> models.User:
        return models.User(
            id=user.id or None,
            email=user.email or None,
            password=user.password,
            nickname=user.nickname,
            birthday=_date_to_millis(user.birthday),
            about_me=user.about_me,
            phone=user.phone or None,
            wechat_open_id=user.wechat_info.open_id or None,
            wechat_union_id=user.wechat_info.union_id or None,
        )
