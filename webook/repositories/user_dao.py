"""Data access for the ``users`` table backed by SQLAlchemy."""
from __future__ import annotations

import time
from abc import ABC, abstractmethod

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from webook.core.errors import DuplicateUserError, TransientError, UserNotFoundError
from webook.db.models import User
from webook.db.session import get_session


def now_millis() -> int:
    return int(time.time() * 1000)


class UserDAO(ABC):
    @abstractmethod
    def insert(self, user: User) -> User: ...

    @abstractmethod
    def find_by_email(self, email: str) -> User: ...

    @abstractmethod
    def find_by_id(self, uid: int) -> User: ...

    @abstractmethod
    def find_by_phone(self, phone: str) -> User: ...

    @abstractmethod
    def find_by_wechat(self, open_id: str) -> User: ...

    @abstractmethod
    def update_by_id(self, user: User) -> None: ...


class SQLUserDAO(UserDAO):
    """CRUD helpers wrapping the SQLAlchemy session.

    Unique violations surface as ``DuplicateUserError``; any other database
    failure surfaces as ``TransientError``.
    """

    def insert(self, user: User) -> User:
        now = now_millis()
        user.ctime = now
        user.utime = now
        with get_session() as session:
            try:
                session.add(user)
                session.commit()
                session.refresh(user)
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateUserError() from exc
            except SQLAlchemyError as exc:
                session.rollback()
                raise TransientError(f"insert user failed: {exc}") from exc
            session.expunge(user)
            return user

    def _first(self, *criteria) -> User:
        with get_session() as session:
            try:
                row = session.execute(select(User).where(*criteria).limit(1)).scalar_one_or_none()
            except SQLAlchemyError as exc:
                raise TransientError(f"user lookup failed: {exc}") from exc
            if row is None:
                raise UserNotFoundError()
            return row

    def find_by_email(self, email: str) -> User:
        return self._first(User.email == email)

    def find_by_id(self, uid: int) -> User:
        return self._first(User.id == uid)

    def find_by_phone(self, phone: str) -> User:
        return self._first(User.phone == phone)

    def find_by_wechat(self, open_id: str) -> User:
        return self._first(User.wechat_open_id == open_id)

    def update_by_id(self, user: User) -> None:
        # Only the profile fields; callers pass exactly the values meant to change.
        stmt = (
            update(User)
            .where(User.id == user.id)
            .values(
                nickname=user.nickname,
                birthday=user.birthday,
                about_me=user.about_me,
                utime=now_millis(),
            )
        )
        with get_session() as session:
            try:
                session.execute(stmt)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise TransientError(f"update user {user.id} failed: {exc}") from exc
