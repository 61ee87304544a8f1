"""
Account use cases: signup, password login, profile edit and find-or-create
for SMS and WeChat logins.
"""

from __future__ import annotations

import logging

from webook.core.errors import DuplicateUserError, UserNotFoundError
from webook.core.security import hash_password, verify_password
from webook.domain.user import User, WechatInfo
from webook.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """Unknown e-mail or wrong password."""


class UserService:
    def __init__(self, repo: UserRepository) -> None:
        self.repo = repo

    def signup(self, user: User) -> None:
        user.password = hash_password(user.password)
        self.repo.create(user)
        logger.info("User signed up")

    def login(self, email: str, password: str) -> User:
        try:
            user = self.repo.find_by_email(email)
        except UserNotFoundError as exc:
            raise InvalidCredentialsError() from exc
        if not verify_password(password, user.password):
            raise InvalidCredentialsError()
        return user

    def update_non_sensitive_info(self, user: User) -> None:
        self.repo.update_non_zero_fields(user)

    def find_by_id(self, uid: int) -> User:
        return self.repo.find_by_id(uid)

    def find_or_create(self, phone: str) -> User:
        try:
            return self.repo.find_by_phone(phone)
        except UserNotFoundError:
            pass
        try:
            self.repo.create(User(phone=phone))
        except DuplicateUserError:
            # another request created it first
            logger.debug("Concurrent signup by phone")
        return self.repo.find_by_phone(phone)

    def find_or_create_by_wechat(self, info: WechatInfo) -> User:
        try:
            return self.repo.find_by_wechat(info.open_id)
        except UserNotFoundError:
            pass
        try:
            self.repo.create(User(wechat_info=info))
        except DuplicateUserError:
            logger.debug("Concurrent signup by wechat")
        return self.repo.find_by_wechat(info.open_id)
