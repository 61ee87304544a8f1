from __future__ import annotations

import pytest

from webook.core.errors import DuplicateUserError, UserNotFoundError
from webook.domain.user import User, WechatInfo
from webook.repositories.cache.user_cache import RedisUserCache
from webook.repositories.user_dao import SQLUserDAO
from webook.repositories.user_repository import CachedUserRepository
from webook.services.user_service import InvalidCredentialsError, UserService


@pytest.fixture()
def svc(temp_db, redis_client):
    return UserService(CachedUserRepository(SQLUserDAO(), RedisUserCache(redis_client)))


def test_signup_hashes_password_and_login_succeeds(svc):
    svc.signup(User(email="alice@example.com", password="hello#world123"))

    user = svc.login("alice@example.com", "hello#world123")

    assert user.email == "alice@example.com"
    assert user.password != "hello#world123"
    assert user.password.startswith("$argon2")


def test_signup_duplicate_email(svc):
    svc.signup(User(email="alice@example.com", password="hello#world123"))

    with pytest.raises(DuplicateUserError):
        svc.signup(User(email="alice@example.com", password="other#pass1"))


def test_login_wrong_password_or_unknown_email(svc):
    svc.signup(User(email="alice@example.com", password="hello#world123"))

    with pytest.raises(InvalidCredentialsError):
        svc.login("alice@example.com", "wrong#pass1")
    with pytest.raises(InvalidCredentialsError):
        svc.login("bob@example.com", "hello#world123")


def test_find_or_create_by_phone_is_idempotent(svc):
    first = svc.find_or_create("+8613800000000")
    second = svc.find_or_create("+8613800000000")

    assert first.id == second.id
    assert first.phone == "+8613800000000"


def test_find_or_create_by_wechat(svc):
    info = WechatInfo(open_id="oid-1", union_id="union-1")

    first = svc.find_or_create_by_wechat(info)
    second = svc.find_or_create_by_wechat(info)

    assert first.id == second.id
    assert second.wechat_info == info


def test_find_or_create_tolerates_concurrent_creator(temp_db, redis_client, monkeypatch):
    repo = CachedUserRepository(SQLUserDAO(), RedisUserCache(redis_client))
    svc = UserService(repo)
    real_find = repo.find_by_phone
    calls = {"n": 0}

    def racing_find(phone):
        calls["n"] += 1
        if calls["n"] == 1:
            # someone else inserts between our lookup and our insert
            repo.create(User(phone=phone))
            raise UserNotFoundError()
        return real_find(phone)

    monkeypatch.setattr(repo, "find_by_phone", racing_find)

    user = svc.find_or_create("555")

    assert user.phone == "555"


def test_update_non_sensitive_info_is_visible_in_store(svc):
    svc.signup(User(email="alice@example.com", password="hello#world123"))
    uid = svc.login("alice@example.com", "hello#world123").id

    svc.update_non_sensitive_info(User(id=uid, nickname="Alice", about_me="bio"))

    stored = svc.repo.find_by_email("alice@example.com")
    assert stored.nickname == "Alice"
    assert stored.about_me == "bio"
