"""Builds the object graph: clients, caches, repositories and services."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import redis

from webook.core.config import Settings, get_settings
from webook.core.redis_client import get_redis
from webook.repositories.cache.code_cache import CodeCache
from webook.repositories.cache.user_cache import RedisUserCache
from webook.repositories.user_dao import SQLUserDAO, UserDAO
from webook.repositories.user_repository import CachedUserRepository
from webook.services.code_service import CodeService
from webook.services.sms import LocalSmsService, SmsService
from webook.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class Container:
    user_service: UserService
    code_service: CodeService
    refresh_executor: ThreadPoolExecutor | None = None

    def close(self) -> None:
        if self.refresh_executor is not None:
            self.refresh_executor.shutdown(wait=True)
            self.refresh_executor = None


def init_sms_service(settings: Settings) -> SmsService:
    logger.info("Using local SMS service", extra={"environment": settings.app_env})
    return LocalSmsService()


def build_container(
    settings: Settings | None = None,
    *,
    redis_client: redis.Redis | None = None,
    dao: UserDAO | None = None,
    sms: SmsService | None = None,
    async_cache_refresh: bool = True,
) -> Container:
    settings = settings or get_settings()
    client = redis_client if redis_client is not None else get_redis()

    executor = None
    if async_cache_refresh and settings.cache_refresh_workers > 0:
        executor = ThreadPoolExecutor(
            max_workers=settings.cache_refresh_workers,
            thread_name_prefix="user-cache-refresh",
        )

    user_cache = RedisUserCache(client, expiration_seconds=settings.user_cache_ttl_seconds)
    repo = CachedUserRepository(dao or SQLUserDAO(), user_cache, refresh_executor=executor)
    code_cache = CodeCache(
        client,
        ttl_seconds=settings.code_ttl_seconds,
        resend_interval_seconds=settings.code_resend_interval_seconds,
        max_attempts=settings.code_max_attempts,
    )
    code_service = CodeService(
        code_cache,
        sms or init_sms_service(settings),
        template_id=settings.sms_code_template_id,
    )
    return Container(
        user_service=UserService(repo),
        code_service=code_service,
        refresh_executor=executor,
    )
