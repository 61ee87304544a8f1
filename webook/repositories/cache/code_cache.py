"""
Atomic storage of SMS verification codes.

Both operations run as a single Lua script inside Redis, so concurrent sends
cannot both pass the cooldown check and concurrent verifies cannot both spend
the same attempt.
"""
from __future__ import annotations

import logging
from pathlib import Path

import redis

from webook.core.errors import CodeIntegrityError, CodeSendTooManyError, CodeVerifyTooManyError, TransientError

logger = logging.getLogger(__name__)

_LUA_DIR = Path(__file__).resolve().parent / "lua"
LUA_SET_CODE = (_LUA_DIR / "set_code.lua").read_text(encoding="utf-8")
LUA_VERIFY_CODE = (_LUA_DIR / "verify_code.lua").read_text(encoding="utf-8")

_SET_OK = 0
_SET_TOO_MANY = -1
_SET_NO_EXPIRY = -2

_VERIFY_OK = 0
_VERIFY_TOO_MANY = -1


class CodeCache:
    def __init__(
        self,
        client: redis.Redis,
        *,
        ttl_seconds: int = 600,
        resend_interval_seconds: int = 60,
        max_attempts: int = 3,
    ) -> None:
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.resend_interval_seconds = resend_interval_seconds
        self.max_attempts = max_attempts
        self._set_script = client.register_script(LUA_SET_CODE)
        self._verify_script = client.register_script(LUA_VERIFY_CODE)

    @staticmethod
    def key(biz: str, phone: str) -> str:
        return f"phone_code:{biz}:{phone}"

    def set(self, biz: str, phone: str, code: str) -> None:
        """Store a fresh code, or raise if the key is in cooldown or corrupt."""
        key = self.key(biz, phone)
        try:
            res = int(
                self._set_script(
                    keys=[key],
                    args=[code, self.ttl_seconds, self.resend_interval_seconds, self.max_attempts],
                )
            )
        except redis.RedisError as exc:
            raise TransientError(f"set code failed: {exc}") from exc
        if res == _SET_NO_EXPIRY:
            logger.error("Verification code without expiry", extra={"key": key})
            raise CodeIntegrityError()
        if res == _SET_TOO_MANY:
            raise CodeSendTooManyError()

    def verify(self, biz: str, phone: str, code: str) -> bool:
        """
        Spend one attempt against the stored code.

        Returns True exactly once for the right code (the entry is deleted),
        False for a wrong code or when nothing is stored, and raises
        CodeVerifyTooManyError once the attempts are used up.
        """
        key = self.key(biz, phone)
        try:
            res = int(self._verify_script(keys=[key], args=[code]))
        except redis.RedisError as exc:
            raise TransientError(f"verify code failed: {exc}") from exc
        if res == _VERIFY_TOO_MANY:
            raise CodeVerifyTooManyError()
        return res == _VERIFY_OK
