"""
Error taxonomy shared by the cache, repository and service layers.

Each exception carries an ``ErrorKind`` so callers can branch on what went
wrong without comparing against module-level singleton values.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    SEND_TOO_MANY = "send_too_many"
    VERIFY_TOO_MANY = "verify_too_many"
    INTEGRITY = "integrity"
    NOT_FOUND = "not_found"
    DUPLICATE_KEY = "duplicate_key"
    TRANSIENT = "transient"


class WebookError(Exception):
    """Base class for every failure surfaced by the core layers."""

    kind: ErrorKind = ErrorKind.TRANSIENT
    default_message = "internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CodeSendTooManyError(WebookError):
    """A code was sent for this key within the resend cooldown."""

    kind = ErrorKind.SEND_TOO_MANY
    default_message = "verification code sent too frequently"


class CodeVerifyTooManyError(WebookError):
    """Attempts for the live code are exhausted."""

    kind = ErrorKind.VERIFY_TOO_MANY
    default_message = "too many verification attempts"


class CodeIntegrityError(WebookError):
    """A code entry exists without an expiry; the store was tampered with."""

    kind = ErrorKind.INTEGRITY
    default_message = "verification code exists without expiry"


class NotFoundError(WebookError):
    kind = ErrorKind.NOT_FOUND
    default_message = "not found"


class CacheMissError(NotFoundError):
    default_message = "cache key does not exist"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class DuplicateUserError(WebookError):
    """Unique constraint violated on email, phone or wechat open-id."""

    kind = ErrorKind.DUPLICATE_KEY
    default_message = "user already exists"


class TransientError(WebookError):
    """Network, store or delivery failure."""

    kind = ErrorKind.TRANSIENT
    default_message = "store unavailable"


class SmsDeliveryError(TransientError):
    default_message = "sms delivery failed"
