"""Verification codes sent by SMS."""
from __future__ import annotations

import logging
import secrets

from webook.core.errors import CodeVerifyTooManyError, SmsDeliveryError
from webook.repositories.cache.code_cache import CodeCache
from webook.services.sms import SmsService

logger = logging.getLogger(__name__)

DEFAULT_CODE_TEMPLATE_ID = "1877556"


def generate_code() -> str:
    """Uniform six-digit code, zero padded (000000-999999)."""
    return f"{secrets.randbelow(1_000_000):06d}"


class CodeService:
    def __init__(self, cache: CodeCache, sms: SmsService, template_id: str = DEFAULT_CODE_TEMPLATE_ID) -> None:
        self.cache = cache
        self.sms = sms
        self.template_id = template_id

    def send(self, biz: str, phone: str) -> None:
        """
        Store a new code and text it to ``phone``.

        Storage failures (including CodeSendTooManyError) propagate unchanged;
        a vendor failure is raised as SmsDeliveryError.
        """
        code = generate_code()
        self.cache.set(biz, phone, code)
        try:
            self.sms.send(self.template_id, [code], phone)
        except SmsDeliveryError:
            raise
        except Exception as exc:
            logger.error("SMS delivery failed", extra={"biz": biz, "error": str(exc)})
            raise SmsDeliveryError(str(exc)) from exc

    def verify(self, biz: str, phone: str, input_code: str) -> bool:
        try:
            return self.cache.verify(biz, phone, input_code)
        except CodeVerifyTooManyError:
            # Lockout looks exactly like a wrong code so attempts cannot be probed.
            logger.warning("Verification attempts exhausted", extra={"biz": biz})
            return False
