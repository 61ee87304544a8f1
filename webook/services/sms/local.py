"""SMS adapter for development: writes the message to the log instead of a vendor."""
from __future__ import annotations

import logging
from typing import Sequence

from .base import SmsService

logger = logging.getLogger(__name__)


class LocalSmsService(SmsService):
    def send(self, template_id: str, args: Sequence[str], *numbers: str) -> None:
        logger.info(
            "SMS sent",
            extra={"template_id": template_id, "sms_args": list(args), "numbers": list(numbers)},
        )
