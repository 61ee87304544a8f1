"""SMS delivery adapters."""

from .base import SmsService
from .local import LocalSmsService

__all__ = ["SmsService", "LocalSmsService"]
