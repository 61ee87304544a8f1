from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class SmsService(ABC):
    @abstractmethod
    def send(self, template_id: str, args: Sequence[str], *numbers: str) -> None:
        """Deliver a templated message; raise on any delivery failure."""
