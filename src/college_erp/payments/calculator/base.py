from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import PaymentMethod


class FeeCalculator(ABC):
    """Calculator interface (Strategy Pattern for checkout surcharges)."""

    @abstractmethod
    def processing_fee(self, amount: Decimal, method: PaymentMethod) -> Decimal:
        raise NotImplementedError

    def total(self, amount: Decimal, method: PaymentMethod) -> Decimal:
        return amount + self.processing_fee(amount, method)
