from __future__ import annotations

from decimal import Decimal

from ...common.money import round_money
from .base import FeeCalculator
from ..model import PaymentMethod


class GatewayFeeCalculator(FeeCalculator):
    """Standard rule: amount x method fee %, rounded half-up to paise."""

    def processing_fee(self, amount: Decimal, method: PaymentMethod) -> Decimal:
        return round_money(amount * method.processing_fee_percent / Decimal("100"))
