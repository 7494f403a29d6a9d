from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..common.money import parse_money
from ..core.exceptions import ValidationError
from .calculator.base import FeeCalculator
from .calculator.gateway_fee_calculator import GatewayFeeCalculator
from .methods import get_method
from .model import PaymentQuote

_default_calculator = GatewayFeeCalculator()


def quote_payment(amount, method_id: str, *, calculator: Optional[FeeCalculator] = None) -> PaymentQuote:
    calculator = calculator or _default_calculator
    base = parse_money(amount)
    if base < 0:
        raise ValidationError("Amount cannot be negative")

    method = get_method(method_id)
    fee = calculator.processing_fee(base, method)
    return PaymentQuote(
        method_id=method.method_id,
        base_amount=base,
        processing_fee=fee,
        total_amount=base + fee,
    )


def resolve_payment_total(amount, method_id: str) -> Decimal:
    """Amount payable through ``method_id``: base plus gateway fee, 2 decimals."""
    return quote_payment(amount, method_id).total_amount
