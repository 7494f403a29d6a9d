"""Payment methods offered at checkout and their gateway processing fees."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from ..core.exceptions import ValidationError
from .model import PaymentMethod

PAYMENT_METHODS: Dict[str, PaymentMethod] = {
    m.method_id: m
    for m in (
        PaymentMethod("card", "Credit/Debit Card", Decimal("2.5"), "Visa, Mastercard, RuPay, American Express"),
        PaymentMethod("netbanking", "Net Banking", Decimal("1.5"), "All major banks supported"),
        PaymentMethod("upi", "UPI", Decimal("0"), "Google Pay, PhonePe, Paytm, BHIM"),
        PaymentMethod("wallet", "Digital Wallet", Decimal("1.0"), "Paytm, Mobikwik, Amazon Pay"),
    )
}


def get_method(method_id: str) -> PaymentMethod:
    method = PAYMENT_METHODS.get((method_id or "").strip().lower())
    if not method:
        raise ValidationError(f"Unknown payment method: {method_id!r}")
    return method


def list_methods() -> List[PaymentMethod]:
    return list(PAYMENT_METHODS.values())
