from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import DueState, FeeCategory, PaymentStatus


@dataclass(frozen=True)
class PaymentMethod:
    method_id: str
    name: str
    processing_fee_percent: Decimal
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.method_id,
            "name": self.name,
            "processing_fee_percent": float(self.processing_fee_percent),
            "description": self.description,
        }


@dataclass(frozen=True)
class PaymentStructure:
    """Fee template: what is owed, by when, and the penalty for paying late."""

    structure_id: str
    name: str
    amount: Decimal
    due_date: date
    category: FeeCategory
    semester: str
    description: str = ""
    department: Optional[str] = None
    is_recurring: bool = False
    is_active: bool = True
    late_fee_penalty: Decimal = Decimal("0")
    grace_period_days: int = 0


@dataclass(frozen=True)
class StudentPayment:
    """One student's obligation against a structure."""

    payment_id: str
    student_id: str
    structure_id: str
    amount: Decimal
    paid_amount: Decimal
    due_date: date
    status: PaymentStatus
    late_fee: Decimal = Decimal("0")
    paid_date: Optional[date] = None
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None

    @property
    def total_due(self) -> Decimal:
        return self.amount + self.late_fee

    @property
    def balance(self) -> Decimal:
        return max(self.total_due - self.paid_amount, Decimal("0"))

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "student_id": self.student_id,
            "structure_id": self.structure_id,
            "amount": float(self.amount),
            "paid_amount": float(self.paid_amount),
            "late_fee": float(self.late_fee),
            "balance": float(self.balance),
            "due_date": self.due_date.isoformat(),
            "paid_date": self.paid_date.isoformat() if self.paid_date else None,
            "status": self.status.value,
            "payment_method": self.payment_method,
            "transaction_id": self.transaction_id,
        }


@dataclass(frozen=True)
class PaymentQuote:
    method_id: str
    base_amount: Decimal
    processing_fee: Decimal
    total_amount: Decimal

    def to_dict(self) -> dict:
        return {
            "method_id": self.method_id,
            "base_amount": float(self.base_amount),
            "processing_fee": float(self.processing_fee),
            "total_amount": float(self.total_amount),
        }


@dataclass(frozen=True)
class DueInfo:
    days: int
    state: DueState


@dataclass(frozen=True)
class PaymentSummary:
    total_paid: Decimal
    outstanding: Decimal
    total_late_fees: Decimal
    overdue_count: int

    def to_dict(self) -> dict:
        return {
            "total_paid": float(self.total_paid),
            "outstanding": float(self.outstanding),
            "total_late_fees": float(self.total_late_fees),
            "overdue_count": self.overdue_count,
        }


@dataclass(frozen=True)
class PaymentReceipt:
    payment: StudentPayment
    quote: PaymentQuote

    def to_dict(self) -> dict:
        return {"payment": self.payment.to_dict(), "charged": self.quote.to_dict()}
