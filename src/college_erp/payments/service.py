from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from ..common.datetime_utils import today_local
from ..common.money import parse_money
from ..common.validators import require_choice, require_in_range, require_int, require_length, require_non_empty
from ..core.constants import MAX_PAYMENT_AMOUNT, MIN_PAYMENT_AMOUNT, URGENT_DUE_DAYS
from ..core.enums import DueState, FeeCategory, PaymentStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .calculator.base import FeeCalculator
from .calculator.gateway_fee_calculator import GatewayFeeCalculator
from .methods import list_methods
from .model import DueInfo, PaymentQuote, PaymentReceipt, PaymentStructure, PaymentSummary, StudentPayment
from .repository import PaymentRepository
from .resolver import quote_payment

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def derive_status(payment: StudentPayment, today: date) -> PaymentStatus:
    if payment.paid_amount >= payment.total_due:
        return PaymentStatus.PAID
    if today > payment.due_date:
        return PaymentStatus.OVERDUE
    if payment.paid_amount > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def due_info(due_date: date, today: date) -> DueInfo:
    days = (due_date - today).days
    if days < 0:
        return DueInfo(days=-days, state=DueState.OVERDUE)
    if days == 0:
        return DueInfo(days=0, state=DueState.DUE_TODAY)
    if days <= URGENT_DUE_DAYS:
        return DueInfo(days=days, state=DueState.URGENT)
    return DueInfo(days=days, state=DueState.NORMAL)


def summarize(payments: List[StudentPayment]) -> PaymentSummary:
    return PaymentSummary(
        total_paid=sum((p.paid_amount for p in payments), ZERO),
        outstanding=sum((p.amount - p.paid_amount for p in payments if p.status != PaymentStatus.PAID), ZERO),
        total_late_fees=sum((p.late_fee for p in payments), ZERO),
        overdue_count=sum(1 for p in payments if p.status == PaymentStatus.OVERDUE),
    )


class PaymentService:
    """Use cases: fee structures, student obligations and checkout."""

    def __init__(self, payments: PaymentRepository, *, calculator: Optional[FeeCalculator] = None):
        self._payments = payments
        self._calculator = calculator or GatewayFeeCalculator()

    def methods(self):
        return list_methods()

    def quote(self, amount, method_id: str) -> PaymentQuote:
        return quote_payment(amount, method_id, calculator=self._calculator)

    def create_structure(
        self,
        *,
        structure_id: str,
        name: str,
        amount,
        due_date: date,
        category,
        semester: str,
        description: str,
        department: Optional[str] = None,
        is_recurring: bool = False,
        late_fee_penalty=0,
        grace_period_days: int = 0,
        today: Optional[date] = None,
    ) -> PaymentStructure:
        today = today or today_local()
        structure_id = require_non_empty(structure_id, "Structure id")
        if self._payments.get_structure(structure_id):
            raise ConflictError(f"Fee structure {structure_id} already exists")

        amount = parse_money(amount, "Amount")
        late_fee_penalty = parse_money(late_fee_penalty, "Late fee penalty")
        grace_period_days = require_int(grace_period_days, "Grace period")
        require_in_range(amount, "Amount", MIN_PAYMENT_AMOUNT, MAX_PAYMENT_AMOUNT)
        require_in_range(late_fee_penalty, "Late fee penalty", 0, 10_000)
        require_in_range(grace_period_days, "Grace period", 0, 30)
        if str(semester) not in {str(n) for n in range(1, 9)}:
            raise ValidationError("Semester must be between 1 and 8")
        if due_date < today:
            raise ValidationError("Due date must be in the future")

        structure = PaymentStructure(
            structure_id=structure_id,
            name=require_length(name, "Structure name", min_len=5, max_len=100),
            amount=amount,
            due_date=due_date,
            category=require_choice(category, FeeCategory, "Fee category"),
            semester=str(semester),
            description=require_length(description, "Description", min_len=10, max_len=200),
            department=department or None,
            is_recurring=bool(is_recurring),
            late_fee_penalty=late_fee_penalty,
            grace_period_days=grace_period_days,
        )
        self._payments.save_structure(structure)
        logger.info("Created fee structure %s (%s)", structure.structure_id, structure.name)
        return structure

    def assign(self, *, structure_id: str, student_id: str) -> StudentPayment:
        structure = self._payments.get_structure(structure_id)
        if not structure:
            raise NotFoundError(f"Fee structure {structure_id} not found")
        if not structure.is_active:
            raise ValidationError("Fee structure is inactive")

        payment_id = f"{structure_id}-{student_id}"
        if self._payments.get_payment(payment_id):
            raise ConflictError("Fee already assigned to this student")

        payment = StudentPayment(
            payment_id=payment_id,
            student_id=student_id,
            structure_id=structure_id,
            amount=structure.amount,
            paid_amount=ZERO,
            due_date=structure.due_date,
            status=PaymentStatus.PENDING,
        )
        self._payments.save_payment(payment)
        return payment

    def get_payment(self, payment_id: str) -> StudentPayment:
        payment = self._payments.get_payment(payment_id)
        if not payment:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    def student_payments(self, student_id: str) -> List[StudentPayment]:
        return list(self._payments.list_payments(student_id=student_id))

    def student_summary(self, student_id: str) -> PaymentSummary:
        return summarize(self.student_payments(student_id))

    def record_payment(
        self,
        *,
        payment_id: str,
        amount,
        method_id: str,
        today: Optional[date] = None,
        transaction_id: Optional[str] = None,
    ) -> PaymentReceipt:
        today = today or today_local()
        payment = self.get_payment(payment_id)

        amount = parse_money(amount, "Payment amount")
        require_in_range(amount, "Payment amount", MIN_PAYMENT_AMOUNT, MAX_PAYMENT_AMOUNT)
        if payment.status == PaymentStatus.PAID:
            raise ConflictError("This fee is already paid")

        new_paid = payment.paid_amount + amount
        if new_paid > payment.total_due:
            logger.warning("Rejected overpayment on %s: %s > %s", payment_id, new_paid, payment.total_due)
            raise ValidationError(f"Payment exceeds the outstanding balance of {payment.balance}")

        quote = self.quote(amount, method_id)
        updated = replace(
            payment,
            paid_amount=new_paid,
            payment_method=quote.method_id,
            transaction_id=transaction_id or f"TXN{uuid.uuid4().hex[:12].upper()}",
        )
        status = derive_status(updated, today)
        updated = replace(updated, status=status, paid_date=today if status == PaymentStatus.PAID else payment.paid_date)

        self._payments.save_payment(updated)
        logger.info(
            "Recorded %s via %s on %s (%s, paid %s of %s)",
            amount,
            quote.method_id,
            payment_id,
            status.value,
            new_paid,
            payment.total_due,
        )
        return PaymentReceipt(payment=updated, quote=quote)

    def refresh(self, *, today: Optional[date] = None, student_id: Optional[str] = None) -> List[StudentPayment]:
        """Re-derive statuses and apply late fees once the grace period has passed.

        Returns the payments that changed.
        """
        today = today or today_local()
        changed: List[StudentPayment] = []

        for payment in self._payments.list_payments(student_id=student_id):
            if payment.status == PaymentStatus.PAID:
                continue

            updated = payment
            structure = self._payments.get_structure(payment.structure_id)
            if structure and payment.late_fee == 0 and structure.late_fee_penalty > 0:
                if today > payment.due_date + timedelta(days=structure.grace_period_days):
                    updated = replace(updated, late_fee=structure.late_fee_penalty)

            updated = replace(updated, status=derive_status(updated, today))
            if updated != payment:
                self._payments.save_payment(updated)
                changed.append(updated)

        if changed:
            logger.info("Refreshed %d payment(s) as of %s", len(changed), today)
        return changed
