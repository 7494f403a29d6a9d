from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import PaymentStructure, StudentPayment


class PaymentRepository(Protocol):
    """Storage contract for fee structures and student obligations."""

    def get_structure(self, structure_id: str) -> Optional[PaymentStructure]:
        raise NotImplementedError

    def list_structures(self, *, active_only: bool = False) -> Sequence[PaymentStructure]:
        raise NotImplementedError

    def save_structure(self, structure: PaymentStructure) -> None:
        raise NotImplementedError

    def get_payment(self, payment_id: str) -> Optional[StudentPayment]:
        raise NotImplementedError

    def list_payments(
        self,
        *,
        student_id: Optional[str] = None,
        status: Optional[PaymentStatus] = None,
    ) -> Sequence[StudentPayment]:
        """Ordered by due date."""
        raise NotImplementedError

    def save_payment(self, payment: StudentPayment) -> None:
        raise NotImplementedError
