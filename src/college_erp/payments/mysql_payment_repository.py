from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import FeeCategory, PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_decimal, db_cursor, fetchall, fetchone
from .model import PaymentStructure, StudentPayment
from .repository import PaymentRepository

_STRUCTURE_COLUMNS = """
    structure_id, name, amount, due_date, category, semester, description, department,
    is_recurring, is_active, late_fee_penalty, grace_period_days
"""

_PAYMENT_COLUMNS = """
    payment_id, student_id, structure_id, amount, paid_amount, due_date, status,
    late_fee, paid_date, payment_method, transaction_id
"""


def _to_structure(r: dict) -> PaymentStructure:
    return PaymentStructure(
        structure_id=str(r["structure_id"]),
        name=r["name"],
        amount=as_decimal(r["amount"]),
        due_date=r["due_date"],
        category=FeeCategory(r["category"]),
        semester=str(r["semester"]),
        description=r.get("description") or "",
        department=r.get("department"),
        is_recurring=as_bool(r.get("is_recurring")),
        is_active=as_bool(r.get("is_active")),
        late_fee_penalty=as_decimal(r.get("late_fee_penalty")),
        grace_period_days=int(r.get("grace_period_days") or 0),
    )


def _to_payment(r: dict) -> StudentPayment:
    return StudentPayment(
        payment_id=str(r["payment_id"]),
        student_id=str(r["student_id"]),
        structure_id=str(r["structure_id"]),
        amount=as_decimal(r["amount"]),
        paid_amount=as_decimal(r["paid_amount"]),
        due_date=r["due_date"],
        status=PaymentStatus(r["status"]),
        late_fee=as_decimal(r.get("late_fee")),
        paid_date=r.get("paid_date"),
        payment_method=r.get("payment_method"),
        transaction_id=r.get("transaction_id"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_structure(self, structure_id: str) -> Optional[PaymentStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STRUCTURE_COLUMNS} FROM fee_structures WHERE structure_id=%s", (structure_id,))
            r = fetchone(cur)
            return _to_structure(r) if r else None

    def list_structures(self, *, active_only: bool = False) -> Sequence[PaymentStructure]:
        sql = f"SELECT {_STRUCTURE_COLUMNS} FROM fee_structures"
        if active_only:
            sql += " WHERE is_active=1"
        sql += " ORDER BY due_date, structure_id"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return [_to_structure(r) for r in fetchall(cur)]

    def save_structure(self, structure: PaymentStructure) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO fee_structures(
                    structure_id, name, amount, due_date, category, semester, description, department,
                    is_recurring, is_active, late_fee_penalty, grace_period_days
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    amount=VALUES(amount),
                    due_date=VALUES(due_date),
                    category=VALUES(category),
                    semester=VALUES(semester),
                    description=VALUES(description),
                    department=VALUES(department),
                    is_recurring=VALUES(is_recurring),
                    is_active=VALUES(is_active),
                    late_fee_penalty=VALUES(late_fee_penalty),
                    grace_period_days=VALUES(grace_period_days)
                """,
                (
                    structure.structure_id,
                    structure.name,
                    structure.amount,
                    structure.due_date,
                    structure.category.value,
                    structure.semester,
                    structure.description,
                    structure.department,
                    1 if structure.is_recurring else 0,
                    1 if structure.is_active else 0,
                    structure.late_fee_penalty,
                    int(structure.grace_period_days),
                ),
            )

    def get_payment(self, payment_id: str) -> Optional[StudentPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYMENT_COLUMNS} FROM student_payments WHERE payment_id=%s", (payment_id,))
            r = fetchone(cur)
            return _to_payment(r) if r else None

    def list_payments(
        self,
        *,
        student_id: Optional[str] = None,
        status: Optional[PaymentStatus] = None,
    ) -> Sequence[StudentPayment]:
        sql = f"SELECT {_PAYMENT_COLUMNS} FROM student_payments WHERE 1=1"
        params: list = []
        if student_id:
            sql += " AND student_id=%s"
            params.append(student_id)
        if status:
            sql += " AND status=%s"
            params.append(status.value)
        sql += " ORDER BY due_date, payment_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_payment(r) for r in fetchall(cur)]

    def save_payment(self, payment: StudentPayment) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_payments(
                    payment_id, student_id, structure_id, amount, paid_amount, due_date, status,
                    late_fee, paid_date, payment_method, transaction_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    amount=VALUES(amount),
                    paid_amount=VALUES(paid_amount),
                    due_date=VALUES(due_date),
                    status=VALUES(status),
                    late_fee=VALUES(late_fee),
                    paid_date=VALUES(paid_date),
                    payment_method=VALUES(payment_method),
                    transaction_id=VALUES(transaction_id)
                """,
                (
                    payment.payment_id,
                    payment.student_id,
                    payment.structure_id,
                    payment.amount,
                    payment.paid_amount,
                    payment.due_date,
                    payment.status.value,
                    payment.late_fee,
                    payment.paid_date,
                    payment.payment_method,
                    payment.transaction_id,
                ),
            )
