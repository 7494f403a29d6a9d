from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_REQUIRED_PERCENTAGE
from .database.connection import DBConfig, DatabaseConnection
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .policies.factory import ScopeMatcherFactory
from .policies.mysql_policy_repository import MySQLPolicyRepository
from .policies.repository import PolicyRepository
from .policies.service import PolicyService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    policies_repo: PolicyRepository
    payments_repo: PaymentRepository

    attendance_service: AttendanceService
    policy_service: PolicyService
    payment_service: PaymentService


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    policies_repo: PolicyRepository,
    payments_repo: PaymentRepository,
    required_percentage=DEFAULT_REQUIRED_PERCENTAGE,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""
    return Container(
        attendance_repo=attendance_repo,
        policies_repo=policies_repo,
        payments_repo=payments_repo,
        attendance_service=AttendanceService(attendance_repo, required_percentage=required_percentage),
        policy_service=PolicyService(policies_repo, matcher_factory=ScopeMatcherFactory()),
        payment_service=PaymentService(payments_repo),
    )


def build_container(*, db_config: dict, required_percentage=DEFAULT_REQUIRED_PERCENTAGE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        policies_repo=MySQLPolicyRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        required_percentage=required_percentage,
    )
