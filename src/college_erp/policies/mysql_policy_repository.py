from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import ConsequenceType, PolicyScope
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import AttendancePolicy
from .repository import PolicyRepository

_COLUMNS = """
    policy_id, name, min_attendance_percentage, warning_threshold, critical_threshold,
    consequence_type, applies_to, target_id, grace_allowance, medical_exemption,
    is_active, special_cases
"""


def _to_policy(r: dict) -> AttendancePolicy:
    special = r.get("special_cases")
    return AttendancePolicy(
        policy_id=str(r["policy_id"]),
        name=r["name"],
        min_attendance_percentage=float(r["min_attendance_percentage"]),
        warning_threshold=float(r["warning_threshold"]),
        critical_threshold=float(r["critical_threshold"]),
        consequence_type=ConsequenceType(r["consequence_type"]),
        applies_to=PolicyScope(r["applies_to"]),
        target_id=r.get("target_id"),
        grace_allowance=int(r.get("grace_allowance") or 0),
        medical_exemption=as_bool(r.get("medical_exemption")),
        is_active=as_bool(r.get("is_active")),
        special_cases=tuple(json.loads(special)) if special else (),
    )


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendancePolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_policies ORDER BY created_at, policy_id")
            return [_to_policy(r) for r in fetchall(cur)]

    def get_by_id(self, policy_id: str) -> Optional[AttendancePolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_policies WHERE policy_id=%s", (policy_id,))
            r = fetchone(cur)
            return _to_policy(r) if r else None

    def save(self, policy: AttendancePolicy) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_policies(
                    policy_id, name, min_attendance_percentage, warning_threshold, critical_threshold,
                    consequence_type, applies_to, target_id, grace_allowance, medical_exemption,
                    is_active, special_cases
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    min_attendance_percentage=VALUES(min_attendance_percentage),
                    warning_threshold=VALUES(warning_threshold),
                    critical_threshold=VALUES(critical_threshold),
                    consequence_type=VALUES(consequence_type),
                    applies_to=VALUES(applies_to),
                    target_id=VALUES(target_id),
                    grace_allowance=VALUES(grace_allowance),
                    medical_exemption=VALUES(medical_exemption),
                    is_active=VALUES(is_active),
                    special_cases=VALUES(special_cases)
                """,
                (
                    policy.policy_id,
                    policy.name,
                    policy.min_attendance_percentage,
                    policy.warning_threshold,
                    policy.critical_threshold,
                    policy.consequence_type.value,
                    policy.applies_to.value,
                    policy.target_id,
                    int(policy.grace_allowance),
                    1 if policy.medical_exemption else 0,
                    1 if policy.is_active else 0,
                    json.dumps(list(policy.special_cases)),
                ),
            )

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance_policies")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
