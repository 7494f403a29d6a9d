from __future__ import annotations

from typing import Optional

import pytest

from college_erp.core.enums import ComplianceStatus, ConsequenceType, PolicyScope, Role
from college_erp.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from college_erp.policies.model import AttendancePolicy, CourseContext
from college_erp.policies.service import PolicyService
from college_erp.users.model import Student


class InMemoryPolicies:
    def __init__(self):
        self._items: dict[str, AttendancePolicy] = {}

    def list_all(self):
        return list(self._items.values())

    def get_by_id(self, policy_id: str) -> Optional[AttendancePolicy]:
        return self._items.get(policy_id)

    def save(self, policy: AttendancePolicy) -> None:
        self._items[policy.policy_id] = policy

    def count(self) -> int:
        return len(self._items)


VALID = dict(
    name="General Attendance Policy",
    min_attendance_percentage=75,
    warning_threshold=80,
    critical_threshold=75,
)


def test_create_assigns_sequential_ids_and_starts_inactive():
    svc = PolicyService(InMemoryPolicies())

    first = svc.create(current_role=Role.ADMIN, **VALID)
    second = svc.create(
        current_role=Role.FACULTY,
        name="Laboratory Course Policy",
        min_attendance_percentage=85,
        warning_threshold=90,
        critical_threshold=85,
        applies_to="course",
        target_id="lab-courses",
        consequence_type="grade_reduction",
        is_active=True,
    )

    assert first.policy_id == "policy-1"
    assert first.is_active is False
    assert first.applies_to == PolicyScope.ALL
    assert second.policy_id == "policy-2"
    assert second.consequence_type == ConsequenceType.GRADE_REDUCTION
    assert [p.policy_id for p in svc.list_policies(active_only=True)] == ["policy-2"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "Tiny"},
        {"min_attendance_percentage": 101},
        {"warning_threshold": 70, "critical_threshold": 75},
        {"grace_allowance": 31},
        {"applies_to": "department"},
        {"consequence_type": "expulsion"},
    ],
)
def test_create_validation(overrides):
    svc = PolicyService(InMemoryPolicies())
    with pytest.raises(ValidationError):
        svc.create(current_role=Role.ADMIN, **{**VALID, **overrides})


def test_students_cannot_manage_policies():
    svc = PolicyService(InMemoryPolicies())
    with pytest.raises(AuthorizationError):
        svc.create(current_role=Role.STUDENT, **VALID)


def test_update_and_toggle():
    svc = PolicyService(InMemoryPolicies())
    created = svc.create(current_role=Role.ADMIN, **VALID)

    updated = svc.update(current_role=Role.ADMIN, policy_id=created.policy_id, min_attendance_percentage=70, critical_threshold=70)
    assert updated.min_attendance_percentage == 70

    toggled = svc.toggle(current_role=Role.PRINCIPAL, policy_id=created.policy_id)
    assert toggled.is_active is True
    assert svc.get(created.policy_id).is_active is True


def test_update_unknown_policy():
    svc = PolicyService(InMemoryPolicies())
    with pytest.raises(NotFoundError):
        svc.update(current_role=Role.ADMIN, policy_id="policy-9", name="Renamed policy")


def test_update_rejects_unknown_field():
    svc = PolicyService(InMemoryPolicies())
    created = svc.create(current_role=Role.ADMIN, **VALID)
    with pytest.raises(ValidationError):
        svc.update(current_role=Role.ADMIN, policy_id=created.policy_id, colour="red")


def test_evaluate_student_uses_student_department():
    svc = PolicyService(InMemoryPolicies())
    svc.create(current_role=Role.ADMIN, is_active=True, **VALID)
    svc.create(
        current_role=Role.ADMIN,
        name="Computer Science Department Policy",
        min_attendance_percentage=80,
        warning_threshold=85,
        critical_threshold=80,
        applies_to="department",
        target_id="computer-science",
        is_active=True,
    )

    student = Student(
        user_id="stu001",
        full_name="John Smith",
        department="computer-science",
        courses=(CourseContext("cs302", "Software Engineering", total_classes=50, attended_classes=39),),
    )

    [result] = svc.evaluate_student(student)
    assert result.governing_policy.policy_id == "policy-2"
    assert result.status == ComplianceStatus.CRITICAL
