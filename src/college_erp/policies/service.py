from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from ..common.validators import require_choice, require_in_range, require_length
from ..core.constants import MAX_GRACE_ALLOWANCE, POLICY_NAME_MAX, POLICY_NAME_MIN
from ..core.enums import ConsequenceType, PolicyScope, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Student
from .evaluator import evaluate_policy
from .factory import ScopeMatcherFactory
from .model import AttendancePolicy, CourseContext, PolicyEvaluation
from .repository import PolicyRepository

logger = logging.getLogger(__name__)

_MANAGING_ROLES = {Role.ADMIN, Role.FACULTY, Role.PRINCIPAL}


def validate_policy(policy: AttendancePolicy) -> AttendancePolicy:
    name = require_length(policy.name, "Rule name", min_len=POLICY_NAME_MIN, max_len=POLICY_NAME_MAX)
    require_in_range(policy.min_attendance_percentage, "Minimum attendance percentage", 0, 100)
    require_in_range(policy.warning_threshold, "Warning threshold", 0, 100)
    require_in_range(policy.critical_threshold, "Critical threshold", 0, 100)
    if policy.warning_threshold < policy.critical_threshold:
        raise ValidationError("Warning threshold must be greater than or equal to critical threshold")

    require_in_range(policy.grace_allowance, "Grace allowance", 0, MAX_GRACE_ALLOWANCE)

    consequence = require_choice(policy.consequence_type, ConsequenceType, "Consequence type")
    scope = require_choice(policy.applies_to, PolicyScope, "Application scope")
    target_id = (policy.target_id or "").strip() or None
    if scope != PolicyScope.ALL and not target_id:
        raise ValidationError(f"A target is required for {scope.value}-scoped policies")

    return replace(
        policy,
        name=name,
        consequence_type=consequence,
        applies_to=scope,
        target_id=target_id if scope != PolicyScope.ALL else None,
    )


class PolicyService:
    """Use cases: manage attendance policies and evaluate students against them."""

    def __init__(self, policies: PolicyRepository, *, matcher_factory: Optional[ScopeMatcherFactory] = None):
        self._policies = policies
        self._factory = matcher_factory or ScopeMatcherFactory()

    @staticmethod
    def _require_manager(current_role: Role) -> None:
        if current_role not in _MANAGING_ROLES:
            raise AuthorizationError("You are not allowed to manage attendance policies")

    def list_policies(self, *, active_only: bool = False) -> List[AttendancePolicy]:
        items = list(self._policies.list_all())
        if active_only:
            items = [p for p in items if p.is_active]
        return items

    def get(self, policy_id: str) -> AttendancePolicy:
        policy = self._policies.get_by_id(policy_id)
        if not policy:
            raise NotFoundError(f"Policy {policy_id} not found")
        return policy

    def create(self, *, current_role: Role, **fields) -> AttendancePolicy:
        """New policies start inactive unless ``is_active`` is passed."""
        self._require_manager(current_role)
        fields.setdefault("is_active", False)
        fields.setdefault("consequence_type", ConsequenceType.WARNING)
        fields.setdefault("applies_to", PolicyScope.ALL)

        policy_id = f"policy-{self._policies.count() + 1}"
        while self._policies.get_by_id(policy_id):
            policy_id = f"policy-{int(policy_id.rsplit('-', 1)[1]) + 1}"

        try:
            policy = AttendancePolicy(policy_id=policy_id, **fields)
        except TypeError as e:
            raise ValidationError(str(e))
        policy = validate_policy(policy)

        self._policies.save(policy)
        logger.info("Created attendance policy %s (%s)", policy.policy_id, policy.name)
        return policy

    def update(self, *, current_role: Role, policy_id: str, **changes) -> AttendancePolicy:
        self._require_manager(current_role)
        current = self.get(policy_id)
        changes.pop("policy_id", None)
        try:
            policy = replace(current, **changes)
        except TypeError as e:
            raise ValidationError(str(e))
        policy = validate_policy(policy)

        self._policies.save(policy)
        logger.info("Updated attendance policy %s", policy_id)
        return policy

    def toggle(self, *, current_role: Role, policy_id: str) -> AttendancePolicy:
        self._require_manager(current_role)
        policy = self.get(policy_id)
        toggled = replace(policy, is_active=not policy.is_active)
        self._policies.save(toggled)
        logger.info("Policy %s is now %s", policy_id, "active" if toggled.is_active else "inactive")
        return toggled

    def evaluate_course(self, course: CourseContext) -> PolicyEvaluation:
        return evaluate_policy(course, self._policies.list_all(), factory=self._factory)

    def evaluate_courses(self, courses: Iterable[CourseContext]) -> List[PolicyEvaluation]:
        policies = list(self._policies.list_all())
        return [evaluate_policy(c, policies, factory=self._factory) for c in courses]

    def evaluate_student(self, student: Student) -> List[PolicyEvaluation]:
        # Enrolment may omit the department on each course; the student's own applies then.
        courses = [
            c if c.department or not student.department else replace(c, department=student.department)
            for c in student.courses
        ]
        return self.evaluate_courses(courses)
