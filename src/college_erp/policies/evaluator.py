from __future__ import annotations

from fractions import Fraction
from typing import Iterable, List, Optional, Sequence

from ..attendance.calculator import classes_needed, max_absences
from ..core.enums import ComplianceStatus
from .factory import ScopeMatcherFactory
from .model import AttendancePolicy, CourseContext, PolicyEvaluation

_default_factory = ScopeMatcherFactory()


def applicable_policies(
    course: CourseContext,
    policies: Iterable[AttendancePolicy],
    *,
    factory: Optional[ScopeMatcherFactory] = None,
) -> List[AttendancePolicy]:
    """Active policies whose scope covers ``course``, in their original order."""
    factory = factory or _default_factory
    return [p for p in policies if p.is_active and factory.for_scope(p.applies_to).matches(p, course)]


def strictest_policy(policies: Sequence[AttendancePolicy]) -> Optional[AttendancePolicy]:
    """Highest minimum wins; on a tie the earliest policy is kept."""
    if not policies:
        return None
    # max() returns the first maximal element
    return max(policies, key=lambda p: Fraction(str(p.min_attendance_percentage)))


def compliance_status(attendance: float, policy: AttendancePolicy) -> ComplianceStatus:
    value = Fraction(str(attendance))
    if value < Fraction(str(policy.critical_threshold)):
        return ComplianceStatus.CRITICAL
    if value < Fraction(str(policy.warning_threshold)):
        return ComplianceStatus.WARNING
    return ComplianceStatus.GOOD


def evaluate_policy(
    course: CourseContext,
    policies: Iterable[AttendancePolicy],
    *,
    factory: Optional[ScopeMatcherFactory] = None,
) -> PolicyEvaluation:
    matching = applicable_policies(course, policies, factory=factory)
    governing = strictest_policy(matching)
    attendance = course.attendance

    if governing is None:
        return PolicyEvaluation(course_id=course.course_id, attendance=attendance)

    status = compliance_status(attendance, governing)
    allowed = max_absences(course.total_classes, governing.min_attendance_percentage)

    return PolicyEvaluation(
        course_id=course.course_id,
        attendance=attendance,
        status=status,
        governing_policy=governing,
        applicable_policy_ids=tuple(p.policy_id for p in matching),
        classes_needed=classes_needed(
            course.total_classes,
            course.attended_classes,
            governing.min_attendance_percentage,
        ),
        absences_remaining=allowed + int(governing.grace_allowance or 0) - course.absences,
        medical_exemption_available=status == ComplianceStatus.CRITICAL and governing.medical_exemption,
    )
