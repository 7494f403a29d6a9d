from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..attendance.calculator import current_percentage
from ..core.enums import ComplianceStatus, ConsequenceType, PolicyScope


@dataclass(frozen=True)
class AttendancePolicy:
    """Domain entity: an attendance requirement and the consequence of missing it."""

    policy_id: str
    name: str
    min_attendance_percentage: float
    warning_threshold: float
    critical_threshold: float
    consequence_type: ConsequenceType
    applies_to: PolicyScope
    target_id: Optional[str] = None
    grace_allowance: int = 0
    medical_exemption: bool = False
    is_active: bool = True
    special_cases: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.policy_id,
            "name": self.name,
            "min_attendance_percentage": self.min_attendance_percentage,
            "warning_threshold": self.warning_threshold,
            "critical_threshold": self.critical_threshold,
            "consequence_type": self.consequence_type.value,
            "applies_to": self.applies_to.value,
            "target_id": self.target_id,
            "grace_allowance": self.grace_allowance,
            "medical_exemption": self.medical_exemption,
            "is_active": self.is_active,
            "special_cases": list(self.special_cases),
        }


@dataclass(frozen=True)
class CourseContext:
    """A course as seen from one student's enrolment."""

    course_id: str
    name: str
    department: Optional[str] = None
    course_type: Optional[str] = None
    total_classes: int = 0
    attended_classes: int = 0

    @property
    def attendance(self) -> float:
        return current_percentage(self.total_classes, self.attended_classes)

    @property
    def absences(self) -> int:
        return self.total_classes - self.attended_classes


@dataclass(frozen=True)
class PolicyEvaluation:
    course_id: str
    attendance: float
    status: Optional[ComplianceStatus] = None
    governing_policy: Optional[AttendancePolicy] = None
    applicable_policy_ids: Tuple[str, ...] = field(default_factory=tuple)
    classes_needed: Optional[int] = None
    absences_remaining: Optional[int] = None
    medical_exemption_available: bool = False

    def to_dict(self) -> dict:
        return {
            "course_id": self.course_id,
            "attendance": round(self.attendance, 2),
            "status": self.status.value if self.status else None,
            "governing_policy": self.governing_policy.to_dict() if self.governing_policy else None,
            "applicable_policy_ids": list(self.applicable_policy_ids),
            "classes_needed": self.classes_needed,
            "absences_remaining": self.absences_remaining,
            "medical_exemption_available": self.medical_exemption_available,
        }
