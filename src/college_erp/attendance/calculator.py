"""Attendance arithmetic.

All functions are pure. Percentages are computed with ``Fraction`` so that
boundary cases (e.g. exactly 75 % against a 75 % requirement) compare exactly;
results are reported as ``float``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from ..common.validators import require_in_range, require_non_negative
from ..core.constants import WARNING_MARGIN
from ..core.enums import ComplianceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceSummary:
    percentage: float
    status: ComplianceStatus
    classes_needed: Optional[int]
    max_absences: int
    remaining_absences: int

    def to_dict(self) -> dict:
        return {
            "percentage": round(self.percentage, 2),
            "status": self.status.value,
            "classes_needed": self.classes_needed,
            "max_absences": self.max_absences,
            "remaining_absences": self.remaining_absences,
        }


def _exact(value) -> Fraction:
    if isinstance(value, Fraction):
        return value
    # str() keeps 72.5 as 145/2 instead of its binary float expansion
    return Fraction(str(value))


def validate_counts(total_classes: int, attended_classes: int, required_percentage=0) -> None:
    require_non_negative(total_classes, "Total classes")
    require_non_negative(attended_classes, "Attended classes")
    if attended_classes > total_classes:
        raise ValidationError("Attended classes cannot exceed total classes")
    require_in_range(required_percentage, "Required percentage", 0, 100)


def _percentage(total_classes: int, attended_classes: int) -> Fraction:
    if total_classes == 0:
        return Fraction(0)
    return Fraction(attended_classes * 100, total_classes)


def current_percentage(total_classes: int, attended_classes: int) -> float:
    validate_counts(total_classes, attended_classes)
    return float(_percentage(total_classes, attended_classes))


def status_for(percentage, required_percentage) -> ComplianceStatus:
    p = _exact(percentage)
    required = _exact(required_percentage)
    if p < required:
        return ComplianceStatus.CRITICAL
    if p < required + WARNING_MARGIN:
        return ComplianceStatus.WARNING
    return ComplianceStatus.GOOD


def classes_needed(total_classes: int, attended_classes: int, required_percentage) -> Optional[int]:
    """Consecutive classes to attend before the requirement is met.

    Returns ``None`` when the requirement is 100 % and a class has already been
    missed, since no number of future classes can bring the percentage back to 100.
    """
    validate_counts(total_classes, attended_classes, required_percentage)
    required = _exact(required_percentage)
    if _percentage(total_classes, attended_classes) >= required:
        return 0
    if required == 100:
        # attended == total at this point means no classes have been held yet
        return None if attended_classes < total_classes else 1

    needed = (required * total_classes - 100 * attended_classes) / (100 - required)
    return max(0, math.ceil(needed))


def max_absences(total_classes: int, required_percentage) -> int:
    require_non_negative(total_classes, "Total classes")
    require_in_range(required_percentage, "Required percentage", 0, 100)
    required = _exact(required_percentage)
    return math.floor(total_classes - required * total_classes / 100)


def future_percentage(total_classes: int, attended_classes: int, future_total_classes: int) -> float:
    """Percentage at ``future_total_classes`` if every remaining class is attended."""
    validate_counts(total_classes, attended_classes)
    if future_total_classes < total_classes:
        return float(_percentage(total_classes, attended_classes))
    future_attended = attended_classes + (future_total_classes - total_classes)
    return float(_percentage(future_total_classes, future_attended))


def future_absence_allowance(
    total_classes: int,
    attended_classes: int,
    future_total_classes: int,
    required_percentage,
) -> int:
    """Absences still allowed among the remaining classes up to ``future_total_classes``."""
    validate_counts(total_classes, attended_classes, required_percentage)
    if future_total_classes <= total_classes:
        return 0
    already_missed = total_classes - attended_classes
    return max(0, max_absences(future_total_classes, required_percentage) - already_missed)


def compute_attendance(total_classes: int, attended_classes: int, required_percentage) -> AttendanceSummary:
    validate_counts(total_classes, attended_classes, required_percentage)

    percentage = _percentage(total_classes, attended_classes)
    allowed = max_absences(total_classes, required_percentage)

    return AttendanceSummary(
        percentage=float(percentage),
        status=status_for(percentage, required_percentage),
        classes_needed=classes_needed(total_classes, attended_classes, required_percentage),
        max_absences=allowed,
        remaining_absences=allowed - (total_classes - attended_classes),
    )
