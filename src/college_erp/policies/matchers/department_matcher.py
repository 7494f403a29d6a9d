from __future__ import annotations

from ..model import AttendancePolicy, CourseContext
from .base import ScopeMatcher


class DepartmentMatcher(ScopeMatcher):
    """Policy targeted at one department (target_id is the department key)."""

    def matches(self, policy: AttendancePolicy, course: CourseContext) -> bool:
        return bool(policy.target_id) and policy.target_id == course.department
