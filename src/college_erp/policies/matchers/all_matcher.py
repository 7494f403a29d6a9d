from __future__ import annotations

from ..model import AttendancePolicy, CourseContext
from .base import ScopeMatcher


class AllCoursesMatcher(ScopeMatcher):
    """Institution-wide policy."""

    def matches(self, policy: AttendancePolicy, course: CourseContext) -> bool:
        return True
