from __future__ import annotations

from ..model import AttendancePolicy, CourseContext
from .base import ScopeMatcher


class CourseMatcher(ScopeMatcher):
    """Policy targeted at a single course or a course type such as ``lab-courses``."""

    def matches(self, policy: AttendancePolicy, course: CourseContext) -> bool:
        if not policy.target_id:
            return False
        return policy.target_id in (course.course_id, course.course_type)
