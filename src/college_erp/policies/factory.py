from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PolicyScope
from .matchers.all_matcher import AllCoursesMatcher
from .matchers.base import ScopeMatcher
from .matchers.course_matcher import CourseMatcher
from .matchers.department_matcher import DepartmentMatcher


@dataclass
class ScopeMatcherFactory:
    """Factory Pattern: choose the matcher for a policy scope."""

    def for_scope(self, scope: PolicyScope) -> ScopeMatcher:
        if scope == PolicyScope.DEPARTMENT:
            return DepartmentMatcher()
        if scope == PolicyScope.COURSE:
            return CourseMatcher()
        return AllCoursesMatcher()
