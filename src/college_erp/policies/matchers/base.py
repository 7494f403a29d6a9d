from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import AttendancePolicy, CourseContext


class ScopeMatcher(ABC):
    """Strategy Pattern: decide whether a policy's scope covers a course."""

    @abstractmethod
    def matches(self, policy: AttendancePolicy, course: CourseContext) -> bool:
        raise NotImplementedError
