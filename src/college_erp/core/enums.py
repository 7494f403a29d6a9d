from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Portal roles; each one has its own user variant in ``users.model``."""

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"
    EMPLOYEE = "employee"
    PRINCIPAL = "principal"
    FINANCE = "finance"


class AttendanceStatus(str, Enum):
    """Status of a single day in the attendance calendar."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    LEAVE = "leave"
    HOLIDAY = "holiday"


class ComplianceStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class ConsequenceType(str, Enum):
    EXAM_BLOCK = "exam_block"
    GRADE_REDUCTION = "grade_reduction"
    WARNING = "warning"
    PROBATION = "probation"


class PolicyScope(str, Enum):
    """Which courses an attendance policy applies to."""

    ALL = "all"
    DEPARTMENT = "department"
    COURSE = "course"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"


class FeeCategory(str, Enum):
    TUITION = "tuition"
    HOSTEL = "hostel"
    LIBRARY = "library"
    LAB = "lab"
    EXAM = "exam"
    OTHER = "other"


class DueState(str, Enum):
    """Countdown bucket for a fee due date."""

    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    URGENT = "urgent"
    NORMAL = "normal"
