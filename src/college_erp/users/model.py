from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple, Union

from ..common.validators import require_choice, require_int, require_non_empty, require_non_negative
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..policies.model import CourseContext


@dataclass(frozen=True)
class BaseUser:
    """Fields every portal account has. Use one of the role variants below."""

    role: ClassVar[Role]

    user_id: str
    full_name: str
    email: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class Student(BaseUser):
    role: ClassVar[Role] = Role.STUDENT

    roll_number: Optional[str] = None
    semester: Optional[int] = None
    courses: Tuple[CourseContext, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Faculty(BaseUser):
    role: ClassVar[Role] = Role.FACULTY

    designation: Optional[str] = None
    course_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Admin(BaseUser):
    role: ClassVar[Role] = Role.ADMIN


@dataclass(frozen=True)
class Employee(BaseUser):
    role: ClassVar[Role] = Role.EMPLOYEE

    designation: Optional[str] = None


@dataclass(frozen=True)
class Principal(BaseUser):
    role: ClassVar[Role] = Role.PRINCIPAL


@dataclass(frozen=True)
class Finance(BaseUser):
    role: ClassVar[Role] = Role.FINANCE


User = Union[Student, Faculty, Admin, Employee, Principal, Finance]

_VARIANTS = {cls.role: cls for cls in (Student, Faculty, Admin, Employee, Principal, Finance)}


def course_from_dict(data: dict) -> CourseContext:
    if not isinstance(data, dict):
        raise ValidationError("Each course must be an object")
    course_id = require_non_empty(str(data.get("course_id") or data.get("id") or ""), "Course id")
    total = require_non_negative(require_int(data.get("total_classes", 0), "Total classes"), "Total classes")
    attended = require_non_negative(require_int(data.get("attended_classes", 0), "Attended classes"), "Attended classes")
    if attended > total:
        raise ValidationError(f"Attended classes cannot exceed total classes for {course_id}")

    return CourseContext(
        course_id=course_id,
        name=str(data.get("name") or course_id),
        department=data.get("department"),
        course_type=data.get("course_type"),
        total_classes=total,
        attended_classes=attended,
    )


def user_from_dict(data: dict) -> User:
    """Build the role variant named by ``data["role"]``.

    Keys that do not belong to that variant are ignored.
    """
    role = require_choice(data.get("role"), Role, "Role")
    common = {
        "user_id": require_non_empty(str(data.get("user_id") or ""), "User id"),
        "full_name": require_non_empty(str(data.get("full_name") or ""), "Full name"),
        "email": data.get("email"),
        "department": data.get("department"),
    }

    if role == Role.STUDENT:
        semester = data.get("semester")
        return Student(
            **common,
            roll_number=data.get("roll_number"),
            semester=require_int(semester, "Semester") if semester is not None else None,
            courses=tuple(course_from_dict(c) for c in data.get("courses") or ()),
        )
    if role == Role.FACULTY:
        return Faculty(
            **common,
            designation=data.get("designation"),
            course_ids=tuple(data.get("course_ids") or ()),
        )
    if role == Role.EMPLOYEE:
        return Employee(**common, designation=data.get("designation"))
    return _VARIANTS[role](**common)
