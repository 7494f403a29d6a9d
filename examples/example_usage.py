"""Example: using the calculators and services directly (no Flask).

Controllers are a thin layer; the business rules live in the modules below.
"""

from college_erp.attendance.calculator import compute_attendance
from college_erp.core.enums import ConsequenceType, PolicyScope
from college_erp.payments.resolver import resolve_payment_total
from college_erp.policies.evaluator import evaluate_policy
from college_erp.policies.model import AttendancePolicy, CourseContext


def main():
    print(compute_attendance(40, 28, 75))

    policies = [
        AttendancePolicy("policy-1", "General Attendance Policy", 75, 80, 75, ConsequenceType.EXAM_BLOCK, PolicyScope.ALL,
                         grace_allowance=5, medical_exemption=True),
        AttendancePolicy("policy-2", "Laboratory Course Policy", 85, 90, 85, ConsequenceType.GRADE_REDUCTION,
                         PolicyScope.COURSE, target_id="lab-courses", medical_exemption=True),
    ]
    lab = CourseContext("cs304-lab", "Machine Learning Lab", "computer-science", "lab-courses", 25, 22)
    print(evaluate_policy(lab, policies).to_dict())

    print(resolve_payment_total(10000, "card"))


if __name__ == "__main__":
    main()
