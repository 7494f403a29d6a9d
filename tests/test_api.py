from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

import pytest

from college_erp.container import build_services
from college_erp.main import create_app


class InMemoryAttendance:
    def __init__(self):
        self._items = {}

    def get_for_user_and_date(self, user_id, day):
        return self._items.get((user_id, day))

    def upsert(self, record) -> None:
        self._items[(record.user_id, record.date)] = record

    def list_for_user(self, user_id, *, start_date=None, end_date=None, limit=None):
        items = sorted(
            (
                r
                for r in self._items.values()
                if r.user_id == user_id
                and (start_date is None or r.date >= start_date)
                and (end_date is None or r.date <= end_date)
            ),
            key=lambda r: r.date,
            reverse=True,
        )
        return items[:limit] if limit else items

    def delete(self, user_id, day) -> bool:
        return self._items.pop((user_id, day), None) is not None


class InMemoryPolicies:
    def __init__(self):
        self._items = {}

    def list_all(self):
        return list(self._items.values())

    def get_by_id(self, policy_id):
        return self._items.get(policy_id)

    def save(self, policy) -> None:
        self._items[policy.policy_id] = policy

    def count(self) -> int:
        return len(self._items)


class InMemoryPayments:
    def __init__(self):
        self.structures = {}
        self.payments = {}

    def get_structure(self, structure_id):
        return self.structures.get(structure_id)

    def list_structures(self, *, active_only: bool = False):
        return [s for s in self.structures.values() if s.is_active or not active_only]

    def save_structure(self, structure) -> None:
        self.structures[structure.structure_id] = structure

    def get_payment(self, payment_id):
        return self.payments.get(payment_id)

    def list_payments(self, *, student_id: Optional[str] = None, status=None):
        items = [
            p
            for p in self.payments.values()
            if (student_id is None or p.student_id == student_id) and (status is None or p.status == status)
        ]
        return sorted(items, key=lambda p: p.due_date)

    def save_payment(self, payment) -> None:
        self.payments[payment.payment_id] = payment


@pytest.fixture
def container():
    return build_services(
        attendance_repo=InMemoryAttendance(),
        policies_repo=InMemoryPolicies(),
        payments_repo=InMemoryPayments(),
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _sign_in(client, role: str) -> None:
    with client.session_transaction() as sess:
        sess["role"] = role


def test_calculate_attendance(client):
    res = client.post(
        "/api/attendance/calculate",
        json={"total_classes": 40, "attended_classes": 30, "required_percentage": 75, "future_total_classes": 50},
    )
    assert res.status_code == 200
    body = res.get_json()
    assert body["percentage"] == 75.0
    assert body["status"] == "warning"
    assert body["classes_needed"] == 0
    assert body["max_absences"] == 10
    assert body["remaining_absences"] == 0
    assert body["future"]["percentage"] == 80.0
    assert body["future"]["status"] == "good"
    assert body["future"]["absences_allowed"] == 2


def test_calculate_uses_configured_default_requirement(client):
    res = client.post("/api/attendance/calculate", json={"total_classes": 40, "attended_classes": 28})
    assert res.get_json()["classes_needed"] == 8


def test_calculate_rejects_inconsistent_counts(client):
    res = client.post("/api/attendance/calculate", json={"total_classes": 10, "attended_classes": 11})
    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_mark_and_read_attendance(client):
    today = date.today()
    for offset, status in enumerate(["present", "late", "absent", "present"]):
        day = (today - timedelta(days=offset)).isoformat()
        res = client.post("/api/attendance/stu001/records", json={"date": day, "status": status})
        assert res.status_code == 201

    history = client.get("/api/attendance/stu001/records?limit=2").get_json()["records"]
    assert [r["date"] for r in history] == [today.isoformat(), (today - timedelta(days=1)).isoformat()]

    stats = client.get("/api/attendance/stu001/stats").get_json()
    assert stats["stats"]["total_days"] == 4
    assert stats["stats"]["percentage"] == 75.0
    assert stats["summary"]["status"] == "warning"

    res = client.delete(f"/api/attendance/stu001/records/{today.isoformat()}")
    assert res.status_code == 200
    res = client.delete(f"/api/attendance/stu001/records/{today.isoformat()}")
    assert res.status_code == 404


def test_mark_rejects_future_dates(client):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    res = client.post("/api/attendance/stu001/records", json={"date": tomorrow, "status": "present"})
    assert res.status_code == 400


def test_policy_management_requires_a_managing_role(client):
    body = {"name": "General Attendance Policy", "min_attendance_percentage": 75, "warning_threshold": 80, "critical_threshold": 75}

    assert client.post("/api/policies", json=body).status_code == 403

    _sign_in(client, "student")
    assert client.post("/api/policies", json=body).status_code == 403

    _sign_in(client, "faculty")
    res = client.post("/api/policies", json=body)
    assert res.status_code == 201
    assert res.get_json()["policy"]["id"] == "policy-1"
    assert res.get_json()["policy"]["is_active"] is False


def test_policy_lifecycle_and_evaluation(client):
    _sign_in(client, "admin")
    res = client.post(
        "/api/policies",
        json={
            "name": "Computer Science Department Policy",
            "min_attendance_percentage": 80,
            "warning_threshold": 85,
            "critical_threshold": 80,
            "applies_to": "department",
            "target_id": "CS",
            "grace_allowance": 0,
            "medical_exemption": True,
        },
    )
    policy_id = res.get_json()["policy"]["id"]

    res = client.post(f"/api/policies/{policy_id}/toggle")
    assert res.get_json()["policy"]["is_active"] is True
    assert len(client.get("/api/policies?active=1").get_json()["policies"]) == 1

    res = client.post(
        "/api/policies/evaluate",
        json={
            "student": {
                "user_id": "stu001",
                "full_name": "Asha Verma",
                "department": "CS",
                "courses": [{"id": "CS301", "total_classes": 50, "attended_classes": 39}],
            }
        },
    )
    [result] = res.get_json()["results"]
    assert result["status"] == "critical"
    assert result["governing_policy"]["id"] == policy_id
    assert result["classes_needed"] == 5
    assert result["medical_exemption_available"] is True


def test_policy_errors(client):
    _sign_in(client, "admin")
    assert client.post("/api/policies/policy-9/toggle").status_code == 404
    assert client.put("/api/policies/policy-9", json={"name": "Renamed policy"}).status_code == 404
    assert client.post("/api/policies", json={"name": "Incomplete"}).status_code == 400
    assert client.post("/api/policies/evaluate", json={}).status_code == 400


def test_payment_quote(client):
    res = client.post("/api/payments/quote", json={"amount": 10000, "method": "card"})
    assert res.status_code == 200
    assert res.get_json()["total_amount"] == 10250.0

    assert client.post("/api/payments/quote", json={"amount": 100, "method": "cheque"}).status_code == 400
    assert client.post("/api/payments/quote", json={"method": "upi"}).status_code == 400

    methods = client.get("/api/payments/methods").get_json()["methods"]
    assert {m["id"] for m in methods} == {"card", "netbanking", "upi", "wallet"}


def test_student_payments_and_checkout(client, container):
    today = date.today()
    svc = container.payment_service
    svc.create_structure(
        structure_id="tuition-s5",
        name="Semester Tuition Fee",
        amount=45000,
        due_date=today + timedelta(days=10),
        category="tuition",
        semester="5",
        description="Tuition fee for semester 5",
        today=today,
    )
    svc.assign(structure_id="tuition-s5", student_id="stu001")

    body = client.get("/api/students/stu001/payments").get_json()
    [item] = body["payments"]
    assert item["status"] == "pending"
    assert item["due"] == {"days": 10, "state": "normal"}
    assert body["summary"]["outstanding"] == 45000.0

    res = client.post("/api/payments/tuition-s5-stu001/pay", json={"amount": 20000, "method": "wallet"})
    assert res.status_code == 200
    assert res.get_json()["payment"]["status"] == "partial"
    assert res.get_json()["charged"]["total_amount"] == 20200.0

    assert client.post("/api/payments/unknown/pay", json={"amount": 10, "method": "upi"}).status_code == 404
    res = client.post("/api/payments/tuition-s5-stu001/pay", json={"amount": 30000, "method": "upi"})
    assert res.status_code == 400


@pytest.mark.parametrize(
    "body",
    [
        {"total_classes": 40, "attended_classes": 30, "required_percentage": "nan"},
        {"total_classes": 40, "attended_classes": 30, "required_percentage": "inf"},
        {"total_classes": "forty", "attended_classes": 30},
        {"total_classes": 40, "attended_classes": 30, "future_total_classes": "nan"},
    ],
)
def test_calculate_rejects_non_numeric_input(client, body):
    res = client.post("/api/attendance/calculate", json=body)
    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_non_object_bodies_are_rejected(client):
    assert client.post("/api/attendance/calculate", json=[40, 30]).status_code == 400
    assert client.post("/api/payments/quote", json="10000").status_code == 400


def test_policy_with_nan_threshold_is_rejected(client):
    _sign_in(client, "admin")
    res = client.post(
        "/api/policies",
        json={
            "name": "General Attendance Policy",
            "min_attendance_percentage": "nan",
            "warning_threshold": 80,
            "critical_threshold": 75,
        },
    )
    assert res.status_code == 400
    assert client.get("/api/policies").get_json()["policies"] == []


@pytest.mark.parametrize(
    "body",
    [
        {"courses": [{"course_id": "c1", "total_classes": "abc"}]},
        {"courses": [{"course_id": "c1", "total_classes": 10, "attended_classes": "nan"}]},
        {"courses": [{"course_id": "c1", "total_classes": 10, "attended_classes": 12}]},
        {"courses": ["c1"]},
        {"courses": {"course_id": "c1"}},
        {"student": "stu001"},
        {"student": {"user_id": "stu001", "full_name": "Asha Verma", "semester": "fifth"}},
    ],
)
def test_evaluate_rejects_malformed_courses(client, body):
    assert client.post("/api/policies/evaluate", json=body).status_code == 400


@pytest.mark.parametrize("amount", ["NaN", "abc", "Infinity"])
def test_quote_rejects_non_finite_amounts(client, amount):
    assert client.post("/api/payments/quote", json={"amount": amount, "method": "upi"}).status_code == 400


def test_checkout_rejects_bad_amounts_and_paid_fees(client, container):
    today = date.today()
    svc = container.payment_service
    svc.create_structure(
        structure_id="lab-s5",
        name="Laboratory Fee",
        amount=2500,
        due_date=today + timedelta(days=10),
        category="lab",
        semester="5",
        description="Consumables for semester 5 labs",
        today=today,
    )
    svc.assign(structure_id="lab-s5", student_id="stu001")

    for amount in ("abc", "NaN"):
        res = client.post("/api/payments/lab-s5-stu001/pay", json={"amount": amount, "method": "upi"})
        assert res.status_code == 400

    res = client.post("/api/payments/lab-s5-stu001/pay", json={"amount": 2500, "method": "upi"})
    assert res.get_json()["payment"]["status"] == "paid"

    res = client.post("/api/payments/lab-s5-stu001/pay", json={"amount": 1, "method": "upi"})
    assert res.status_code == 409
    assert res.get_json()["success"] is False
