from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.validators import require_choice, require_int, require_number, require_object
from ..container import Container
from ..core.enums import ConsequenceType, PolicyScope, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import Student, course_from_dict, user_from_dict

_NUMERIC = ("min_attendance_percentage", "warning_threshold", "critical_threshold")


def _policy_fields(data: dict) -> dict:
    """Map a JSON body onto AttendancePolicy keyword arguments (only keys present)."""
    fields: dict = {}
    if "name" in data:
        fields["name"] = str(data["name"] or "")
    for key in _NUMERIC:
        if key in data:
            fields[key] = require_number(data[key], key.replace("_", " ").capitalize())
    if "consequence_type" in data:
        fields["consequence_type"] = require_choice(data["consequence_type"], ConsequenceType, "Consequence type")
    if "applies_to" in data:
        fields["applies_to"] = require_choice(data["applies_to"], PolicyScope, "Application scope")
    if "target_id" in data:
        fields["target_id"] = str(data["target_id"]) if data["target_id"] is not None else None
    if "grace_allowance" in data:
        fields["grace_allowance"] = require_int(data["grace_allowance"] or 0, "Grace allowance")
    for key in ("medical_exemption", "is_active"):
        if key in data:
            fields[key] = bool(data[key])
    if "special_cases" in data:
        fields["special_cases"] = tuple(str(s) for s in data["special_cases"] or ())
    return fields


def register(app: Flask, container: Container) -> None:
    def current_role() -> Role:
        role = session.get("role")
        if not role:
            raise AuthorizationError("Please sign in to continue")
        return require_choice(role, Role, "Role")

    @app.route("/api/policies", methods=["GET"], endpoint="policies_list")
    def policies_list():
        active_only = request.args.get("active") in {"1", "true"}
        items = container.policy_service.list_policies(active_only=active_only)
        return jsonify({"success": True, "policies": [p.to_dict() for p in items]})

    @app.route("/api/policies", methods=["POST"], endpoint="policies_create")
    def policies_create():
        data = require_object(request.get_json(silent=True), "Request body")
        fields = _policy_fields(data)
        for key in ("name",) + _NUMERIC:
            if key not in fields:
                raise ValidationError(f"Missing field: {key}")
        policy = container.policy_service.create(current_role=current_role(), **fields)
        return jsonify({"success": True, "policy": policy.to_dict()}), 201

    @app.route("/api/policies/<policy_id>", methods=["PUT"], endpoint="policies_update")
    def policies_update(policy_id: str):
        data = require_object(request.get_json(silent=True), "Request body")
        policy = container.policy_service.update(
            current_role=current_role(),
            policy_id=policy_id,
            **_policy_fields(data),
        )
        return jsonify({"success": True, "policy": policy.to_dict()})

    @app.route("/api/policies/<policy_id>/toggle", methods=["POST"], endpoint="policies_toggle")
    def policies_toggle(policy_id: str):
        policy = container.policy_service.toggle(current_role=current_role(), policy_id=policy_id)
        return jsonify({"success": True, "policy": policy.to_dict()})

    @app.route("/api/policies/evaluate", methods=["POST"], endpoint="policies_evaluate")
    def policies_evaluate():
        """Evaluate either ``{"student": {...}}`` or a bare ``{"courses": [...]}`` list."""
        data = require_object(request.get_json(silent=True), "Request body")
        if data.get("student"):
            if not isinstance(data["student"], dict):
                raise ValidationError("Student must be an object")
            student = user_from_dict({"role": Role.STUDENT.value, **data["student"]})
            if not isinstance(student, Student):
                raise ValidationError("Only students can be evaluated against attendance policies")
            results = container.policy_service.evaluate_student(student)
        else:
            raw_courses = data.get("courses") or []
            if not isinstance(raw_courses, list):
                raise ValidationError("Courses must be a list")
            courses = [course_from_dict(c) for c in raw_courses]
            if not courses:
                raise ValidationError("At least one course is required")
            results = container.policy_service.evaluate_courses(courses)
        return jsonify({"success": True, "results": [r.to_dict() for r in results]})
