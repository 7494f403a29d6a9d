from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_int, require_number, require_object
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from .calculator import compute_attendance, future_absence_allowance, future_percentage, status_for


def _record_to_dict(r) -> dict:
    return {
        "date": r.date.strftime("%Y-%m-%d"),
        "status": r.status.value,
        "subject": r.subject,
        "hours": r.hours,
        "notes": r.notes,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/calculate", methods=["POST"], endpoint="attendance_calculate")
    def attendance_calculate():
        data = require_object(request.get_json(silent=True), "Request body")
        total = require_int(data.get("total_classes"), "Total classes")
        attended = require_int(data.get("attended_classes"), "Attended classes")
        required = require_number(
            data.get("required_percentage", app.config["DEFAULT_REQUIRED_PERCENTAGE"]),
            "Required percentage",
        )

        summary = compute_attendance(total, attended, required)
        payload = {"success": True, **summary.to_dict()}

        if data.get("future_total_classes") is not None:
            future_total = require_int(data.get("future_total_classes"), "Future total classes")
            projected = future_percentage(total, attended, future_total)
            payload["future"] = {
                "total_classes": future_total,
                "percentage": round(projected, 2),
                "status": status_for(projected, required).value,
                "absences_allowed": future_absence_allowance(total, attended, future_total, required),
            }
        return jsonify(payload)

    @app.route("/api/attendance/<user_id>/records", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark(user_id: str):
        data = require_object(request.get_json(silent=True), "Request body")
        hours = data.get("hours")
        record = container.attendance_service.mark(
            user_id=user_id,
            day=parse_iso_date(data.get("date")),
            status=data.get("status"),
            subject=data.get("subject"),
            hours=require_number(hours, "Hours") if hours is not None else None,
            notes=data.get("notes"),
        )
        return jsonify({"success": True, "record": _record_to_dict(record)}), 201

    @app.route("/api/attendance/<user_id>/records", methods=["GET"], endpoint="attendance_history")
    def attendance_history(user_id: str):
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        rows = container.attendance_service.history(
            user_id,
            start=parse_iso_date(start_s) if start_s else None,
            end=parse_iso_date(end_s) if end_s else None,
            limit=require_int(request.args.get("limit", DEFAULT_HISTORY_LIMIT), "Limit"),
        )
        return jsonify({"success": True, "records": [_record_to_dict(r) for r in rows]})

    @app.route("/api/attendance/<user_id>/records/<day>", methods=["DELETE"], endpoint="attendance_remove")
    def attendance_remove(user_id: str, day: str):
        container.attendance_service.remove(user_id=user_id, day=parse_iso_date(day))
        return jsonify({"success": True})

    @app.route("/api/attendance/<user_id>/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats(user_id: str):
        stats = container.attendance_service.stats(user_id)
        required = request.args.get("required")
        summary = container.attendance_service.summary(
            user_id,
            required_percentage=require_number(required, "Required percentage") if required else None,
        )
        return jsonify(
            {
                "success": True,
                "stats": {
                    "total_days": stats.total_days,
                    "present_days": stats.present_days,
                    "absent_days": stats.absent_days,
                    "late_days": stats.late_days,
                    "leave_days": stats.leave_days,
                    "holiday_days": stats.holiday_days,
                    "percentage": round(stats.percentage, 2),
                },
                "summary": summary.to_dict(),
            }
        )
