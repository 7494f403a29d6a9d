from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import require_object
from ..container import Container
from ..core.exceptions import ValidationError
from .service import due_info


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payments/methods", methods=["GET"], endpoint="payments_methods")
    def payments_methods():
        return jsonify({"success": True, "methods": [m.to_dict() for m in container.payment_service.methods()]})

    @app.route("/api/payments/quote", methods=["POST"], endpoint="payments_quote")
    def payments_quote():
        data = require_object(request.get_json(silent=True), "Request body")
        if data.get("amount") is None:
            raise ValidationError("Amount is required")
        quote = container.payment_service.quote(data.get("amount"), data.get("method") or "")
        return jsonify({"success": True, **quote.to_dict()})

    @app.route("/api/students/<student_id>/payments", methods=["GET"], endpoint="student_payments")
    def student_payments(student_id: str):
        today_s = request.args.get("today")
        today = parse_iso_date(today_s) if today_s else today_local()

        svc = container.payment_service
        svc.refresh(today=today, student_id=student_id)
        payments = svc.student_payments(student_id)

        items = []
        for p in payments:
            item = p.to_dict()
            if p.balance > 0:
                info = due_info(p.due_date, today)
                item["due"] = {"days": info.days, "state": info.state.value}
            items.append(item)

        return jsonify(
            {
                "success": True,
                "payments": items,
                "summary": svc.student_summary(student_id).to_dict(),
            }
        )

    @app.route("/api/payments/<payment_id>/pay", methods=["POST"], endpoint="payments_pay")
    def payments_pay(payment_id: str):
        data = require_object(request.get_json(silent=True), "Request body")
        if data.get("amount") is None:
            raise ValidationError("Amount is required")
        receipt = container.payment_service.record_payment(
            payment_id=payment_id,
            amount=data.get("amount"),
            method_id=data.get("method") or "",
            transaction_id=data.get("transaction_id"),
        )
        return jsonify({"success": True, **receipt.to_dict()})
