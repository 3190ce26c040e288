from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import json_body, ok, require_id
from ..container import Container
from ..core import constants
from .service import impact_payload, to_payload


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def check_in():
        user_id = require_id(json_body(), "user_id")
        impact = service.check_in(user_id)
        return ok(201, message="Checked in", impact=impact_payload(impact))

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def check_out():
        user_id = require_id(json_body(), "user_id")
        impact = service.check_out(user_id)
        message = "Checked out"
        if impact.early_departure_minutes > 0:
            message = f"Checked out early by {impact.early_departure_minutes} minute(s)"
        return ok(message=message, impact=impact_payload(impact))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def today():
        user_id = require_id(request.args, "user_id")
        record = service.get_today_record(user_id, now_local().date())
        return ok(record=to_payload(record) if record else None)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    def history():
        user_id = require_id(request.args, "user_id")
        limit = request.args.get("limit", type=int) or constants.DEFAULT_HISTORY_LIMIT
        return ok(records=service.get_history(user_id, limit=limit))

    @app.route("/api/admin/attendance", methods=["PUT"], endpoint="admin_attendance_edit")
    def admin_edit():
        data = json_body()
        record = service.admin_edit(
            user_id=require_id(data, "user_id"),
            work_date=parse_iso_date(data.get("date", "")),
            check_in=data.get("check_in", ""),
            check_out=data.get("check_out") or "",
            status=data.get("status") or "present",
            note=data.get("note"),
        )
        return ok(message="Attendance record saved", record=to_payload(record))

    @app.route(
        "/api/admin/attendance/<int:attendance_id>/approve-pay-cut",
        methods=["POST"],
        endpoint="admin_approve_pay_cut",
    )
    def approve_pay_cut(attendance_id: int):
        approver_id = require_id(json_body(), "approver_id")
        service.approve_pay_cut(attendance_id=attendance_id, approver_id=approver_id)
        return ok(message="Pay cut approved")

    @app.route("/api/admin/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="admin_attendance_delete")
    def delete_record(attendance_id: int):
        service.delete_record(attendance_id=attendance_id)
        return ok(message="Attendance record deleted")
