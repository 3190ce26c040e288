from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body, ok, require_id
from ..container import Container
from .service import to_payload


def register(app: Flask, container: Container) -> None:
    service = container.overtime_service

    @app.route("/api/overtime", methods=["POST"], endpoint="overtime_create")
    def create():
        data = json_body()
        request_id = service.create_request(
            user_id=require_id(data, "user_id"),
            work_date=parse_iso_date(data.get("date", "")),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            reason=data.get("reason", ""),
        )
        return ok(201, message="Overtime request submitted", request_id=request_id)

    @app.route("/api/overtime", methods=["GET"], endpoint="overtime_mine")
    def mine():
        user_id = require_id(request.args, "user_id")
        return ok(requests=[to_payload(r) for r in service.list_for_user(user_id=user_id)])

    @app.route("/api/admin/overtime/pending", methods=["GET"], endpoint="admin_overtime_pending")
    def pending():
        return ok(
            pending=[to_payload(r) for r in service.list_pending()],
            decided=[to_payload(r) for r in service.list_decided()],
        )

    @app.route("/api/admin/overtime/<int:request_id>/approve", methods=["POST"], endpoint="admin_overtime_approve")
    def approve(request_id: int):
        service.approve(request_id=request_id, approver_id=require_id(json_body(), "approver_id"))
        return ok(message="Overtime request approved")

    @app.route("/api/admin/overtime/<int:request_id>/reject", methods=["POST"], endpoint="admin_overtime_reject")
    def reject(request_id: int):
        service.reject(request_id=request_id, approver_id=require_id(json_body(), "approver_id"))
        return ok(message="Overtime request rejected")

    @app.route("/api/admin/overtime/<int:request_id>/estimate", methods=["GET"], endpoint="admin_overtime_estimate")
    def estimate(request_id: int):
        return ok(request_id=request_id, estimated_pay=str(service.estimate_pay(request_id=request_id)))
