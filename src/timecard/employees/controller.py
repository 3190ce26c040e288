from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from .service import to_payload


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/admin/employees", methods=["GET"], endpoint="admin_employees_list")
    def list_employees():
        return ok(employees=[to_payload(e) for e in service.list_employees()])

    @app.route("/api/admin/employees", methods=["POST"], endpoint="admin_employees_create")
    def create():
        data = json_body()
        employee = service.create_employee(
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            role=data.get("role") or "employee",
            hourly_rate=data.get("hourly_rate"),
            base_salary=data.get("base_salary"),
            vacation_days=data.get("vacation_days"),
        )
        return ok(201, message="Employee created", employee=to_payload(employee))

    @app.route("/api/admin/employees/<int:user_id>", methods=["GET"], endpoint="admin_employees_get")
    def get(user_id: int):
        return ok(employee=to_payload(service.get(user_id)))

    @app.route("/api/admin/employees/<int:user_id>", methods=["PUT"], endpoint="admin_employees_update")
    def update(user_id: int):
        employee = service.update_employee(user_id, **json_body())
        return ok(message="Employee updated", employee=to_payload(employee))
