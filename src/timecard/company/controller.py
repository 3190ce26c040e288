from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from .model import CompanySettings


def to_payload(s: CompanySettings) -> dict:
    return {
        "working_days": list(s.working_days),
        "daily_working_hours": str(s.daily_working_hours),
        "break_time_minutes": s.break_time_minutes,
        "overtime_threshold": str(s.overtime_threshold),
        "work_start_hour": s.work_start_hour,
        "leniency_minutes": s.leniency_minutes,
        "penalty_multiplier": str(s.penalty_multiplier),
        "overtime_first_period_hours": str(s.overtime_first_period_hours),
        "overtime_first_period_ratio": str(s.overtime_first_period_ratio),
        "overtime_second_period_ratio": str(s.overtime_second_period_ratio),
    }


def register(app: Flask, container: Container) -> None:
    service = container.settings_service

    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    def get_settings():
        return ok(settings=to_payload(service.get_settings()))

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="admin_settings_update")
    def update_settings():
        saved = service.update_settings(**json_body())
        return ok(message="Settings saved", settings=to_payload(saved))
