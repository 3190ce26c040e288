from __future__ import annotations

import csv
import io
from datetime import datetime

import pytest

from timecard.main import create_app

CLOCK = {"now": datetime(2025, 3, 12, 9, 15)}


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    set_clock(9, 15)
    for target in (
        "timecard.attendance.service.now_local",
        "timecard.attendance.controller.now_local",
        "timecard.payroll.controller.now_local",
    ):
        monkeypatch.setattr(target, lambda: CLOCK["now"])

    app = create_app(container=container)
    return app.test_client()


def set_clock(hour: int, minute: int = 0) -> None:
    CLOCK["now"] = datetime(2025, 3, 12, hour, minute)


def test_check_in_and_check_out_day(client):
    set_clock(9, 15)
    res = client.post("/api/attendance/check-in", json={"user_id": 1})
    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["impact"]["late_minutes"] == 15
    assert body["impact"]["pay_cut_amount"] == "7.50"
    assert body["impact"]["total_hours"] is None

    set_clock(16, 50)
    res = client.post("/api/attendance/check-out", json={"user_id": 1})
    assert res.status_code == 200
    body = res.get_json()
    assert body["message"] == "Checked out early by 10 minute(s)"
    assert body["impact"]["pay_cut_amount"] == "12.50"
    assert body["impact"]["total_hours"] == "7.58"

    res = client.get("/api/attendance/today?user_id=1")
    record = res.get_json()["record"]
    assert record["date"] == "2025-03-12"
    assert record["is_late"] is True
    assert record["early_departure_minutes"] == 10
    assert record["pay_cut_approved"] is False


def test_duplicate_check_in_is_bad_request(client):
    set_clock(8, 50)
    client.post("/api/attendance/check-in", json={"user_id": 1})
    res = client.post("/api/attendance/check-in", json={"user_id": 1})

    assert res.status_code == 400
    assert res.get_json() == {"success": False, "message": "You have already checked in today"}


def test_missing_user_id_is_bad_request(client):
    res = client.post("/api/attendance/check-in", json={})
    assert res.status_code == 400
    assert res.get_json()["message"] == "user_id is invalid"


def test_unknown_employee_is_not_found(client):
    res = client.post("/api/attendance/check-in", json={"user_id": 404})
    assert res.status_code == 404


def test_today_without_record(client):
    res = client.get("/api/attendance/today?user_id=2")
    assert res.status_code == 200
    assert res.get_json()["record"] is None


def test_admin_edit_and_approve_pay_cut(client):
    res = client.put(
        "/api/admin/attendance",
        json={"user_id": 2, "date": "2025-03-11", "check_in": "09:40", "check_out": "16:30", "status": "late"},
    )
    assert res.status_code == 200
    record = res.get_json()["record"]
    assert record["pay_cut_amount"] == "75.00"
    assert record["status"] == "late"

    url = f"/api/admin/attendance/{record['attendance_id']}/approve-pay-cut"
    res = client.post(url, json={"approver_id": 9})
    assert res.status_code == 200

    res = client.post(url, json={"approver_id": 9})
    assert res.status_code == 400
    assert res.get_json()["message"] == "Pay cut already approved"


def test_admin_edit_rejects_bad_date(client):
    res = client.put("/api/admin/attendance", json={"user_id": 2, "date": "11/03/2025", "check_in": "09:00"})
    assert res.status_code == 400


def test_overtime_workflow(client):
    res = client.post(
        "/api/overtime",
        json={
            "user_id": 1,
            "date": "2025-03-12",
            "start_time": "17:00",
            "end_time": "20:00",
            "reason": "Production incident follow-up",
        },
    )
    assert res.status_code == 201
    request_id = res.get_json()["request_id"]

    pending = client.get("/api/admin/overtime/pending").get_json()
    assert [r["request_id"] for r in pending["pending"]] == [request_id]
    assert pending["decided"] == []

    res = client.get(f"/api/admin/overtime/{request_id}/estimate")
    assert res.get_json()["estimated_pay"] == "120.00"

    res = client.post(f"/api/admin/overtime/{request_id}/approve", json={"approver_id": 9})
    assert res.status_code == 200

    mine = client.get("/api/overtime?user_id=1").get_json()["requests"]
    assert mine[0]["status"] == "approved"
    assert mine[0]["approved_by"] == 9

    res = client.post(f"/api/admin/overtime/{request_id}/reject", json={"approver_id": 9})
    assert res.status_code == 400


def test_overtime_rejects_short_reason(client):
    res = client.post(
        "/api/overtime",
        json={"user_id": 1, "date": "2025-03-12", "start_time": "17:00", "end_time": "20:00", "reason": "late"},
    )
    assert res.status_code == 400
    assert res.get_json()["message"] == "Reason must be at least 10 characters"


def test_report_json_and_csv(client):
    client.put("/api/admin/attendance", json={"user_id": 1, "date": "2025-03-10", "check_in": "09:10", "check_out": "17:00"})

    res = client.get("/api/admin/report")
    body = res.get_json()
    assert body["start"] == "2025-03-05"
    assert body["end"] == "2025-03-12"
    assert body["rows"][0]["pay_cut_amount"] == "5.00"

    res = client.get("/api/admin/report.csv?start=2025-03-01&end=2025-03-31")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "attendance_report_20250301_20250331.csv" in res.headers["Content-Disposition"]

    rows = list(csv.DictReader(io.StringIO(res.data.decode("utf-8-sig"))))
    assert len(rows) == 1
    assert rows[0]["full_name"] == "Alice Tran"
    assert rows[0]["check_in"] == "09:10"
    assert rows[0]["pay_cut_approved"] == "no"


def test_report_csv_requires_range(client):
    res = client.get("/api/admin/report.csv?start=2025-03-01")
    assert res.status_code == 400


def test_monthly_summary_defaults_to_current_month(client):
    body = client.get("/api/admin/monthly-summary").get_json()
    assert (body["year"], body["month"]) == (2025, 3)
    assert {e["total_working_days"] for e in body["employees"]} == {21}


def test_settings_roundtrip(client):
    res = client.put("/api/admin/settings", json={"work_start_hour": 8, "leniency_minutes": 45})
    assert res.status_code == 200
    assert res.get_json()["settings"]["work_start_hour"] == 8

    settings = client.get("/api/settings").get_json()["settings"]
    assert settings["leniency_minutes"] == 45
    assert settings["penalty_multiplier"] == "1.5"

    res = client.put("/api/admin/settings", json={"penalty_multiplier": "0.5"})
    assert res.status_code == 400


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.get_json()["success"] is False


@pytest.mark.parametrize("value", ["Infinity", "NaN", "1e30"])
def test_settings_reject_non_finite_daily_hours(client, value):
    res = client.put("/api/admin/settings", json={"daily_working_hours": value})
    assert res.status_code == 400
    assert client.get("/api/settings").get_json()["settings"]["daily_working_hours"] == "8"


@pytest.mark.parametrize(
    "payload",
    [
        {"user_id": 2, "date": 20250311, "check_in": "09:00"},
        {"user_id": 2, "date": "2025-03-11", "check_in": 900},
        {"user_id": 2, "date": "2025-03-11", "check_in": "09:00", "check_out": 1700},
    ],
)
def test_admin_edit_rejects_non_string_values(client, payload):
    res = client.put("/api/admin/attendance", json=payload)
    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_overtime_rejects_non_string_reason(client):
    res = client.post(
        "/api/overtime",
        json={"user_id": 1, "date": "2025-03-12", "start_time": "17:00", "end_time": "20:00", "reason": 1234567890123},
    )
    assert res.status_code == 400


def test_admin_deletes_attendance_record(client):
    res = client.put("/api/admin/attendance", json={"user_id": 1, "date": "2025-03-11", "check_in": "09:00"})
    attendance_id = res.get_json()["record"]["attendance_id"]

    res = client.delete(f"/api/admin/attendance/{attendance_id}")
    assert res.status_code == 200
    assert res.get_json()["message"] == "Attendance record deleted"

    res = client.delete(f"/api/admin/attendance/{attendance_id}")
    assert res.status_code == 404


def test_admin_employee_create_and_update(client):
    res = client.post(
        "/api/admin/employees",
        json={"full_name": "Em Pham", "email": "em@example.com", "hourly_rate": "25", "vacation_days": "2"},
    )
    assert res.status_code == 201
    employee = res.get_json()["employee"]
    assert employee["role"] == "employee"
    assert employee["hourly_rate"] == "25"
    assert employee["vacation_days"] == 2

    res = client.put(f"/api/admin/employees/{employee['user_id']}", json={"hourly_rate": "30.5"})
    assert res.status_code == 200
    assert res.get_json()["employee"]["hourly_rate"] == "30.5"

    listed = client.get("/api/admin/employees").get_json()["employees"]
    assert "em@example.com" in [e["email"] for e in listed]


@pytest.mark.parametrize(
    "payload",
    [
        {"full_name": "Em Pham", "email": "em@example.com", "hourly_rate": -5},
        {"full_name": "Em Pham", "email": "em@example.com", "vacation_days": -1},
        {"full_name": "Em Pham", "email": "alice@example.com"},
        {"email": "em@example.com"},
    ],
)
def test_admin_employee_create_rejects_bad_input(client, payload):
    res = client.post("/api/admin/employees", json=payload)
    assert res.status_code == 400


def test_admin_employee_update_unknown_is_not_found(client):
    res = client.put("/api/admin/employees/404", json={"full_name": "Nobody"})
    assert res.status_code == 404
