from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from timecard.attendance.model import AttendanceImpact, AttendanceRecord, AttendanceReportRow
from timecard.company.model import CompanySettings
from timecard.container import assemble
from timecard.core.enums import OvertimeStatus, Role
from timecard.employees.model import Employee
from timecard.overtime.model import OvertimeRequest


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self.by_id = {e.user_id: e for e in employees}

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self.by_id.get(user_id)

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda e: e.full_name)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.email == email), None)

    def create(self, *, full_name, email, role, hourly_rate, base_salary, vacation_days) -> int:
        user_id = max(self.by_id, default=0) + 1
        self.by_id[user_id] = Employee(
            user_id=user_id,
            full_name=full_name,
            email=email,
            role=role,
            hourly_rate=hourly_rate,
            base_salary=base_salary,
            vacation_days=vacation_days,
        )
        return user_id

    def update(self, employee: Employee) -> bool:
        current = self.by_id.get(employee.user_id)
        if not current:
            return False
        self.by_id[employee.user_id] = replace(employee, email=current.email)
        return current != self.by_id[employee.user_id]


class InMemoryAttendance:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self.by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def _next_id(self) -> int:
        self._id += 1
        return self._id

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        for rec in self.by_user_date.values():
            if rec.attendance_id == attendance_id:
                return rec
        return None

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self.by_user_date.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self.by_user_date.get((user_id, work_date))

    def create_checkin(self, *, user_id, work_date, check_in_time, status, impact: AttendanceImpact) -> int:
        rec = AttendanceRecord(
            attendance_id=self._next_id(),
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
            is_late=impact.is_late,
            late_minutes=impact.late_minutes,
            pay_cut_amount=impact.pay_cut_amount,
        )
        self.by_user_date[(user_id, work_date)] = rec
        return rec.attendance_id

    def update_checkout(self, *, attendance_id, check_out_time, impact: AttendanceImpact) -> bool:
        for key, rec in list(self.by_user_date.items()):
            if rec.attendance_id == attendance_id:
                self.by_user_date[key] = replace(
                    rec,
                    check_out_time=check_out_time,
                    total_hours=impact.total_hours,
                    early_departure_minutes=impact.early_departure_minutes,
                    pay_cut_amount=impact.pay_cut_amount,
                )
                return True
        return False

    def save_admin_record(
        self, *, user_id, work_date, check_in_time, check_out_time, status, impact: AttendanceImpact, note=None
    ) -> int:
        existing = self.by_user_date.get((user_id, work_date))
        attendance_id = existing.attendance_id if existing else self._next_id()
        self.by_user_date[(user_id, work_date)] = AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            is_late=impact.is_late,
            late_minutes=impact.late_minutes,
            early_departure_minutes=impact.early_departure_minutes,
            total_hours=impact.total_hours,
            pay_cut_amount=impact.pay_cut_amount,
            pay_cut_approved=False,
            note=note,
        )
        return attendance_id

    def approve_pay_cut(self, *, attendance_id, approved_by, approved_at) -> bool:
        for key, rec in list(self.by_user_date.items()):
            if rec.attendance_id == attendance_id:
                self.by_user_date[key] = replace(
                    rec,
                    pay_cut_approved=True,
                    pay_cut_approved_by=approved_by,
                    pay_cut_approved_at=approved_at,
                )
                return True
        return False

    def delete(self, attendance_id) -> bool:
        for key, rec in list(self.by_user_date.items()):
            if rec.attendance_id == attendance_id:
                del self.by_user_date[key]
                return True
        return False

    def get_report_rows(self, *, start_date, end_date, user_id=None):
        rows = []
        for rec in self.by_user_date.values():
            if not start_date <= rec.work_date <= end_date:
                continue
            if user_id is not None and rec.user_id != user_id:
                continue
            emp = self._employees.get_by_id(rec.user_id)
            rows.append(
                AttendanceReportRow(
                    user_id=rec.user_id,
                    full_name=emp.full_name,
                    email=emp.email,
                    work_date=rec.work_date,
                    check_in_time=rec.check_in_time,
                    check_out_time=rec.check_out_time,
                    status=rec.status,
                    is_late=rec.is_late,
                    late_minutes=rec.late_minutes,
                    early_departure_minutes=rec.early_departure_minutes,
                    total_hours=rec.total_hours,
                    pay_cut_amount=rec.pay_cut_amount,
                    pay_cut_approved=rec.pay_cut_approved,
                    note=rec.note,
                )
            )
        rows.sort(key=lambda r: (r.work_date, -r.user_id), reverse=True)
        return rows


class InMemoryOvertime:
    def __init__(self):
        self.by_id: dict[int, OvertimeRequest] = {}
        self._id = 0

    def create(self, *, user_id, work_date, start_time, end_time, hours, reason) -> int:
        self._id += 1
        self.by_id[self._id] = OvertimeRequest(
            request_id=self._id,
            user_id=user_id,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            hours=hours,
            reason=reason,
            status=OvertimeStatus.PENDING,
            created_at=datetime(2025, 1, 1, 12, 0),
        )
        return self._id

    def get(self, *, request_id):
        return self.by_id.get(request_id)

    def list_requests(self, *, status=None, statuses=None, user_id=None, start_date=None, end_date=None, limit=200):
        items = [
            r
            for r in self.by_id.values()
            if (status is None or r.status == status)
            and (not statuses or r.status in statuses)
            and (user_id is None or r.user_id == user_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: r.request_id, reverse=True)
        return items[:limit]

    def decide(self, *, request_id, status, decided_by, decided_at) -> bool:
        req = self.by_id.get(request_id)
        if not req or req.status != OvertimeStatus.PENDING:
            return False
        self.by_id[request_id] = replace(req, status=status, approved_by=decided_by, approved_at=decided_at)
        return True


class InMemorySettings:
    def __init__(self, settings: Optional[CompanySettings] = None):
        self.settings = settings

    def get(self):
        return self.settings

    def save(self, settings: CompanySettings) -> CompanySettings:
        self.settings = replace(settings, settings_id=settings.settings_id or 1)
        return self.settings


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 12, 8, 55, 0)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(user_id=1, full_name="Alice Tran", email="alice@example.com", hourly_rate=Decimal("30")),
            Employee(user_id=2, full_name="Bao Nguyen", email="bao@example.com", hourly_rate=Decimal("60")),
            Employee(user_id=3, full_name="Chi Le", email="chi@example.com", hourly_rate=None),
            Employee(user_id=9, full_name="Dung Admin", email="admin@example.com", role=Role.ADMIN),
        ]
    )


@pytest.fixture
def container(employees):
    return assemble(
        attendance_repo=InMemoryAttendance(employees),
        employees_repo=employees,
        overtime_repo=InMemoryOvertime(),
        settings_repo=InMemorySettings(),
    )
