from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..company.service import CompanySettingsService
from ..core.enums import AttendanceStatus, OvertimeStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..overtime.repository import OvertimeRepository

REPORT_FIELDS = [
    "work_date",
    "user_id",
    "full_name",
    "email",
    "check_in",
    "check_out",
    "status",
    "total_hours",
    "late_minutes",
    "early_departure_minutes",
    "pay_cut_amount",
    "pay_cut_approved",
    "note",
]

_ZERO = Decimal("0")
_TENTH = Decimal("0.1")


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class PayrollReportService:
    """Admin reporting over persisted attendance: per-record rows and per-employee totals."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        overtime: OvertimeRepository,
        settings: CompanySettingsService,
    ):
        self._attendance = attendance
        self._employees = employees
        self._overtime = overtime
        self._settings = settings

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must be on or after start date")

        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end, user_id=user_id)

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            out_rows.append(
                {
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "email": r.email,
                    "check_in": r.check_in_time.strftime("%H:%M") if r.check_in_time else "-",
                    "check_out": r.check_out_time.strftime("%H:%M") if r.check_out_time else "-",
                    "status": r.status.value,
                    "total_hours": str(r.total_hours) if r.total_hours is not None else "-",
                    "late_minutes": r.late_minutes,
                    "early_departure_minutes": r.early_departure_minutes,
                    "pay_cut_amount": str(r.pay_cut_amount),
                    "pay_cut_approved": "yes" if r.pay_cut_approved else "no",
                    "note": r.note or "",
                }
            )

            s = summary_map.get(r.user_id)
            if not s:
                s = {
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "email": r.email,
                    "total_hours": _ZERO,
                    "days_late": 0,
                    "total_pay_cut": _ZERO,
                    "approved_pay_cut": _ZERO,
                }
                summary_map[r.user_id] = s
            s["total_hours"] += r.total_hours or _ZERO
            s["days_late"] += 1 if r.is_late else 0
            s["total_pay_cut"] += r.pay_cut_amount
            if r.pay_cut_approved:
                s["approved_pay_cut"] += r.pay_cut_amount

        summary = sorted(summary_map.values(), key=lambda x: x["total_hours"], reverse=True)
        for s in summary:
            for key in ("total_hours", "total_pay_cut", "approved_pay_cut"):
                s[key] = str(s[key])
        return ReportData(rows=out_rows, summary=summary)

    def build_monthly_summary(self, *, year: int, month: int) -> list[dict]:
        """Per-employee attendance for one calendar month.

        Working days come from the company's configured weekdays. A record
        counts as present when its status is present or late; absences beyond
        the employee's vacation days are unpaid.
        """
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")

        month_start = date(int(year), int(month), 1)
        month_end = date(int(year), int(month), calendar.monthrange(int(year), int(month))[1])

        settings = self._settings.get_settings()
        working_days = sum(
            1
            for offset in range((month_end - month_start).days + 1)
            if settings.is_working_day(month_start + timedelta(days=offset))
        )

        records = self._attendance.get_report_rows(start_date=month_start, end_date=month_end)
        overtime = self._overtime.list_requests(
            status=OvertimeStatus.APPROVED,
            start_date=month_start,
            end_date=month_end,
            limit=10_000,
        )

        out: list[dict] = []
        for employee in self._employees.list_all():
            mine = [r for r in records if r.user_id == employee.user_id]
            days_present = sum(1 for r in mine if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE))
            days_absent = max(working_days - days_present, 0)

            rate = _ZERO
            if working_days > 0:
                rate = (Decimal(days_present) * 100 / working_days).quantize(_TENTH, rounding=ROUND_HALF_UP)

            out.append(
                {
                    "user_id": employee.user_id,
                    "full_name": employee.full_name,
                    "email": employee.email,
                    "total_working_days": working_days,
                    "days_present": days_present,
                    "days_absent": days_absent,
                    "unpaid_absent_days": max(days_absent - employee.vacation_days, 0),
                    "days_late": sum(1 for r in mine if r.is_late),
                    "total_hours": str(sum((r.total_hours or _ZERO for r in mine), _ZERO)),
                    "attendance_rate": str(rate),
                    "total_pay_cut": str(sum((r.pay_cut_amount for r in mine), _ZERO)),
                    "approved_pay_cut": str(sum((r.pay_cut_amount for r in mine if r.pay_cut_approved), _ZERO)),
                    "overtime_hours": str(sum((o.hours for o in overtime if o.user_id == employee.user_id), _ZERO)),
                }
            )
        return out
