from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local, parse_hhmm
from ..company.service import CompanySettingsService
from ..core import constants
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from . import calculator
from .model import AttendanceImpact, AttendanceRecord, PriorImpact
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in, check-out and admin edits; each persists a calculator result verbatim."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        settings: CompanySettingsService,
    ):
        self._attendance = attendance
        self._employees = employees
        self._settings = settings

    def _require_employee(self, user_id: int) -> Employee:
        employee = self._employees.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def check_in(self, user_id: int, *, now: datetime | None = None) -> AttendanceImpact:
        now = now or now_local()
        today = now.date()

        employee = self._require_employee(user_id)
        if self._attendance.get_for_user_and_date(employee.user_id, today):
            raise ValidationError("You have already checked in today")

        impact = calculator.compute_check_in_impact(
            now,
            self._settings.get_policy(),
            employee.hourly_rate,
            work_date=today,
        )
        self._attendance.create_checkin(
            user_id=employee.user_id,
            work_date=today,
            check_in_time=now,
            status=AttendanceStatus.PRESENT,
            impact=impact,
        )

        logger.info("Check-in user=%s date=%s late_minutes=%s", employee.user_id, today, impact.late_minutes)
        logger.debug("Check-in impact user=%s: %r", employee.user_id, impact)
        return impact

    def check_out(self, user_id: int, *, now: datetime | None = None) -> AttendanceImpact:
        now = now or now_local()
        today = now.date()

        employee = self._require_employee(user_id)
        record = self._attendance.get_for_user_and_date(employee.user_id, today)
        if not record or record.check_in_time is None:
            raise ValidationError("You have not checked in today")
        if record.check_out_time is not None:
            raise ValidationError("You have already checked out today")
        if now < record.check_in_time:
            raise ValidationError("Check-out time cannot be before check-in time")

        impact = calculator.compute_check_out_impact(
            record.check_in_time,
            now,
            self._settings.get_policy(),
            employee.hourly_rate,
            PriorImpact.from_record(record),
            work_date=record.work_date,
        )
        if not self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            impact=impact,
        ):
            raise ValidationError("Check-out failed")

        logger.info(
            "Check-out user=%s date=%s early_minutes=%s pay_cut=%s",
            employee.user_id,
            record.work_date,
            impact.early_departure_minutes,
            impact.pay_cut_amount,
        )
        return impact

    def admin_edit(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in: str,
        check_out: str = "",
        status: str = AttendanceStatus.PRESENT.value,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Create or replace a day's record from HH:MM times, re-priced in a single pass.

        The pay cut goes back to unapproved whenever an admin edits the record.
        """
        employee = self._require_employee(user_id)

        check_in_time = datetime.combine(work_date, parse_hhmm(check_in, "Check-in time"))
        check_out_time = None
        if check_out is not None and str(check_out).strip():
            check_out_time = datetime.combine(work_date, parse_hhmm(check_out, "Check-out time"))
            if check_out_time < check_in_time:
                raise ValidationError("Check-out time cannot be before check-in time")

        clean_note = str(note).strip() if note is not None else ""

        try:
            record_status = AttendanceStatus(str(status or AttendanceStatus.PRESENT.value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {status!r}")

        impact = calculator.compute_full_impact(
            check_in_time,
            check_out_time,
            self._settings.get_policy(),
            employee.hourly_rate,
            work_date=work_date,
        )
        self._attendance.save_admin_record(
            user_id=employee.user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=record_status,
            impact=impact,
            note=clean_note or None,
        )

        logger.info("Admin edit user=%s date=%s pay_cut=%s", employee.user_id, work_date, impact.pay_cut_amount)
        saved = self._attendance.get_for_user_and_date(employee.user_id, work_date)
        if not saved:
            raise ValidationError("Saving attendance record failed")
        return saved

    def approve_pay_cut(self, *, attendance_id: int, approver_id: int, now: datetime | None = None) -> None:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        if record.pay_cut_amount <= 0:
            raise ValidationError("This record has no pay cut to approve")
        if record.pay_cut_approved:
            raise ValidationError("Pay cut already approved")

        ok = self._attendance.approve_pay_cut(
            attendance_id=record.attendance_id,
            approved_by=int(approver_id),
            approved_at=now or now_local(),
        )
        if not ok:
            raise ValidationError("Approving pay cut failed")
        logger.info("Pay cut approved attendance=%s by=%s", record.attendance_id, approver_id)

    def delete_record(self, *, attendance_id: int) -> None:
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record deleted attendance=%s", attendance_id)

    def get_today_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        """Get today's attendance record for a user"""
        return self._attendance.get_for_user_and_date(int(user_id), today)

    def get_history(self, user_id: int, *, limit: int = constants.DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = self._attendance.get_recent_for_user(int(user_id), int(limit))
        return [to_payload(r) for r in rows]


def _fmt(value) -> Optional[str]:
    return str(value) if value is not None else None


def to_payload(r: AttendanceRecord) -> dict:
    return {
        "attendance_id": r.attendance_id,
        "user_id": r.user_id,
        "date": r.work_date.strftime("%Y-%m-%d"),
        "check_in": r.check_in_time.isoformat() if r.check_in_time else None,
        "check_out": r.check_out_time.isoformat() if r.check_out_time else None,
        "status": r.status.value,
        "is_late": r.is_late,
        "late_minutes": r.late_minutes,
        "early_departure_minutes": r.early_departure_minutes,
        "total_hours": _fmt(r.total_hours),
        "pay_cut_amount": _fmt(r.pay_cut_amount),
        "pay_cut_approved": r.pay_cut_approved,
        "note": r.note,
    }


def impact_payload(impact: AttendanceImpact) -> dict:
    return {
        "is_late": impact.is_late,
        "late_minutes": impact.late_minutes,
        "early_departure_minutes": impact.early_departure_minutes,
        "total_hours": _fmt(impact.total_hours),
        "pay_cut_amount": _fmt(impact.pay_cut_amount),
    }
