from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Raw input of one attendance day as supplied by a caller."""

    work_date: date
    check_in: datetime
    check_out: Optional[datetime] = None
    hourly_rate: Optional[Decimal] = None


@dataclass(frozen=True)
class AttendanceImpact:
    """Lateness, early departure, worked hours and pay cut derived for one day."""

    is_late: bool
    late_minutes: int
    total_hours: Optional[Decimal]
    early_departure_minutes: int
    pay_cut_amount: Decimal

    @property
    def violation_minutes(self) -> int:
        return self.late_minutes + self.early_departure_minutes


@dataclass(frozen=True)
class PriorImpact:
    """What the check-in transaction already charged, fed into the check-out pricing."""

    late_minutes: int = 0
    pay_cut_amount: Decimal = Decimal("0")

    @classmethod
    def from_record(cls, record: "AttendanceRecord") -> "PriorImpact":
        return cls(
            late_minutes=int(record.late_minutes or 0),
            pay_cut_amount=Decimal(str(record.pay_cut_amount or 0)),
        )


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one persisted attendance day of one employee."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    is_late: bool = False
    late_minutes: int = 0
    early_departure_minutes: int = 0
    total_hours: Optional[Decimal] = None
    pay_cut_amount: Decimal = Decimal("0")
    pay_cut_approved: bool = False
    pay_cut_approved_by: Optional[int] = None
    pay_cut_approved_at: Optional[datetime] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (record joined with the employee)."""

    user_id: int
    full_name: str
    email: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    is_late: bool
    late_minutes: int
    early_departure_minutes: int
    total_hours: Optional[Decimal]
    pay_cut_amount: Decimal
    pay_cut_approved: bool
    note: Optional[str] = None
