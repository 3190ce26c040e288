from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..common.validators import to_optional_decimal
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import AttendanceImpact, AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time, status,
    is_late, late_minutes, early_departure_minutes, total_hours,
    pay_cut_amount, pay_cut_approved, pay_cut_approved_by, pay_cut_approved_at, note
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    approved_by = r.get("pay_cut_approved_by")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        is_late=as_bool(r.get("is_late")),
        late_minutes=int(r.get("late_minutes") or 0),
        early_departure_minutes=int(r.get("early_departure_minutes") or 0),
        total_hours=to_optional_decimal(r.get("total_hours")),
        pay_cut_amount=to_optional_decimal(r.get("pay_cut_amount")) or Decimal("0"),
        pay_cut_approved=as_bool(r.get("pay_cut_approved")),
        pay_cut_approved_by=int(approved_by) if approved_by is not None else None,
        pay_cut_approved_at=r.get("pay_cut_approved_at"),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        impact: AttendanceImpact,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, work_date, check_in_time, status, is_late, late_minutes, pay_cut_amount)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    work_date,
                    check_in_time,
                    status.value,
                    impact.is_late,
                    impact.late_minutes,
                    impact.pay_cut_amount,
                ),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        impact: AttendanceImpact,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out_time=%s, total_hours=%s, early_departure_minutes=%s, pay_cut_amount=%s
                WHERE attendance_id=%s
                """,
                (
                    check_out_time,
                    impact.total_hours,
                    impact.early_departure_minutes,
                    impact.pay_cut_amount,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def save_admin_record(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
        impact: AttendanceImpact,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    user_id, work_date, check_in_time, check_out_time, status, is_late, late_minutes,
                    early_departure_minutes, total_hours, pay_cut_amount, pay_cut_approved, note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,FALSE,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    status=VALUES(status),
                    is_late=VALUES(is_late),
                    late_minutes=VALUES(late_minutes),
                    early_departure_minutes=VALUES(early_departure_minutes),
                    total_hours=VALUES(total_hours),
                    pay_cut_amount=VALUES(pay_cut_amount),
                    pay_cut_approved=FALSE,
                    pay_cut_approved_by=NULL,
                    pay_cut_approved_at=NULL,
                    note=VALUES(note)
                """,
                (
                    int(user_id),
                    work_date,
                    check_in_time,
                    check_out_time,
                    status.value,
                    impact.is_late,
                    impact.late_minutes,
                    impact.early_departure_minutes,
                    impact.total_hours,
                    impact.pay_cut_amount,
                    note,
                ),
            )
            return int(cur.lastrowid)

    def approve_pay_cut(self, *, attendance_id: int, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET pay_cut_approved=TRUE, pay_cut_approved_by=%s, pay_cut_approved_at=%s
                WHERE attendance_id=%s
                """,
                (int(approved_by), approved_at, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["a.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if user_id is not None:
            clauses.append("p.user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    p.user_id, p.full_name, p.email,
                    a.work_date, a.check_in_time, a.check_out_time, a.status,
                    a.is_late, a.late_minutes, a.early_departure_minutes, a.total_hours,
                    a.pay_cut_amount, a.pay_cut_approved, a.note
                FROM attendance a
                JOIN profiles p ON p.user_id = a.user_id
                WHERE {where}
                ORDER BY a.work_date DESC, p.user_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    user_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    email=r["email"],
                    work_date=r["work_date"],
                    check_in_time=r.get("check_in_time"),
                    check_out_time=r.get("check_out_time"),
                    status=AttendanceStatus(r["status"]),
                    is_late=as_bool(r.get("is_late")),
                    late_minutes=int(r.get("late_minutes") or 0),
                    early_departure_minutes=int(r.get("early_departure_minutes") or 0),
                    total_hours=to_optional_decimal(r.get("total_hours")),
                    pay_cut_amount=to_optional_decimal(r.get("pay_cut_amount")) or Decimal("0"),
                    pay_cut_approved=as_bool(r.get("pay_cut_approved")),
                    note=r.get("note"),
                )
                for r in rows
            ]
