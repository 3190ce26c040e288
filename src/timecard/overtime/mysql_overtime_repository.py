from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import OvertimeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OvertimeRequest
from .repository import OvertimeRepository

_COLUMNS = """
    request_id, user_id, work_date, start_time, end_time, hours, reason,
    status, created_at, approved_by, approved_at
"""


def _to_request(r: Dict[str, Any]) -> OvertimeRequest:
    approved_by = r.get("approved_by")
    return OvertimeRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        start_time=r["start_time"],
        end_time=r["end_time"],
        hours=Decimal(str(r["hours"])),
        reason=r.get("reason"),
        status=OvertimeStatus(r["status"]),
        created_at=r["created_at"],
        approved_by=int(approved_by) if approved_by is not None else None,
        approved_at=r.get("approved_at"),
    )


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        start_time: datetime,
        end_time: datetime,
        hours: Decimal,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_requests(user_id, work_date, start_time, end_time, hours, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), work_date, start_time, end_time, hours, reason, OvertimeStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM overtime_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[OvertimeStatus] = None,
        statuses: Optional[Sequence[OvertimeStatus]] = None,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[OvertimeRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if statuses:
            clauses.append(f"status IN ({', '.join(['%s'] * len(statuses))})")
            params.extend(s.value for s in statuses)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_requests
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: OvertimeStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_requests
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, int(request_id), OvertimeStatus.PENDING.value),
            )
            return cur.rowcount > 0
