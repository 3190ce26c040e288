from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..common.validators import to_optional_decimal
from ..core import constants
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "user_id, full_name, email, role, hourly_rate, base_salary, vacation_days"


def _to_employee(r: Dict[str, Any]) -> Employee:
    vacation_days = r.get("vacation_days")
    return Employee(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        email=r["email"],
        role=Role(r["role"]),
        hourly_rate=to_optional_decimal(r.get("hourly_rate")),
        base_salary=to_optional_decimal(r.get("base_salary")),
        vacation_days=int(vacation_days) if vacation_days is not None else constants.DEFAULT_VACATION_DAYS,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY full_name ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(
        self,
        *,
        full_name: str,
        email: str,
        role: Role,
        hourly_rate: Optional[Decimal],
        base_salary: Optional[Decimal],
        vacation_days: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(full_name, email, role, hourly_rate, base_salary, vacation_days)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (full_name, email, role.value, hourly_rate, base_salary, int(vacation_days)),
            )
            return int(cur.lastrowid)

    def update(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE profiles
                SET full_name=%s, role=%s, hourly_rate=%s, base_salary=%s, vacation_days=%s
                WHERE user_id=%s
                """,
                (
                    employee.full_name,
                    employee.role.value,
                    employee.hourly_rate,
                    employee.base_salary,
                    int(employee.vacation_days),
                    int(employee.user_id),
                ),
            )
            return cur.rowcount > 0
