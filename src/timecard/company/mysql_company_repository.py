from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import CompanySettings
from .repository import CompanySettingsRepository

_FIELDS = (
    "daily_working_hours",
    "break_time_minutes",
    "overtime_threshold",
    "work_start_hour",
    "leniency_minutes",
    "penalty_multiplier",
    "overtime_first_period_hours",
    "overtime_first_period_ratio",
    "overtime_second_period_ratio",
)


def _to_settings(r: Dict[str, Any]) -> CompanySettings:
    working_days = tuple(d.strip() for d in (r.get("working_days") or "").split(",") if d.strip())
    return CompanySettings(
        settings_id=int(r["settings_id"]),
        working_days=working_days,
        daily_working_hours=Decimal(str(r["daily_working_hours"])),
        break_time_minutes=int(r["break_time_minutes"]),
        overtime_threshold=Decimal(str(r["overtime_threshold"])),
        work_start_hour=int(r["work_start_hour"]),
        leniency_minutes=int(r["leniency_minutes"]),
        penalty_multiplier=Decimal(str(r["penalty_multiplier"])),
        overtime_first_period_hours=Decimal(str(r["overtime_first_period_hours"])),
        overtime_first_period_ratio=Decimal(str(r["overtime_first_period_ratio"])),
        overtime_second_period_ratio=Decimal(str(r["overtime_second_period_ratio"])),
    )


class MySQLCompanySettingsRepository(CompanySettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[CompanySettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT settings_id, working_days, {", ".join(_FIELDS)}
                FROM company_settings
                ORDER BY settings_id ASC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            return _to_settings(r) if r else None

    def save(self, settings: CompanySettings) -> CompanySettings:
        values = [",".join(settings.working_days)] + [getattr(settings, f) for f in _FIELDS]

        with db_cursor(self._conn_factory) as (_, cur):
            if settings.settings_id is None:
                cur.execute(
                    f"""
                    INSERT INTO company_settings(working_days, {", ".join(_FIELDS)})
                    VALUES({", ".join(["%s"] * (len(_FIELDS) + 1))})
                    """,
                    tuple(values),
                )
                return replace(settings, settings_id=int(cur.lastrowid))

            assignments = ", ".join(f"{f}=%s" for f in ("working_days",) + _FIELDS)
            cur.execute(
                f"UPDATE company_settings SET {assignments} WHERE settings_id=%s",
                tuple(values + [settings.settings_id]),
            )
            return settings
