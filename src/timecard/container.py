from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .company.model import CompanySettings
from .company.mysql_company_repository import MySQLCompanySettingsRepository
from .company.repository import CompanySettingsRepository
from .company.service import CompanySettingsService
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.repository import OvertimeRepository
from .overtime.service import OvertimeService
from .payroll.service import PayrollReportService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    employees_repo: EmployeeRepository
    overtime_repo: OvertimeRepository
    settings_repo: CompanySettingsRepository

    settings_service: CompanySettingsService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    overtime_service: OvertimeService
    payroll_report_service: PayrollReportService

    conn: Optional[DatabaseConnection] = None


def default_company_settings(workday_defaults: Optional[Mapping[str, Any]] = None) -> CompanySettings:
    overrides = dict(workday_defaults or {})
    for key in ("daily_working_hours", "penalty_multiplier"):
        if key in overrides:
            overrides[key] = Decimal(str(overrides[key]))
    settings = CompanySettings(**overrides)
    # Fail at startup rather than on the first check-in.
    settings.to_policy()
    return settings


def assemble(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    overtime_repo: OvertimeRepository,
    settings_repo: CompanySettingsRepository,
    defaults: Optional[CompanySettings] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    settings_service = CompanySettingsService(settings_repo, defaults=defaults)
    return Container(
        attendance_repo=attendance_repo,
        employees_repo=employees_repo,
        overtime_repo=overtime_repo,
        settings_repo=settings_repo,
        settings_service=settings_service,
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo, settings_service),
        overtime_service=OvertimeService(overtime_repo, employees_repo, settings_service),
        payroll_report_service=PayrollReportService(attendance_repo, employees_repo, overtime_repo, settings_service),
        conn=conn,
    )


def build_container(*, db_config: dict, workday_defaults: Optional[Mapping[str, Any]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble(
        attendance_repo=MySQLAttendanceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        overtime_repo=MySQLOvertimeRepository(conn),
        settings_repo=MySQLCompanySettingsRepository(conn),
        defaults=default_company_settings(workday_defaults),
        conn=conn,
    )
