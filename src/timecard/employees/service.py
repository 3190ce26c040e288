from __future__ import annotations

import logging
import re
from dataclasses import replace
from decimal import Decimal
from typing import Any, Optional

from ..common.validators import require_non_empty, to_decimal
from ..core import constants
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_EDITABLE = ("full_name", "role", "hourly_rate", "base_salary", "vacation_days")


def _clean_full_name(value: Any) -> str:
    full_name = require_non_empty(value, "Full name")
    if len(full_name) > constants.MAX_FULL_NAME_LENGTH:
        raise ValidationError("Name too long")
    return full_name


def _clean_email(value: Any) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email


def _clean_role(value: Any) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown role: {value}")


def _clean_money(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return amount


def _clean_vacation_days(value: Any) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return constants.DEFAULT_VACATION_DAYS
    if isinstance(value, bool):
        raise ValidationError("vacation_days must be an integer")
    try:
        days = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("vacation_days must be an integer")
    if days < 0:
        raise ValidationError("vacation_days cannot be negative")
    return days


class EmployeeService:
    """Use case: manage employee profiles (admin)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self) -> list[Employee]:
        return list(self._employees.list_all())

    def get(self, user_id: int) -> Employee:
        employee = self._employees.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create_employee(
        self,
        *,
        full_name: Any,
        email: Any,
        role: Any = Role.EMPLOYEE,
        hourly_rate: Any = None,
        base_salary: Any = None,
        vacation_days: Any = None,
    ) -> Employee:
        full_name = _clean_full_name(full_name)
        email = _clean_email(email)
        role = _clean_role(role)
        hourly_rate = _clean_money(hourly_rate, "hourly_rate")
        base_salary = _clean_money(base_salary, "base_salary")
        vacation_days = _clean_vacation_days(vacation_days)

        if self._employees.get_by_email(email):
            raise ValidationError("Email already registered")

        user_id = self._employees.create(
            full_name=full_name,
            email=email,
            role=role,
            hourly_rate=hourly_rate,
            base_salary=base_salary,
            vacation_days=vacation_days,
        )
        logger.info("Employee created user=%s role=%s", user_id, role.value)
        return self.get(user_id)

    def update_employee(self, user_id: int, **changes: Any) -> Employee:
        """Partial update of the profile; the email cannot be changed here."""
        unknown = set(changes) - set(_EDITABLE)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        current = self.get(user_id)
        cleaned: dict[str, Any] = {}
        if "full_name" in changes:
            cleaned["full_name"] = _clean_full_name(changes["full_name"])
        if "role" in changes:
            cleaned["role"] = _clean_role(changes["role"])
        for key in ("hourly_rate", "base_salary"):
            if key in changes:
                cleaned[key] = _clean_money(changes[key], key)
        if "vacation_days" in changes:
            cleaned["vacation_days"] = _clean_vacation_days(changes["vacation_days"])

        updated = replace(current, **cleaned)
        self._employees.update(updated)
        logger.info("Employee updated user=%s fields=%s", updated.user_id, sorted(cleaned))
        return self.get(updated.user_id)


def to_payload(e: Employee) -> dict:
    return {
        "user_id": e.user_id,
        "full_name": e.full_name,
        "email": e.email,
        "role": e.role.value,
        "hourly_rate": str(e.hourly_rate) if e.hourly_rate is not None else None,
        "base_salary": str(e.base_salary) if e.base_salary is not None else None,
        "vacation_days": e.vacation_days,
    }
