from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core import constants
from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee profile.

    Note: Plain data object, no DB access. ``hourly_rate`` is optional; an
    employee without one never accrues a pay cut.
    """

    user_id: int
    full_name: str
    email: str
    role: Role = Role.EMPLOYEE
    hourly_rate: Optional[Decimal] = None
    base_salary: Optional[Decimal] = None
    vacation_days: int = constants.DEFAULT_VACATION_DAYS
