from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, employee: Employee) -> bool:
        """Overwrite the editable profile fields; the email is kept.

        Returns False when the row is unknown or nothing changed.
        """

        raise NotImplementedError
