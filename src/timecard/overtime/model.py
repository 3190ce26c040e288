from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import OvertimeStatus


@dataclass(frozen=True)
class OvertimeRequest:
    """Domain entity: an employee's request to have overtime approved."""

    request_id: int
    user_id: int
    work_date: date
    start_time: datetime
    end_time: datetime
    hours: Decimal
    reason: Optional[str]
    status: OvertimeStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
