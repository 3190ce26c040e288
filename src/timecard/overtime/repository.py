from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import OvertimeStatus
from .model import OvertimeRequest


class OvertimeRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[OvertimeRequest]:
        raise NotImplementedError

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
        """Newest first. ``statuses`` restricts to any of the given states."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: OvertimeStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        """Only transitions a PENDING request; returns False otherwise."""

        raise NotImplementedError
