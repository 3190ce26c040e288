from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance import calculator
from ..common.datetime_utils import now_local, parse_hhmm
from ..common.validators import require_min_length
from ..company.service import CompanySettingsService
from ..core import constants
from ..core.enums import OvertimeStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import OvertimeRequest
from .repository import OvertimeRepository

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


class OvertimeService:
    def __init__(
        self,
        requests: OvertimeRepository,
        employees: EmployeeRepository,
        settings: CompanySettingsService,
    ):
        self._requests = requests
        self._employees = employees
        self._settings = settings

    def create_request(
        self,
        *,
        user_id: int,
        work_date: date,
        start_time: str,
        end_time: str,
        reason: str,
    ) -> int:
        if not self._employees.get_by_id(int(user_id)):
            raise NotFoundError("Employee not found")

        start = datetime.combine(work_date, parse_hhmm(start_time, "Start time"))
        end = datetime.combine(work_date, parse_hhmm(end_time, "End time"))
        if end <= start:
            raise ValidationError("End time must be after start time")

        reason = require_min_length(reason, "Reason", constants.MIN_OVERTIME_REASON_LENGTH)
        hours = calculator.compute_overtime_hours(start, end).quantize(_CENT, rounding=ROUND_HALF_UP)

        request_id = self._requests.create(
            user_id=int(user_id),
            work_date=work_date,
            start_time=start,
            end_time=end,
            hours=hours,
            reason=reason,
        )
        logger.info("Overtime request %s created user=%s date=%s hours=%s", request_id, user_id, work_date, hours)
        return request_id

    def _require(self, request_id: int) -> OvertimeRequest:
        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise NotFoundError("Overtime request not found")
        return req

    def _decide(self, request_id: int, approver_id: int, status: OvertimeStatus, now: Optional[datetime]) -> None:
        req = self._require(request_id)
        if req.status != OvertimeStatus.PENDING:
            raise ValidationError("Overtime request has already been processed")

        decided = self._requests.decide(
            request_id=req.request_id,
            status=status,
            decided_by=int(approver_id),
            decided_at=now or now_local(),
        )
        if not decided:
            raise ValidationError("Overtime request has already been processed")
        logger.info("Overtime request %s %s by=%s", req.request_id, status.value, approver_id)

    def approve(self, *, request_id: int, approver_id: int, now: Optional[datetime] = None) -> None:
        self._decide(request_id, approver_id, OvertimeStatus.APPROVED, now)

    def reject(self, *, request_id: int, approver_id: int, now: Optional[datetime] = None) -> None:
        self._decide(request_id, approver_id, OvertimeStatus.REJECTED, now)

    def list_pending(self) -> list[OvertimeRequest]:
        return list(self._requests.list_requests(status=OvertimeStatus.PENDING, limit=500))

    def list_decided(self, *, limit: int = 50) -> list[OvertimeRequest]:
        return list(
            self._requests.list_requests(
                statuses=(OvertimeStatus.APPROVED, OvertimeStatus.REJECTED), limit=int(limit)
            )
        )

    def list_for_user(self, *, user_id: int) -> list[OvertimeRequest]:
        return list(self._requests.list_requests(user_id=int(user_id), limit=200))

    def estimate_pay(self, *, request_id: int) -> Decimal:
        req = self._require(request_id)
        employee = self._employees.get_by_id(req.user_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return calculator.compute_overtime_pay(req.hours, employee.hourly_rate, self._settings.get_settings())


def to_payload(r: OvertimeRequest) -> dict:
    return {
        "request_id": r.request_id,
        "user_id": r.user_id,
        "date": r.work_date.strftime("%Y-%m-%d"),
        "start_time": r.start_time.strftime("%H:%M"),
        "end_time": r.end_time.strftime("%H:%M"),
        "hours": str(r.hours),
        "reason": r.reason,
        "status": r.status.value,
        "approved_by": r.approved_by,
        "approved_at": r.approved_at.isoformat() if r.approved_at else None,
    }
