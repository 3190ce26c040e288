"""Attendance-to-payroll impact calculation.

Pure functions: given check-in/check-out instants, a ``WorkdayPolicy`` and an
hourly rate they derive lateness, early departure, worked hours and the
monetary pay cut. Nothing here reads or writes storage; callers persist the
returned values unchanged.

Rounding is half-up everywhere: minutes to whole minutes, hours and money to
2 decimals. Negative durations (check-out before check-in) are returned as-is;
the attendance service rejects such input before calling in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..company.model import CompanySettings, WorkdayPolicy
from .model import AttendanceEvent, AttendanceImpact, PriorImpact

Number = Union[int, float, Decimal]

_MICROS_PER_MINUTE = Decimal(60_000_000)
_MICROS_PER_HOUR = Decimal(3_600_000_000)
_ONE = Decimal("1")
_CENT = Decimal("0.01")
_NO_CUT = Decimal("0.00")
_DEFAULT_POLICY = WorkdayPolicy()


@dataclass(frozen=True)
class Lateness:
    is_late: bool
    late_minutes: int


def _micros(delta: timedelta) -> int:
    return delta // timedelta(microseconds=1)


def _round_minutes(delta: timedelta) -> int:
    minutes = Decimal(_micros(delta)) / _MICROS_PER_MINUTE
    return int(minutes.quantize(_ONE, rounding=ROUND_HALF_UP))


def _round_cents(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _as_decimal(value: Optional[Number]) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def compute_lateness(check_in: datetime, work_date: date, policy: WorkdayPolicy) -> Lateness:
    """Minutes by which ``check_in`` is past the start of the workday."""
    work_start = policy.work_start(work_date, tzinfo=check_in.tzinfo)
    if check_in > work_start:
        late_minutes = _round_minutes(check_in - work_start)
        return Lateness(is_late=late_minutes > 0, late_minutes=late_minutes)
    return Lateness(is_late=False, late_minutes=0)


def compute_early_departure(check_out: datetime, work_date: date, policy: WorkdayPolicy) -> int:
    """Minutes by which ``check_out`` precedes the end of the workday."""
    work_end = policy.work_end(work_date, tzinfo=check_out.tzinfo)
    if check_out < work_end:
        return _round_minutes(work_end - check_out)
    return 0


def compute_total_hours(check_in: datetime, check_out: datetime) -> Decimal:
    """Worked hours at 2 decimals. Not clamped: may be negative."""
    return _round_cents(Decimal(_micros(check_out - check_in)) / _MICROS_PER_HOUR)


def _price_from_bucket_start(minutes: int, rate: Decimal, policy: WorkdayPolicy) -> Decimal:
    """Rounded price of ``minutes`` violation minutes counted from an empty bucket."""
    base_minutes = min(minutes, int(policy.leniency_minutes))
    penalty_minutes = minutes - base_minutes
    return _round_cents((base_minutes * rate + penalty_minutes * rate * policy.penalty_multiplier) / 60)


def compute_pay_cut(
    late_minutes: int,
    early_departure_minutes: int,
    hourly_rate: Optional[Number],
    prior_pay_cut: Number = 0,
    prior_late_minutes: int = 0,
    *,
    policy: Optional[WorkdayPolicy] = None,
) -> Decimal:
    """Price violation minutes against the shared leniency bucket.

    Single pass (no prior): all ``late_minutes + early_departure_minutes`` are
    priced together. Incremental (check-out after a charged check-in): the new
    minutes are priced against what is left of the bucket after
    ``prior_late_minutes`` and added to ``prior_pay_cut``, which is never
    re-priced.

    The increment is the rounded price of all minutes so far minus the
    rounded price of the prior minutes, so a check-in charge followed by a
    check-out charge always totals the single-pass price.

    Without a positive rate nothing new is charged; the prior charge is kept.
    """
    rate = _as_decimal(hourly_rate)
    if rate is None or rate <= 0:
        return _round_cents(_as_decimal(prior_pay_cut))

    policy = policy or _DEFAULT_POLICY
    prior_minutes = max(0, int(prior_late_minutes))
    minutes = int(late_minutes) + int(early_departure_minutes)

    additional = _price_from_bucket_start(prior_minutes + minutes, rate, policy) - _price_from_bucket_start(
        prior_minutes, rate, policy
    )
    return _round_cents(_as_decimal(prior_pay_cut) + additional)


def compute_overtime_hours(start_time: datetime, end_time: datetime) -> Decimal:
    """Plain overtime duration in hours, unrounded and without tiers."""
    return Decimal(_micros(end_time - start_time)) / _MICROS_PER_HOUR


def compute_overtime_pay(hours: Number, hourly_rate: Optional[Number], settings: CompanySettings) -> Decimal:
    """Pay for overtime hours using the organization's two-period ratios."""
    rate = _as_decimal(hourly_rate)
    hours = _as_decimal(hours)
    if rate is None or rate <= 0 or hours <= 0:
        return _NO_CUT

    first_hours = min(hours, Decimal(str(settings.overtime_first_period_hours)))
    rest_hours = hours - first_hours
    pay = (
        first_hours * Decimal(str(settings.overtime_first_period_ratio))
        + rest_hours * Decimal(str(settings.overtime_second_period_ratio))
    ) * rate
    return _round_cents(pay)


def compute_check_in_impact(
    check_in: datetime,
    policy: WorkdayPolicy,
    hourly_rate: Optional[Number],
    *,
    work_date: Optional[date] = None,
) -> AttendanceImpact:
    work_date = work_date or check_in.date()
    lateness = compute_lateness(check_in, work_date, policy)
    return AttendanceImpact(
        is_late=lateness.is_late,
        late_minutes=lateness.late_minutes,
        total_hours=None,
        early_departure_minutes=0,
        pay_cut_amount=compute_pay_cut(lateness.late_minutes, 0, hourly_rate, policy=policy),
    )


def compute_check_out_impact(
    check_in: datetime,
    check_out: datetime,
    policy: WorkdayPolicy,
    hourly_rate: Optional[Number],
    prior: Optional[PriorImpact] = None,
    *,
    work_date: Optional[date] = None,
) -> AttendanceImpact:
    """Extend the check-in impact with early departure and worked hours."""
    prior = prior or PriorImpact()
    work_date = work_date or check_in.date()
    early_minutes = compute_early_departure(check_out, work_date, policy)
    pay_cut = compute_pay_cut(
        0,
        early_minutes,
        hourly_rate,
        prior_pay_cut=prior.pay_cut_amount,
        prior_late_minutes=prior.late_minutes,
        policy=policy,
    )
    return AttendanceImpact(
        is_late=prior.late_minutes > 0,
        late_minutes=prior.late_minutes,
        total_hours=compute_total_hours(check_in, check_out),
        early_departure_minutes=early_minutes,
        pay_cut_amount=pay_cut,
    )


def compute_full_impact(
    check_in: datetime,
    check_out: Optional[datetime],
    policy: WorkdayPolicy,
    hourly_rate: Optional[Number],
    *,
    work_date: Optional[date] = None,
) -> AttendanceImpact:
    """Single-pass impact for a record whose times are all known (admin edit)."""
    work_date = work_date or check_in.date()
    lateness = compute_lateness(check_in, work_date, policy)

    early_minutes = 0
    total_hours = None
    if check_out is not None:
        early_minutes = compute_early_departure(check_out, work_date, policy)
        total_hours = compute_total_hours(check_in, check_out)

    return AttendanceImpact(
        is_late=lateness.is_late,
        late_minutes=lateness.late_minutes,
        total_hours=total_hours,
        early_departure_minutes=early_minutes,
        pay_cut_amount=compute_pay_cut(lateness.late_minutes, early_minutes, hourly_rate, policy=policy),
    )


def compute_impact(event: AttendanceEvent, policy: WorkdayPolicy) -> AttendanceImpact:
    return compute_full_impact(
        event.check_in,
        event.check_out,
        policy,
        event.hourly_rate,
        work_date=event.work_date,
    )
