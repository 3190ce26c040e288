from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from ..core import constants
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class WorkdayPolicy:
    """Nominal workday window [start_hour, start_hour + daily_hours) and pay-cut tiers.

    ``leniency_minutes`` is one bucket shared by lateness and early departure;
    minutes inside it cost the base per-minute rate, minutes beyond it cost
    ``penalty_multiplier`` times that rate.
    """

    start_hour: int = constants.DEFAULT_WORK_START_HOUR
    daily_hours: Decimal = constants.DEFAULT_DAILY_WORKING_HOURS
    leniency_minutes: int = constants.DEFAULT_LENIENCY_MINUTES
    penalty_multiplier: Decimal = constants.DEFAULT_PENALTY_MULTIPLIER

    def __post_init__(self) -> None:
        object.__setattr__(self, "daily_hours", Decimal(str(self.daily_hours)))
        object.__setattr__(self, "penalty_multiplier", Decimal(str(self.penalty_multiplier)))

        if not 0 <= int(self.start_hour) <= 23:
            raise ValidationError("Work start hour must be between 0 and 23")
        if not self.daily_hours.is_finite() or not 0 < self.daily_hours <= constants.MAX_DAILY_WORKING_HOURS:
            raise ValidationError(
                f"Daily working hours must be greater than 0 and at most {constants.MAX_DAILY_WORKING_HOURS}"
            )
        if int(self.leniency_minutes) < 0:
            raise ValidationError("Leniency minutes cannot be negative")
        if not self.penalty_multiplier.is_finite() or self.penalty_multiplier < 1:
            raise ValidationError("Penalty multiplier must be at least 1")

    def work_start(self, work_date: date, *, tzinfo=None) -> datetime:
        return datetime.combine(work_date, time(hour=int(self.start_hour)), tzinfo=tzinfo)

    def work_end(self, work_date: date, *, tzinfo=None) -> datetime:
        # Fractional daily hours are converted to microseconds before adding;
        # an end past midnight rolls into the next day.
        micros = int((self.daily_hours * 3_600_000_000).to_integral_value())
        return self.work_start(work_date, tzinfo=tzinfo) + timedelta(microseconds=micros)


@dataclass(frozen=True)
class CompanySettings:
    """Organization-wide work-hour configuration (single row)."""

    working_days: tuple[str, ...] = constants.DEFAULT_WORKING_DAYS
    daily_working_hours: Decimal = constants.DEFAULT_DAILY_WORKING_HOURS
    break_time_minutes: int = constants.DEFAULT_BREAK_TIME_MINUTES
    overtime_threshold: Decimal = constants.DEFAULT_OVERTIME_THRESHOLD
    work_start_hour: int = constants.DEFAULT_WORK_START_HOUR
    leniency_minutes: int = constants.DEFAULT_LENIENCY_MINUTES
    penalty_multiplier: Decimal = constants.DEFAULT_PENALTY_MULTIPLIER
    overtime_first_period_hours: Decimal = constants.DEFAULT_OVERTIME_FIRST_PERIOD_HOURS
    overtime_first_period_ratio: Decimal = constants.DEFAULT_OVERTIME_FIRST_PERIOD_RATIO
    overtime_second_period_ratio: Decimal = constants.DEFAULT_OVERTIME_SECOND_PERIOD_RATIO
    settings_id: int | None = field(default=None, compare=False)

    def to_policy(self) -> WorkdayPolicy:
        return WorkdayPolicy(
            start_hour=int(self.work_start_hour),
            daily_hours=self.daily_working_hours,
            leniency_minutes=int(self.leniency_minutes),
            penalty_multiplier=self.penalty_multiplier,
        )

    def is_working_day(self, day: date) -> bool:
        return constants.WEEKDAY_NAMES[day.weekday()] in self.working_days
