from __future__ import annotations

import logging
from dataclasses import fields, replace
from decimal import Decimal
from typing import Any, Optional

from ..common.validators import to_decimal
from ..core import constants
from ..core.exceptions import ValidationError
from .model import CompanySettings, WorkdayPolicy
from .repository import CompanySettingsRepository

logger = logging.getLogger(__name__)

_DECIMAL_FIELDS = {
    "daily_working_hours",
    "overtime_threshold",
    "penalty_multiplier",
    "overtime_first_period_hours",
    "overtime_first_period_ratio",
    "overtime_second_period_ratio",
}
_INT_FIELDS = {"break_time_minutes", "work_start_hour", "leniency_minutes"}


class CompanySettingsService:
    def __init__(self, settings: CompanySettingsRepository, *, defaults: Optional[CompanySettings] = None):
        self._settings = settings
        self._defaults = defaults or CompanySettings()

    def get_settings(self) -> CompanySettings:
        return self._settings.get() or self._defaults

    def get_policy(self) -> WorkdayPolicy:
        return self.get_settings().to_policy()

    def update_settings(self, **changes: Any) -> CompanySettings:
        known = {f.name for f in fields(CompanySettings)} - {"settings_id"}
        unknown = set(changes) - known
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        cleaned: dict[str, Any] = {}
        for name, value in changes.items():
            if name == "working_days":
                cleaned[name] = self._clean_working_days(value)
            elif name in _DECIMAL_FIELDS:
                cleaned[name] = to_decimal(value, name)
            elif name in _INT_FIELDS:
                try:
                    cleaned[name] = int(value)
                except (TypeError, ValueError, OverflowError):
                    raise ValidationError(f"{name} must be an integer")

        updated = replace(self.get_settings(), **cleaned)
        self._validate(updated)

        saved = self._settings.save(updated)
        logger.info("Company settings updated: %s", ", ".join(sorted(cleaned)) or "no changes")
        return saved

    @staticmethod
    def _clean_working_days(value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = value.split(",")
        if value is None:
            value = []
        if not isinstance(value, (list, tuple)):
            raise ValidationError("working_days must be a list or a comma-separated string")
        days = tuple(dict.fromkeys(str(d).strip().lower() for d in value if str(d).strip()))
        if not days:
            raise ValidationError("At least one working day is required")
        invalid = [d for d in days if d not in constants.WEEKDAY_NAMES]
        if invalid:
            raise ValidationError(f"Unknown weekday: {', '.join(invalid)}")
        return days

    @staticmethod
    def _validate(settings: CompanySettings) -> None:
        # WorkdayPolicy validates start hour, daily hours, leniency and multiplier.
        settings.to_policy()

        if settings.break_time_minutes < 0:
            raise ValidationError("Break time cannot be negative")
        if settings.overtime_threshold <= 0:
            raise ValidationError("Overtime threshold must be positive")
        if settings.overtime_first_period_hours < 0:
            raise ValidationError("Overtime first period cannot be negative")
        for name in ("overtime_first_period_ratio", "overtime_second_period_ratio"):
            if getattr(settings, name) < Decimal("1"):
                raise ValidationError(f"{name} must be at least 1")
