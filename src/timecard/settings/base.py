"""Settings shared by every environment, read from the process environment."""

import os

from ..core import constants


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "timecard"),
    }


def workday_defaults_from_env() -> dict:
    """Fallback workday policy used until company_settings has a row."""
    return {
        "work_start_hour": int(os.getenv("WORK_START_HOUR", str(constants.DEFAULT_WORK_START_HOUR))),
        "daily_working_hours": os.getenv("DAILY_WORKING_HOURS", str(constants.DEFAULT_DAILY_WORKING_HOURS)),
        "leniency_minutes": int(os.getenv("LENIENCY_MINUTES", str(constants.DEFAULT_LENIENCY_MINUTES))),
        "penalty_multiplier": os.getenv("PENALTY_MULTIPLIER", str(constants.DEFAULT_PENALTY_MULTIPLIER)),
    }
