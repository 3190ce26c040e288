"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_REPORT_DAYS = 7

DEFAULT_WORK_START_HOUR = 9
DEFAULT_DAILY_WORKING_HOURS = Decimal("8")
MAX_DAILY_WORKING_HOURS = Decimal("24")
DEFAULT_BREAK_TIME_MINUTES = 60
DEFAULT_OVERTIME_THRESHOLD = Decimal("8")

# Combined late + early-departure minutes charged at the base rate.
DEFAULT_LENIENCY_MINUTES = 60
DEFAULT_PENALTY_MULTIPLIER = Decimal("1.5")

DEFAULT_OVERTIME_FIRST_PERIOD_HOURS = Decimal("2")
DEFAULT_OVERTIME_FIRST_PERIOD_RATIO = Decimal("1.25")
DEFAULT_OVERTIME_SECOND_PERIOD_RATIO = Decimal("1.5")

DEFAULT_VACATION_DAYS = 1
MAX_FULL_NAME_LENGTH = 100
MIN_OVERTIME_REASON_LENGTH = 10

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
DEFAULT_WORKING_DAYS = WEEKDAY_NAMES[:5]
