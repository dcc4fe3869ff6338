"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "18:00"
DEFAULT_BREAK_MINUTES = 60
DEFAULT_STANDARD_HOURS = 8.0
DEFAULT_OVERTIME_THRESHOLD_HOURS = 8.0
DEFAULT_WEEK_START_DAY = 1

DEFAULT_BUSINESS_UTC_OFFSET = "+09:00"

FULL_CAPACITY = 1.0
ALLOCATION_EPSILON = 1e-9
DEFAULT_RECOMMENDED_ALLOCATION = 0.5
