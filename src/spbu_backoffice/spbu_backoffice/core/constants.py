"""Constants and defaults.

Note: Keep rates and calendar bounds here to avoid magic numbers spread across code.
"""

# Business day starts at 03:00 (WIB); 00:00-02:59 belongs to the previous day.
DAY_RESET_HOUR = 3
MINUTES_PER_DAY = 24 * 60

DEFAULT_SHIFT_KEY = "pagi"

# Suggestion rates, in rupiah.
EARLY_ARRIVAL_RATE_PER_MINUTE = 1500
LATE_DEPARTURE_RATE_PER_MINUTE = 1500
LATENESS_RATE_PER_MINUTE = 1000
EARLY_LEAVE_RATE_PER_MINUTE = 800

STANDARD_WORKING_HOURS = 8
SALARY_DAYS_PER_MONTH = 30

DEFAULT_OVERTIME_RATE_PER_HOUR = 10000

MIN_SUPPORTED_YEAR = 2000
MAX_SUPPORTED_YEAR = 2100
