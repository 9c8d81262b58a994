"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STANDARD_WORK_MINUTES = 480

# Night hours: a shift "starts at night" from 20:00, "ends at night" from 22:00,
# both until 05:00.
NIGHT_START_FROM_HOUR = 20
NIGHT_END_FROM_HOUR = 22
NIGHT_UNTIL_HOUR = 5

PAYROLL_CUTOFF_DAY = 20
DEFAULT_PERIOD_OPTIONS = 12

# Clock-ins before this hour belong to the previous working date.
WORKING_DATE_ROLLOVER_HOUR = 4
RECLOCKIN_THRESHOLD_MINUTES = 60

FIXED_START_TIME = "08:00:00"
FIXED_END_TIME = "17:00:00"
FIXED_BREAK_MINUTES = 60

UNKNOWN_EMPLOYEE_NAME = "不明"
