"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_REQUIRED_PERCENTAGE = 75
WARNING_MARGIN = 5
DEFAULT_HISTORY_LIMIT = 30

MAX_NOTES_LENGTH = 200
MAX_GRACE_ALLOWANCE = 30
POLICY_NAME_MIN = 5
POLICY_NAME_MAX = 100

MIN_PAYMENT_AMOUNT = 1
MAX_PAYMENT_AMOUNT = 1_000_000
URGENT_DUE_DAYS = 3
