"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

NOTES_SEPARATOR = " | "

FULL_DAY_HOURS = Decimal("9")
SHORT_DAY_HOURS = Decimal("8")

DEFAULT_SHARED_TILL_STORE_IDS = (1, 2, 3, 4)
# DECIMAL(12,2) columns
MAX_AMOUNT = Decimal("1e10")

DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 500

MIN_REPORT_YEAR = 2000
MAX_REPORT_YEAR = 2100

ALL_STORES = "all"
