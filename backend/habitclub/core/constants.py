"""
Fixed limits and display values shared across services
"""

# Max ids a single "any-of" (IN) filter may carry
ANY_OF_BATCH_LIMIT = 10

# Max check-ins returned by one feed query
FEED_LIMIT = 50

MIN_SEARCH_TERM_LENGTH = 2
SEARCH_RESULT_LIMIT = 25

# PostgREST reads * in like/ilike patterns as %, and it cannot be escaped
WILDCARD_CHARACTER = "*"

# Conditional streak writes retried this many times before giving up
MAX_STREAK_UPDATE_ATTEMPTS = 3

DEFAULT_CHECK_IN_HISTORY_LIMIT = 30

UNKNOWN_USER = "Unknown User"
UNKNOWN_HABIT = "Unknown Habit"
MISSING_TIMESTAMP = "N/A"

STREAK_POLICY_CALENDAR_DAY = "calendar_day"
STREAK_POLICY_FREQUENCY = "frequency"

# Suggested, not enforced
HABIT_CATEGORIES = [
    "Health",
    "Fitness",
    "Learning",
    "Finance",
    "Mindfulness",
    "Social",
    "Other",
]
DEFAULT_HABIT_CATEGORY = "Health"

# Postgres unique_violation / foreign_key_violation
UNIQUE_VIOLATION_CODE = "23505"
FOREIGN_KEY_VIOLATION_CODE = "23503"
