"""Internal constants shared across the library."""

from datetime import timedelta, timezone

DEFAULT_RULES_PATH = "config/rules.json"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

# Schedules are wall-clock times in a single fixed zone, independent of the
# host's local time.
DEFAULT_UTC_OFFSET_HOURS = 3.0
UTC_OFFSET = timezone(timedelta(hours=DEFAULT_UTC_OFFSET_HOURS), "UTC+3")

# The persisted file uses a one-space indent.
JSON_INDENT = 1
