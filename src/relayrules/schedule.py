"""Schedule resolution.

A relay schedule is a list of time-of-day checkpoints. The temperature in
force is the one of the most recently passed checkpoint *today*, evaluated
in a fixed UTC offset. Before the first checkpoint of the day the circuit's
base temperature applies; yesterday's last checkpoint never carries over
midnight.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, time, timezone

from relayrules._constants import UTC_OFFSET
from relayrules.models.rules import ScheduleEntry

_logger = logging.getLogger(__name__)

# 24-hour clock with an optional meridiem marker, e.g. "14:30 PM" or "8:05".
_TIME_OF_DAY_RE = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})(?: (?P<meridiem>AM|PM))?$")

InvalidEntryHook = Callable[[ScheduleEntry, ValueError], None]


def parse_time_of_day(value: str) -> time:
    """Parse a schedule time string.

    The hour is read on a 24-hour clock. A trailing ``PM`` adds twelve
    hours only to hours below 12 and ``AM`` maps hour 12 to midnight, so
    ``"14:30 PM"`` and ``"2:30 PM"`` are the same time.

    Raises :class:`ValueError` when *value* is not a valid time of day.
    """
    match = _TIME_OF_DAY_RE.match(value.strip())
    if match is None:
        raise ValueError(f"unrecognised time of day {value!r}")
    hour = int(match["hour"])
    minute = int(match["minute"])
    if hour > 23 or minute > 59:
        raise ValueError(f"time of day out of range: {value!r}")
    meridiem = match["meridiem"]
    if meridiem == "PM" and hour < 12:
        hour += 12
    elif meridiem == "AM" and hour == 12:
        hour = 0
    return time(hour, minute)


def resolve_temperature(
    schedule: Iterable[ScheduleEntry],
    fallback: float,
    now: datetime,
    *,
    offset: timezone = UTC_OFFSET,
    on_invalid: InvalidEntryHook | None = None,
) -> float:
    """Return the temperature in force at *now*.

    Each entry is anchored to today's date in *offset*. Only entries
    strictly in the past qualify; the one passed most recently wins, with
    ties going to the earlier entry. Entries whose time cannot be parsed
    are skipped and reported to *on_invalid*. Returns *fallback* when no
    entry qualifies.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    local_now = now.astimezone(offset)
    today = local_now.date()

    temperature = fallback
    best_diff: float | None = None
    for entry in schedule:
        try:
            time_of_day = parse_time_of_day(entry.time)
        except ValueError as exc:
            _logger.warning("Skipping schedule entry with unparseable time %r: %s", entry.time, exc)
            if on_invalid is not None:
                on_invalid(entry, exc)
            continue
        candidate = datetime.combine(today, time_of_day, tzinfo=offset)
        diff = (local_now - candidate).total_seconds()
        if diff > 0 and (best_diff is None or diff < best_diff):
            best_diff = diff
            temperature = entry.temperature
    return temperature
