# ----------------------------
# TIME HELPERS
# ----------------------------
import re
from datetime import date, datetime

SLOT_MINUTES = 30

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def canonical_date(value):
    """'YYYY-MM-DD' for a date or a parseable date string, else None.

    Unpadded input such as '2025-9-5' comes back as '2025-09-05' so one
    calendar day always has one key.
    """
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    try:
        return datetime.strptime(value, "%Y-%m-%d").strftime("%Y-%m-%d")
    except (TypeError, ValueError):
        return None


def normalize_time(raw_time: str) -> str:
    """Turn user input into HH:MM format."""
    raw_time = raw_time.strip()

    # 4 digits -> HHMM
    if len(raw_time) == 4 and raw_time.isdigit():
        return raw_time[:2] + ":" + raw_time[2:]

    # H:MM -> HH:MM
    if ":" in raw_time:
        hour, _, minute = raw_time.partition(":")
        if hour.isdigit() and len(hour) == 1:
            return f"0{hour}:{minute}"
        return raw_time

    # just an hour like "7"
    if raw_time.isdigit():
        hour = int(raw_time)
        if 0 <= hour <= 23:
            return f"{hour:02d}:00"

    return raw_time


def is_valid_time(hhmm) -> bool:
    """True for a clock time written as HH:MM (00:00 - 23:59)."""
    return isinstance(hhmm, str) and _TIME_PATTERN.match(hhmm) is not None


def time_to_minutes(hhmm: str) -> int:
    """'19:30' -> 1170 minutes since midnight."""
    hour, minute = hhmm.split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time(minutes: int) -> str:
    """1170 -> '19:30'"""
    hour = minutes // 60
    minute = minutes % 60
    return f"{hour:02d}:{minute:02d}"


def round_to_half_hour(hhmm: str) -> str:
    """Snap a clock time to its half-hour slot.

    :00-:14 rounds down, :15-:44 goes to :30 and :45-:59 rounds up to the next
    full hour (23:50 -> 00:00).
    """
    hour, minute = (int(part) for part in hhmm.split(":"))
    if minute < 15:
        return f"{hour:02d}:00"
    if minute < 45:
        return f"{hour:02d}:30"
    return f"{(hour + 1) % 24:02d}:00"


def times_overlap(start1, end1, start2, end2) -> bool:
    """
    Half-open ranges [start, end) overlap if they intersect at all.
    Back-to-back ranges (end1 == start2) do not overlap.
    """
    return start1 < end2 and start2 < end1


def generate_time_slots(first: str, last: str, step=SLOT_MINUTES):
    """All slot start times from first to last (inclusive) every `step` minutes."""
    slots = []
    current = time_to_minutes(first)
    end = time_to_minutes(last)

    while current <= end:
        slots.append(minutes_to_time(current))
        current += step

    return slots
