"""
Meal periods and the default seating time that goes with each of them.

A booking's duration is never typed in by the guest: it follows from the meal
its (rounded) start time falls into.
"""
from timeslots import time_to_minutes

BREAKFAST = "breakfast"
LUNCH = "lunch"
DINNER = "dinner"
OTHER = "other"
ALL = "all"

MEALS = (BREAKFAST, LUNCH, DINNER)

# Closed ranges: a time equal to the end value still belongs to the meal.
MEAL_RANGES = {
    BREAKFAST: ("08:00", "10:59"),
    LUNCH: ("11:00", "14:31"),
    DINNER: ("17:00", "21:31"),
}

MEAL_DURATIONS = {
    BREAKFAST: 60,
    LUNCH: 90,
    DINNER: 120,
}

DEFAULT_DURATION = 90


def meal_window(meal, ranges=None):
    """(start, end) minutes of a meal's range, both ends inclusive."""
    ranges = ranges or MEAL_RANGES
    if meal == ALL:
        return 0, 24 * 60 - 1
    start, end = ranges[meal]
    return time_to_minutes(start), time_to_minutes(end)


def meal_for(hhmm: str, ranges=None) -> str:
    """Classify a clock time; times outside every configured range are OTHER."""
    ranges = ranges or MEAL_RANGES
    minutes = time_to_minutes(hhmm)
    for meal in MEALS:
        if meal not in ranges:
            continue
        start, end = meal_window(meal, ranges)
        if start <= minutes <= end:
            return meal
    return OTHER


def duration_for(meal: str, durations=None, default=None) -> int:
    durations = durations or MEAL_DURATIONS
    if default is None:
        default = DEFAULT_DURATION
    return durations.get(meal, default)


def duration_for_time(hhmm: str, policy=None) -> int:
    """Seating minutes for a booking starting at `hhmm` under the given policy."""
    policy = policy or {}
    meal = meal_for(hhmm, policy.get("meal_ranges"))
    return duration_for(meal, policy.get("durations"), policy.get("default_duration"))
