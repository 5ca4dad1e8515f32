"""Meal classification and the seating time derived from it."""
import pytest

from meals import (
    BREAKFAST,
    DINNER,
    LUNCH,
    OTHER,
    duration_for,
    duration_for_time,
    meal_for,
)


@pytest.mark.parametrize("hhmm, meal", [
    ("07:59", OTHER),
    ("08:00", BREAKFAST),
    ("10:59", BREAKFAST),
    ("11:00", LUNCH),
    ("14:30", LUNCH),
    ("14:31", LUNCH),
    ("14:32", OTHER),
    ("16:59", OTHER),
    ("17:00", DINNER),
    ("21:31", DINNER),
    ("21:32", OTHER),
])
def test_meal_boundaries(hhmm, meal):
    assert meal_for(hhmm) == meal


def test_durations():
    assert duration_for(BREAKFAST) == 60
    assert duration_for(LUNCH) == 90
    assert duration_for(DINNER) == 120
    assert duration_for(OTHER) == 90


def test_duration_for_time_uses_policy():
    policy = {
        "meal_ranges": {LUNCH: ["11:00", "15:00"]},
        "durations": {LUNCH: 75},
        "default_duration": 45,
    }
    assert duration_for_time("14:45", policy) == 75
    assert duration_for_time("09:00", policy) == 45
    assert duration_for_time("19:00") == 120
