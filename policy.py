# ----------------------------
# RESTAURANT POLICY (loaded from file)
# ----------------------------
import copy
import json
from pathlib import Path

import storage
from availability import TABLE_CAPACITIES, build_tables
from meals import DEFAULT_DURATION, MEAL_DURATIONS, MEAL_RANGES
from reservations import DEFAULT_MAX_GUESTS
from timeslots import SLOT_MINUTES

POLICY_FILENAME = "restaurant_policy.json"

DEFAULT_POLICY = {
    "tables": list(TABLE_CAPACITIES),
    "slot_step_minutes": SLOT_MINUTES,
    "meal_ranges": {meal: list(window) for meal, window in MEAL_RANGES.items()},
    "durations": dict(MEAL_DURATIONS),
    "default_duration": DEFAULT_DURATION,
    "max_guests_per_reservation": DEFAULT_MAX_GUESTS,
}


def policy_file():
    return storage.DATA_DIR / POLICY_FILENAME


def load_policy(path=None) -> dict:
    """Load restaurant_policy.json and fill anything it leaves out from the defaults.

    - Missing file -> defaults.
    - Unreadable or non-object file -> defaults, with a warning.
    """
    path = Path(path) if path else policy_file()
    policy = copy.deepcopy(DEFAULT_POLICY)

    if not path.exists():
        return policy

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"⚠️ Could not read {path} ({e}). Using default policy.")
        return policy

    if not isinstance(data, dict):
        print(f"⚠️ {path} does not hold a JSON object. Using default policy.")
        return policy

    for key, value in data.items():
        if isinstance(value, dict) and isinstance(policy.get(key), dict):
            policy[key].update(value)
        else:
            policy[key] = value
    return policy


def save_policy(policy, path=None):
    """Persist policy to restaurant_policy.json"""
    path = Path(path) if path else policy_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(policy, f, indent=4)


def table_catalog(policy) -> list[dict]:
    return build_tables(policy.get("tables") or TABLE_CAPACITIES)
