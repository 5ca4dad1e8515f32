# ----------------------------
# BOOKING SNAPSHOTS (one JSON file per date)
# ----------------------------
import json
import os
import threading
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = Path(os.environ.get("SEATPLAN_DATA_DIR", BASE_DIR / "data"))

MANUAL_REVIEW_FILENAME = "manual_review.json"

_date_locks = {}
_date_locks_guard = threading.Lock()


def date_lock(date_str) -> threading.Lock:
    """The lock guarding one date's booking snapshot.

    Hold it for the whole load -> reserve -> save cycle so two requests for
    the same date never both see a table as free.
    """
    with _date_locks_guard:
        lock = _date_locks.get(date_str)
        if lock is None:
            lock = _date_locks[date_str] = threading.Lock()
        return lock


def bookings_file_for_date(date_str):
    return DATA_DIR / f"bookings_{date_str}.json"


def normalize_booking(booking, date_str=None):
    """Bring a stored booking into the current shape.

    - Older snapshots used 'start_time' and 'guests'; those are migrated.
    - table_id is always an int or None.
    - The date defaults to the snapshot's date.
    """
    if "time" not in booking and "start_time" in booking:
        booking["time"] = booking.pop("start_time")
    if "party_size" not in booking and "guests" in booking:
        booking["party_size"] = booking.pop("guests")

    booking["party_size"] = int(booking.get("party_size", 0))
    if date_str is not None:
        booking.setdefault("date", date_str)

    table_id = booking.get("table_id")
    booking["table_id"] = int(table_id) if table_id not in (None, "") else None

    booking.setdefault("notes", None)
    booking.setdefault("status", "confirmed")
    booking.setdefault("source", "web")
    return booking


def load_bookings_for_date(date_str) -> list[dict]:
    filename = bookings_file_for_date(date_str)
    if not filename.exists():
        return []
    try:
        with open(filename, "r", encoding="utf-8") as f:
            bookings = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"⚠️ Could not read {filename} ({e}). Treating {date_str} as empty.")
        return []
    if not isinstance(bookings, list):
        return []
    return [normalize_booking(b, date_str) for b in bookings if isinstance(b, dict)]


def save_bookings_for_date(date_str, bookings):
    """Replace the snapshot for date_str with the bookings on that date."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    day = [b for b in bookings if b.get("date", date_str) == date_str]
    with open(bookings_file_for_date(date_str), "w", encoding="utf-8") as f:
        json.dump(day, f, indent=4)


def load_manual_reviews() -> list[dict]:
    filename = DATA_DIR / MANUAL_REVIEW_FILENAME
    if not filename.exists():
        return []
    try:
        with open(filename, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return []
    return data if isinstance(data, list) else []


def record_manual_review(request):
    """Keep an oversized request so staff can follow up by hand."""
    with _date_locks_guard:
        pending = load_manual_reviews()
        pending.append(dict(request))
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        with open(DATA_DIR / MANUAL_REVIEW_FILENAME, "w", encoding="utf-8") as f:
            json.dump(pending, f, indent=4)
    return len(pending)
