# ----------------------------
# TABLE ASSIGNMENT
# ----------------------------
"""
Availability engine: which table can seat a party, and re-seating a whole day.

Everything here is a pure function of the table catalog, the meal policy and
the bookings passed in. Callers own the booking list and are responsible for
serializing read-modify-write cycles on a date (see storage.date_lock).
"""
from datetime import date

from meals import MEAL_RANGES, MEALS, duration_for_time
from timeslots import (
    SLOT_MINUTES,
    generate_time_slots,
    minutes_to_time,
    round_to_half_hour,
    time_to_minutes,
    times_overlap,
)

TABLE_CAPACITIES = [2, 2, 2, 4, 4, 4, 6, 6]


def build_tables(capacities) -> list[dict]:
    """Catalog of tables; ids are the 1-based position in `capacities`."""
    return [{"id": i, "capacity": int(cap)} for i, cap in enumerate(capacities, start=1)]


DEFAULT_TABLES = build_tables(TABLE_CAPACITIES)


def _date_key(value) -> str:
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return value


def _on_date(booking, day_key) -> bool:
    return _date_key(booking.get("date", day_key)) == day_key


def booking_interval(booking, policy=None):
    """(start, end) minutes occupied by a stored booking.

    Uses the stored duration when present, otherwise derives it from the meal
    of the rounded start time.
    """
    start_time = round_to_half_hour(booking["time"])
    start = time_to_minutes(start_time)
    duration = booking.get("duration_minutes") or duration_for_time(start_time, policy)
    return start, start + duration


def find_table(booking_date, hhmm, party_size, bookings, tables=None, policy=None):
    """Find a table that fits party_size and is free during the time window.

    Tables are tried in catalog order and the first free one wins. Returns the
    table id, or None when nothing fits.
    """
    if tables is None:
        tables = DEFAULT_TABLES
    day_key = _date_key(booking_date)

    start_time = round_to_half_hour(hhmm)
    start_minutes = time_to_minutes(start_time)
    end_minutes = start_minutes + duration_for_time(start_time, policy)

    for table in tables:
        if table["capacity"] < party_size:
            continue

        # check this table's existing bookings
        table_is_free = True
        for b in bookings:
            if b.get("table_id") != table["id"] or not _on_date(b, day_key):
                continue

            existing_start, existing_end = booking_interval(b, policy)
            if times_overlap(start_minutes, end_minutes, existing_start, existing_end):
                table_is_free = False
                break

        if table_is_free:
            return table["id"]

    return None


def repack_day(booking_date, bookings, tables=None, policy=None) -> list[dict]:
    """Re-seat every booking of one date from scratch.

    Largest parties go first (earlier time breaks ties) and each takes the
    smallest free table that fits. Times are snapped to the half hour and
    durations re-derived. A booking that fits nowhere keeps table_id None.
    Bookings on other dates are passed through unchanged; the input list and
    its dicts are not modified.
    """
    if tables is None:
        tables = DEFAULT_TABLES
    day_key = _date_key(booking_date)

    others = [dict(b) for b in bookings if not _on_date(b, day_key)]
    day = [b for b in bookings if _on_date(b, day_key)]
    day.sort(key=lambda b: (-b["party_size"], time_to_minutes(b["time"])))
    tightest_first = sorted(tables, key=lambda t: t["capacity"])

    placed = []
    for booking in day:
        start_time = round_to_half_hour(booking["time"])
        duration = duration_for_time(start_time, policy)
        start = time_to_minutes(start_time)
        end = start + duration

        chosen = None
        for table in tightest_first:
            if table["capacity"] < booking["party_size"]:
                continue
            conflict = any(
                p["table_id"] == table["id"]
                and times_overlap(start, end, *booking_interval(p, policy))
                for p in placed
            )
            if not conflict:
                chosen = table["id"]
                break

        placed.append({
            **booking,
            "date": day_key,
            "time": start_time,
            "duration_minutes": duration,
            "table_id": chosen,
        })

    return others + placed


def unseated_bookings(bookings, booking_date=None) -> list[dict]:
    """Bookings left without a table (optionally limited to one date)."""
    day_key = _date_key(booking_date)
    return [
        b for b in bookings
        if b.get("table_id") is None and (day_key is None or _on_date(b, day_key))
    ]


def slot_grid(policy=None):
    """Bookable start times, from the first meal's opening to the last meal's end."""
    policy = policy or {}
    ranges = policy.get("meal_ranges") or MEAL_RANGES
    step = policy.get("slot_step_minutes", SLOT_MINUTES)
    windows = [ranges[m] for m in MEALS if m in ranges]
    first = min(time_to_minutes(start) for start, _ in windows)
    last = max(time_to_minutes(end) for _, end in windows)
    return generate_time_slots(minutes_to_time(first), minutes_to_time(last), step)


def available_times(booking_date, party_size, bookings, tables=None, policy=None):
    """
    For each slot of the day, can a party of `party_size` be seated right now?
    Returns: [{"time": "17:00", "available": true}, ...]
    """
    return [
        {
            "time": slot,
            "available": find_table(booking_date, slot, party_size, bookings, tables, policy) is not None,
        }
        for slot in slot_grid(policy)
    ]


def check_assignments(bookings, tables=None, policy=None) -> list[str]:
    """Describe every capacity or double-booking problem; empty when consistent."""
    if tables is None:
        tables = DEFAULT_TABLES
    capacity = {t["id"]: t["capacity"] for t in tables}
    problems = []

    seated = [b for b in bookings if b.get("table_id") is not None]
    for b in seated:
        cap = capacity.get(b["table_id"])
        if cap is None:
            problems.append(f"{b.get('name')}: table {b['table_id']} does not exist")
        elif cap < b["party_size"]:
            problems.append(
                f"{b.get('name')}: party of {b['party_size']} on table {b['table_id']} ({cap} seats)"
            )

    for i, a in enumerate(seated):
        for b in seated[i + 1:]:
            if a["table_id"] != b["table_id"] or _date_key(a["date"]) != _date_key(b["date"]):
                continue
            if times_overlap(*booking_interval(a, policy), *booking_interval(b, policy)):
                problems.append(
                    f"{a.get('name')} and {b.get('name')} overlap on table {a['table_id']} ({_date_key(a['date'])})"
                )

    return problems
