"""
Reservation intake: validate a booking request, find it a table and re-seat
the day.

Every expected failure comes back as a result dict, never as an exception:

    {"ok": False, "error": NO_CAPACITY, "message": "..."}

The booking list handed in is never modified; successful calls return a new
list the caller persists.
"""
import uuid

from availability import find_table, repack_day, unseated_bookings
from meals import duration_for_time
from timeslots import canonical_date, is_valid_time, normalize_time, round_to_half_hour

# Error kinds
MISSING_FIELD = "missing_field"
INVALID_PARTY_SIZE = "invalid_party_size"
REQUIRES_MANUAL_REVIEW = "requires_manual_review"
NO_CAPACITY = "no_capacity"
UNSEATED = "unseated"
NOT_FOUND = "not_found"

ERROR_MESSAGES = {
    MISSING_FIELD: "A required field is missing.",
    INVALID_PARTY_SIZE: "Party size must be at least 1.",
    REQUIRES_MANUAL_REVIEW: (
        "Parties of more than {max_guests} guests need manual confirmation. "
        "We will get back to you shortly."
    ),
    NO_CAPACITY: "No suitable table is free in this time window.",
    UNSEATED: "{name} (party of {party_size} at {time}) has no table after re-seating.",
    NOT_FOUND: "No booking with that id on {date}.",
}

DEFAULT_MAX_GUESTS = 22


def _error(kind, message=None, **extra):
    result = {"ok": False, "error": kind, "message": message or ERROR_MESSAGES[kind]}
    result.update(extra)
    return result


def _new_booking_id() -> str:
    return uuid.uuid4().hex[:8]


def _validate_date(value):
    """(canonical date string, None) or (None, error result)."""
    if not value:
        return None, _error(MISSING_FIELD, "Date is required.", field="date")
    booking_date = canonical_date(value)
    if booking_date is None:
        return None, _error(MISSING_FIELD, "Invalid date format. Use YYYY-MM-DD.", field="date")
    return booking_date, None


def _parse_party_size(value):
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def create_reservation(request, policy, bookings, tables=None):
    """Turn a booking request into a seated booking, or explain why not.

    Checks run in a fixed order and the first failure wins: name, date, time,
    party size >= 1, party size within policy, then a free table.
    """
    policy = policy or {}

    name = str(request.get("name") or "").strip()
    if not name:
        return _error(MISSING_FIELD, "Name is required.", field="name")

    booking_date, date_error = _validate_date(request.get("date"))
    if date_error:
        return date_error

    raw_time = request.get("time")
    if not raw_time or not str(raw_time).strip():
        return _error(MISSING_FIELD, "Time is required.", field="time")
    start_time = normalize_time(str(raw_time))
    if not is_valid_time(start_time):
        return _error(MISSING_FIELD, "Invalid time format. Use HH:MM.", field="time")

    party_size = _parse_party_size(request.get("party_size"))
    if party_size is None or party_size < 1:
        return _error(INVALID_PARTY_SIZE)

    max_guests = policy.get("max_guests_per_reservation", DEFAULT_MAX_GUESTS)
    if party_size > max_guests:
        return _error(
            REQUIRES_MANUAL_REVIEW,
            ERROR_MESSAGES[REQUIRES_MANUAL_REVIEW].format(max_guests=max_guests),
            party_size=party_size,
        )

    start_time = round_to_half_hour(start_time)
    table_id = find_table(booking_date, start_time, party_size, bookings, tables, policy)
    if table_id is None:
        return _error(NO_CAPACITY)

    notes = str(request.get("notes") or "").strip() or None
    booking = {
        "id": _new_booking_id(),
        "date": booking_date,
        "time": start_time,
        "party_size": party_size,
        "duration_minutes": duration_for_time(start_time, policy),
        "table_id": table_id,
        "name": name,
        "notes": notes,
        "status": "confirmed",
        "source": request.get("source") or "web",
    }
    return {"ok": True, "booking": booking}


def unseated_warnings(bookings, booking_date):
    return [
        {
            "error": UNSEATED,
            "booking_id": b.get("id"),
            "message": ERROR_MESSAGES[UNSEATED].format(
                name=b.get("name"), party_size=b["party_size"], time=b["time"]
            ),
        }
        for b in unseated_bookings(bookings, booking_date)
    ]


def reserve(request, policy, bookings, tables=None):
    """create_reservation + append + re-seat the day.

    Returns the placed booking as it stands after re-seating, the new booking
    list and any unseated warnings for that date.
    """
    result = create_reservation(request, policy, bookings, tables)
    if not result["ok"]:
        return result

    booking = result["booking"]
    repacked = repack_day(booking["date"], [*bookings, booking], tables, policy)
    placed = next(b for b in repacked if b.get("id") == booking["id"])
    return {
        "ok": True,
        "booking": placed,
        "bookings": repacked,
        "warnings": unseated_warnings(repacked, booking["date"]),
    }


def cancel_reservation(booking_date, booking_id, bookings, tables=None, policy=None):
    """Drop one booking and re-seat the rest of that date."""
    booking_date = canonical_date(booking_date) or booking_date
    remaining = [
        b for b in bookings
        if not (b.get("id") == booking_id and b.get("date") == booking_date)
    ]
    if len(remaining) == len(bookings):
        return _error(NOT_FOUND, ERROR_MESSAGES[NOT_FOUND].format(date=booking_date))

    removed = next(b for b in bookings if b.get("id") == booking_id and b.get("date") == booking_date)
    repacked = repack_day(booking_date, remaining, tables, policy)
    return {
        "ok": True,
        "removed": removed,
        "bookings": repacked,
        "warnings": unseated_warnings(repacked, booking_date),
    }
