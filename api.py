from flask import Flask, request, jsonify
import os

import storage
from availability import available_times as slot_availability, repack_day
from meals import ALL, MEALS
from policy import load_policy, table_catalog
from reservations import (
    INVALID_PARTY_SIZE,
    MISSING_FIELD,
    NO_CAPACITY,
    REQUIRES_MANUAL_REVIEW,
    cancel_reservation,
    reserve,
    unseated_warnings,
)
from summary import bookings_for_meal, day_summary, group_by_slot
from timeslots import canonical_date

ERROR_STATUS = {
    MISSING_FIELD: 400,
    INVALID_PARTY_SIZE: 400,
    REQUIRES_MANUAL_REVIEW: 202,
    NO_CAPACITY: 409,
}

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "change-me-in-prod")


@app.route("/tables", methods=["GET"])
def get_tables():
    return jsonify(table_catalog(load_policy()))


@app.route("/bookings", methods=["GET"])
def get_bookings():
    date_str = request.args.get("date")
    if not date_str:
        return jsonify({"error": "date query param is required, e.g. ?date=2025-11-09"}), 400
    date_str = canonical_date(date_str)
    if date_str is None:
        return jsonify({"error": "Invalid date format. Use YYYY-MM-DD"}), 400
    return jsonify(storage.load_bookings_for_date(date_str))


@app.route("/bookings", methods=["POST"])
def create_booking():
    """
    Expects JSON like:
    {
        "date": "2025-11-09",
        "name": "Anna",
        "party_size": 4,
        "time": "19:00",
        "notes": "Window seat if possible"
    }
    The seating time follows from the meal and a table is picked automatically.
    Returns 201 with the seated booking, 400 for invalid input, 202 when the
    party is too large and has been queued for manual review, 409 when no
    table is free.
    """
    data = request.get_json(silent=True) or {}
    booking_request = {
        "date": data.get("date"),
        "time": data.get("time") or data.get("start_time"),
        "party_size": data.get("party_size"),
        "name": data.get("name"),
        "notes": data.get("notes"),
        "source": data.get("source"),
    }
    date_str = canonical_date(booking_request["date"])

    policy = load_policy()
    tables = table_catalog(policy)

    if date_str is None:
        # nothing to lock or load; reserve reports the first invalid field
        result = reserve(booking_request, policy, [], tables)
    else:
        booking_request["date"] = date_str
        with storage.date_lock(date_str):
            bookings = storage.load_bookings_for_date(date_str)
            result = reserve(booking_request, policy, bookings, tables)
            if result["ok"]:
                storage.save_bookings_for_date(date_str, result["bookings"])

    if not result["ok"]:
        kind = result["error"]
        body = {"error": kind, "message": result["message"]}
        if "field" in result:
            body["field"] = result["field"]
        if kind == REQUIRES_MANUAL_REVIEW:
            body["queued"] = storage.record_manual_review(booking_request)
            app.logger.info("Party of %s on %s queued for manual review", result.get("party_size"), date_str)
        else:
            app.logger.info("Booking rejected (%s) for %s", kind, date_str)
        return jsonify(body), ERROR_STATUS.get(kind, 400)

    booking = result["booking"]
    app.logger.info(
        "Booking %s: %s, party of %s at %s on table %s",
        booking["id"], booking["name"], booking["party_size"], booking["time"], booking["table_id"],
    )
    for warning in result["warnings"]:
        app.logger.warning(warning["message"])

    return jsonify({
        "status": "ok",
        "message": f"Booking created for {booking['name']}, party of {booking['party_size']}",
        "booking": booking,
        "warnings": result["warnings"],
    }), 201


@app.route("/bookings", methods=["DELETE"])
def delete_booking():
    """Delete a booking by date and id, then re-seat that date.

    Accepts parameters via query string or JSON body:
      - date: YYYY-MM-DD
      - id: booking id
    """
    date_str = request.args.get("date")
    booking_id = request.args.get("id")

    if request.is_json:
        payload = request.get_json(silent=True) or {}
        date_str = date_str or payload.get("date")
        booking_id = booking_id or payload.get("id")

    if not date_str or not booking_id:
        return jsonify({"error": MISSING_FIELD, "message": "Both 'date' and 'id' are required"}), 400
    date_str = canonical_date(date_str)
    if date_str is None:
        return jsonify({"error": MISSING_FIELD, "message": "Invalid date format. Use YYYY-MM-DD"}), 400

    policy = load_policy()
    with storage.date_lock(date_str):
        bookings = storage.load_bookings_for_date(date_str)
        result = cancel_reservation(date_str, booking_id, bookings, table_catalog(policy), policy)
        if result["ok"]:
            storage.save_bookings_for_date(date_str, result["bookings"])

    if not result["ok"]:
        return jsonify({"error": result["error"], "message": result["message"]}), 404

    app.logger.info("Cancelled booking %s on %s", booking_id, date_str)
    return jsonify({
        "date": date_str,
        "removed": result["removed"],
        "bookings": result["bookings"],
        "warnings": result["warnings"],
    }), 200


@app.route("/repack", methods=["POST"])
def repack():
    """Re-seat every booking of a date from scratch.

    Request JSON: {"date": "YYYY-MM-DD"}
    """
    payload = request.get_json(silent=True) or {}
    date_str = canonical_date(payload.get("date"))
    if date_str is None:
        return jsonify({"error": MISSING_FIELD, "message": "Missing or invalid 'date' in JSON body"}), 400

    policy = load_policy()
    with storage.date_lock(date_str):
        bookings = storage.load_bookings_for_date(date_str)
        repacked = repack_day(date_str, bookings, table_catalog(policy), policy)
        storage.save_bookings_for_date(date_str, repacked)

    warnings = unseated_warnings(repacked, date_str)
    for warning in warnings:
        app.logger.warning(warning["message"])

    return jsonify({"date": date_str, "bookings": repacked, "warnings": warnings})


@app.route("/api/available-times")
def available_times():
    """
    Get available time slots for a given date and guest count.
    Query params: date (YYYY-MM-DD), guests (int)
    Returns: [{"time": "17:00", "available": true}, ...]
    """
    date_str = request.args.get("date")
    guests_str = request.args.get("guests")

    if not date_str or not guests_str:
        return jsonify({"error": "Missing date or guests parameter"}), 400

    try:
        guests = int(guests_str)
    except (ValueError, TypeError):
        guests = 0
    date_str = canonical_date(date_str)
    if date_str is None or guests < 1:
        return jsonify({"error": "Invalid date or guests format"}), 400

    policy = load_policy()
    bookings = storage.load_bookings_for_date(date_str)
    return jsonify(slot_availability(date_str, guests, bookings, table_catalog(policy), policy))


@app.route("/api/day-summary")
def get_day_summary():
    """Dashboard numbers for a date, plus its bookings for one meal grouped by slot.

    Query params: date (YYYY-MM-DD), meal (all|breakfast|lunch|dinner, default all)
    """
    date_str = canonical_date(request.args.get("date"))
    meal = request.args.get("meal", ALL)
    if date_str is None:
        return jsonify({"error": "Missing or invalid date parameter"}), 400
    if meal != ALL and meal not in MEALS:
        return jsonify({"error": f"Unknown meal '{meal}'"}), 400

    policy = load_policy()
    bookings = storage.load_bookings_for_date(date_str)
    result = day_summary(date_str, bookings, policy)
    result["meal"] = meal
    result["slots"] = group_by_slot(bookings_for_meal(bookings, meal, policy))
    return jsonify(result)


@app.route("/healthz")
def healthz():
    return {"status": "ok"}, 200


if __name__ == "__main__":
    app.run(debug=True)
