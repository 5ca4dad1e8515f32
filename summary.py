"""Figures for the day view: per-meal lists, guest totals, busy hours."""
from availability import unseated_bookings
from meals import ALL, MEALS, meal_for, meal_window
from timeslots import round_to_half_hour, time_to_minutes


def bookings_for_meal(bookings, meal=ALL, policy=None):
    """Bookings whose time falls inside the meal's range, earliest first."""
    ranges = (policy or {}).get("meal_ranges")
    start, end = meal_window(meal, ranges)
    picked = [b for b in bookings if start <= time_to_minutes(b["time"]) <= end]
    return sorted(picked, key=lambda b: time_to_minutes(b["time"]))


def group_by_slot(bookings):
    """{"12:00": [...], "12:30": [...]} in time order."""
    groups = {}
    for b in sorted(bookings, key=lambda b: time_to_minutes(round_to_half_hour(b["time"]))):
        groups.setdefault(round_to_half_hour(b["time"]), []).append(b)
    return groups


def guests_by_meal(bookings, policy=None):
    ranges = (policy or {}).get("meal_ranges")
    totals = {ALL: 0, **{meal: 0 for meal in MEALS}}
    for b in bookings:
        meal = meal_for(b["time"], ranges)
        if meal in totals:
            totals[meal] += b["party_size"]
        totals[ALL] += b["party_size"]
    return totals


def busiest_and_quietest_hour(bookings):
    """Hour labels like '18:00 – 19:00' with the most and fewest bookings.

    Only hours with at least one booking count; the earliest hour wins a tie.
    """
    per_hour = {}
    for b in bookings:
        hour = time_to_minutes(b["time"]) // 60
        per_hour[hour] = per_hour.get(hour, 0) + 1

    if not per_hour:
        return "–", "–"

    hours = sorted(per_hour)
    busiest = max(hours, key=lambda h: per_hour[h])
    quietest = min(hours, key=lambda h: per_hour[h])

    def label(hour):
        return f"{hour:02d}:00 – {(hour + 1) % 24:02d}:00"

    return label(busiest), label(quietest)


def day_summary(booking_date, bookings, policy=None):
    day = [b for b in bookings if b.get("date", booking_date) == booking_date]
    busiest, quietest = busiest_and_quietest_hour(day)
    return {
        "date": booking_date,
        "bookings": len(day),
        "guests": sum(b["party_size"] for b in day),
        "guests_by_meal": guests_by_meal(day, policy),
        "busiest_hour": busiest,
        "quietest_hour": quietest,
        "unseated": len(unseated_bookings(day)),
    }
