# ----------------------------
# SETUP (policy and bookings loaded from the data directory)
# ----------------------------
from datetime import datetime, date

import storage
from availability import available_times, check_assignments, repack_day
from policy import load_policy, table_catalog
from reservations import cancel_reservation, reserve
from summary import day_summary
from timeslots import canonical_date, minutes_to_time, time_to_minutes

policy = {}
tables = []
bookings = []  # each booking has: id, name, party_size, date, time, duration_minutes, table_id
current_date = None  # Track which date we're viewing/editing


def load_settings():
    """Load restaurant_policy.json and build the table catalog from it."""
    global policy, tables
    policy = load_policy()
    tables = table_catalog(policy)
    print(
        f"📐 {len(tables)} tables, max {policy['max_guests_per_reservation']} guests per booking"
    )


def _date_str(booking_date):
    return canonical_date(booking_date) or booking_date


# ----------------------------
# BOOKING FUNCTIONS
# ----------------------------
def load_bookings(booking_date=None):
    """Load bookings for a specific date."""
    global bookings, current_date

    if booking_date is None:
        booking_date = date.today()

    current_date = booking_date
    bookings = storage.load_bookings_for_date(_date_str(booking_date))


def save_bookings():
    """Save bookings to the current date's file."""
    if current_date is None:
        print("⚠️ No date set for bookings.")
        return
    storage.save_bookings_for_date(_date_str(current_date), bookings)


def list_tables():
    if not tables:
        print("No tables defined.")
        return
    print("🪑 Tables:")
    for t in tables:
        print(f"- Table {t['id']}: {t['capacity']} seats")


def create_booking(name, party_size, start_time_str, booking_date=None, notes=None):
    """Create a booking for a specific date. Returns the seated booking or None."""
    global bookings

    if booking_date is None:
        booking_date = current_date if current_date else date.today()

    if booking_date != current_date:
        load_bookings(booking_date)

    date_str = _date_str(booking_date)
    with storage.date_lock(date_str):
        bookings = storage.load_bookings_for_date(date_str)
        result = reserve(
            {"date": date_str, "time": start_time_str, "party_size": party_size,
             "name": name, "notes": notes, "source": "phone"},
            policy, bookings, tables,
        )
        if not result["ok"]:
            print(f"❌ {result['message']}")
            return None
        bookings = [b for b in result["bookings"] if b["date"] == date_str]
        save_bookings()

    booking = result["booking"]
    end_time_str = minutes_to_time(time_to_minutes(booking["time"]) + booking["duration_minutes"])
    print(
        f"✅ Booking created for {booking['name']} {booking['time']}-{end_time_str} on table {booking['table_id']}."
    )
    for warning in result["warnings"]:
        print(f"⚠️ {warning['message']}")
    return booking


def list_bookings(show_index=False):
    if not bookings:
        print("No bookings yet.")
        return

    date_str = _date_str(current_date) if current_date else "Unknown"
    print(f"📋 Bookings for {date_str}:")
    ordered = sorted(bookings, key=lambda b: time_to_minutes(b["time"]))
    for i, b in enumerate(ordered, start=1):
        end_time = minutes_to_time(time_to_minutes(b["time"]) + b["duration_minutes"])
        table = f"Table {b['table_id']}" if b["table_id"] is not None else "UNSEATED"
        line = f"{b['time']}–{end_time} | {b['name']} ({b['party_size']} ppl) -> {table}"
        if show_index:
            print(f"{i}) {line}")
        else:
            print(f"- {line}")
    return ordered


def cancel_booking():
    global bookings

    if not bookings:
        print("There are no bookings to cancel.")
        return

    ordered = list_bookings(show_index=True)

    try:
        choice = int(input("Enter the number of the booking to cancel: "))
    except ValueError:
        print("Please enter a valid number.")
        return

    index = choice - 1
    if not 0 <= index < len(ordered):
        print("No booking with that number.")
        return

    date_str = _date_str(current_date)
    with storage.date_lock(date_str):
        bookings = storage.load_bookings_for_date(date_str)
        result = cancel_reservation(date_str, ordered[index]["id"], bookings, tables, policy)
        if not result["ok"]:
            print(f"❌ {result['message']}")
            return
        bookings = result["bookings"]
        save_bookings()

    removed = result["removed"]
    print(f"🗑️ Canceled booking for {removed['name']} at {removed['time']} (Table {removed['table_id']}).")


def repack_current_day():
    """Re-seat every booking of the current date and report what moved."""
    global bookings

    date_str = _date_str(current_date)
    with storage.date_lock(date_str):
        bookings = storage.load_bookings_for_date(date_str)
        before = {b["id"]: b["table_id"] for b in bookings}
        bookings = repack_day(date_str, bookings, tables, policy)
        save_bookings()

    moved = [b for b in bookings if before.get(b["id"]) != b["table_id"]]
    print(f"🔄 Re-seated {len(bookings)} bookings for {date_str}, {len(moved)} changed table.")
    for b in moved:
        print(f"   • {b['name']}: table {before.get(b['id'])} -> {b['table_id']}")

    problems = check_assignments(bookings, tables, policy)
    for problem in problems:
        print(f"⚠️ {problem}")
    return bookings


def show_available_times(party_size):
    slots = available_times(_date_str(current_date), party_size, bookings, tables, policy)
    free = [s["time"] for s in slots if s["available"]]
    if not free:
        print(f"❌ No free tables for {party_size} people on {_date_str(current_date)}.")
        return free
    print(f"🕓 Free times for {party_size} people: {', '.join(free)}")
    return free


def show_day_summary():
    s = day_summary(_date_str(current_date), bookings, policy)
    print("=" * 60)
    print(f"📊 {s['date']}: {s['bookings']} bookings, {s['guests']} guests")
    for meal, guests in s["guests_by_meal"].items():
        print(f"   {meal.title():<10} {guests} guests")
    print(f"   Busiest hour: {s['busiest_hour']}")
    print(f"   Quietest hour: {s['quietest_hour']}")
    if s["unseated"]:
        print(f"⚠️ {s['unseated']} booking(s) without a table")
    print("=" * 60)
    return s


def parse_date(date_str):
    """Parse a date string in YYYY-MM-DD format or return today's date."""
    date_str = date_str.strip()
    if not date_str or date_str.lower() == "today":
        return date.today()

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        print("⚠️ Invalid date format. Using today's date.")
        return date.today()


# ----------------------------
# MAIN PROGRAM
# ----------------------------
def main():
    load_settings()
    # Load today's bookings by default
    load_bookings(date.today())
    print("🍽️ Restaurant Booking System")
    print(f"Current date: {_date_str(current_date)}")

    while True:
        print("\nWhat do you want to do?")
        print("1) Create a booking")
        print("2) List bookings")
        print("3) Cancel a booking")
        print("4) Change viewing date")
        print("5) List tables")
        print("6) Re-seat the day")
        print("7) Show free times")
        print("8) Day summary")
        print("9) Quit")

        choice = input("Enter choice (1-9): ")

        if choice == "1":
            date_input = input(f"Booking date (YYYY-MM-DD or 'today', default: {_date_str(current_date)}): ").strip()
            booking_date = parse_date(date_input) if date_input else current_date

            name = input("Guest name: ")
            try:
                party_size = int(input("Party size (number of people): "))
            except ValueError:
                print("Please enter a valid number.")
                continue
            start_time = input("Start time (e.g. 19:00): ")
            notes = input("Notes (optional): ").strip() or None

            create_booking(name, party_size, start_time, booking_date, notes)
        elif choice == "2":
            list_bookings()
        elif choice == "3":
            cancel_booking()
        elif choice == "4":
            date_input = input("Enter date to view (YYYY-MM-DD or 'today'): ").strip()
            load_bookings(parse_date(date_input))
            print(f"✅ Now viewing bookings for {_date_str(current_date)}")
        elif choice == "5":
            list_tables()
        elif choice == "6":
            repack_current_day()
        elif choice == "7":
            try:
                party_size = int(input("Party size: "))
            except ValueError:
                print("Please enter a valid number.")
                continue
            show_available_times(party_size)
        elif choice == "8":
            show_day_summary()
        elif choice == "9":
            print("Goodbye!")
            break
        else:
            print("Please enter a number between 1 and 9.")


if __name__ == "__main__":
    main()
