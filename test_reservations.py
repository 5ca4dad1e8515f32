"""Tests for reservation intake, error kinds and cancellation."""
import copy
import datetime

import pytest

from availability import DEFAULT_TABLES, build_tables
from conftest import make_booking
from reservations import (
    INVALID_PARTY_SIZE,
    MISSING_FIELD,
    NO_CAPACITY,
    NOT_FOUND,
    REQUIRES_MANUAL_REVIEW,
    UNSEATED,
    cancel_reservation,
    create_reservation,
    reserve,
)

DAY = "2025-09-05"
POLICY = {"max_guests_per_reservation": 22}


def request(**overrides):
    base = {"date": DAY, "time": "12:05", "party_size": 4, "name": "Anna Berg"}
    base.update(overrides)
    return base


class TestValidation:

    @pytest.mark.parametrize("overrides, kind, field", [
        ({"name": "   "}, MISSING_FIELD, "name"),
        ({"name": None, "party_size": 0}, MISSING_FIELD, "name"),
        ({"date": None}, MISSING_FIELD, "date"),
        ({"date": "2025-13-01"}, MISSING_FIELD, "date"),
        ({"date": "05/09/2025"}, MISSING_FIELD, "date"),
        ({"time": ""}, MISSING_FIELD, "time"),
        ({"time": "25:00"}, MISSING_FIELD, "time"),
        ({"time": "noon", "party_size": 0}, MISSING_FIELD, "time"),
    ])
    def test_missing_or_malformed_fields(self, overrides, kind, field):
        result = create_reservation(request(**overrides), POLICY, [])
        assert result["ok"] is False
        assert result["error"] == kind
        assert result["field"] == field

    @pytest.mark.parametrize("party_size", [0, -2, "many", None, True])
    def test_invalid_party_size(self, party_size):
        result = create_reservation(request(party_size=party_size), POLICY, [])
        assert result["error"] == INVALID_PARTY_SIZE

    def test_manual_review_leaves_bookings_alone(self):
        existing = [make_booking("Anna", "12:00", 4, table_id=4, duration=90)]
        snapshot = copy.deepcopy(existing)
        result = reserve(request(party_size=30), POLICY, existing)
        assert result["error"] == REQUIRES_MANUAL_REVIEW
        assert "22" in result["message"]
        assert "bookings" not in result
        assert existing == snapshot

    def test_manual_review_checked_before_capacity(self):
        result = create_reservation(request(party_size=23), POLICY, [], build_tables([2]))
        assert result["error"] == REQUIRES_MANUAL_REVIEW

    def test_limit_itself_is_allowed_but_may_not_fit(self):
        result = create_reservation(request(party_size=22), POLICY, [])
        assert result["error"] == NO_CAPACITY

    def test_each_kind_has_its_own_message(self):
        messages = {
            create_reservation(request(name=""), POLICY, [])["message"],
            create_reservation(request(party_size=0), POLICY, [])["message"],
            create_reservation(request(party_size=40), POLICY, [])["message"],
            create_reservation(request(party_size=8), POLICY, [])["message"],
        }
        assert len(messages) == 4


class TestCreateReservation:

    def test_fit_found(self):
        result = create_reservation(request(), POLICY, [])
        booking = result["booking"]
        assert result["ok"] is True
        assert booking["time"] == "12:00"
        assert booking["duration_minutes"] == 90
        assert booking["table_id"] == 4
        assert booking["name"] == "Anna Berg"
        assert booking["status"] == "confirmed"
        assert booking["source"] == "web"

    def test_conflict_then_next_table(self):
        first = create_reservation(request(), POLICY, [])["booking"]
        second = create_reservation(request(time="12:30", name="Bo"), POLICY, [first])
        assert second["booking"]["table_id"] == 5

    def test_no_capacity(self):
        existing = [
            make_booking(f"Guest {t['id']}", "18:00", 2, table_id=t["id"], duration=120)
            for t in DEFAULT_TABLES
        ]
        snapshot = copy.deepcopy(existing)
        for party_size in (1, 4, 6):
            result = reserve(request(time="18:00", party_size=party_size), POLICY, existing)
            assert result["error"] == NO_CAPACITY
        assert existing == snapshot

    def test_time_shorthand_is_normalised(self):
        booking = create_reservation(request(time="1840"), POLICY, [])["booking"]
        assert booking["time"] == "18:30"
        assert booking["duration_minutes"] == 120

    def test_notes_are_trimmed(self):
        booking = create_reservation(request(notes="  Nut allergy "), POLICY, [])["booking"]
        assert booking["notes"] == "Nut allergy"
        assert create_reservation(request(notes="  "), POLICY, [])["booking"]["notes"] is None

    def test_ids_are_unique(self):
        ids = {create_reservation(request(), POLICY, [])["booking"]["id"] for _ in range(20)}
        assert len(ids) == 20

    def test_unpadded_date_sees_the_same_day(self):
        existing = [make_booking("Anna", "12:00", 4, table_id=4, duration=90)]
        result = create_reservation(request(date="2025-9-5", name="Bo"), POLICY, existing)
        assert result["booking"]["date"] == DAY
        assert result["booking"]["table_id"] == 5

        seated = reserve(request(date="2025-09-5", name="Bo"), POLICY, existing)
        assert {b["date"] for b in seated["bookings"]} == {DAY}
        assert sorted(b["table_id"] for b in seated["bookings"]) == [4, 5]

    def test_date_object_is_accepted(self):
        result = create_reservation(request(date=datetime.date(2025, 9, 5)), POLICY, [])
        assert result["ok"] is True
        assert result["booking"]["date"] == DAY


class TestReserve:

    def test_new_booking_is_repacked_into_the_day(self):
        existing = [make_booking("Wide", "12:00", 2, table_id=4, duration=90)]
        result = reserve(request(party_size=2, name="Narrow"), POLICY, existing)
        assert result["ok"] is True
        seated = {b["name"]: b["table_id"] for b in result["bookings"]}
        assert seated == {"Wide": 1, "Narrow": 2}
        assert result["booking"]["table_id"] == 2
        assert result["warnings"] == []
        assert existing[0]["table_id"] == 4

    def test_unseated_bookings_are_reported(self):
        tables = build_tables([2])
        existing = [
            make_booking("Seated", "12:00", 2, table_id=1),
            make_booking("Left over", "12:00", 2),
        ]
        result = reserve(request(time="18:00", party_size=2, name="Evening"), POLICY, existing, tables)
        assert result["ok"] is True
        assert result["booking"]["table_id"] == 1
        assert [w["booking_id"] for w in result["warnings"]] == ["left-over"]
        assert result["warnings"][0]["error"] == UNSEATED
        assert "Left over" in result["warnings"][0]["message"]

    def test_other_dates_pass_through(self):
        other = make_booking("Tomorrow", "12:00", 4, table_id=4, date="2025-09-06", duration=90)
        result = reserve(request(), POLICY, [other])
        assert other in result["bookings"]
        assert len(result["bookings"]) == 2


class TestCancelReservation:

    def test_cancel_repacks_remaining(self):
        tables = build_tables([2, 4])
        bookings = [
            make_booking("Keep", "12:00", 2, table_id=2, duration=90),
            make_booking("Drop", "12:00", 2, table_id=1, duration=90),
        ]
        result = cancel_reservation(DAY, "drop", bookings, tables)
        assert result["ok"] is True
        assert result["removed"]["name"] == "Drop"
        assert [(b["name"], b["table_id"]) for b in result["bookings"]] == [("Keep", 1)]

    def test_cancel_unknown_booking(self):
        result = cancel_reservation(DAY, "nobody", [make_booking("A", "12:00", 2)])
        assert result["ok"] is False
        assert result["error"] == NOT_FOUND

    def test_cancel_only_matches_the_given_date(self):
        bookings = [make_booking("A", "12:00", 2, date="2025-09-06")]
        assert cancel_reservation(DAY, "a", bookings)["error"] == NOT_FOUND

    def test_cancel_with_unpadded_date(self):
        bookings = [make_booking("A", "12:00", 2, table_id=1, duration=90)]
        result = cancel_reservation("2025-9-5", "a", bookings)
        assert result["ok"] is True
        assert result["bookings"] == []
