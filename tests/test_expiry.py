"""Tests for lazy reclamation of lapsed holds.

Run with: pytest tests/test_expiry.py -v
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from django.utils import timezone

from inventory.expiry import list_seats, reclaim_expired_holds, seat_statistics
from inventory.holds import hold_seat
from inventory.layout import generate_seats, row_letters
from inventory.models import Seat
from SeatDesk.exceptions import EventNotFoundError
from tests.helpers import reload


@pytest.mark.django_db
class TestReclaimExpiredHolds:

    def test_only_lapsed_holds_are_reclaimed(self, make_seat, actor):
        now = timezone.now()
        lapsed = make_seat(seat_number=1)
        live = make_seat(seat_number=2)
        owned = make_seat(seat_number=3, status=Seat.SEAT_STATUS.RESERVED, is_reserved=True)
        hold_seat(lapsed.seat_id, actor, now=now - timedelta(minutes=15))
        hold_seat(live.seat_id, actor, now=now)

        assert reclaim_expired_holds(now=now) == 1

        assert reload(lapsed).status == Seat.SEAT_STATUS.AVAILABLE
        assert reload(lapsed).held_by_id is None
        assert reload(live).status == Seat.SEAT_STATUS.RESERVED
        # Owned by a pending reservation, so never touched
        assert reload(owned).status == Seat.SEAT_STATUS.RESERVED

    def test_idempotent(self, seat, actor):
        now = timezone.now()
        hold_seat(seat.seat_id, actor, now=now - timedelta(minutes=15))
        assert reclaim_expired_holds(now=now) == 1
        assert reclaim_expired_holds(now=now) == 0

    def test_scoped_to_event(self, make_event, make_seat, actor):
        now = timezone.now()
        other_event = make_event(event_name="Autumn Gala")
        here = make_seat(seat_number=1)
        there = make_seat(seat_number=1, for_event=other_event)
        hold_seat(here.seat_id, actor, now=now - timedelta(minutes=15))
        hold_seat(there.seat_id, actor, now=now - timedelta(minutes=15))

        assert reclaim_expired_holds(event_id=here.event_id_id, now=now) == 1
        assert reload(there).status == Seat.SEAT_STATUS.RESERVED


@pytest.mark.django_db
class TestListSeats:

    def test_reading_reclaims_lapsed_holds(self, event, seat, actor):
        hold_seat(seat.seat_id, actor, now=timezone.now() - timedelta(minutes=15))

        _, seats = list_seats(event.events_id)

        assert [s.status for s in seats] == [Seat.SEAT_STATUS.AVAILABLE]

    def test_ordering(self, event, make_seat):
        make_seat(section="balcony", row_label="A", seat_number=1)
        make_seat(section="orchestra", row_label="B", seat_number=1)
        make_seat(section="orchestra", row_label="A", seat_number=2)
        make_seat(section="orchestra", row_label="A", seat_number=1)

        _, seats = list_seats(event.events_id)

        assert [s.seat_label for s in seats] == [
            "BALCONY-A1", "ORCHESTRA-A1", "ORCHESTRA-A2", "ORCHESTRA-B1",
        ]

    def test_double_letter_rows_follow_z(self, event, make_seat):
        for row in ("AA", "Z", "AB", "B", "A"):
            make_seat(row_label=row)

        _, seats = list_seats(event.events_id)

        assert [s.row_label for s in seats] == ["A", "B", "Z", "AA", "AB"]

    def test_generated_large_layout_reads_in_row_order(self, event):
        generate_seats(event.events_id, 999, venue_capacity=999)
        _, seats = list_seats(event.events_id)

        orchestra_rows = []
        for s in seats:
            if s.section == "orchestra" and s.row_label not in orchestra_rows:
                orchestra_rows.append(s.row_label)
        assert orchestra_rows == [row_letters(i) for i in range(1, len(orchestra_rows) + 1)]
        assert "AA" in orchestra_rows

    def test_unknown_event(self, db):
        with pytest.raises(EventNotFoundError):
            list_seats(uuid4())


@pytest.mark.django_db
class TestSeatStatistics:

    def test_counts_and_occupancy(self, make_seat):
        make_seat(seat_number=1)
        make_seat(seat_number=2, status=Seat.SEAT_STATUS.RESERVED, is_reserved=True)
        make_seat(seat_number=3, status=Seat.SEAT_STATUS.SOLD, is_reserved=True, is_vip=True)

        stats = seat_statistics(list(Seat.objects.all()))

        assert stats == {
            'total_seats': 3,
            'available_seats': 1,
            'reserved_seats': 1,
            'sold_seats': 1,
            'vip_seats': 1,
            'occupancy_rate': "66.67",
        }

    def test_empty_event(self):
        assert seat_statistics([])['occupancy_rate'] == "0.00"
