"""Concurrent holds and reservations on the same seats.

These run in real transactions with one database connection per thread.
Run with: pytest tests/test_concurrency.py -v
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from django.db import connection
from django.utils import timezone

from bookings.models import Reservation
from bookings.reservations import create_reservation
from inventory import locks
from inventory.expiry import reclaim_expired_holds
from inventory.holds import hold_seat, release_seat
from inventory.models import Seat
from SeatDesk.context import Actor
from SeatDesk.exceptions import DomainError
from tests.helpers import create_user, reload

WORKERS = 8


def run_concurrently(func, args_list):
    """Run func over args_list in threads; returns results or raised DomainErrors."""
    def call(args):
        try:
            return func(*args)
        except DomainError as e:
            return e
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        return list(pool.map(call, args_list))


@pytest.mark.django_db(transaction=True)
class TestConcurrentHolds:

    def test_exactly_one_hold_wins(self, seat):
        actors = [Actor.from_user(create_user(f"racer{i}@example.com")) for i in range(WORKERS)]

        results = run_concurrently(hold_seat, [(seat.seat_id, actor) for actor in actors])

        winners = [r for r in results if isinstance(r, Seat)]
        losers = [r for r in results if isinstance(r, DomainError)]
        assert len(winners) == 1
        assert len(losers) == WORKERS - 1
        assert all(e.__class__.__name__ == "SeatUnavailableError" for e in losers)
        assert reload(seat).held_by_id == winners[0].held_by_id
        assert locks._seat_mutexes == {}

    def test_release_and_reclaim_converge(self, make_seat, actor):
        """Releases racing the reconciler always end with available seats."""
        now = timezone.now()
        seats = [make_seat(seat_number=n) for n in range(1, WORKERS + 1)]
        for seat in seats:
            hold_seat(seat.seat_id, actor, now=now - timedelta(minutes=9, seconds=59))

        # The holds lapse a second from now; some releases see them live, some not
        later = now + timedelta(seconds=1)
        jobs = [(seat.seat_id, actor, later if i % 2 else now) for i, seat in enumerate(seats)]
        run_concurrently(release_seat, jobs)
        reclaim_expired_holds(now=later)

        assert Seat.objects.filter(status=Seat.SEAT_STATUS.AVAILABLE).count() == WORKERS


@pytest.mark.django_db(transaction=True)
class TestConcurrentReservations:

    def test_one_reservation_per_seat(self, event, seat, actor):
        hold_seat(seat.seat_id, actor)

        results = run_concurrently(
            create_reservation,
            [(actor, event.events_id, seat.seat_id) for _ in range(WORKERS)],
        )

        created = [r for r in results if isinstance(r, Reservation)]
        assert len(created) == 1
        assert Reservation.objects.filter(seat_id=seat).count() == 1
        assert reload(seat).status == Seat.SEAT_STATUS.SOLD

    def test_one_reservation_per_user_and_event(self, event, make_seat, actor):
        seats = [make_seat(seat_number=n) for n in range(1, WORKERS + 1)]
        for seat in seats:
            hold_seat(seat.seat_id, actor)

        results = run_concurrently(
            create_reservation,
            [(actor, event.events_id, seat.seat_id) for seat in seats],
        )

        created = [r for r in results if isinstance(r, Reservation)]
        assert len(created) == 1
        assert all(
            r.__class__.__name__ == "DuplicateReservationError"
            for r in results if isinstance(r, DomainError)
        )
        assert Reservation.objects.filter(user_id=actor.user_id, event_id=event).count() == 1
        assert Seat.objects.filter(status=Seat.SEAT_STATUS.SOLD).count() == 1

    def test_contended_seats_are_never_double_sold(self, event, make_seat):
        """Many users race for holds and reservations on a few seats."""
        seats = [make_seat(seat_number=n) for n in range(1, 4)]
        actors = [Actor.from_user(create_user(f"fan{i}@example.com")) for i in range(WORKERS)]

        def hold_and_reserve(actor, seat):
            hold_seat(seat.seat_id, actor)
            return create_reservation(actor, event.events_id, seat.seat_id)

        results = run_concurrently(
            hold_and_reserve,
            [(actor, seats[i % len(seats)]) for i, actor in enumerate(actors)],
        )

        created = [r for r in results if isinstance(r, Reservation)]
        assert len(created) == len(seats)
        for seat in seats:
            assert Reservation.objects.filter(seat_id=seat).count() == 1
            assert reload(seat).status == Seat.SEAT_STATUS.SOLD


class TestSeatMutexRegistry:
    """Per-seat mutexes exist only while some thread uses them."""

    def test_entry_dropped_after_release(self):
        with locks._seat_mutex("seat-1"):
            assert "seat-1" in locks._seat_mutexes
        assert locks._seat_mutexes == {}

    def test_entry_kept_while_a_waiter_queues(self):
        entered = threading.Event()
        order = []

        def waiter():
            entered.set()
            with locks._seat_mutex("seat-1"):
                order.append("waiter")

        with locks._seat_mutex("seat-1"):
            thread = threading.Thread(target=waiter)
            thread.start()
            entered.wait()
            order.append("holder")
        thread.join()

        assert order == ["holder", "waiter"]
        assert locks._seat_mutexes == {}

    def test_exceptions_release_the_entry(self):
        with pytest.raises(RuntimeError):
            with locks._seat_mutex("seat-2"):
                raise RuntimeError("boom")
        assert locks._seat_mutexes == {}
