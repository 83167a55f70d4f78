"""
Seat-level serialization for booking writes.

Every write to a seat's occupancy runs as

    with seat_lock(seat_id), transaction.atomic():
        seat = lock_seat(seat_id)
        ...

On databases with row locks lock_seat() issues SELECT ... FOR UPDATE and
seat_lock() does nothing. SQLite has no row locks, so seat_lock() falls back
to a process-local mutex per seat id, held until after commit.
"""
import threading
from contextlib import contextmanager

from django.db import connection

from inventory.models import Seat
from SeatDesk.exceptions import SeatNotFoundError

_registry_lock = threading.Lock()
# seat id -> [mutex, threads using it]; an entry is dropped when the count hits zero
_seat_mutexes = {}


@contextmanager
def _seat_mutex(seat_id):
    key = str(seat_id)
    with _registry_lock:
        entry = _seat_mutexes.setdefault(key, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _registry_lock:
            entry[1] -= 1
            if not entry[1]:
                del _seat_mutexes[key]


@contextmanager
def seat_lock(seat_id):
    if connection.features.has_select_for_update:
        yield
        return
    with _seat_mutex(seat_id):
        yield


def lock_seat(seat_id):
    """Load a seat and its event under the seat row lock. Call inside a transaction."""
    try:
        return (
            Seat.objects.select_for_update(of=("self",))
            .select_related("event_id")
            .get(seat_id=seat_id)
        )
    except Seat.DoesNotExist:
        raise SeatNotFoundError()
