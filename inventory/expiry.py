"""
Lazy reclamation of lapsed seat holds.

There is no background sweeper. A hold whose hold_expiry has passed is reset
to AVAILABLE the next time anything reads or touches the seat: a seat list
for its event, a hold attempt or a reservation attempt on it.
"""
import logging

from django.db.models.functions import Length
from django.utils import timezone

from events.models import Events
from inventory.models import Seat
from SeatDesk.exceptions import EventNotFoundError

logger = logging.getLogger(__name__)


def reclaim_expired_holds(event_id=None, now=None):
    """
    Reset every lapsed hold (optionally of one event) to available.

    A single conditional UPDATE, so it is idempotent and converges with a
    concurrent release of the same seat. Seats owned by a pending reservation
    have no hold_expiry and are never touched.
    """
    now = now or timezone.now()
    expired = Seat.objects.filter(
        status=Seat.SEAT_STATUS.RESERVED,
        hold_expiry__isnull=False,
        hold_expiry__lte=now,
    )
    if event_id is not None:
        expired = expired.filter(event_id=event_id)

    reclaimed = expired.update(
        status=Seat.SEAT_STATUS.AVAILABLE,
        is_reserved=False,
        hold_expiry=None,
        held_by=None,
        updated_at=now,
    )
    if reclaimed:
        logger.info("[Seat-Expiry] reclaimed %s lapsed hold(s) for event %s", reclaimed, event_id or "*")
    return reclaimed


def reclaim_if_expired(seat, now=None):
    """Reset a seat loaded under its row lock if its hold has lapsed"""
    if not seat.hold_has_expired(now):
        return False
    seat.clear_hold()
    seat.save(update_fields=Seat.HOLD_FIELDS)
    logger.info("[Seat-Expiry] reclaimed lapsed hold on seat %s", seat.seat_id)
    return True


def list_seats(event_id, now=None):
    """Return (event, seats) after reclaiming the event's lapsed holds"""
    try:
        event = Events.objects.get(events_id=event_id)
    except Events.DoesNotExist:
        raise EventNotFoundError()

    reclaim_expired_holds(event_id=event.events_id, now=now)
    return event, list(
        Seat.objects.filter(event_id=event.events_id)
        .order_by("section", Length("row_label"), "row_label", "seat_number")
    )


def seat_statistics(seats):
    total = len(seats)
    available = sum(1 for seat in seats if seat.status == Seat.SEAT_STATUS.AVAILABLE)
    reserved = sum(1 for seat in seats if seat.status == Seat.SEAT_STATUS.RESERVED)
    sold = sum(1 for seat in seats if seat.status == Seat.SEAT_STATUS.SOLD)
    occupancy = (reserved + sold) / total * 100 if total else 0

    return {
        'total_seats': total,
        'available_seats': available,
        'reserved_seats': reserved,
        'sold_seats': sold,
        'vip_seats': sum(1 for seat in seats if seat.is_vip),
        'occupancy_rate': f"{occupancy:.2f}",
    }
