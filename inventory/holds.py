"""
Time-boxed seat holds.

A hold is RESERVED + hold_expiry + held_by on the seat row itself. Manual
release and lazy reclamation are separate paths: release only acts on a live
hold, reclamation only on a lapsed one, and both write conditionally so the
seat ends AVAILABLE whichever runs first.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from inventory.expiry import reclaim_if_expired
from inventory.locks import lock_seat, seat_lock
from inventory.models import Seat
from SeatDesk.exceptions import (
    EventInPastError,
    EventNotBookableError,
    HoldOwnershipError,
    SeatNotReleasableError,
    SeatUnavailableError,
)

logger = logging.getLogger(__name__)


def hold_duration():
    return timedelta(minutes=getattr(settings, 'SEAT_HOLD_MINUTES', 10))


def hold_seat(seat_id, actor, now=None):
    """
    Place a hold on an available seat for the actor.

    Raises:
        SeatNotFoundError: the seat does not exist.
        SeatUnavailableError: the seat is held, reserved, sold or blocked.
        EventNotBookableError: the event is not published.
        EventInPastError: the event has already started.
    """
    now = now or timezone.now()

    with seat_lock(seat_id), transaction.atomic():
        seat = lock_seat(seat_id)
        reclaim_if_expired(seat, now)

        if seat.status != Seat.SEAT_STATUS.AVAILABLE or seat.is_reserved:
            raise SeatUnavailableError()

        event = seat.event_id
        if not event.is_published():
            raise EventNotBookableError()
        if event.has_started(now):
            raise EventInPastError()

        seat.status = Seat.SEAT_STATUS.RESERVED
        seat.is_reserved = True
        seat.hold_expiry = now + hold_duration()
        seat.held_by_id = actor.user_id
        seat.save(update_fields=Seat.HOLD_FIELDS)

    logger.info("[Seat-Hold] seat %s held by %s until %s", seat.seat_id, actor.user_id, seat.hold_expiry.isoformat())
    return seat


def release_seat(seat_id, actor, now=None):
    """
    Release a live hold.

    A lapsed hold is not releasable here; the expiry reconciler owns it.

    Raises:
        SeatNotFoundError: the seat does not exist.
        SeatNotReleasableError: the seat carries no live hold.
        HoldOwnershipError: the hold belongs to someone else and the actor is not staff.
    """
    now = now or timezone.now()

    with seat_lock(seat_id), transaction.atomic():
        seat = lock_seat(seat_id)

        if not seat.hold_is_active(now):
            raise SeatNotReleasableError()
        if seat.held_by_id and seat.held_by_id != actor.user_id and not actor.is_staff:
            raise HoldOwnershipError()

        released = Seat.objects.filter(
            seat_id=seat.seat_id,
            status=Seat.SEAT_STATUS.RESERVED,
            hold_expiry__gt=now,
        ).update(
            status=Seat.SEAT_STATUS.AVAILABLE,
            is_reserved=False,
            hold_expiry=None,
            held_by=None,
            updated_at=now,
        )
        if not released:
            raise SeatNotReleasableError()
        seat.clear_hold()

    logger.info("[Seat-Hold] seat %s released by %s", seat.seat_id, actor.user_id)
    return seat
