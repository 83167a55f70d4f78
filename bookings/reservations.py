"""
Turning a held seat into a reservation.

create_reservation() is the only way a seat leaves the hold state for a
reservation. Everything that decides whether the booking is allowed runs
under the seat lock and in one transaction; the ticket email goes out after
the commit.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from accounts.models import User
from bookings.models import PAYMENT_METHOD, Payment, Reservation, reservation_expiry
from bookings.notifications import deliver_ticket
from bookings.qr import render_reservation_qr, save_qr_to_file
from inventory.expiry import reclaim_if_expired
from inventory.locks import lock_seat, seat_lock
from inventory.models import Seat
from SeatDesk.exceptions import (
    DuplicateReservationError,
    EventInPastError,
    EventNotBookableError,
    HoldExpiredError,
    InvalidError,
    PaymentMethodRequiredError,
    PermissionDeniedError,
    PersistenceError,
    ReservationNotFoundError,
    SeatEventMismatchError,
    SeatNotHeldError,
    SeatUnavailableError,
)

logger = logging.getLogger(__name__)


def active_reservations():
    return Reservation.objects.filter(status__in=Reservation.ACTIVE_STATUSES)


def _check_bookable(seat, actor, event_id, now):
    """Validation of a seat whose hold is still live, in reporting order"""
    if seat.held_by_id and seat.held_by_id != actor.user_id:
        raise SeatNotHeldError("Seat is held by another user")
    if str(seat.event_id_id) != str(event_id):
        raise SeatEventMismatchError()

    event = seat.event_id
    if not event.is_published():
        raise EventNotBookableError()
    if event.has_started(now):
        raise EventInPastError()

    if active_reservations().filter(seat_id=seat.seat_id).exists():
        raise SeatUnavailableError("Seat already has an active reservation")
    if active_reservations().filter(user_id=actor.user_id, event_id=event.events_id).exists():
        raise DuplicateReservationError()


def _reserve(seat, user, payment_method, payment_reference, now):
    event = seat.event_id
    total = seat.price_cents
    is_free = total == 0

    reservation = Reservation(
        user_id=user,
        event_id=event,
        seat_id=seat,
        status=Reservation.RESERVATION_STATUS.CONFIRMED if is_free else Reservation.RESERVATION_STATUS.PENDING,
        total_amount_cents=total,
        payment_status=Reservation.PAYMENT_STATUS.PAID if is_free else Reservation.PAYMENT_STATUS.PENDING,
        payment_method=PAYMENT_METHOD.FREE if is_free else payment_method,
        payment_reference=payment_reference or "",
        expires_at=reservation_expiry(total, now),
    )
    reservation.save()

    # A pending reservation owns the seat: still RESERVED, but no longer a hold
    seat.status = Seat.SEAT_STATUS.SOLD if is_free else Seat.SEAT_STATUS.RESERVED
    seat.is_reserved = True
    seat.hold_expiry = None
    seat.held_by = None
    seat.save(update_fields=Seat.HOLD_FIELDS)

    reservation.qr_code = render_reservation_qr(reservation, seat, event, user.name)
    if reservation.qr_code:
        reservation.save(update_fields=["qr_code", "updated_at"])

    if is_free:
        Payment.objects.create(
            reservation_id=reservation,
            amount_cents=0,
            payment_method=PAYMENT_METHOD.FREE,
            status=Payment.PAYMENT_RECORD_STATUS.COMPLETED,
            processed_at=now,
        )

    return reservation


def create_reservation(actor, event_id, seat_id, payment_method=None, payment_reference=None, now=None):
    """
    Convert the actor's live hold on a seat into a reservation.

    Free seats are confirmed and sold immediately; priced seats become a
    PENDING reservation awaiting staff approval.

    Raises:
        SeatNotFoundError: the seat does not exist.
        SeatNotHeldError: the seat carries no live hold for the actor.
        HoldExpiredError: the hold lapsed; the seat has been reclaimed.
        SeatEventMismatchError: the seat belongs to another event.
        EventNotBookableError, EventInPastError: the event cannot be booked.
        SeatUnavailableError, DuplicateReservationError: an active reservation exists.
        PaymentMethodRequiredError: a priced seat without a non-free payment method.
        PersistenceError: the database rejected the write; nothing was saved.
    """
    now = now or timezone.now()
    hold_expired = False

    with seat_lock(seat_id):
        try:
            with transaction.atomic():
                seat = lock_seat(seat_id)
                if not seat.is_held():
                    raise SeatNotHeldError()

                if seat.hold_has_expired(now):
                    # Committed before HoldExpiredError is raised below
                    reclaim_if_expired(seat, now)
                    hold_expired = True
                else:
                    # The user row lock serializes one user's bookings across seats
                    try:
                        user = User.objects.select_for_update().get(user_id=actor.user_id)
                    except User.DoesNotExist:
                        raise PermissionDeniedError("Unknown user")
                    _check_bookable(seat, actor, event_id, now)
                    if seat.price_cents and payment_method in (None, PAYMENT_METHOD.FREE):
                        raise PaymentMethodRequiredError()
                    reservation = _reserve(seat, user, payment_method, payment_reference, now)
        except DatabaseError as e:
            logger.error("[Reservation] write failed for seat %s: %s", seat_id, e, exc_info=e)
            raise PersistenceError() from e

    if hold_expired:
        raise HoldExpiredError()

    logger.info(
        "[Reservation] %s created for seat %s by %s (%s)",
        reservation.reservation_code, seat.seat_id, actor.user_id,
        Reservation.RESERVATION_STATUS(reservation.status).name,
    )

    if reservation.qr_code and getattr(settings, 'SAVE_QR_FILES', False):
        save_qr_to_file(reservation.qr_code, reservation.reservation_code)
    deliver_ticket(reservation, user, seat.event_id, seat)
    return reservation


def get_own_reservation(reservation_id, actor):
    """A reservation of the actor with its event, seat and payments"""
    try:
        return (
            Reservation.objects.select_related("event_id", "seat_id")
            .prefetch_related("payments")
            .get(reservation_id=reservation_id, user_id=actor.user_id)
        )
    except Reservation.DoesNotExist:
        raise ReservationNotFoundError()


def reservation_qr(reservation_id, actor):
    """Return (qr_code, reservation_code) of an active reservation of the actor"""
    reservation = active_reservations().filter(
        reservation_id=reservation_id, user_id=actor.user_id
    ).first()
    if reservation is None:
        raise ReservationNotFoundError("Reservation not found or not accessible")
    if not reservation.qr_code:
        raise InvalidError("QR code not available for this reservation")
    return reservation.qr_code, reservation.reservation_code
