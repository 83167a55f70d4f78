"""
Reservation state changes after creation.

Each operation takes the seat lock, then row-locks the seat and the
reservation inside one transaction, so a reservation and the seat it owns
always change together. Ticket emails go out after the commit.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from bookings.models import Payment, Reservation
from bookings.notifications import deliver_ticket, send_ticket_email
from bookings.qr import render_reservation_qr
from inventory.locks import lock_seat, seat_lock
from inventory.models import Seat
from SeatDesk.exceptions import (
    CancellationWindowClosedError,
    DomainError,
    EventInPastError,
    InternalError,
    ReservationNotFoundError,
    ReservationStateError,
)

logger = logging.getLogger(__name__)

BULK_APPROVE_MAX = 2000


def _seat_id_of(reservation_id, user_id=None):
    reservations = Reservation.objects.filter(reservation_id=reservation_id)
    if user_id is not None:
        reservations = reservations.filter(user_id=user_id)
    seat_id = reservations.values_list("seat_id", flat=True).first()
    if seat_id is None:
        raise ReservationNotFoundError()
    return seat_id


def _lock_reservation(reservation_id):
    try:
        return (
            Reservation.objects.select_for_update(of=("self",))
            .select_related("user_id")
            .get(reservation_id=reservation_id)
        )
    except Reservation.DoesNotExist:
        raise ReservationNotFoundError()


def _free_seat(seat):
    seat.clear_hold()
    seat.save(update_fields=Seat.HOLD_FIELDS)


def ensure_qr_code(reservation, seat, event):
    """Regenerate a missing QR code; returns whether one is now stored"""
    if reservation.qr_code:
        return True
    reservation.qr_code = render_reservation_qr(reservation, seat, event, reservation.user_id.name)
    if not reservation.qr_code:
        return False
    reservation.save(update_fields=["qr_code", "updated_at"])
    return True


def approve_reservation(reservation_id, actor, now=None):
    """
    Confirm a pending reservation and mark its seat sold.

    Raises:
        StaffOnlyError: the actor is not ADMIN or STAFF.
        ReservationNotFoundError: no such reservation.
        ReservationStateError: the reservation is not pending.
        EventInPastError: the event has already started.
    """
    actor.require_staff()
    now = now or timezone.now()
    seat_id = _seat_id_of(reservation_id)

    with seat_lock(seat_id), transaction.atomic():
        seat = lock_seat(seat_id)
        reservation = _lock_reservation(reservation_id)

        if reservation.status != Reservation.RESERVATION_STATUS.PENDING:
            raise ReservationStateError("Only pending reservations can be approved")
        event = seat.event_id
        if event.has_started(now):
            raise EventInPastError("Cannot approve reservations for past events")

        reservation.status = Reservation.RESERVATION_STATUS.CONFIRMED
        if reservation.total_amount_cents == 0:
            reservation.payment_status = Reservation.PAYMENT_STATUS.PAID
        reservation.save(update_fields=["status", "payment_status", "updated_at"])

        seat.status = Seat.SEAT_STATUS.SOLD
        seat.is_reserved = True
        seat.hold_expiry = None
        seat.held_by = None
        seat.save(update_fields=Seat.HOLD_FIELDS)

    logger.info("[Reservation] %s approved by %s", reservation.reservation_code, actor.user_id)

    ensure_qr_code(reservation, seat, event)
    if not reservation.email_sent:
        deliver_ticket(reservation, reservation.user_id, event, seat)
    return reservation


def reject_reservation(reservation_id, actor, now=None):
    """
    Cancel a pending reservation on staff decision and free its seat.
    Paid money is marked refunded on the reservation and its payments.
    """
    actor.require_staff()
    now = now or timezone.now()
    seat_id = _seat_id_of(reservation_id)

    with seat_lock(seat_id), transaction.atomic():
        seat = lock_seat(seat_id)
        reservation = _lock_reservation(reservation_id)

        if reservation.status != Reservation.RESERVATION_STATUS.PENDING:
            raise ReservationStateError("Only pending reservations can be rejected")

        reservation.status = Reservation.RESERVATION_STATUS.CANCELLED
        if reservation.payment_status == Reservation.PAYMENT_STATUS.PAID:
            reservation.payment_status = Reservation.PAYMENT_STATUS.REFUNDED
            Payment.objects.filter(
                reservation_id=reservation.reservation_id,
                status=Payment.PAYMENT_RECORD_STATUS.COMPLETED,
            ).update(
                status=Payment.PAYMENT_RECORD_STATUS.REFUNDED,
                refunded_at=now,
                refund_amount_cents=F("amount_cents"),
            )
        reservation.save(update_fields=["status", "payment_status", "updated_at"])
        _free_seat(seat)

    logger.info("[Reservation] %s rejected by %s", reservation.reservation_code, actor.user_id)
    return reservation


def cancellation_deadline(event):
    return event.event_date - timedelta(hours=getattr(settings, 'CANCELLATION_CUTOFF_HOURS', 2))


def cancel_reservation(reservation_id, actor, now=None):
    """
    Cancel one of the actor's own reservations and free the seat.

    Raises:
        ReservationNotFoundError: no such reservation for this actor.
        ReservationStateError: already cancelled, expired or used.
        CancellationWindowClosedError: the event starts within the cutoff.
    """
    now = now or timezone.now()
    seat_id = _seat_id_of(reservation_id, user_id=actor.user_id)

    with seat_lock(seat_id), transaction.atomic():
        seat = lock_seat(seat_id)
        reservation = _lock_reservation(reservation_id)

        if reservation.status == Reservation.RESERVATION_STATUS.CANCELLED:
            raise ReservationStateError("Reservation is already cancelled")
        if reservation.status == Reservation.RESERVATION_STATUS.USED:
            raise ReservationStateError("Cannot cancel used tickets")
        if not reservation.is_active():
            raise ReservationStateError()
        if now >= cancellation_deadline(seat.event_id):
            raise CancellationWindowClosedError()

        reservation.status = Reservation.RESERVATION_STATUS.CANCELLED
        reservation.save(update_fields=["status", "updated_at"])
        _free_seat(seat)

    logger.info("[Reservation] %s cancelled by owner %s", reservation.reservation_code, actor.user_id)
    return reservation


def bulk_approve_reservations(event_id, actor, limit=1000, now=None):
    """
    Approve an event's pending reservations, oldest first.

    Every reservation is approved in its own transaction; one failure does
    not stop the batch.
    """
    actor.require_staff()
    now = now or timezone.now()
    limit = max(1, min(int(limit or 1000), BULK_APPROVE_MAX))

    pending_ids = list(
        Reservation.objects.filter(
            event_id=event_id,
            status=Reservation.RESERVATION_STATUS.PENDING,
        ).order_by("created_at").values_list("reservation_id", flat=True)[:limit]
    )

    approved = 0
    for reservation_id in pending_ids:
        try:
            approve_reservation(reservation_id, actor, now=now)
            approved += 1
        except EventInPastError:
            continue
        except (DomainError, DatabaseError) as e:
            logger.error("[Bulk-Approve] reservation %s failed: %s", reservation_id, e)

    logger.info("[Bulk-Approve] event %s: approved %s of %s", event_id, approved, len(pending_ids))
    return {'approved': approved, 'attempted': len(pending_ids)}


def resend_ticket_email(reservation_id, actor):
    """
    Send the ticket email again on the owner's request.

    Unlike the automatic sends, a delivery failure is reported to the caller.
    """
    try:
        reservation = (
            Reservation.objects.select_related("user_id", "event_id__venue_id", "seat_id")
            .get(reservation_id=reservation_id, user_id=actor.user_id)
        )
    except Reservation.DoesNotExist:
        raise ReservationNotFoundError()

    if not reservation.is_active():
        raise ReservationStateError("Only pending or confirmed reservations have a ticket")

    seat = reservation.seat_id
    event = reservation.event_id
    ensure_qr_code(reservation, seat, event)

    try:
        send_ticket_email(
            to=reservation.user_id.email,
            user_name=reservation.user_id.name,
            reservation=reservation,
            event=event,
            seat=seat,
            qr_code=reservation.qr_code,
        )
    except Exception as e:
        logger.warning("[Email] resend of %s failed: %s", reservation.reservation_code, e)
        raise InternalError("Failed to send the ticket email") from e

    if not reservation.email_sent:
        reservation.email_sent = True
        reservation.save(update_fields=["email_sent", "updated_at"])
    return reservation
