"""Ticket email delivery on top of Django's email framework."""
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from bookings.qr import decode_data_url

logger = logging.getLogger(__name__)


def send_ticket_email(to, user_name, reservation, event, seat, qr_code=None):
    """
    Send the ticket confirmation. Raises on delivery failure; callers decide
    whether that is fatal.
    """
    context = {
        'user_name': user_name,
        'reservation_code': reservation.reservation_code,
        'status': reservation.RESERVATION_STATUS(reservation.status).name,
        'event_name': event.event_name,
        'event_date': timezone.localtime(event.event_date).strftime("%A, %B %d, %Y %I:%M %p"),
        'venue_name': event.venue_name,
        'seat_label': seat.seat_label,
        'is_vip': seat.is_vip,
        'has_qr': bool(decode_data_url(qr_code)),
    }
    subject = f"Ticket Confirmation - {event.event_name} | {reservation.reservation_code}"

    message = EmailMultiAlternatives(
        subject=subject,
        body=render_to_string('bookings/ticket_email.txt', context),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to],
    )
    message.attach_alternative(render_to_string('bookings/ticket_email.html', context), "text/html")

    decoded = decode_data_url(qr_code)
    if decoded:
        mime, content = decoded
        message.attach(f"ticket-{reservation.reservation_code}.png", content, mime)

    message.send(fail_silently=False)
    logger.info("[Email] ticket %s sent to %s", reservation.reservation_code, to)


def deliver_ticket(reservation, user, event, seat):
    """
    Best-effort ticket delivery after a commit. Marks email_sent only when
    the mail went out; failures are logged and swallowed.
    """
    try:
        send_ticket_email(
            to=user.email,
            user_name=user.name,
            reservation=reservation,
            event=event,
            seat=seat,
            qr_code=reservation.qr_code,
        )
    except Exception as e:
        logger.warning("[Email] ticket %s to %s failed: %s", reservation.reservation_code, user.email, e)
        return False

    reservation.email_sent = True
    reservation.save(update_fields=["email_sent", "updated_at"])
    return True
