"""
QR ticket payloads.

The encoder is pluggable through settings.QR_ENCODER: any callable taking the
payload dict and returning a data URL.
"""
import base64
import binascii
import io
import json
import logging
import re

import qrcode
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.utils import timezone
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

DATA_URL_RE = re.compile(r'^data:(image/[\w.+-]+);base64,(.+)$')


def build_qr_payload(reservation, seat, event, user_name):
    return {
        'reservationId': str(reservation.reservation_id),
        'reservationCode': reservation.reservation_code,
        'eventId': str(event.events_id),
        'seatInfo': seat.seat_label,
        'userName': user_name,
        'eventTitle': event.event_name,
    }


def encode_qr(payload):
    """Render the payload as a PNG QR code data URL"""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=1,
    )
    qr.add_data(json.dumps(payload))
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def get_qr_encoder():
    return import_string(getattr(settings, 'QR_ENCODER', 'bookings.qr.encode_qr'))


def render_reservation_qr(reservation, seat, event, user_name):
    """
    Encode the ticket QR, or return "" when the encoder fails.

    A missing QR code is regenerated on approval or when the ticket email is
    resent, so it never blocks the reservation itself.
    """
    try:
        return get_qr_encoder()(build_qr_payload(reservation, seat, event, user_name))
    except Exception as e:
        logger.warning("[QR] encoding failed for %s: %s", reservation.reservation_code, e)
        return ""


def decode_data_url(data_url):
    """Return (mime, bytes) for a base64 image data URL, or None"""
    if not data_url or not isinstance(data_url, str):
        return None
    match = DATA_URL_RE.match(data_url)
    if not match:
        return None
    try:
        return match.group(1), base64.b64decode(match.group(2))
    except (binascii.Error, ValueError):
        return None


def save_qr_to_file(data_url, reservation_code):
    """Store a QR data URL under qrcodes/ in default storage; best-effort"""
    decoded = decode_data_url(data_url)
    if decoded is None:
        return None
    mime, content = decoded
    extension = (mime.split("/")[1] or "png").lower()
    filename = f"qrcodes/qr_{reservation_code}_{int(timezone.now().timestamp() * 1000)}.{extension}"
    try:
        return default_storage.save(filename, ContentFile(content))
    except OSError as e:
        logger.warning("[QR] saving %s failed: %s", filename, e)
        return None
