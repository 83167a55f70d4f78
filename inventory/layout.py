"""
Deterministic seat layout generation.

generate_seats() deletes an event's seats and recreates them, so running it
again with the same arguments yields the same layout instead of duplicates.
It runs at event setup time and is not meant to race with bookings.
"""
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import ProtectedError

from events.models import Events
from inventory.models import Seat
from SeatDesk.exceptions import ConflictError, EventNotFoundError

logger = logging.getLogger(__name__)

VIP_SECTION = "vip"


def clamp(value, minimum, maximum):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return minimum
    return max(minimum, min(maximum, value))


def sections_for_capacity(venue_capacity):
    """Section names and weights; smaller rooms have fewer sections"""
    if venue_capacity >= 1000:
        return [
            ("orchestra", 0.5),
            ("balcony", 0.35),
            ("lodge_left", 0.075),
            ("lodge_right", 0.075),
        ]
    if venue_capacity >= 300:
        return [("orchestra", 0.7), ("balcony", 0.3)]
    return [("orchestra", 1.0)]


def seats_per_row(venue_capacity):
    if venue_capacity >= 1000:
        return 40
    if venue_capacity >= 300:
        return 24
    return 16


def row_letters(index):
    """1 -> A, 26 -> Z, 27 -> AA"""
    label = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        label = chr(65 + remainder) + label
    return label


def build_layout(max_seats, base_price_cents=0, vip_price_cents=0, vip_count=0, venue_capacity=None):
    """
    Return the seat definitions for a layout without touching the database.

    Core seats are split across sections by weight, the last section taking
    the rounding remainder; VIP seats get a section of their own.
    """
    if venue_capacity is None:
        venue_capacity = getattr(settings, 'DEFAULT_VENUE_CAPACITY', 1196)
    total = clamp(max_seats, 1, venue_capacity)
    vip_total = clamp(vip_count, 0, total)
    core_total = total - vip_total

    sections = sections_for_capacity(venue_capacity)
    blocks = []
    allocated = 0
    for index, (name, weight) in enumerate(sections):
        count = int(core_total * weight)
        if index == len(sections) - 1:
            count = core_total - allocated
        allocated += count
        blocks.append((name, count, False))
    if vip_total:
        blocks.append((VIP_SECTION, vip_total, True))

    per_row = seats_per_row(venue_capacity)
    layout = []
    for name, count, is_vip in blocks:
        remaining = count
        row_index = 0
        while remaining > 0:
            row_index += 1
            in_row = min(per_row, remaining)
            for number in range(1, in_row + 1):
                layout.append({
                    'section': name,
                    'row_label': row_letters(row_index),
                    'seat_number': number,
                    'is_vip': is_vip,
                    'price_cents': vip_price_cents if is_vip else base_price_cents,
                })
            remaining -= in_row

    return layout[:total]


def generate_seats(event_id, max_seats, base_price_cents=0, vip_price_cents=0, vip_count=0, venue_capacity=None):
    """
    Replace an event's seats with a freshly generated layout.

    Returns the number of seats created.
    """
    try:
        event = Events.objects.select_related('venue_id').get(events_id=event_id)
    except Events.DoesNotExist:
        raise EventNotFoundError()

    if venue_capacity is None:
        venue_capacity = event.venue_capacity

    layout = build_layout(max_seats, base_price_cents, vip_price_cents, vip_count, venue_capacity)

    with transaction.atomic():
        try:
            deleted, _ = Seat.objects.filter(event_id=event).delete()
        except ProtectedError:
            raise ConflictError("Seats with reservations cannot be regenerated")
        Seat.objects.bulk_create(
            [Seat(event_id=event, **definition) for definition in layout],
            batch_size=500,
        )

    logger.info(
        "[Seat-Layout] event %s: removed %s, created %s seat(s)",
        event.events_id, deleted, len(layout),
    )
    return len(layout)
