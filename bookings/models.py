import secrets
import time
from datetime import timedelta
from uuid import uuid4

from django.conf import settings
from django.db import models
from django.utils import timezone
from django_enumfield import enum

from accounts.models import User
from events.models import Events
from inventory.models import Seat


def _base36(number):
    digits = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    encoded = ""
    while number:
        number, remainder = divmod(number, 36)
        encoded = digits[remainder] + encoded
    return encoded or "0"


def generate_reservation_code():
    suffix = "".join(secrets.choice("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ") for _ in range(4))
    return f"RSV-{_base36(int(time.time() * 1000))}-{suffix}"


def reservation_expiry(total_amount_cents, now=None):
    now = now or timezone.now()
    if total_amount_cents > 0:
        hours = getattr(settings, 'PAID_RESERVATION_EXPIRY_HOURS', 24)
    else:
        hours = getattr(settings, 'FREE_RESERVATION_EXPIRY_HOURS', 2)
    return now + timedelta(hours=hours)


class PAYMENT_METHOD(enum.Enum):
    FREE = 1
    CASH = 2
    GCASH = 3
    PAYMAYA = 4
    CARD = 5


class Reservation(models.Model):

    class RESERVATION_STATUS(enum.Enum):
        PENDING = 1
        CONFIRMED = 2
        CANCELLED = 3
        EXPIRED = 4
        USED = 5

        __transitions__ = {
            PENDING: (),
            CONFIRMED: (PENDING,),
            CANCELLED: (PENDING, CONFIRMED),
            EXPIRED: (PENDING, CONFIRMED),
            USED: (PENDING, CONFIRMED),
        }

    class PAYMENT_STATUS(enum.Enum):
        PENDING = 1
        PAID = 2
        FAILED = 3
        REFUNDED = 4

    ACTIVE_STATUSES = (RESERVATION_STATUS.PENDING, RESERVATION_STATUS.CONFIRMED)

    reservation_id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    reservation_code = models.CharField(max_length=32, unique=True, editable=False)
    user_id = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reservations")
    event_id = models.ForeignKey(Events, on_delete=models.CASCADE, related_name="reservations")
    seat_id = models.ForeignKey(Seat, on_delete=models.PROTECT, related_name="reservations")
    status = enum.EnumField(RESERVATION_STATUS, default=RESERVATION_STATUS.PENDING)
    total_amount_cents = models.PositiveIntegerField(default=0)
    payment_status = enum.EnumField(PAYMENT_STATUS, default=PAYMENT_STATUS.PENDING)
    payment_method = enum.EnumField(PAYMENT_METHOD, default=PAYMENT_METHOD.FREE)
    payment_reference = models.CharField(max_length=100, blank=True)
    qr_code = models.TextField(blank=True)
    email_sent = models.BooleanField(default=False)
    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField()
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "reservation"
        indexes = [
            models.Index(fields=["user_id", "event_id", "status"]),
            models.Index(fields=["seat_id", "status"]),
            models.Index(fields=["event_id", "status", "created_at"]),
        ]

    def save(self, *args, **kwargs):
        # Both are NOT NULL and derived once, before the first insert
        if not self.reservation_code:
            self.reservation_code = generate_reservation_code()
        if not self.expires_at:
            self.expires_at = reservation_expiry(self.total_amount_cents)
        super().save(*args, **kwargs)

    def is_active(self):
        return self.status in self.ACTIVE_STATUSES

    def __str__(self):
        return self.reservation_code


class Payment(models.Model):

    class PAYMENT_RECORD_STATUS(enum.Enum):
        PENDING = 1
        COMPLETED = 2
        FAILED = 3
        REFUNDED = 4

    payment_id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    reservation_id = models.ForeignKey(Reservation, on_delete=models.CASCADE, related_name="payments")
    amount_cents = models.PositiveIntegerField(default=0)
    payment_method = enum.EnumField(PAYMENT_METHOD, default=PAYMENT_METHOD.FREE)
    payment_reference = models.CharField(max_length=100, blank=True)
    status = enum.EnumField(PAYMENT_RECORD_STATUS, default=PAYMENT_RECORD_STATUS.PENDING)
    transaction_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    refund_amount_cents = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "payment"
