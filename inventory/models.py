from uuid import uuid4
from django.db import models
from django.utils import timezone
from django_enumfield import enum
from accounts.models import User
from events.models import Events


class Seat(models.Model):

    class SEAT_STATUS(enum.Enum):
        AVAILABLE = 1
        RESERVED = 2
        SOLD = 3
        BLOCKED = 4

    seat_id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    event_id = models.ForeignKey(Events, on_delete=models.CASCADE, related_name="seats")
    section = models.CharField(max_length=60)
    row_label = models.CharField(max_length=3)
    seat_number = models.PositiveIntegerField()
    is_vip = models.BooleanField(default=False)
    is_accessible = models.BooleanField(default=False)
    price_cents = models.PositiveIntegerField(default=0)
    status = enum.EnumField(SEAT_STATUS, default=SEAT_STATUS.AVAILABLE)
    # Mirrors status != AVAILABLE for clients reading the flag only
    is_reserved = models.BooleanField(default=False)
    hold_expiry = models.DateTimeField(null=True, blank=True)
    held_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="held_seats")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "seat"
        unique_together = ("event_id", "section", "row_label", "seat_number")
        indexes = [
            models.Index(fields=["event_id", "status"]),
            models.Index(fields=["status", "hold_expiry"]),
        ]

    HOLD_FIELDS = ["status", "is_reserved", "hold_expiry", "held_by", "updated_at"]

    @property
    def seat_label(self):
        return f"{self.section.upper()}-{self.row_label}{self.seat_number}"

    def is_held(self):
        """RESERVED under a time-boxed hold rather than a pending reservation"""
        return self.status == self.SEAT_STATUS.RESERVED and self.hold_expiry is not None

    def hold_is_active(self, now=None):
        now = now or timezone.now()
        return self.is_held() and self.hold_expiry > now

    def hold_has_expired(self, now=None):
        now = now or timezone.now()
        return self.is_held() and self.hold_expiry <= now

    def clear_hold(self):
        self.status = self.SEAT_STATUS.AVAILABLE
        self.is_reserved = False
        self.hold_expiry = None
        self.held_by = None

    def __str__(self):
        return self.seat_label
