from uuid import uuid4
from django.conf import settings
from django.db import models
from django_enumfield import enum


class Venue(models.Model):
    venue_id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)
    capacity_hint = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "venue"

    @property
    def seat_capacity(self):
        return self.capacity_hint or getattr(settings, 'DEFAULT_VENUE_CAPACITY', 1196)

    def __str__(self):
        return self.name


class Events(models.Model):

    class EVENT_STATUS(enum.Enum):
        DRAFT = 1
        PUBLISHED = 2
        SOLD_OUT = 3
        CANCELLED = 4
        COMPLETED = 5

    events_id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    venue_id = models.ForeignKey(Venue, on_delete=models.SET_NULL, null=True, blank=True, related_name="events")
    event_name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    event_date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    status = enum.EnumField(EVENT_STATUS, default=EVENT_STATUS.DRAFT)
    is_paid = models.BooleanField(default=False)
    base_price_cents = models.PositiveIntegerField(default=0)
    vip_price_cents = models.PositiveIntegerField(default=0)
    currency = models.CharField(max_length=3, default="USD")
    max_seats = models.PositiveIntegerField(default=500)
    vip_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "events"
        ordering = ["event_date"]

    @property
    def venue_capacity(self):
        if self.venue_id is None:
            return getattr(settings, 'DEFAULT_VENUE_CAPACITY', 1196)
        return self.venue_id.seat_capacity

    @property
    def venue_name(self):
        return self.venue_id.name if self.venue_id else ""

    def is_published(self):
        return self.status == self.EVENT_STATUS.PUBLISHED

    def has_started(self, now):
        return self.event_date <= now

    def __str__(self):
        return self.event_name
