"""
Serializers for seat maps and seat layout generation
"""
from django.utils import timezone
from rest_framework import serializers
from inventory.models import Seat


class SeatSerializer(serializers.ModelSerializer):
    """Serializer for seat data"""
    status = serializers.SerializerMethodField()
    seat_label = serializers.CharField(read_only=True)
    is_available = serializers.SerializerMethodField()
    hold_seconds_remaining = serializers.SerializerMethodField()
    held_by_me = serializers.SerializerMethodField()

    class Meta:
        model = Seat
        fields = [
            'seat_id', 'event_id', 'section', 'row_label', 'seat_number', 'seat_label',
            'is_vip', 'is_accessible', 'price_cents', 'status', 'is_reserved',
            'hold_expiry', 'is_available', 'hold_seconds_remaining', 'held_by_me'
        ]

    def get_status(self, obj):
        return Seat.SEAT_STATUS(obj.status).name.lower()

    def get_is_available(self, obj):
        return obj.status == Seat.SEAT_STATUS.AVAILABLE and not obj.is_reserved

    def get_hold_seconds_remaining(self, obj):
        if obj.hold_is_active():
            return int((obj.hold_expiry - timezone.now()).total_seconds())
        return 0

    def get_held_by_me(self, obj):
        user_id = self.context.get('user_id')
        return bool(user_id and obj.held_by_id == user_id)


class SeatHoldSerializer(serializers.ModelSerializer):
    """Response body of a successful hold"""

    class Meta:
        model = Seat
        fields = ['seat_id', 'hold_expiry']


class GenerateSeatsSerializer(serializers.Serializer):
    """Serializer for staff seat layout generation"""
    max_seats = serializers.IntegerField(min_value=1, required=False)
    base_price_cents = serializers.IntegerField(min_value=0, required=False)
    vip_price_cents = serializers.IntegerField(min_value=0, required=False)
    vip_count = serializers.IntegerField(min_value=0, required=False)
    venue_capacity = serializers.IntegerField(min_value=1, required=False)
