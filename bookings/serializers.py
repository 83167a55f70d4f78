from rest_framework import serializers
from bookings.models import PAYMENT_METHOD, Payment, Reservation


def _choices(enum_class):
    return [(member.name.lower(), member.name) for member in enum_class]


class CreateReservationSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    seat_id = serializers.UUIDField()
    # Free seats ignore it; priced seats need one other than 'free'
    payment_method = serializers.ChoiceField(choices=_choices(PAYMENT_METHOD), required=False)
    payment_reference = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate_payment_method(self, value):
        return PAYMENT_METHOD[value.upper()]


class PaymentSerializer(serializers.ModelSerializer):
    status = serializers.SerializerMethodField()
    payment_method = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            'payment_id', 'amount_cents', 'payment_method', 'payment_reference', 'status',
            'transaction_id', 'processed_at', 'refunded_at', 'refund_amount_cents', 'created_at'
        ]

    def get_status(self, obj):
        return Payment.PAYMENT_RECORD_STATUS(obj.status).name.lower()

    def get_payment_method(self, obj):
        return PAYMENT_METHOD(obj.payment_method).name.lower()


class ReservationSerializer(serializers.ModelSerializer):
    status = serializers.SerializerMethodField()
    payment_status = serializers.SerializerMethodField()
    payment_method = serializers.SerializerMethodField()
    event_name = serializers.CharField(source='event_id.event_name', read_only=True)
    event_date = serializers.DateTimeField(source='event_id.event_date', read_only=True)
    seat_info = serializers.SerializerMethodField()

    class Meta:
        model = Reservation
        fields = [
            'reservation_id', 'reservation_code', 'user_id', 'event_id', 'seat_id', 'status',
            'total_amount_cents', 'payment_status', 'payment_method', 'payment_reference',
            'email_sent', 'checked_in', 'checked_in_at', 'expires_at', 'notes',
            'created_at', 'updated_at', 'event_name', 'event_date', 'seat_info'
        ]

    def get_status(self, obj):
        return Reservation.RESERVATION_STATUS(obj.status).name.lower()

    def get_payment_status(self, obj):
        return Reservation.PAYMENT_STATUS(obj.payment_status).name.lower()

    def get_payment_method(self, obj):
        return PAYMENT_METHOD(obj.payment_method).name.lower()

    def get_seat_info(self, obj):
        seat = obj.seat_id
        return {
            'section': seat.section,
            'row': seat.row_label,
            'seat_number': seat.seat_number,
            'label': seat.seat_label,
            'is_vip': seat.is_vip,
        }


class ReservationDetailSerializer(ReservationSerializer):
    payments = PaymentSerializer(many=True, read_only=True)

    class Meta(ReservationSerializer.Meta):
        fields = ReservationSerializer.Meta.fields + ['payments']


class ReservationHistorySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    rows_per_page = serializers.IntegerField(default=10, min_value=1, max_value=100)
    status = serializers.ChoiceField(
        choices=_choices(Reservation.RESERVATION_STATUS),
        required=False
    )

    def validate_status(self, value):
        return Reservation.RESERVATION_STATUS[value.upper()]


class AdminReservationFilterSerializer(ReservationHistorySerializer):
    event_id = serializers.UUIDField(required=False)
    rows_per_page = serializers.IntegerField(default=20, min_value=1, max_value=100)


class BulkApproveSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    limit = serializers.IntegerField(min_value=1, default=1000)
