from SeatDesk.cache_utils import cache_api_response, invalidate_user_cache
from SeatDesk.exceptions import DomainError
from SeatDesk.helper import BaseAPIClass
from SeatDesk.utils import paginate_queryset
from bookings.lifecycle import cancel_reservation, resend_ticket_email
from bookings.models import Reservation
from bookings.reservations import create_reservation, get_own_reservation, reservation_qr
from bookings.serializers import (
    CreateReservationSerializer,
    ReservationDetailSerializer,
    ReservationHistorySerializer,
    ReservationSerializer,
)

USER_RESERVATIONS_CACHE = 'user_reservations'


class ReservationView(BaseAPIClass):
    model_class = Reservation
    create_serializer = CreateReservationSerializer
    fetch_serializer = ReservationHistorySerializer

    def post(self, request):
        """
        Turn the caller's held seat into a reservation
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=4100)

            serializer = self.create_serializer(data=request.data)
            if serializer.is_valid():
                validated_data = serializer.validated_data
                reservation = create_reservation(
                    actor,
                    event_id=validated_data['event_id'],
                    seat_id=validated_data['seat_id'],
                    payment_method=validated_data.get('payment_method'),
                    payment_reference=validated_data.get('payment_reference'),
                )
                invalidate_user_cache(USER_RESERVATIONS_CACHE, actor.user_id)

                self.code = 201
                self.data = {
                    'reservation': ReservationSerializer(reservation).data,
                    'qr_code': reservation.qr_code,
                }
                if reservation.status == Reservation.RESERVATION_STATUS.CONFIRMED:
                    self.message = "Reservation confirmed"
                else:
                    self.message = "Reservation created and awaiting payment approval"
            else:
                self.custom_code = 4101
                self.serializer_errors(serializer.errors)

        except DomainError as e:
            self.domain_error(e, custom_code=4102)
        except Exception as e:
            self.error_occurred(e, message="Reservation creation failed", custom_code=4103)

        return self.get_response()

    @cache_api_response(USER_RESERVATIONS_CACHE, timeout=30, vary_on_user=True)
    def get(self, request):
        """
        Get the caller's reservations
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=4104)

            serializer = self.fetch_serializer(data=request.GET)
            if serializer.is_valid():
                validated_data = serializer.validated_data
                page = validated_data.get('page', 1)
                rows_per_page = validated_data.get('rows_per_page', 10)
                status_filter = validated_data.get('status')

                queryset = self.model_class.objects.filter(
                    user_id=actor.user_id
                ).select_related('event_id', 'seat_id').order_by('-created_at')
                if status_filter:
                    queryset = queryset.filter(status=status_filter)

                paginated_data = paginate_queryset(queryset, page, rows_per_page)
                self.data = {
                    'reservations': ReservationSerializer(paginated_data['results'], many=True).data,
                    'pagination': {
                        'current_page': page,
                        'total_pages': paginated_data['total_pages'],
                        'total_count': paginated_data['total_count'],
                        'has_next': paginated_data['has_next'],
                        'has_previous': paginated_data['has_previous']
                    }
                }
                self.message = "Reservations retrieved successfully"
            else:
                self.custom_code = 4105
                self.serializer_errors(serializer.errors)

        except Exception as e:
            self.error_occurred(e, message="Failed to retrieve reservations", custom_code=4106)

        return self.get_response()


class ReservationDetailView(BaseAPIClass):

    def get(self, request, reservation_id):
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=4110)

            reservation = get_own_reservation(reservation_id, actor)
            self.data = ReservationDetailSerializer(reservation).data
            self.message = "Reservation retrieved successfully"

        except DomainError as e:
            self.domain_error(e, custom_code=4111)
        except Exception as e:
            self.error_occurred(e, message="Failed to retrieve reservation", custom_code=4112)

        return self.get_response()


class ReservationCancelView(BaseAPIClass):

    def put(self, request, reservation_id):
        """
        Cancel one of the caller's reservations
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=4120)

            reservation = cancel_reservation(reservation_id, actor)
            invalidate_user_cache(USER_RESERVATIONS_CACHE, actor.user_id)

            self.data = {
                'reservation_id': str(reservation.reservation_id),
                'status': Reservation.RESERVATION_STATUS(reservation.status).name.lower(),
            }
            self.message = "Reservation cancelled successfully"

        except DomainError as e:
            self.domain_error(e, custom_code=4121)
        except Exception as e:
            self.error_occurred(e, message="Failed to cancel reservation", custom_code=4122)

        return self.get_response()


class ReservationQRView(BaseAPIClass):

    def get(self, request, reservation_id):
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=4130)

            qr_code, reservation_code = reservation_qr(reservation_id, actor)
            self.data = {'qr_code': qr_code, 'reservation_code': reservation_code}
            self.message = "QR code retrieved successfully"

        except DomainError as e:
            self.domain_error(e, custom_code=4131)
        except Exception as e:
            self.error_occurred(e, message="Failed to retrieve QR code", custom_code=4132)

        return self.get_response()


class ReservationResendEmailView(BaseAPIClass):

    def post(self, request, reservation_id):
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=4140)

            reservation = resend_ticket_email(reservation_id, actor)
            invalidate_user_cache(USER_RESERVATIONS_CACHE, actor.user_id)

            self.data = {'reservation_code': reservation.reservation_code}
            self.message = "Ticket email sent successfully"

        except DomainError as e:
            self.domain_error(e, custom_code=4141)
        except Exception as e:
            self.error_occurred(e, message="Failed to resend ticket email", custom_code=4142)

        return self.get_response()
