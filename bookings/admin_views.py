"""
Staff reservation review views
"""
from SeatDesk.cache_utils import invalidate_prefix_cache, invalidate_user_cache
from SeatDesk.exceptions import DomainError
from SeatDesk.helper import BaseAPIClass
from SeatDesk.utils import paginate_queryset
from bookings.lifecycle import approve_reservation, bulk_approve_reservations, reject_reservation
from bookings.models import Reservation
from bookings.serializers import (
    AdminReservationFilterSerializer,
    BulkApproveSerializer,
    ReservationSerializer,
)
from bookings.views import USER_RESERVATIONS_CACHE


class AdminReservationListView(BaseAPIClass):
    model_class = Reservation

    def get(self, request):
        """
        List reservations, optionally filtered by event and status (staff only)
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=5100)
            actor.require_staff()

            serializer = AdminReservationFilterSerializer(data=request.GET)
            if serializer.is_valid():
                validated_data = serializer.validated_data
                page = validated_data.get('page', 1)
                rows_per_page = validated_data.get('rows_per_page', 20)

                queryset = self.model_class.objects.select_related(
                    'event_id', 'seat_id', 'user_id'
                ).order_by('-created_at')
                if validated_data.get('event_id'):
                    queryset = queryset.filter(event_id=validated_data['event_id'])
                if validated_data.get('status'):
                    queryset = queryset.filter(status=validated_data['status'])

                paginated_data = paginate_queryset(queryset, page, rows_per_page)
                reservations = ReservationSerializer(paginated_data['results'], many=True).data
                for item, reservation in zip(reservations, paginated_data['results']):
                    item['user'] = {
                        'user_id': str(reservation.user_id.user_id),
                        'name': reservation.user_id.name,
                        'email': reservation.user_id.email,
                    }

                self.data = {
                    'reservations': reservations,
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
                self.custom_code = 5101
                self.serializer_errors(serializer.errors)

        except DomainError as e:
            self.domain_error(e, custom_code=5102)
        except Exception as e:
            self.error_occurred(e, message="Failed to retrieve reservations", custom_code=5103)

        return self.get_response()


class AdminReservationApproveView(BaseAPIClass):

    def put(self, request, reservation_id):
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=5110)

            reservation = approve_reservation(reservation_id, actor)
            invalidate_user_cache(USER_RESERVATIONS_CACHE, reservation.user_id_id)

            self.data = ReservationSerializer(reservation).data
            self.message = "Reservation approved"

        except DomainError as e:
            self.domain_error(e, custom_code=5111)
        except Exception as e:
            self.error_occurred(e, message="Failed to approve reservation", custom_code=5112)

        return self.get_response()


class AdminReservationRejectView(BaseAPIClass):

    def put(self, request, reservation_id):
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=5120)

            reservation = reject_reservation(reservation_id, actor)
            invalidate_user_cache(USER_RESERVATIONS_CACHE, reservation.user_id_id)

            self.data = ReservationSerializer(reservation).data
            self.message = "Reservation rejected"

        except DomainError as e:
            self.domain_error(e, custom_code=5121)
        except Exception as e:
            self.error_occurred(e, message="Failed to reject reservation", custom_code=5122)

        return self.get_response()


class AdminBulkApproveView(BaseAPIClass):

    def put(self, request):
        """
        Approve an event's pending reservations in one request
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=5130)

            serializer = BulkApproveSerializer(data=request.data)
            if serializer.is_valid():
                result = bulk_approve_reservations(
                    serializer.validated_data['event_id'],
                    actor,
                    limit=serializer.validated_data['limit'],
                )
                if result['approved']:
                    invalidate_prefix_cache(USER_RESERVATIONS_CACHE)

                self.data = result
                self.message = f"Approved {result['approved']} reservation(s)"
            else:
                self.custom_code = 5131
                self.serializer_errors(serializer.errors)

        except DomainError as e:
            self.domain_error(e, custom_code=5132)
        except Exception as e:
            self.error_occurred(e, message="Bulk approve failed", custom_code=5133)

        return self.get_response()
