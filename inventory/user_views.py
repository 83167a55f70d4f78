"""
User-facing seat map and hold views
"""
from SeatDesk.exceptions import DomainError
from SeatDesk.helper import BaseAPIClass
from inventory.expiry import list_seats, seat_statistics
from inventory.holds import hold_duration, hold_seat, release_seat
from inventory.serializers import SeatHoldSerializer, SeatSerializer


def _event_summary(event):
    return {
        'event_id': str(event.events_id),
        'event_name': event.event_name,
        'event_date': event.event_date,
        'status': event.EVENT_STATUS(event.status).name.lower(),
    }


class SeatListView(BaseAPIClass):
    """Seat map of an event. Never cached: every read reclaims lapsed holds."""

    def get(self, request, event_id):
        try:
            user = request.validated_user
            event, seats = list_seats(event_id)

            serializer = SeatSerializer(
                seats, many=True,
                context={'user_id': user.user_id if user else None}
            )
            self.data = {
                'event': _event_summary(event),
                'seats': serializer.data,
            }
            self.message = "Seats retrieved successfully"

        except DomainError as e:
            self.domain_error(e, custom_code=7001)
        except Exception as e:
            self.error_occurred(e, message="Failed to retrieve seats", custom_code=7002)

        return self.get_response()


class SeatAvailabilityView(BaseAPIClass):
    """Seat map plus occupancy statistics"""

    def get(self, request, event_id):
        try:
            user = request.validated_user
            event, seats = list_seats(event_id)

            self.data = {
                'event': _event_summary(event),
                'statistics': seat_statistics(seats),
                'seats': SeatSerializer(
                    seats, many=True,
                    context={'user_id': user.user_id if user else None}
                ).data,
            }
            self.message = "Seat availability retrieved successfully"

        except DomainError as e:
            self.domain_error(e, custom_code=7003)
        except Exception as e:
            self.error_occurred(e, message="Failed to retrieve seat availability", custom_code=7004)

        return self.get_response()


class SeatHoldView(BaseAPIClass):

    def post(self, request, seat_id):
        """
        Hold a seat for the caller
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=7005)

            seat = hold_seat(seat_id, actor)
            self.data = SeatHoldSerializer(seat).data
            self.message = f"Seat held for {int(hold_duration().total_seconds() // 60)} minutes"

        except DomainError as e:
            self.domain_error(e, custom_code=7006)
        except Exception as e:
            self.error_occurred(e, message="Failed to hold seat", custom_code=7007)

        return self.get_response()


class SeatReleaseView(BaseAPIClass):

    def post(self, request, seat_id):
        """
        Release the caller's live hold on a seat
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=7008)

            seat = release_seat(seat_id, actor)
            self.data = {'seat_id': str(seat.seat_id)}
            self.message = "Seat released successfully"

        except DomainError as e:
            self.domain_error(e, custom_code=7009)
        except Exception as e:
            self.error_occurred(e, message="Failed to release seat", custom_code=7010)

        return self.get_response()
