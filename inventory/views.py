"""
Admin seat layout views
"""
from SeatDesk.exceptions import DomainError, EventNotFoundError
from SeatDesk.helper import BaseAPIClass
from inventory.layout import generate_seats
from inventory.serializers import GenerateSeatsSerializer
from events.models import Events


class AdminSeatGenerationView(BaseAPIClass):
    """Regenerate the seat layout of an event (staff only)"""

    def post(self, request, event_id):
        try:
            actor = self.get_actor(request)
            if actor is None:
                return self.authentication_required(custom_code=6001)
            actor.require_staff()

            serializer = GenerateSeatsSerializer(data=request.data)
            if serializer.is_valid():
                options = serializer.validated_data

                try:
                    event = Events.objects.get(events_id=event_id)
                except Events.DoesNotExist:
                    raise EventNotFoundError()

                # Unset options fall back to the event's own configuration
                created = generate_seats(
                    event.events_id,
                    options.get('max_seats', event.max_seats),
                    base_price_cents=options.get('base_price_cents', event.base_price_cents),
                    vip_price_cents=options.get('vip_price_cents', event.vip_price_cents),
                    vip_count=options.get('vip_count', event.vip_count),
                    venue_capacity=options.get('venue_capacity'),
                )
                self.data = {'event_id': str(event_id), 'seats_created': created}
                self.message = f"Generated {created} seats"
            else:
                self.custom_code = 6002
                self.serializer_errors(serializer.errors)

        except DomainError as e:
            self.domain_error(e, custom_code=6003)
        except Exception as e:
            self.error_occurred(e, message="Failed to generate seats", custom_code=6004)

        return self.get_response()
