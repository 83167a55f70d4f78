from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from events.models import Events
from inventory.layout import generate_seats
from SeatDesk.exceptions import DomainError


class Command(BaseCommand):
    help = "Regenerate the seat layout of an event"

    def add_arguments(self, parser):
        parser.add_argument("event_id")
        parser.add_argument("--max-seats", type=int, help="Defaults to the event's max_seats")
        parser.add_argument("--base-price-cents", type=int)
        parser.add_argument("--vip-price-cents", type=int)
        parser.add_argument("--vip-count", type=int)
        parser.add_argument("--venue-capacity", type=int)

    def handle(self, *args, **options):
        try:
            event = Events.objects.get(events_id=options["event_id"])
        except (Events.DoesNotExist, ValidationError):
            raise CommandError(f"Event {options['event_id']} not found")

        def option(name, fallback):
            value = options.get(name)
            return fallback if value is None else value

        try:
            created = generate_seats(
                event.events_id,
                option("max_seats", event.max_seats),
                base_price_cents=option("base_price_cents", event.base_price_cents),
                vip_price_cents=option("vip_price_cents", event.vip_price_cents),
                vip_count=option("vip_count", event.vip_count),
                venue_capacity=options.get("venue_capacity"),
            )
        except DomainError as e:
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(f"Generated {created} seats for {event.event_name}"))
