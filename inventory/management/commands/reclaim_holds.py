from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from events.models import Events
from inventory.expiry import reclaim_expired_holds


class Command(BaseCommand):
    help = "Reset every lapsed seat hold to available (safe to run from cron)"

    def add_arguments(self, parser):
        parser.add_argument("--event-id", help="Only reclaim holds of this event")

    def handle(self, *args, **options):
        event_id = options.get("event_id")
        if event_id is not None:
            try:
                event_id = Events.objects.values_list("events_id", flat=True).get(events_id=event_id)
            except (Events.DoesNotExist, ValidationError):
                raise CommandError(f"Event {options['event_id']} not found")

        reclaimed = reclaim_expired_holds(event_id=event_id)
        self.stdout.write(f"Reclaimed {reclaimed} lapsed hold(s)")
