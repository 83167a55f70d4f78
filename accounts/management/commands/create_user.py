from django.core.management.base import BaseCommand, CommandError

from accounts.models import User


class Command(BaseCommand):
    help = "Create a user, or reset the password and role of an existing one"

    def add_arguments(self, parser):
        parser.add_argument("email")
        parser.add_argument("password")
        parser.add_argument("--name", default="")
        parser.add_argument(
            "--role",
            default="USER",
            choices=[member.name for member in User.USER_TYPE],
        )

    def handle(self, *args, **options):
        if len(options["password"]) < 8:
            raise CommandError("Password must be at least 8 characters")

        user, created = User.objects.get_or_create(
            email=options["email"].lower(),
            defaults={'name': options["name"] or options["email"].split("@")[0]},
        )
        user.user_type = User.USER_TYPE[options["role"]]
        user.status = User.USER_STATUS.ACTIVE
        user.set_password(options["password"])
        user.save()

        verb = "Created" if created else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} {user.role} {user.email} ({user.user_id})"))
