import datetime

from django.core.management.base import BaseCommand, CommandError

from apps.bookings.coordinator import complete_expired_bookings


class Command(BaseCommand):
    help = "Complete approved bookings whose lease has ended and free their listings"

    def add_arguments(self, parser):
        parser.add_argument("--today", help="Reference date, YYYY-MM-DD (default: today)")

    def handle(self, *args, **options):
        today = None
        if options.get("today"):
            try:
                today = datetime.date.fromisoformat(options["today"])
            except ValueError as exc:
                raise CommandError(f"Invalid --today value: {options['today']}") from exc

        completed = complete_expired_bookings(today=today)
        for pk in completed:
            self.stdout.write(self.style.SUCCESS(f"[OK] booking #{pk} completed"))
        self.stdout.write(self.style.SUCCESS(f"Done. Completed bookings: {len(completed)}"))
