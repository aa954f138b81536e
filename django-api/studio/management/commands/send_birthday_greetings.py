from django.core.management.base import BaseCommand
from django.utils import timezone

from studio.handlers import dependencies


class Command(BaseCommand):
    help = "Email a birthday greeting to every customer born on today's date."

    def handle(self, *args, **options):
        today = timezone.localdate()
        sent = dependencies.get_customer_service().send_birthday_greetings(today)
        self.stdout.write(self.style.SUCCESS(f"Sent {sent} birthday greetings"))
