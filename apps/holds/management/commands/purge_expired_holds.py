from django.core.management.base import BaseCommand

from apps.holds.lifecycle import HoldLifecycleController


class Command(BaseCommand):
    help = "Deletes expired room holds that were never converted into reservations"

    def handle(self, *args, **options):
        purged = HoldLifecycleController().sweep()
        self.stdout.write(self.style.SUCCESS(f"Purged {purged} expired hold(s)"))
