"""Management command to re-resolve tiers of active accounts."""

from django.core.management.base import BaseCommand

from tierman.service import MembershipService


class Command(BaseCommand):
    help = "Re-resolve the tier of every active account against the current catalog"

    def handle(self, *args, **options):
        changed = MembershipService.reconcile_all()
        self.stdout.write(self.style.SUCCESS(f"Reconciled accounts, {changed} changed tier."))
