"""Management command to apply the canonical tier catalog."""

from django.core.management.base import BaseCommand
from django.db import transaction

from tierman.catalog_defaults import CATALOG_VERSION, DEFAULT_TIERS
from tierman.models import Tier
from tierman.services import catalog


class Command(BaseCommand):
    help = "Create or update the default tiers by name (never deletes tiers)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without writing",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        created = updated = 0

        with transaction.atomic():
            for definition in DEFAULT_TIERS:
                fields = dict(definition)
                name = fields.pop("name")
                tier = Tier.objects.filter(name=name).first()

                if tier is None:
                    created += 1
                    self.stdout.write(f"create {name} ({fields['points_required']} pts)")
                    if not dry_run:
                        catalog.create_tier(name, **fields)
                else:
                    updated += 1
                    self.stdout.write(f"update {name} ({fields['points_required']} pts)")
                    if not dry_run:
                        catalog.update_tier(tier.pk, **fields)

        prefix = "[dry-run] " if dry_run else ""
        self.stdout.write(
            self.style.SUCCESS(
                f"{prefix}Catalog v{CATALOG_VERSION}: {created} created, {updated} updated."
            )
        )
