"""Management command to validate the catalog JSON files."""

from collections import Counter

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from storefront.catalog.loader import CatalogError, load_catalog


class Command(BaseCommand):
    help = "Load the catalog from disk and report what it contains"

    def add_arguments(self, parser):
        parser.add_argument(
            "--path",
            default=None,
            help="Catalog directory (defaults to STOREFRONT_CATALOG_DIR)",
        )

    def handle(self, *args, **options):
        directory = options["path"] or settings.STOREFRONT_CATALOG_DIR

        try:
            catalog = load_catalog(directory)
        except CatalogError as e:
            raise CommandError(str(e)) from e

        known = {category.slug for category in catalog.categories()}
        per_category = Counter(item.category for item in catalog.items())

        self.stdout.write(f"Catalog: {directory}")
        self.stdout.write(f"  Items: {len(catalog.items())}")
        self.stdout.write(f"  Categories: {len(catalog.categories())}")
        for slug, count in sorted(per_category.items()):
            self.stdout.write(f"    {slug}: {count}")

        orphans = sorted(set(per_category) - known)
        if orphans:
            self.stdout.write(
                self.style.WARNING(f"  Items reference unknown categories: {', '.join(orphans)}")
            )

        self.stdout.write(self.style.SUCCESS("Catalog OK"))
