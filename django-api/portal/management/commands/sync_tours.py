from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from portal.domain.errors import StorageUnavailableError
from portal.handlers.dependencies import catalog_sync_service


class Command(BaseCommand):
    help = "Upsert the tour catalog from the external JSON export (one-way)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--file",
            type=str,
            help="Path to the export; defaults to PORTAL_CATALOG_EXPORT_PATH",
        )

    def handle(self, *args, **options):
        path = options.get("file") or settings.PORTAL_CATALOG_EXPORT_PATH
        if not path:
            raise CommandError("--file is required when PORTAL_CATALOG_EXPORT_PATH is unset")
        try:
            count = catalog_sync_service(path).sync()
        except StorageUnavailableError as exc:
            raise CommandError(exc.message) from exc
        self.stdout.write(self.style.SUCCESS(f"Synced {count} tours"))
