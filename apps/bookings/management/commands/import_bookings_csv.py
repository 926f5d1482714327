from django.core.management.base import BaseCommand, CommandError  # type: ignore

from apps.accommodations.models import Accommodation
from apps.bookings.importers import import_bookings


class Command(BaseCommand):
    help = 'Imports a historical booking spreadsheet (semicolon separated CSV) as confirmed bookings'

    def add_arguments(self, parser):
        parser.add_argument('file', help='Path to the CSV export')
        parser.add_argument('--accommodation', type=int, required=True, help='Accommodation id')
        parser.add_argument('--encoding', default='utf-8-sig')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Parse and check every row without saving anything',
        )

    def handle(self, *args, **options):
        try:
            accommodation = Accommodation.objects.get(pk=options['accommodation'])
        except Accommodation.DoesNotExist as exc:
            raise CommandError(f"Accommodation {options['accommodation']} does not exist") from exc

        try:
            with open(options['file'], encoding=options['encoding'], newline='') as handle:
                report = import_bookings(handle, accommodation, dry_run=options['dry_run'])
        except OSError as exc:
            raise CommandError(f"Cannot read {options['file']}: {exc}") from exc

        self.stdout.write(f"Processing {options['file']} -> {accommodation.name}")
        for problem in report.problems:
            self.stdout.write(self.style.WARNING(f"  - {problem}"))

        summary = f"Processed: {report.processed}, Skipped: {report.skipped}"
        if options['dry_run']:
            self.stdout.write(self.style.NOTICE(f"{summary} (dry run, nothing saved)"))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
