"""Shared argument handling for the billing management commands."""

from datetime import date

from django.core.management.base import BaseCommand, CommandError


def parse_run_date(value):
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise CommandError(f"Invalid --date {value!r}; expected YYYY-MM-DD")


class BillingCommand(BaseCommand):

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            help='Run as if today were this date (YYYY-MM-DD)',
        )

    def report_failures(self, failures):
        for failure in failures:
            self.stdout.write(
                self.style.WARNING(f"  - resident {failure['resident_id']}: {failure['error']}")
            )
