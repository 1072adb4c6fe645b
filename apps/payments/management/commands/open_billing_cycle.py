"""
Open a new billing cycle: paid residents due this cycle go back to pending.

Run once at the start of each month, before the overdue sweep.

Usage:
    python manage.py open_billing_cycle [--date YYYY-MM-DD]
"""

from apps.payments.services import get_engine

from ._base import BillingCommand, parse_run_date


class Command(BillingCommand):
    help = 'Reset paid residents to pending for the new billing cycle'

    def handle(self, *args, **options):
        result = get_engine().open_billing_cycle(today=parse_run_date(options['date']))
        self.stdout.write(
            self.style.SUCCESS(f"✓ {result['updated_count']} resident(s) back to pending")
        )
