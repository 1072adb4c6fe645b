"""
Send WhatsApp reminders to pending residents due in the current cycle.

Usage:
    python manage.py send_payment_reminders [--date YYYY-MM-DD]
"""

from apps.notifications.backends import get_backend
from apps.payments.services import get_engine

from ._base import BillingCommand, parse_run_date


class Command(BillingCommand):
    help = 'Send payment reminders for the current billing cycle'

    def handle(self, *args, **options):
        run_date = parse_run_date(options['date'])

        with get_backend() as backend:
            result = get_engine(backend).send_reminders(today=run_date)

        if result['candidates'] == 0:
            self.stdout.write(self.style.SUCCESS('No residents need a reminder.'))
            return

        self.stdout.write(
            self.style.SUCCESS(
                f"✓ Reminded {result['notified_count']} of {result['candidates']} resident(s)"
            )
        )
        self.report_failures(result['failures'])
