"""
Management command to create sample data for testing the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear

This creates:
- 3 operator accounts (admin, manager, viewer)
- 12 residents with phone numbers and registration numbers
- Access tokens for most residents
- Payments for the previous and current month (some residents owe)
- A few notifications in the log
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
import random

from apps.accounts.models import User, Role
from apps.notifications.models import Notification, NotificationType
from apps.payments.billing import previous_period
from apps.payments.models import Payment
from apps.payments.services import get_engine
from apps.residents.models import Resident, Token
from apps.residents.services import create_resident, create_token


RESIDENTS = [
    ('María', 'Rodríguez', 'A-101'),
    ('José', 'Martínez', 'A-102'),
    ('Carmen', 'Sánchez', 'A-201'),
    ('Rafael', 'Jiménez', 'A-202'),
    ('Rosa', 'Fernández', 'B-101'),
    ('Pedro', 'Reyes', 'B-102'),
    ('Lucía', 'Castillo', 'B-201'),
    ('Manuel', 'Ramírez', 'B-202'),
    ('Elena', 'Morales', 'C-101'),
    ('Francisco', 'Vargas', 'C-102'),
    ('Isabel', 'Herrera', 'C-201'),
    ('Antonio', 'Medina', 'C-202'),
]


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=42,
            help='Random seed for which residents pay and which owe',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        random.seed(options['seed'])
        self.stdout.write('Creating sample data...')

        self.create_users()
        residents = self.create_residents()
        self.create_tokens(residents)
        self.create_payments(residents)
        self.create_notifications(residents)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (admin)')
        self.stdout.write('  manager@example.com / password123 (manager)')
        self.stdout.write('  viewer@example.com / password123 (user)')

    def clear_data(self):
        """Clear all data from the database."""
        Notification.objects.all().delete()
        Payment.objects.all().delete()
        Token.objects.all().delete()
        Resident.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create one account per role."""
        self.stdout.write('  Creating users...')

        accounts = [
            ('admin@example.com', 'Admin User', Role.ADMIN, 'admin123', True),
            ('manager@example.com', 'Gerente', Role.MANAGER, 'password123', False),
            ('viewer@example.com', 'Consulta', Role.USER, 'password123', False),
        ]
        for email, display_name, role, password, superuser in accounts:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={
                    'display_name': display_name,
                    'role': role,
                    'is_staff': superuser,
                    'is_superuser': superuser,
                }
            )
            user.set_password(password)
            user.save()

    def create_residents(self):
        """Register residents through the service layer so they start pending."""
        self.stdout.write('  Creating residents...')

        residents = []
        for index, (name, last_name, unit) in enumerate(RESIDENTS, start=1):
            cedula = f"001-{index:07d}-{index % 10}"
            resident = Resident.objects.filter(cedula=cedula).first()
            if resident is None:
                resident = create_resident(
                    name=name,
                    last_name=last_name,
                    cedula=cedula,
                    registration_number=unit,
                    phone=f"809-555-{index:04d}",
                    address=f"Residencial Las Palmas, {unit}",
                    whatsapp_consent=index % 6 != 0,
                )
            residents.append(resident)

        return residents

    def create_tokens(self, residents):
        """Gate tokens; every third resident also gets a pool token."""
        self.stdout.write('  Creating tokens...')

        for index, resident in enumerate(residents):
            if index % 5 == 4 or resident.tokens.exists():
                continue
            create_token(resident_id=resident.id, name='Portón principal')
            if index % 3 == 0:
                create_token(resident_id=resident.id, name='Piscina')

    def create_payments(self, residents):
        """
        Last month is paid by almost everyone; this month by about half.

        Payments go through the status engine so residents and tokens follow.
        """
        self.stdout.write('  Creating payments...')

        engine = get_engine()
        today = timezone.localdate()
        last_year, last_month = previous_period(today.year, today.month)
        fee = Decimal('700.00')

        for resident in residents:
            periods = []
            if random.random() < 0.9:
                periods.append((last_year, last_month))
            if random.random() < 0.5:
                periods.append((today.year, today.month))

            for year, month in periods:
                if Payment.objects.filter(resident=resident, year=year, month=month).exists():
                    continue
                engine.record_payment(
                    resident_id=resident.id,
                    amount=fee,
                    month=month,
                    year=year,
                )

    def create_notifications(self, residents):
        """A handful of log entries so the notification list is not empty."""
        self.stdout.write('  Creating notifications...')

        for resident in residents[:4]:
            Notification.objects.create(
                resident=resident,
                message=f"Hola {resident.full_name}, recuerde su pago de mantenimiento.",
                type=NotificationType.REMINDER,
            )
        Notification.objects.create(
            resident=residents[0],
            message='Portón principal en mantenimiento el sábado.',
            type=NotificationType.ALERT,
        )
