# Generated manually for the residents and tokens models

import django.db.models.deletion
from django.db import migrations, models


PAYMENT_STATUS_CHOICES = [
    ('pending', 'Pendiente'),
    ('paid', 'Pagado'),
    ('overdue', 'Vencido'),
    ('late', 'Atrasado'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Resident',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('cedula', models.CharField(max_length=20, unique=True)),
                ('registration_number', models.CharField(blank=True, max_length=50)),
                ('phone', models.CharField(blank=True, max_length=30)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('whatsapp_consent', models.BooleanField(default=True)),
                ('payment_status', models.CharField(choices=PAYMENT_STATUS_CHOICES, default='pending', max_length=20)),
                ('last_payment_date', models.DateTimeField(blank=True, null=True)),
                ('next_payment_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'residents',
                'ordering': ['last_name', 'name'],
                'indexes': [
                    models.Index(fields=['payment_status', 'next_payment_date'], name='residents_status_next_idx'),
                    models.Index(fields=['last_name', 'name'], name='residents_name_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Token',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('status', models.CharField(choices=[('active', 'Activo'), ('inactive', 'Inactivo')], default='active', max_length=20)),
                ('payment_status', models.CharField(choices=PAYMENT_STATUS_CHOICES, default='pending', max_length=20)),
                ('last_payment_date', models.DateTimeField(blank=True, null=True)),
                ('next_payment_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('resident', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tokens', to='residents.resident')),
            ],
            options={
                'db_table': 'tokens',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['resident', 'status'], name='tokens_resident_status_idx'),
                ],
            },
        ),
    ]
