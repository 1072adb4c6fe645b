from django.db import models


class ResidentPaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pendiente'
    PAID = 'paid', 'Pagado'
    OVERDUE = 'overdue', 'Vencido'
    # Label written by the daily batch command; same meaning as OVERDUE
    LATE = 'late', 'Atrasado'


OVERDUE_STATUSES = (ResidentPaymentStatus.OVERDUE, ResidentPaymentStatus.LATE)


class TokenStatus(models.TextChoices):
    ACTIVE = 'active', 'Activo'
    INACTIVE = 'inactive', 'Inactivo'


class Resident(models.Model):
    """A person tracked for recurring monthly dues."""

    name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    cedula = models.CharField(max_length=20, unique=True)
    registration_number = models.CharField(max_length=50, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    address = models.CharField(max_length=255, blank=True)
    whatsapp_consent = models.BooleanField(default=True)

    # Payment state (maintained by apps.payments.services)
    payment_status = models.CharField(
        max_length=20,
        choices=ResidentPaymentStatus.choices,
        default=ResidentPaymentStatus.PENDING,
    )
    last_payment_date = models.DateTimeField(null=True, blank=True)
    next_payment_date = models.DateField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'residents'
        indexes = [
            models.Index(fields=['payment_status', 'next_payment_date'], name='residents_status_next_idx'),
            models.Index(fields=['last_name', 'name'], name='residents_name_idx'),
        ]
        ordering = ['last_name', 'name']

    def __str__(self):
        return f"{self.full_name} ({self.cedula})"

    @property
    def full_name(self):
        return f"{self.name} {self.last_name}".strip()

    @property
    def has_phone(self):
        return bool(self.phone and self.phone.strip())

    @property
    def is_overdue(self):
        return self.payment_status in OVERDUE_STATUSES


class Token(models.Model):
    """Access credential owned by a resident; mirrors the resident's payment state."""

    resident = models.ForeignKey(
        Resident,
        on_delete=models.CASCADE,
        related_name='tokens',
    )
    name = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20,
        choices=TokenStatus.choices,
        default=TokenStatus.ACTIVE,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=ResidentPaymentStatus.choices,
        default=ResidentPaymentStatus.PENDING,
    )
    last_payment_date = models.DateTimeField(null=True, blank=True)
    next_payment_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tokens'
        indexes = [
            models.Index(fields=['resident', 'status'], name='tokens_resident_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} - {self.resident.full_name} ({self.status})"
