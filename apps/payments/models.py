from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pendiente'
    COMPLETED = 'completed', 'Completado'
    PAID = 'paid', 'Pagado'
    OVERDUE = 'overdue', 'Vencido'


SETTLED_STATUSES = (PaymentStatus.COMPLETED, PaymentStatus.PAID)


class Payment(models.Model):
    """One resident's dues for one (month, year) billing period."""

    resident = models.ForeignKey(
        'residents.Resident',
        on_delete=models.CASCADE,
        related_name='payments'
    )

    # Financial details
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    # Billing period
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    year = models.PositiveIntegerField()

    payment_date = models.DateTimeField(null=True, blank=True)
    due_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        constraints = [
            models.UniqueConstraint(
                fields=['resident', 'month', 'year'],
                name='unique_payment_per_period'
            ),
        ]
        indexes = [
            models.Index(fields=['status', 'due_date'], name='payments_status_due_idx'),
            models.Index(fields=['year', 'month'], name='payments_period_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.resident} - {self.month:02d}/{self.year}: {self.amount} ({self.status})"

    @property
    def is_settled(self):
        return self.status in SETTLED_STATUSES
