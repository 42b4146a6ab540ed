from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from authentication.models import TimeStampedModel


class Order(TimeStampedModel):
    """Customer order recorded from the storefront cart"""
    ORDER_TYPE_CHOICES = [
        ('delivery', 'Delivery'),
        ('dine-in', 'Dine-In'),
    ]

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('preparing', 'Preparing'),
        ('ready', 'Ready'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=20)
    customer_address = models.TextField(blank=True, default='')
    order_type = models.CharField(max_length=20, choices=ORDER_TYPE_CHOICES, default='delivery')
    items = models.JSONField(default=list)  # [{"id", "name", "quantity", "unit_price", "line_total"}]
    notes = models.TextField(blank=True, default='')
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    language_code = models.CharField(max_length=5, blank=True, default='')

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']

    def __str__(self):
        return f"Order #{self.pk} - {self.customer_name}"

    @property
    def items_count(self):
        return sum(int(line.get('quantity', 0)) for line in self.items or [])

    def items_summary(self):
        return ", ".join(f"{line.get('quantity')}x {line.get('name')}" for line in self.items or [])


class Rating(models.Model):
    """Customer feedback submitted from the public rating page"""
    EXPERIENCE_CHOICES = [
        ('bad', 'Bad'),
        ('neutral', 'Neutral'),
        ('good', 'Good'),
    ]

    score_validators = [MinValueValidator(1), MaxValueValidator(5)]

    customer_name = models.CharField(max_length=255, null=True, blank=True)
    customer_phone = models.CharField(max_length=20, null=True, blank=True)
    service_rating = models.PositiveSmallIntegerField(validators=score_validators)
    staff_rating = models.PositiveSmallIntegerField(validators=score_validators)
    cleanliness_rating = models.PositiveSmallIntegerField(validators=score_validators)
    overall_experience = models.CharField(max_length=10, choices=EXPERIENCE_CHOICES)
    comment = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ratings'
        ordering = ['-created_at']

    def __str__(self):
        return f"Rating #{self.pk} ({self.overall_experience})"

    @property
    def average_score(self):
        return round((self.service_rating + self.staff_rating + self.cleanliness_rating) / 3, 1)
