from datetime import timedelta

import django_filters
from django.utils import timezone

from .models import Order, Rating

PERIOD_CHOICES = [
    ('today', 'Today'),
    ('week', 'Last 7 Days'),
    ('month', 'Last 30 Days'),
]


def filter_by_period(queryset, period, field='created_at'):
    now = timezone.now()
    if period == 'today':
        return queryset.filter(**{f'{field}__date': timezone.localdate()})
    if period == 'week':
        return queryset.filter(**{f'{field}__gte': now - timedelta(days=7)})
    if period == 'month':
        return queryset.filter(**{f'{field}__gte': now - timedelta(days=30)})
    return queryset


def clean_filter_params(params):
    """Drop the 'all' placeholder the filter dropdowns submit"""
    return {key: value for key, value in params.items() if value and value != 'all'}


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Order.STATUS_CHOICES)
    order_type = django_filters.ChoiceFilter(choices=Order.ORDER_TYPE_CHOICES)
    date = django_filters.ChoiceFilter(choices=PERIOD_CHOICES, method='filter_date')

    class Meta:
        model = Order
        fields = ['status', 'order_type', 'date']

    def filter_date(self, queryset, name, value):
        return filter_by_period(queryset, value)


class RatingFilter(django_filters.FilterSet):
    experience = django_filters.ChoiceFilter(field_name='overall_experience', choices=Rating.EXPERIENCE_CHOICES)
    date = django_filters.ChoiceFilter(choices=PERIOD_CHOICES, method='filter_date')

    class Meta:
        model = Rating
        fields = ['experience', 'date']

    def filter_date(self, queryset, name, value):
        return filter_by_period(queryset, value)
