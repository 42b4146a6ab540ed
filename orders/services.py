import html
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone

from authentication.audit import audit_log
from inventory.catalog import resolve_language
from inventory.exceptions import MenuIntegrityError, MenuValidationError
from inventory.labels import get_labels
from inventory.menu import format_price
from inventory.resolver import TranslationResolver
from inventory.services import validated_id

from .models import Order, Rating

logger = logging.getLogger(__name__)


def price_cart(lines, language_code=None, using='default'):
    """
    Re-price cart lines from the database in the customer's language.

    lines: [{'menu_item_id': int, 'quantity': int}]; repeated ids are merged.
    Returns (order_lines, total).
    """
    quantities = {}
    for line in lines:
        quantities[line['menu_item_id']] = quantities.get(line['menu_item_id'], 0) + line['quantity']

    language, default_code = resolve_language(language_code, using=using)
    resolver = TranslationResolver(language.code if language else default_code, default_code, using=using)
    items = {row['id']: row for row in resolver.menu_items_by_ids(list(quantities), active_only=True)}

    unknown = sorted(set(quantities) - set(items))
    if unknown:
        raise MenuIntegrityError(f"Unknown menu items: {', '.join(str(i) for i in unknown)}")

    order_lines, total = [], Decimal('0.00')
    for item_id, quantity in quantities.items():
        row = items[item_id]
        line_total = row['price'] * quantity
        total += line_total
        order_lines.append({
            'id': item_id,
            'name': html.unescape(row['name']),
            'quantity': quantity,
            'unit_price': str(row['price']),
            'line_total': str(line_total),
        })
    return order_lines, total


def order_message(order):
    """Plain-text order summary handed to WhatsApp by the storefront"""
    labels = get_labels(order.language_code or 'en')
    lines = [f"*{labels['restaurant_name']}*", f"🛒 {labels['new_order']}", '']
    for line in order.items:
        lines.append(f"▫️ {line['name']}")
        lines.append(f"   {line['quantity']} × {format_price(line['unit_price'])} = {format_price(line['line_total'])}")
        lines.append('')
    lines.append(f"*{labels['total']}: {format_price(order.total_amount)}*")
    return '\n'.join(lines)


def submit_order(ctx, data):
    """Create an order from validated checkout data"""
    language, default_code = resolve_language(data.get('lang'), using=ctx.using)
    language_code = language.code if language else default_code
    order_lines, total = price_cart(data['items'], language_code, using=ctx.using)
    with transaction.atomic(using=ctx.using):
        order = Order.objects.using(ctx.using).create(
            customer_name=data['customer_name'],
            customer_phone=data['customer_phone'],
            customer_address=data.get('customer_address', ''),
            order_type=data.get('order_type', 'delivery'),
            notes=data.get('notes', ''),
            items=order_lines,
            total_amount=total,
            language_code=language_code,
        )
    logger.info(f"Order #{order.pk} submitted, total {total}")
    return order


def update_order_status(ctx, order_id, new_status):
    if new_status not in dict(Order.STATUS_CHOICES):
        raise MenuValidationError('Invalid status')
    order = Order.objects.using(ctx.using).filter(pk=validated_id(order_id, 'order')).first()
    if order is None:
        raise MenuIntegrityError('Order not found.')
    previous = order.status
    order.status = new_status
    order.save(using=ctx.using, update_fields=['status', 'updated_at'])
    audit_log(ctx, 'order_status_updated', order_id=order.pk, old_status=previous, new_status=new_status)
    return order


def delete_order(ctx, order_id):
    order_id = validated_id(order_id, 'order')
    deleted, _ = Order.objects.using(ctx.using).filter(pk=order_id).delete()
    if not deleted:
        raise MenuIntegrityError('Order not found.')
    audit_log(ctx, 'order_deleted', order_id=order_id)


def delete_rating(ctx, rating_id):
    rating_id = validated_id(rating_id, 'rating')
    deleted, _ = Rating.objects.using(ctx.using).filter(pk=rating_id).delete()
    if not deleted:
        raise MenuIntegrityError('Rating not found.')
    audit_log(ctx, 'rating_deleted', rating_id=rating_id)


# =============== STATISTICS ===============

def order_stats(using='default'):
    orders = Order.objects.using(using)
    counts = orders.aggregate(
        total_orders=Count('id'),
        **{
            f'{status}_orders': Count('id', filter=Q(status=status))
            for status, _ in Order.STATUS_CHOICES
        },
    )
    revenue_orders = orders.exclude(status='cancelled')
    counts['today_revenue'] = revenue_orders.filter(
        created_at__date=timezone.localdate()).aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')
    counts['total_revenue'] = revenue_orders.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')
    return counts


def rating_stats(using='default'):
    stats = Rating.objects.using(using).aggregate(
        total_ratings=Count('id'),
        avg_service=Avg('service_rating'),
        avg_staff=Avg('staff_rating'),
        avg_cleanliness=Avg('cleanliness_rating'),
        good_count=Count('id', filter=Q(overall_experience='good')),
        neutral_count=Count('id', filter=Q(overall_experience='neutral')),
        bad_count=Count('id', filter=Q(overall_experience='bad')),
    )
    for key in ('avg_service', 'avg_staff', 'avg_cleanliness'):
        stats[key] = round(stats[key], 1) if stats[key] is not None else 0
    return stats
