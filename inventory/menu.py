"""
Menu read assembly: resolved items, category names, UI labels and language
metadata in one payload, cached per (language, menu type, category).
"""
import hashlib
import logging
import time
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.cache import caches
from django.db import DEFAULT_DB_ALIAS, DatabaseError
from django.utils import timezone

from .catalog import language_as_dict, list_active_languages, resolve_language
from .exceptions import StorageUnavailable
from .images import image_url
from .labels import get_labels
from .models import MAX_PRICE, MenuType
from .resolver import TranslationResolver

logger = logging.getLogger(__name__)

MENU_CACHE_ALIAS = 'menu'
PRICE_NOT_AVAILABLE = 'Price not available'


def format_price(value):
    """IQD 1,234.50 style string; Free for zero; out of range is not available"""
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return PRICE_NOT_AVAILABLE
    if not price.is_finite() or price < 0 or price > MAX_PRICE:
        return PRICE_NOT_AVAILABLE
    if price == 0:
        return 'Free'
    return f"{settings.MENU_CURRENCY} {price:,.2f}"


# =============== RESPONSE CACHE ===============

def menu_cache():
    return caches[MENU_CACHE_ALIAS]


def menu_cache_key(language, menu_type_id, category):
    raw = f"{language or ''}|{menu_type_id or ''}|{(category or '').lower()}"
    return 'menu_api:' + hashlib.md5(raw.encode('utf-8')).hexdigest()


def cache_get(key):
    try:
        return menu_cache().get(key)
    except Exception:
        logger.exception(f"Menu cache read failed for {key}")
        return None


def cache_set(key, payload):
    try:
        menu_cache().set(key, payload, settings.MENU_CACHE_TTL)
    except Exception:
        logger.exception(f"Menu cache write failed for {key}")


def invalidate_menu_cache():
    try:
        menu_cache().clear()
    except Exception:
        logger.exception("Menu cache invalidation failed")


# =============== ASSEMBLY ===============

def serialize_item(item):
    return {
        'id': item.id,
        'name': item.name,
        'description': item.description,
        'category': item.category,
        'category_id': item.category_id,
        'menu_type': item.menu_type,
        'menu_type_id': item.menu_type_id,
        'price': format_price(item.price),
        'price_value': str(item.price),
        'image': image_url(item.image) if item.image and not item.image_missing else None,
        'image_missing': item.image_missing,
        'display_order': item.display_order,
        'is_featured': item.is_featured,
        'created_at': item.created_at.isoformat() if item.created_at else None,
    }


def build_menu_payload(requested_language=None, menu_type_id=None, category=None, using=DEFAULT_DB_ALIAS):
    """
    Returns (payload, cache_hit). A cache hit returns before any query runs.
    """
    started = time.monotonic()
    category = (category or '').strip() or None
    requested = requested_language.strip().lower() if isinstance(requested_language, str) and requested_language.strip() else None

    key = menu_cache_key(requested, menu_type_id, category)
    cached = cache_get(key)
    if cached is not None:
        payload = dict(cached)
        payload['stats'] = dict(cached['stats'], cache_status='HIT')
        return payload, True

    try:
        language, default_code = resolve_language(requested, using=using)
        served = language_as_dict(language)
        resolver = TranslationResolver(served['code'], default_code, using=using)

        if menu_type_id is not None and not MenuType.objects.using(using).filter(pk=menu_type_id).exists():
            menu_type_id = None

        items = resolver.menu_items(menu_type_id=menu_type_id, category_name=category, active_only=True)
        available = [language_as_dict(l) for l in list_active_languages(using=using)]
    except DatabaseError as e:
        logger.exception("Menu query failed")
        raise StorageUnavailable() from e

    category_names = list(dict.fromkeys(item.category for item in items))
    payload = {
        'success': True,
        'timestamp': timezone.now().isoformat(),
        'language': {
            'current': served,
            'available': available,
            'requested': requested or served['code'],
        },
        'ui_labels': get_labels(served['code']),
        'filters': {
            'menu_type_id': menu_type_id,
            'category': category,
        },
        'stats': {
            'total_items': len(items),
            'categories_count': len(category_names),
            'missing_images': sum(1 for item in items if item.image_missing),
            'execution_time_ms': round((time.monotonic() - started) * 1000, 2),
            'cache_status': 'MISS',
        },
        'categories': category_names,
        'data': [serialize_item(item) for item in items],
    }
    cache_set(key, payload)
    return payload, False
