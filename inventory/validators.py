import html
import re
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.utils.html import strip_tags

from .models import MAX_PRICE

LANGUAGE_CODE_RE = re.compile(r'^[a-z]{2,5}$', re.IGNORECASE)
MAX_ENTITY_ID = 2147483647
NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000
MAX_DISPLAY_ORDER = 9999


def normalize_language_code(code):
    """Return the lowercased code or raise ValidationError"""
    if not isinstance(code, str) or not LANGUAGE_CODE_RE.match(code.strip()):
        raise ValidationError(f"Invalid language code: {code!r}")
    return code.strip().lower()


def validate_entity_id(value, label='id'):
    try:
        entity_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}.")
    if isinstance(value, float) and value != entity_id:
        raise ValidationError(f"Invalid {label}.")
    if entity_id < 1 or entity_id > MAX_ENTITY_ID:
        raise ValidationError(f"Invalid {label}.")
    return entity_id


def clean_text(value, max_length, field_name='text', required=False):
    """Strip markup and surrounding whitespace, then enforce the length cap"""
    if value is None:
        value = ''
    text = html.unescape(strip_tags(str(value))).strip()
    if required and not text:
        raise ValidationError(f"{field_name.capitalize()} is required.")
    if len(text) > max_length:
        raise ValidationError(f"{field_name.capitalize()} must be at most {max_length} characters.")
    return text


def validate_price(value):
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError('Invalid price.')
    if not price.is_finite() or price < 0 or price > MAX_PRICE:
        raise ValidationError(f"Price must be between 0 and {MAX_PRICE}.")
    return price.quantize(Decimal('0.01'))
