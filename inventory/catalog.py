import logging

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError

from .models import Language
from .validators import LANGUAGE_CODE_RE

logger = logging.getLogger(__name__)


def fallback_language_code():
    return getattr(settings, 'DEFAULT_LANGUAGE_FALLBACK', 'en')


def list_active_languages(using=DEFAULT_DB_ALIAS):
    """Active languages, default first, then alphabetical by name"""
    return list(
        Language.objects.using(using)
        .filter(is_active=True)
        .order_by('-is_default', 'name')
    )


def get_default_language_code(using=DEFAULT_DB_ALIAS):
    """
    Code of the default language, or the hard-coded fallback when no row is
    marked default or the query fails. Never raises.
    """
    try:
        code = (
            Language.objects.using(using)
            .filter(is_default=True, is_active=True)
            .values_list('code', flat=True)
            .first()
        )
    except DatabaseError:
        logger.exception("Failed to load the default language")
        return fallback_language_code()
    return code or fallback_language_code()


def get_active_language(code, using=DEFAULT_DB_ALIAS):
    """Active Language for a code, or None for malformed/unknown/inactive codes"""
    if not code or not isinstance(code, str) or not LANGUAGE_CODE_RE.match(code.strip()):
        return None
    return (
        Language.objects.using(using)
        .filter(code=code.strip().lower(), is_active=True)
        .first()
    )


def resolve_language(requested, using=DEFAULT_DB_ALIAS):
    """
    Pick the language to serve for a requested code.

    Returns (language, default_code); language is the requested one when it
    is active, otherwise the default language (which may be None when the
    catalog is empty).
    """
    default_code = get_default_language_code(using=using)
    language = get_active_language(requested, using=using)
    if language is None:
        language = get_active_language(default_code, using=using)
    return language, default_code


def language_as_dict(language):
    if language is None:
        code = fallback_language_code()
        return {
            'code': code,
            'name': code,
            'native_name': code,
            'direction': 'ltr',
            'is_default': True,
        }
    return {
        'code': language.code,
        'name': language.name,
        'native_name': language.native_name,
        'direction': language.direction,
        'is_default': language.is_default,
    }
