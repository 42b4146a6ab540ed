import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.db.models.query import QuerySet

from inventory.catalog import (
    get_active_language,
    get_default_language_code,
    list_active_languages,
    resolve_language,
)
from inventory.labels import get_labels, RATING_LABELS
from inventory.models import Language

pytestmark = pytest.mark.django_db


def test_seeded_languages():
    languages = list_active_languages()
    assert [(l.code, l.direction, l.is_default) for l in languages] == [
        ('en', 'ltr', True),
        ('ar', 'rtl', False),
        ('ku', 'rtl', False),
    ]


def test_default_language_code():
    assert get_default_language_code() == 'en'


def test_default_falls_back_when_query_fails(monkeypatch):
    def broken(*args, **kwargs):
        raise DatabaseError('connection lost')

    monkeypatch.setattr(QuerySet, 'first', broken)
    assert get_default_language_code() == 'en'


def test_only_one_default_language():
    Language.objects.filter(code='ar').update(is_active=False)
    arabic = Language.objects.get(code='ar')
    arabic.is_default = True
    arabic.save()

    assert get_default_language_code() == 'ar'
    assert Language.objects.filter(is_default=True).count() == 1
    # the default language is always active
    assert Language.objects.get(code='ar').is_active


def test_inactive_language_is_not_served():
    Language.objects.filter(code='ku').update(is_active=False)
    assert get_active_language('ku') is None
    language, default_code = resolve_language('ku')
    assert language.code == default_code == 'en'


@pytest.mark.parametrize('code', [None, '', 'e', 'english', 'e1', '<x>'])
def test_malformed_codes_are_unknown(code):
    assert get_active_language(code) is None


def test_referenced_language_code_cannot_change(ctx, menu):
    arabic = Language.objects.get(code='ar')
    arabic.code = 'ara'
    with pytest.raises(ValidationError):
        arabic.save()


def test_labels_fall_back_to_english():
    assert get_labels('fr')['dashboard'] == 'Dashboard'
    assert get_labels('ku', RATING_LABELS)['title'] != get_labels('en', RATING_LABELS)['title']
