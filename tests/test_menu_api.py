from decimal import Decimal

import pytest
from django.urls import reverse

from inventory import services
from inventory.menu import build_menu_payload, format_price

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize('value, expected', [
    (0, 'Free'),
    ('0.00', 'Free'),
    (Decimal('12.5'), 'IQD 12.50'),
    ('1234567', 'Price not available'),
    (-1, 'Price not available'),
    ('abc', 'Price not available'),
    (None, 'Price not available'),
    ('999999.99', 'IQD 999,999.99'),
])
def test_format_price(value, expected):
    assert format_price(value) == expected


def test_arabic_request_falls_back_to_english(client, menu):
    response = client.get(reverse('menu_api'), {'lang': 'ar'})
    assert response.status_code == 200
    body = response.json()

    assert body['success'] is True
    assert body['language']['current']['code'] == 'ar'
    assert body['language']['current']['direction'] == 'rtl'
    assert body['language']['requested'] == 'ar'
    items = {item['id']: item for item in body['data']}
    assert items[menu['kebab'].pk]['name'] == 'كباب'
    assert items[menu['tikka'].pk]['name'] == 'Tikka'
    assert items[menu['tea'].pk]['name'] == 'Unnamed Item'
    assert items[menu['tea'].pk]['price'] == 'Free'
    assert items[menu['kebab'].pk]['price'] == 'IQD 12,000.00'
    assert body['ui_labels']['dashboard'] == 'لوحة التحكم'


def test_unknown_language_serves_default_but_echoes_request(client, menu):
    body = client.get(reverse('menu_api'), {'lang': 'fr'}).json()
    assert body['language']['current']['code'] == 'en'
    assert body['language']['requested'] == 'fr'
    assert [l['code'] for l in body['language']['available']][0] == 'en'


def test_malformed_language_is_not_an_error(client, menu):
    response = client.get(reverse('menu_api'), {'lang': '<x>'})
    assert response.status_code == 200
    assert response.json()['language']['current']['code'] == 'en'


def test_overlong_language_falls_back_to_default(client, menu):
    response = client.get(reverse('menu_api'), {'lang': 'abcdefghijk'})
    assert response.status_code == 200
    assert response.json()['language']['current']['code'] == 'en'


def test_menu_type_filter(client, menu):
    body = client.get(reverse('menu_api'), {'lang': 'en', 'menu_type': menu['indoor'].pk}).json()
    assert {item['id'] for item in body['data']} == {menu['kebab'].pk, menu['tikka'].pk}
    assert body['filters']['menu_type_id'] == menu['indoor'].pk
    assert body['stats']['total_items'] == 2
    assert body['categories'] == ['Grills']


def test_unknown_menu_type_is_ignored(client, menu):
    body = client.get(reverse('menu_api'), {'menu_type': 999}).json()
    assert body['stats']['total_items'] == 3
    assert body['filters']['menu_type_id'] is None


@pytest.mark.parametrize('params', [{'menu_type': 'abc'}, {'menu_type': '0'}, {'category': 'x' * 101}])
def test_malformed_parameters_rejected(client, menu, params):
    response = client.get(reverse('menu_api'), params)
    assert response.status_code == 400
    body = response.json()
    assert body['success'] is False
    assert body['error_code'] == 'INVALID_PARAMETER'


def test_category_substring_filter(client, menu):
    body = client.get(reverse('menu_api'), {'category': 'rill'}).json()
    assert {item['category'] for item in body['data']} == {'Grills'}


def test_category_filter_with_ampersand(client, ctx, menu):
    fish = services.create_category(ctx, menu['indoor'].pk, {'en': 'Fish & Chips'})
    cod = services.create_menu_item(ctx, fish.pk, '7500', {'en': 'Cod'})

    body = client.get(reverse('menu_api'), {'lang': 'en', 'category': 'Fish & Chips'}).json()
    assert body['stats']['total_items'] == 1
    assert [item['id'] for item in body['data']] == [cod.pk]
    assert body['categories'] == ['Fish &amp; Chips']


def test_items_grouped_by_category_in_name_order(client, ctx, db):
    cafe = services.create_menu_type(ctx, {'en': 'Cafe'})
    drinks = services.create_category(ctx, cafe.pk, {'en': 'Drinks'})
    appetizers = services.create_category(ctx, cafe.pk, {'en': 'Appetizers'})
    services.create_menu_item(ctx, drinks.pk, '3000', {'en': 'Apple juice'})
    services.create_menu_item(ctx, appetizers.pk, '4000', {'en': 'Zucchini fries'})

    body = client.get(reverse('menu_api'), {'lang': 'en'}).json()
    assert [(item['category'], item['name']) for item in body['data']] == [
        ('Appetizers', 'Zucchini fries'),
        ('Drinks', 'Apple juice'),
    ]
    assert body['categories'] == ['Appetizers', 'Drinks']


def test_inactive_items_hidden_and_featured_flagged(client, ctx, menu):
    services.update_menu_item(ctx, menu['tikka'].pk, menu['grills'].pk, '10000', {'en': 'Tikka'}, is_active=False)
    services.update_menu_item(ctx, menu['kebab'].pk, menu['grills'].pk, '12000', {'en': 'Kebab'}, is_featured=True)

    body = client.get(reverse('menu_api'), {'lang': 'en'}).json()
    items = {item['id']: item for item in body['data']}
    assert menu['tikka'].pk not in items
    assert items[menu['kebab'].pk]['is_featured'] is True
    assert items[menu['tea'].pk]['is_featured'] is False
    assert body['stats']['total_items'] == 2


def test_second_request_is_served_from_cache(client, menu):
    first = client.get(reverse('menu_api'), {'lang': 'en'})
    second = client.get(reverse('menu_api'), {'lang': 'en'})

    assert first['X-Cache'] == 'MISS'
    assert second['X-Cache'] == 'HIT'
    assert second.json()['stats']['cache_status'] == 'HIT'
    assert second['Cache-Control'] == 'public, max-age=300'
    assert second['ETag']


def test_menu_changes_invalidate_cache(ctx, menu, django_capture_on_commit_callbacks):
    build_menu_payload('en')
    assert build_menu_payload('en')[1] is True

    with django_capture_on_commit_callbacks(execute=True):
        services.create_menu_item(ctx, menu['grills'].pk, '1', {'en': 'Falafel'})

    payload, cache_hit = build_menu_payload('en')
    assert cache_hit is False
    assert 'Falafel' in [item['name'] for item in payload['data']]


def test_image_urls_and_missing_flags(client, ctx, menu, upload_root):
    from tests.conftest import make_image

    item = services.create_menu_item(ctx, menu['grills'].pk, '1', {'en': 'Shawarma'}, image_file=make_image())
    body = client.get(reverse('menu_api')).json()
    row = next(i for i in body['data'] if i['id'] == item.pk)
    assert row['image'] == f'/media/uploads/{item.image}'
    assert row['image_missing'] is False


def test_throttled_after_hourly_budget(client, menu, monkeypatch):
    from inventory.views import MenuApiThrottle

    monkeypatch.setattr(MenuApiThrottle, 'THROTTLE_RATES', {'menu_api': '2/hour'})
    assert client.get(reverse('menu_api')).status_code == 200
    assert client.get(reverse('menu_api')).status_code == 200
    response = client.get(reverse('menu_api'))

    assert response.status_code == 429
    assert response.json()['error_code'] == 'RATE_LIMIT_EXCEEDED'
    assert response.json()['retry_after'] > 0


def test_languages_endpoint(client, db):
    body = client.get(reverse('language_list')).json()
    assert [row['code'] for row in body] == ['en', 'ar', 'ku']
