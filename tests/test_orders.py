import json
from decimal import Decimal

import pytest
from django.urls import reverse

from orders.models import Order
from orders.services import order_message, order_stats

pytestmark = pytest.mark.django_db


def submit(client, **payload):
    data = {
        'customer_name': 'Ali',
        'customer_phone': '07701234567',
        'customer_address': 'Erbil, 60m street',
        'order_type': 'delivery',
        'lang': 'ar',
        'items': [],
    }
    data.update(payload)
    return client.post(reverse('submit_order'), json.dumps(data), content_type='application/json')


def test_order_is_priced_server_side(client, menu):
    response = submit(client, items=[
        {'menu_item_id': menu['kebab'].pk, 'quantity': 2},
        {'menu_item_id': menu['tikka'].pk, 'quantity': 1},
        {'menu_item_id': menu['kebab'].pk, 'quantity': 1},
    ])
    assert response.status_code == 201
    body = response.json()
    order = Order.objects.get(pk=body['order_id'])

    assert order.total_amount == Decimal('46000.00')
    assert body['total'] == 'IQD 46,000.00'
    lines = {line['id']: line for line in order.items}
    assert lines[menu['kebab'].pk]['quantity'] == 3
    assert lines[menu['kebab'].pk]['name'] == 'كباب'
    assert lines[menu['tikka'].pk]['name'] == 'Tikka'
    assert 'كباب' in body['message']


def test_unknown_items_rejected(client, menu):
    response = submit(client, items=[{'menu_item_id': 999, 'quantity': 1}])
    assert response.status_code == 400
    assert response.json()['error_code'] == 'INVALID_ITEMS'
    assert not Order.objects.exists()


def test_hidden_items_cannot_be_ordered(client, ctx, menu):
    from inventory import services

    services.update_menu_item(ctx, menu['tikka'].pk, menu['grills'].pk, '10000', {'en': 'Tikka'}, is_active=False)
    response = submit(client, items=[{'menu_item_id': menu['tikka'].pk, 'quantity': 1}])
    assert response.status_code == 400
    assert response.json()['error_code'] == 'INVALID_ITEMS'


@pytest.mark.parametrize('payload', [
    {'items': []},
    {'items': [{'menu_item_id': 1, 'quantity': 0}]},
    {'items': [{'menu_item_id': 1, 'quantity': 100}]},
    {'customer_phone': 'call me'},
    {'customer_address': ''},
])
def test_invalid_checkout_rejected(client, menu, payload):
    payload = dict(payload)
    payload.setdefault('items', [{'menu_item_id': menu['kebab'].pk, 'quantity': 1}])
    response = submit(client, **payload)
    assert response.status_code == 400
    assert response.json()['error_code'] == 'INVALID_PARAMETER'


def test_dine_in_needs_no_address(client, menu):
    response = submit(client, order_type='dine-in', customer_address='',
                      items=[{'menu_item_id': menu['tikka'].pk, 'quantity': 1}])
    assert response.status_code == 201


def test_order_message_in_english(menu):
    order = Order.objects.create(
        customer_name='Ali', customer_phone='07701234567', language_code='en', total_amount='24000.00',
        items=[{'id': 1, 'name': 'Kebab', 'quantity': 2, 'unit_price': '12000.00', 'line_total': '24000.00'}],
    )
    message = order_message(order)
    assert 'Kebab' in message
    assert '2 × IQD 12,000.00 = IQD 24,000.00' in message
    assert message.endswith('IQD 24,000.00*')


def test_order_stats(db):
    Order.objects.create(customer_name='A', customer_phone='1', total_amount='100.00')
    Order.objects.create(customer_name='B', customer_phone='2', total_amount='50.00', status='delivered')
    Order.objects.create(customer_name='C', customer_phone='3', total_amount='70.00', status='cancelled')

    stats = order_stats()
    assert stats['total_orders'] == 3
    assert stats['pending_orders'] == 1
    assert stats['delivered_orders'] == 1
    assert stats['today_revenue'] == Decimal('150')
    assert stats['total_revenue'] == Decimal('150')


def test_order_api_requires_admin(client, db):
    Order.objects.create(customer_name='A', customer_phone='1', total_amount='100.00')
    anonymous = client.get(reverse('order_list_api'))
    assert anonymous.status_code == 403
    assert anonymous.json()['error_code'] == 'PERMISSION_DENIED'


def test_order_api_lists_for_admin(admin_client, db):
    Order.objects.create(customer_name='A', customer_phone='1', total_amount='100.00')
    Order.objects.create(customer_name='B', customer_phone='2', total_amount='100.00', status='ready')
    body = admin_client.get(reverse('order_list_api'), {'status': 'ready'}).json()
    assert [row['customer_name'] for row in body] == ['B']
