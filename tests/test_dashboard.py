import io
from decimal import Decimal

import openpyxl
import pytest
from django.urls import reverse

from inventory.models import Category, MenuItem, MenuType
from orders.models import Order, Rating
from tests.conftest import make_image

pytestmark = pytest.mark.django_db


def flashed(response):
    return [str(m) for m in response.context['messages']]


def test_dashboard_groups_items(admin_client, menu):
    response = admin_client.get(reverse('dashboard'))
    assert response.status_code == 200
    groups = response.context['groups']
    assert [g['menu_type'].name for g in groups] == ['Delivery', 'Indoor']
    indoor = groups[1]
    assert [i.name for i in indoor['categories'][0]['items']] == ['Tikka', 'Kebab']
    assert response.context['stats']['items'] == 3
    assert response.context['stats']['active_items'] == 3
    assert response.context['stats']['featured_items'] == 0


def test_update_display_order_reorders_items(admin_client, menu):
    response = admin_client.post(reverse('dashboard'), {
        'update_order': '', 'item_id': menu['tikka'].pk, 'display_order': '3',
    }, follow=True)
    assert 'Display order updated successfully!' in flashed(response)
    menu['tikka'].refresh_from_db()
    assert menu['tikka'].display_order == 3
    indoor = response.context['groups'][1]
    assert [i.name for i in indoor['categories'][0]['items']] == ['Kebab', 'Tikka']


def test_update_display_order_rejects_negative(admin_client, menu):
    response = admin_client.post(reverse('dashboard'), {
        'update_order': '', 'item_id': menu['tikka'].pk, 'display_order': '-1',
    }, follow=True)
    assert any(m.startswith('Something wrong') for m in flashed(response))
    menu['tikka'].refresh_from_db()
    assert menu['tikka'].display_order == 0


def test_update_display_order_unknown_item(admin_client, menu):
    response = admin_client.post(reverse('dashboard'), {
        'update_order': '', 'item_id': 999, 'display_order': '1',
    }, follow=True)
    assert 'Item not found or insufficient permissions.' in flashed(response)


def test_dashboard_in_arabic(admin_client, menu):
    response = admin_client.get(reverse('dashboard'), {'lang': 'ar'})
    names = {g['menu_type'].name for g in response.context['groups']}
    assert 'داخلي' in names
    assert admin_client.session['admin_lang'] == 'ar'


# =============== MENU TYPES ===============

def test_add_menu_type(admin_client, db):
    response = admin_client.post(reverse('manage_menu_types'),
                                 {'add': '1', 'name_en': 'Outdoor', 'name_ar': 'خارجي'}, follow=True)
    assert 'Menu type added successfully' in flashed(response)
    menu_type = MenuType.objects.get()
    assert dict(menu_type.translations.values_list('language_id', 'name')) == {'en': 'Outdoor', 'ar': 'خارجي'}


def test_add_menu_type_without_english_name(admin_client, db):
    response = admin_client.post(reverse('manage_menu_types'), {'add': '1', 'name_ar': 'خارجي'}, follow=True)
    assert any('default language' in m for m in flashed(response))
    assert not MenuType.objects.exists()


def test_update_menu_type(admin_client, menu):
    admin_client.post(reverse('manage_menu_types'), {
        'update': '1', 'menu_type_id': menu['indoor'].pk, 'name_en': 'Dine In', 'name_ku': 'ناوەوە',
    })
    names = dict(menu['indoor'].translations.values_list('language_id', 'name'))
    assert names == {'en': 'Dine In', 'ku': 'ناوەوە'}


def test_delete_menu_type(admin_client, menu):
    response = admin_client.post(reverse('manage_menu_types'),
                                 {'delete': '1', 'menu_type_id': menu['indoor'].pk}, follow=True)
    assert 'Menu type deleted with 1 categories and 2 items.' in flashed(response)
    assert not Category.objects.filter(menu_type_id=menu['indoor'].pk).exists()


def test_menu_types_page_lists_translations(admin_client, menu):
    response = admin_client.get(reverse('manage_menu_types'))
    rows = {row['menu_type'].id: row for row in response.context['rows']}
    form = rows[menu['indoor'].pk]['form']
    assert form['name_ar'].value() == 'داخلي'
    assert rows[menu['indoor'].pk]['categories_count'] == 1


def test_menu_type_writes_are_rate_limited(admin_client, db, settings):
    settings.RATE_LIMITS = dict(settings.RATE_LIMITS, menu_types=(1, 600))
    admin_client.post(reverse('manage_menu_types'), {'add': '1', 'name_en': 'One'})
    response = admin_client.post(reverse('manage_menu_types'), {'add': '1', 'name_en': 'Two'}, follow=True)
    assert any('Too many requests' in m for m in flashed(response))
    assert MenuType.objects.count() == 1


# =============== CATEGORIES ===============

def test_add_category(admin_client, menu):
    admin_client.post(reverse('manage_categories'), {
        'add': '1', 'menu_type': menu['delivery'].pk, 'name_en': 'Desserts',
    })
    category = Category.objects.get(translations__name='Desserts')
    assert category.menu_type_id == menu['delivery'].pk


def test_categories_filtered_by_menu_type(admin_client, menu):
    response = admin_client.get(reverse('manage_categories'), {'menu_type': menu['delivery'].pk})
    assert [row['category'].name for row in response.context['rows']] == ['Drinks']


def test_delete_category(admin_client, menu):
    admin_client.post(reverse('manage_categories'), {'delete': '1', 'category_id': menu['grills'].pk})
    assert not MenuItem.objects.filter(pk=menu['kebab'].pk).exists()


# =============== ITEMS ===============

def test_add_item_with_image(admin_client, menu, upload_root):
    response = admin_client.post(reverse('add_item'), {
        'category': menu['grills'].pk,
        'price': '8500',
        'name_en': 'Shish Tawook',
        'description_en': 'Chicken skewers',
        'name_ar': 'شيش طاووق',
        'image': make_image(),
    }, follow=True)
    assert 'Menu item added successfully' in flashed(response)
    item = MenuItem.objects.get(translations__name='Shish Tawook')
    assert (upload_root / item.image).exists()
    assert item.translations.count() == 2


def test_add_item_with_display_flags(admin_client, menu):
    admin_client.post(reverse('add_item'), {
        'category': menu['grills'].pk,
        'price': '9000',
        'name_en': 'Lamb Chops',
        'display_order': '2',
        'is_featured': 'on',
    })
    item = MenuItem.objects.get(translations__name='Lamb Chops')
    assert item.display_order == 2
    assert item.is_featured is True
    # an unticked checkbox is not submitted
    assert item.is_active is False

    stats = admin_client.get(reverse('dashboard')).context['stats']
    assert stats['active_items'] == 3
    assert stats['featured_items'] == 1


def test_add_item_without_any_name_is_rejected(admin_client, menu):
    before = MenuItem.objects.count()
    response = admin_client.post(reverse('add_item'), {'category': menu['grills'].pk, 'price': '1'})
    assert response.status_code == 200
    assert 'At least one translation is required.' in flashed(response)
    assert MenuItem.objects.count() == before


def test_edit_item_offers_only_same_menu_type_categories(admin_client, menu):
    response = admin_client.get(reverse('edit_item', args=[menu['kebab'].pk]))
    choices = [value for value, _ in response.context['form'].fields['category'].choices]
    assert choices == [menu['grills'].pk]
    assert response.context['form']['name_ar'].value() == 'كباب'
    assert response.context['form']['is_active'].value() is True


def test_edit_item(admin_client, menu):
    admin_client.post(reverse('edit_item', args=[menu['tikka'].pk]), {
        'category': menu['grills'].pk, 'price': '11000', 'name_en': 'Chicken Tikka',
        'display_order': '4', 'is_active': 'on', 'is_featured': 'on',
    })
    menu['tikka'].refresh_from_db()
    assert (menu['tikka'].display_order, menu['tikka'].is_active, menu['tikka'].is_featured) == (4, True, True)
    assert menu['tikka'].price == Decimal('11000')
    assert menu['tikka'].translations.get(language_id='en').name == 'Chicken Tikka'


def test_delete_item(admin_client, menu):
    admin_client.post(reverse('delete_item', args=[menu['tikka'].pk]))
    assert not MenuItem.objects.filter(pk=menu['tikka'].pk).exists()
    assert admin_client.get(reverse('delete_item', args=[menu['kebab'].pk])).status_code == 405


def test_delete_translation(admin_client, menu):
    url = reverse('delete_translation', args=['item', menu['kebab'].pk, 'ar'])
    admin_client.post(url)
    assert list(menu['kebab'].translations.values_list('language_id', flat=True)) == ['en']

    response = admin_client.post(reverse('delete_translation', args=['item', menu['kebab'].pk, 'en']), follow=True)
    assert 'Cannot delete the last translation.' in flashed(response)


def test_cleanup_images(admin_client, ctx, menu, upload_root):
    from inventory import services

    item = services.create_menu_item(ctx, menu['grills'].pk, '1', {'en': 'Lost'}, image_file=make_image())
    (upload_root / item.image).unlink()
    response = admin_client.post(reverse('cleanup_images'), follow=True)
    assert 'Cleaned 1 missing image reference(s)' in flashed(response)


# =============== ORDERS & RATINGS ===============

@pytest.fixture
def orders(db):
    return [
        Order.objects.create(customer_name='Ali', customer_phone='07701234567', total_amount='15000.00',
                             items=[{'id': 1, 'name': 'Kebab', 'quantity': 1,
                                     'unit_price': '15000.00', 'line_total': '15000.00'}]),
        Order.objects.create(customer_name='Sara', customer_phone='07707654321', total_amount='5000.00',
                             order_type='dine-in', status='cancelled'),
    ]


def test_orders_page_filters_and_stats(admin_client, orders):
    response = admin_client.get(reverse('orders'), {'status': 'pending', 'order_type': 'all'})
    assert [o.customer_name for o in response.context['page']] == ['Ali']
    stats = response.context['stats']
    assert stats['pending_orders'] == 1
    assert stats['cancelled_orders'] == 1
    assert stats['total_revenue'] == Decimal('15000')


def test_update_order_status(admin_client, orders):
    admin_client.post(reverse('orders'), {'update_status': '1', 'order_id': orders[0].pk, 'status': 'confirmed'})
    orders[0].refresh_from_db()
    assert orders[0].status == 'confirmed'


def test_delete_order(admin_client, orders):
    admin_client.post(reverse('orders'), {'delete': '1', 'order_id': orders[1].pk})
    assert not Order.objects.filter(pk=orders[1].pk).exists()


def test_orders_export(admin_client, orders):
    response = admin_client.get(reverse('orders_export'), {'status': 'pending'})
    assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    sheet = openpyxl.load_workbook(io.BytesIO(response.content)).active
    assert sheet['A4'].value == 'Order ID'
    assert sheet['C5'].value == 'Ali'
    assert sheet['G5'].value == '1x Kebab'
    assert sheet['C6'].value is None


def test_ratings_page(admin_client, db):
    Rating.objects.create(service_rating=5, staff_rating=4, cleanliness_rating=3, overall_experience='good')
    Rating.objects.create(service_rating=1, staff_rating=2, cleanliness_rating=3, overall_experience='bad')

    response = admin_client.get(reverse('ratings'), {'experience': 'good'})
    assert len(response.context['page'].object_list) == 1
    assert response.context['stats']['avg_service'] == 3.0
    assert response.context['stats']['bad_count'] == 1


def test_delete_rating(admin_client, db):
    rating = Rating.objects.create(service_rating=5, staff_rating=5, cleanliness_rating=5, overall_experience='good')
    admin_client.post(reverse('ratings'), {'delete': '1', 'rating_id': rating.pk})
    assert not Rating.objects.exists()
