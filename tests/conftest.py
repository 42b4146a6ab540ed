import io

import pytest
from django.core.cache import caches
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from authentication.context import RequestContext
from inventory import services


@pytest.fixture(autouse=True)
def isolated_storage(settings, tmp_path):
    """Local-memory caches and a throwaway upload directory for every test"""
    settings.CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': f'default-{tmp_path.name}',
        },
        'menu': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': f'menu-{tmp_path.name}',
        },
    }
    upload_root = tmp_path / 'uploads'
    upload_root.mkdir()
    settings.MENU_UPLOAD_ROOT = upload_root
    settings.MENU_UPLOAD_URL = '/media/uploads/'
    caches['default'].clear()
    caches['menu'].clear()
    yield upload_root
    caches['default'].clear()
    caches['menu'].clear()


@pytest.fixture
def upload_root(isolated_storage):
    return isolated_storage


@pytest.fixture
def admin_user(db, django_user_model):
    return django_user_model.objects.create_user(username='manager', password='S3cret-pass!', full_name='Manager')


@pytest.fixture
def admin_client(client, admin_user):
    client.force_login(admin_user)
    return client


@pytest.fixture
def ctx(admin_user):
    return RequestContext(admin=admin_user, ip='127.0.0.1', user_agent='pytest', path='/test', method='POST')


def make_image(name='dish.png', image_format='PNG', size=(4, 4)):
    buffer = io.BytesIO()
    Image.new('RGB', size, color=(200, 80, 40)).save(buffer, image_format)
    content_type = f'image/{image_format.lower()}'
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


@pytest.fixture
def image_file():
    return make_image()


@pytest.fixture
def menu(ctx):
    """
    A small menu: Indoor (en/ar) > Grills (en) > Kebab (en/ar) and Tikka (en),
    plus Delivery (en) > Drinks (en/ku) > Tea (ku only).
    """
    indoor = services.create_menu_type(ctx, {'en': 'Indoor', 'ar': 'داخلي'})
    delivery = services.create_menu_type(ctx, {'en': 'Delivery'})
    grills = services.create_category(ctx, indoor.pk, {'en': 'Grills'})
    drinks = services.create_category(ctx, delivery.pk, {'en': 'Drinks', 'ku': 'خواردنەوە'})
    kebab = services.create_menu_item(ctx, grills.pk, '12000', {
        'en': {'name': 'Kebab', 'description': 'Grilled minced lamb'},
        'ar': {'name': 'كباب', 'description': 'لحم غنم مشوي'},
    })
    tikka = services.create_menu_item(ctx, grills.pk, '10000', {'en': 'Tikka'})
    tea = services.create_menu_item(ctx, drinks.pk, '0', {'ku': 'چا'})
    return {
        'indoor': indoor, 'delivery': delivery,
        'grills': grills, 'drinks': drinks,
        'kebab': kebab, 'tikka': tikka, 'tea': tea,
    }
