import json
import logging

import pytest
from django.urls import reverse

from authentication.audit import audit_log
from authentication.context import RequestContext
from authentication.ratelimit import RateLimiter

pytestmark = pytest.mark.django_db

PASSWORD = 'S3cret-pass!'


def login(client, username='manager', password=PASSWORD, **extra):
    return client.post(reverse('login'), {'username': username, 'password': password}, **extra)


def test_login_success_redirects_to_dashboard(client, admin_user):
    response = login(client)
    assert response.status_code == 302
    assert response.url == reverse('dashboard')
    admin_user.refresh_from_db()
    assert admin_user.last_login is not None


def test_login_honours_safe_next(client, admin_user):
    response = client.post(reverse('login') + '?next=/admin/orders/',
                           {'username': 'manager', 'password': PASSWORD})
    assert response.url == '/admin/orders/'

    client.logout()
    response = client.post(reverse('login') + '?next=https://evil.example/',
                           {'username': 'manager', 'password': PASSWORD})
    assert response.url == reverse('dashboard')


def test_wrong_password_and_unknown_user_look_the_same(client, admin_user):
    for username, password in (('manager', 'wrong'), ('nobody', PASSWORD)):
        response = login(client, username, password, follow=True)
        assert 'Invalid username or password' in response.content.decode()


def test_account_locks_after_repeated_failures(client, admin_user, settings):
    settings.RATE_LIMITS = dict(settings.RATE_LIMITS, login=(50, 900))
    for _ in range(settings.MAX_LOGIN_ATTEMPTS):
        login(client, password='wrong')

    admin_user.refresh_from_db()
    assert admin_user.is_locked

    response = login(client, follow=True)
    assert 'Account temporarily locked' in response.content.decode()
    assert '_auth_user_id' not in client.session


def test_success_resets_failure_counter(client, admin_user):
    login(client, password='wrong')
    login(client, password='wrong')
    login(client)
    admin_user.refresh_from_db()
    assert admin_user.failed_attempts == 0


def test_login_is_rate_limited_per_ip(client, admin_user, settings):
    settings.RATE_LIMITS = dict(settings.RATE_LIMITS, login=(2, 900))
    login(client, password='wrong')
    login(client, password='wrong')
    response = login(client, follow=True)
    assert 'Too many login attempts' in response.content.decode()


def test_staff_flag_required(client, django_user_model):
    django_user_model.objects.create_user(username='cook', password=PASSWORD, is_staff=False)
    response = login(client, 'cook', PASSWORD, follow=True)
    assert 'Invalid username or password' in response.content.decode()
    assert '_auth_user_id' not in client.session


def test_logout_requires_post(admin_client):
    assert admin_client.get(reverse('logout')).status_code == 405
    response = admin_client.post(reverse('logout'))
    assert response.url == reverse('login')
    assert '_auth_user_id' not in admin_client.session


def test_back_office_redirects_anonymous_to_login(client):
    response = client.get(reverse('dashboard'))
    assert response.status_code == 302
    assert response.url.startswith(reverse('login'))
    assert 'next=' in response.url


def test_back_office_logs_out_non_staff(client, django_user_model):
    cook = django_user_model.objects.create_user(username='cook', password=PASSWORD, is_staff=False)
    client.force_login(cook)
    response = client.get(reverse('dashboard'))
    assert response.status_code == 302
    assert '_auth_user_id' not in client.session


def test_back_office_pages_are_not_cached(admin_client, menu):
    response = admin_client.get(reverse('dashboard'))
    assert response.status_code == 200
    assert 'no-cache' in response['Cache-Control']


def test_request_id_header(client, db):
    response = client.get(reverse('health_check'))
    assert response.status_code == 200
    assert len(response['X-Request-ID']) == 32


# =============== RATE LIMITER ===============

def test_rate_limiter_window(db):
    limiter = RateLimiter('test', max_attempts=2, window=60)
    assert limiter.hit('1.2.3.4')
    assert limiter.hit('1.2.3.4')
    assert not limiter.hit('1.2.3.4')
    assert limiter.remaining('1.2.3.4') == 0
    assert 0 < limiter.retry_after('1.2.3.4') <= 60
    # separate keys have separate budgets
    assert limiter.hit('5.6.7.8')

    limiter.reset('1.2.3.4')
    assert limiter.count('1.2.3.4') == 0
    assert limiter.hit('1.2.3.4')


def test_rate_limiter_defaults_from_settings(settings):
    settings.RATE_LIMITS = {'login': (5, 900)}
    limiter = RateLimiter('login')
    assert (limiter.max_attempts, limiter.window) == (5, 900)


# =============== AUDIT ===============

def test_audit_entry_is_one_json_line(admin_user, caplog, monkeypatch):
    # the audit logger does not propagate to the root handlers in production
    monkeypatch.setattr(logging.getLogger('audit'), 'propagate', True)
    ctx = RequestContext(admin=admin_user, ip='10.0.0.1', user_agent='pytest', path='/admin/')
    with caplog.at_level(logging.INFO, logger='audit'):
        entry = audit_log(ctx, 'menu_type_deleted', names={'ar': 'داخلي'})

    record = json.loads(caplog.records[-1].getMessage())
    assert record == json.loads(json.dumps(entry))
    assert record['admin'] == {'id': admin_user.pk, 'username': 'manager'}
    assert record['details']['names']['ar'] == 'داخلي'
    assert record['ip'] == '10.0.0.1'
