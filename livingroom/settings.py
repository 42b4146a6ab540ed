"""
Django settings for the Living Room restaurant website.

Everything environment specific is read from environment variables; a local
`.env` file is loaded first when present.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_int(name, default):
    value = os.getenv(name)
    return int(value) if value else default


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-livingroom-development-key')

DEBUG = env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = [h.strip() for h in os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h.strip()]


INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'rest_framework',
    'django_filters',
    'drf_spectacular',

    'authentication',
    'inventory',
    'orders',
    'dashboard',
    'storefront',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'authentication.middleware.RequestContextMiddleware',
]

ROOT_URLCONF = 'livingroom.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'livingroom.wsgi.application'


# =============== DATABASE ===============

DB_ENGINE = os.getenv('DB_ENGINE', 'sqlite').lower()

if DB_ENGINE == 'sqlite':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.getenv('DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': f'django.db.backends.{DB_ENGINE}',
            'HOST': os.getenv('DB_HOST', 'localhost'),
            'PORT': os.getenv('DB_PORT', ''),
            'NAME': os.getenv('DB_NAME', 'restaurant_db'),
            'USER': os.getenv('DB_USER', ''),
            'PASSWORD': os.getenv('DB_PASSWORD', ''),
            'ATOMIC_REQUESTS': False,
        }
    }
    if DB_ENGINE == 'mysql':
        DATABASES['default']['OPTIONS'] = {'charset': 'utf8mb4'}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

AUTH_USER_MODEL = 'authentication.AdminUser'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
]

LOGIN_URL = 'login'


# =============== SESSIONS & SECURITY ===============

SESSION_TIMEOUT = env_int('SESSION_TIMEOUT', 3600)
SESSION_COOKIE_AGE = SESSION_TIMEOUT
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'
SESSION_COOKIE_SECURE = env_bool('SESSION_COOKIE_SECURE', False)
CSRF_COOKIE_SECURE = SESSION_COOKIE_SECURE
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# login attempts per account before a temporary lockout
MAX_LOGIN_ATTEMPTS = 5
LOGIN_LOCKOUT_TIME = 900

# scope -> (max attempts, window in seconds)
RATE_LIMITS = {
    'login': (MAX_LOGIN_ATTEMPTS, LOGIN_LOCKOUT_TIME),
    'menu_types': (20, 600),
    'categories': (20, 600),
    'menu_items': (20, 600),
    'delete': (10, 600),
    'public_forms': (30, 60),
}


# =============== I18N ===============

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.getenv('TIME_ZONE', 'Asia/Baghdad')
USE_I18N = True
USE_TZ = True

DEFAULT_LANGUAGE_FALLBACK = 'en'


# =============== STATIC & MEDIA ===============

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

MEDIA_URL = '/media/'
MEDIA_ROOT = Path(os.getenv('MEDIA_ROOT', BASE_DIR / 'media'))

MENU_UPLOAD_ROOT = Path(os.getenv('MENU_UPLOAD_ROOT', MEDIA_ROOT / 'uploads'))
MENU_UPLOAD_URL = MEDIA_URL + 'uploads/'

MAX_UPLOAD_SIZE = env_int('MAX_UPLOAD_SIZE', 2 * 1024 * 1024)
ALLOWED_IMAGE_TYPES = {
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
}


# =============== MENU ===============

MENU_CURRENCY = 'IQD'
MENU_MAX_PRICE = '999999.99'
MENU_CACHE_TTL = env_int('MENU_CACHE_TTL', 300)

# menu types whose default-language name matches get the WhatsApp cart
DELIVERY_MENU_NAMES = ['delivery']
WHATSAPP_NUMBER = os.getenv('WHATSAPP_NUMBER', '9647xxxxxxxxx')


# =============== CACHES ===============

LOG_DIR = Path(os.getenv('LOG_DIR', BASE_DIR / 'logs'))
os.makedirs(LOG_DIR, exist_ok=True)

REDIS_URL = os.getenv('REDIS_URL')

if REDIS_URL:
    DEFAULT_CACHE = {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': REDIS_URL,
        'KEY_PREFIX': 'livingroom',
    }
else:
    DEFAULT_CACHE = {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'livingroom-default',
    }

CACHES = {
    'default': DEFAULT_CACHE,
    'menu': {
        'BACKEND': 'django.core.cache.backends.filebased.FileBasedCache',
        'LOCATION': str(LOG_DIR / 'cache'),
        'TIMEOUT': MENU_CACHE_TTL,
    },
}


# =============== REST FRAMEWORK ===============

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'authentication.permissions.IsBackOfficeAdmin',
    ],
    'DEFAULT_FILTER_BACKENDS': ['django_filters.rest_framework.DjangoFilterBackend'],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'EXCEPTION_HANDLER': 'authentication.exceptions.custom_exception_handler',
    'DEFAULT_THROTTLE_RATES': {
        'menu_api': '100/hour',
        'orders': '30/hour',
    },
}

SPECTACULAR_SETTINGS = {
    'TITLE': 'Living Room Restaurant API',
    'DESCRIPTION': 'Public menu, order submission and back-office endpoints',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}


# =============== LOGGING ===============

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
        'audit': {
            'format': '{message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
        'error_file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': str(LOG_DIR / 'error.log'),
            'maxBytes': 5 * 1024 * 1024,
            'backupCount': 5,
            'level': 'WARNING',
            'formatter': 'verbose',
            'encoding': 'utf-8',
        },
        'audit_file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': str(LOG_DIR / 'audit.log'),
            'maxBytes': 5 * 1024 * 1024,
            'backupCount': 10,
            'formatter': 'audit',
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'error_file'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'error_file'],
            'level': os.getenv('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'audit': {
            'handlers': ['audit_file'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
