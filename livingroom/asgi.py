"""
ASGI config for the Living Room project.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'livingroom.settings')

application = get_asgi_application()
