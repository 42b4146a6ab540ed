"""
Image store for menu item uploads.

Files live flat in MENU_UPLOAD_ROOT and are referenced from MenuItem.image
by bare filename. The store is best effort: a failed delete is logged and
reported, never raised, and a missing file only flags the item.
"""
import logging
import os
import re
import secrets
import uuid

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from PIL import Image, UnidentifiedImageError

from .exceptions import MenuValidationError

logger = logging.getLogger(__name__)

SAFE_NAME_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_.-]{0,254}$')

EXTENSIONS = {
    'jpeg': 'jpg',
    'png': 'png',
    'gif': 'gif',
    'webp': 'webp',
}


def get_storage():
    return FileSystemStorage(location=settings.MENU_UPLOAD_ROOT, base_url=settings.MENU_UPLOAD_URL)


def is_safe_name(name):
    return bool(name) and SAFE_NAME_RE.match(name) is not None and '..' not in name


def image_exists(name):
    """True when the file is present and readable in the upload directory"""
    if not is_safe_name(name):
        return False
    storage = get_storage()
    path = storage.path(name)
    return os.path.isfile(path) and os.access(path, os.R_OK)


def image_url(name):
    if not name:
        return None
    return get_storage().url(name)


def validate_upload(uploaded_file):
    """Check size and real content type; returns the Pillow format name"""
    if uploaded_file.size > settings.MAX_UPLOAD_SIZE:
        max_mb = settings.MAX_UPLOAD_SIZE / (1024 * 1024)
        raise MenuValidationError(f"File too large. Maximum size is {max_mb:g}MB.")

    try:
        uploaded_file.seek(0)
        with Image.open(uploaded_file) as image:
            image.verify()
            image_format = (image.format or '').lower()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        raise MenuValidationError('Invalid image file.')
    finally:
        uploaded_file.seek(0)

    if image_format not in settings.ALLOWED_IMAGE_TYPES:
        allowed = ', '.join(sorted(settings.ALLOWED_IMAGE_TYPES))
        raise MenuValidationError(f"Invalid file type. Allowed types: {allowed}.")
    return image_format


def save_upload(uploaded_file, prefix='menu_'):
    """Validate and store an uploaded image under a fresh unique name"""
    image_format = validate_upload(uploaded_file)
    filename = f"{prefix}{uuid.uuid4().hex[:13]}_{secrets.token_hex(8)}.{EXTENSIONS[image_format]}"
    try:
        saved_name = get_storage().save(filename, uploaded_file)
    except OSError:
        logger.exception(f"Failed to store uploaded image {filename}")
        raise MenuValidationError('Failed to upload file.')
    logger.info(f"Stored menu image {saved_name}")
    return saved_name


def delete_image(name):
    """Remove a stored image; returns True only if a file was deleted"""
    if not name:
        return False
    if not is_safe_name(name):
        logger.warning(f"Refusing to delete unsafe image name {name!r}")
        return False
    storage = get_storage()
    try:
        if not storage.exists(name):
            return False
        storage.delete(name)
    except OSError:
        logger.exception(f"Failed to delete image {name}")
        return False
    return True
