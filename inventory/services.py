"""
Write operations for menu types, categories and menu items.

Every operation takes the caller's RequestContext, validates referenced ids
before touching storage, and runs inside one transaction. Entities are
created parent-first and then get their translations upserted; a
transaction that ends with zero translations for the entity is rolled back.
Deletes remove rows child-first and then delete the image files.
"""
import logging
from contextlib import contextmanager

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from authentication.audit import audit_log

from .catalog import get_default_language_code
from .exceptions import MenuIntegrityError, MenuValidationError, StorageUnavailable
from .images import delete_image, image_exists, save_upload
from .menu import invalidate_menu_cache
from .models import (
    Category,
    CategoryTranslation,
    Language,
    MenuItem,
    MenuItemTranslation,
    MenuType,
    MenuTypeTranslation,
)
from .records import DeletionReport, TranslationInput
from .validators import MAX_DISPLAY_ORDER, validate_entity_id, validate_price

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = 'Item not found or insufficient permissions.'

TRANSLATION_MODELS = {
    MenuType: (MenuTypeTranslation, 'menu_type'),
    Category: (CategoryTranslation, 'category'),
    MenuItem: (MenuItemTranslation, 'menu_item'),
}


@contextmanager
def storage_errors():
    """Turn database failures into the menu error taxonomy"""
    try:
        yield
    except IntegrityError as e:
        logger.warning(f"Integrity error during menu write: {e}")
        raise MenuIntegrityError() from e
    except DatabaseError as e:
        logger.exception("Database error during menu write")
        raise StorageUnavailable() from e


def validated_id(value, label):
    try:
        return validate_entity_id(value, label)
    except ValidationError as e:
        raise MenuValidationError(messages=e.messages) from e


def _get_or_fail(ctx, model, entity_id, label):
    entity_id = validated_id(entity_id, label)
    with storage_errors():
        entity = model.objects.using(ctx.using).filter(pk=entity_id).first()
    if entity is None:
        raise MenuIntegrityError(NOT_FOUND_MESSAGE)
    return entity


# =============== TRANSLATIONS ===============

def normalize_translation_data(data):
    """
    Accept {code: {'name': ..., 'description': ...}} or {code: name} and
    return [(code, name, description)] in a stable order.
    """
    rows = []
    for code, value in (data or {}).items():
        if isinstance(value, dict):
            rows.append((code, value.get('name') or '', value.get('description') or ''))
        else:
            rows.append((code, value or '', ''))
    return rows


def build_translations(ctx, data):
    """
    Validate submitted translations into TranslationInput records.

    Blank names mean "no translation for this language" and come back in the
    second list so updates can remove them.
    """
    with storage_errors():
        active_codes = set(
            Language.objects.using(ctx.using).filter(is_active=True).values_list('code', flat=True)
        )
    accepted, blank = [], []
    errors = []
    for code, name, description in normalize_translation_data(data):
        code_key = str(code).strip().lower()
        if not str(name).strip():
            blank.append(code_key)
            continue
        try:
            translation = TranslationInput(code, name, description)
        except ValidationError as e:
            errors.extend(f"[{code_key}] {m}" for m in e.messages)
            continue
        if translation.language_code not in active_codes:
            errors.append(f"[{code_key}] Unsupported language.")
            continue
        accepted.append(translation)
    if errors:
        raise MenuValidationError(messages=errors)
    return accepted, blank


def upsert_translation(entity, translation, using='default'):
    """
    Insert or overwrite the (entity, language) translation row.

    Concurrent saves of the same pair are last-writer-wins: if another
    transaction inserts the row first, the insert conflict becomes an update.
    """
    model, fk_name = TRANSLATION_MODELS[type(entity)]
    lookup = {fk_name: entity, 'language_id': translation.language_code}
    defaults = {'name': translation.name, 'description': translation.description}
    try:
        with transaction.atomic(using=using):
            obj, created = model.objects.using(using).update_or_create(defaults=defaults, **lookup)
    except IntegrityError:
        model.objects.using(using).filter(**lookup).update(updated_at=timezone.now(), **defaults)
        obj, created = model.objects.using(using).get(**lookup), False
    return obj, created


def translation_names(entity, using='default'):
    return dict(entity.translations.using(using).values_list('language_id', 'name'))


def _apply_translations(ctx, entity, accepted, remove_codes=()):
    """Upsert accepted rows, drop removed ones, and enforce at least one left"""
    for translation in accepted:
        upsert_translation(entity, translation, using=ctx.using)
    if remove_codes:
        entity.translations.using(ctx.using).filter(language_id__in=list(remove_codes)).delete()
    if not entity.translations.using(ctx.using).exists():
        raise MenuIntegrityError('At least one translation is required.')


def _require_default_name(accepted, default_code, label):
    for translation in accepted:
        if translation.language_code == default_code:
            return translation.name
    raise MenuValidationError(f"{label} name in the default language ({default_code}) is required.")


def delete_translation(ctx, model, entity_id, language_code):
    """Remove one language's translation, refusing to remove the last one"""
    entity = _get_or_fail(ctx, model, entity_id, model.placeholder_label.lower())
    language_code = str(language_code).strip().lower()
    with storage_errors(), transaction.atomic(using=ctx.using):
        deleted, _ = entity.translations.using(ctx.using).filter(language_id=language_code).delete()
        if not entity.translations.using(ctx.using).exists():
            raise MenuIntegrityError('Cannot delete the last translation.')
    if deleted:
        audit_log(ctx, 'translation_deleted', entity=model.__name__, entity_id=entity.pk, language=language_code)
    return bool(deleted)


# =============== MENU TYPES ===============

def _menu_type_name_taken(ctx, name, default_code, exclude_id=None):
    queryset = MenuTypeTranslation.objects.using(ctx.using).filter(language_id=default_code, name__iexact=name)
    if exclude_id is not None:
        queryset = queryset.exclude(menu_type_id=exclude_id)
    return queryset.exists()


def create_menu_type(ctx, translations):
    accepted, _ = build_translations(ctx, translations)
    default_code = get_default_language_code(using=ctx.using)
    default_name = _require_default_name(accepted, default_code, 'Menu type')

    with storage_errors():
        if _menu_type_name_taken(ctx, default_name, default_code):
            raise MenuIntegrityError('A menu type with this name already exists.')
        with transaction.atomic(using=ctx.using):
            menu_type = MenuType.objects.using(ctx.using).create()
            _apply_translations(ctx, menu_type, accepted)

    audit_log(ctx, 'menu_type_created', menu_type_id=menu_type.pk,
              names={t.language_code: t.name for t in accepted})
    return menu_type


def update_menu_type(ctx, menu_type_id, translations):
    menu_type = _get_or_fail(ctx, MenuType, menu_type_id, 'menu type')
    accepted, blank = build_translations(ctx, translations)
    default_code = get_default_language_code(using=ctx.using)

    with storage_errors():
        for translation in accepted:
            if translation.language_code == default_code and _menu_type_name_taken(
                    ctx, translation.name, default_code, exclude_id=menu_type.pk):
                raise MenuIntegrityError('A menu type with this name already exists.')
        with transaction.atomic(using=ctx.using):
            _apply_translations(ctx, menu_type, accepted, remove_codes=blank)
            menu_type.save(using=ctx.using, update_fields=['updated_at'])

    audit_log(ctx, 'menu_type_updated', menu_type_id=menu_type.pk,
              names={t.language_code: t.name for t in accepted}, removed=blank)
    return menu_type


def delete_menu_type(ctx, menu_type_id):
    """Delete a menu type with its categories, items, translations and images"""
    menu_type = _get_or_fail(ctx, MenuType, menu_type_id, 'menu type')
    using = ctx.using
    report = DeletionReport(entity='menu_type', entity_id=menu_type.pk)

    with storage_errors():
        report.names = translation_names(menu_type, using)
        categories = Category.objects.using(using).filter(menu_type=menu_type)
        items = MenuItem.objects.using(using).filter(category__menu_type=menu_type)
        images = [name for name in items.values_list('image', flat=True) if name]

        with transaction.atomic(using=using):
            report.counts['item_translations'] = MenuItemTranslation.objects.using(using).filter(
                menu_item__category__menu_type=menu_type).delete()[0]
            report.counts['items'] = items.delete()[0]
            report.counts['category_translations'] = CategoryTranslation.objects.using(using).filter(
                category__menu_type=menu_type).delete()[0]
            report.counts['categories'] = categories.delete()[0]
            report.counts['menu_type_translations'] = menu_type.translations.using(using).delete()[0]
            menu_type.delete(using=using)

    _delete_images(report, images)
    audit_log(ctx, 'menu_type_deleted', **report.as_dict())
    return report


# =============== CATEGORIES ===============

def _category_name_taken(ctx, menu_type_id, name, default_code, exclude_id=None):
    queryset = CategoryTranslation.objects.using(ctx.using).filter(
        category__menu_type_id=menu_type_id, language_id=default_code, name__iexact=name)
    if exclude_id is not None:
        queryset = queryset.exclude(category_id=exclude_id)
    return queryset.exists()


def create_category(ctx, menu_type_id, translations):
    menu_type = _get_or_fail(ctx, MenuType, menu_type_id, 'menu type')
    accepted, _ = build_translations(ctx, translations)
    default_code = get_default_language_code(using=ctx.using)
    default_name = _require_default_name(accepted, default_code, 'Category')

    with storage_errors():
        if _category_name_taken(ctx, menu_type.pk, default_name, default_code):
            raise MenuIntegrityError('A category with this name already exists in this menu type.')
        with transaction.atomic(using=ctx.using):
            category = Category.objects.using(ctx.using).create(menu_type=menu_type)
            _apply_translations(ctx, category, accepted)

    audit_log(ctx, 'category_created', category_id=category.pk, menu_type_id=menu_type.pk,
              names={t.language_code: t.name for t in accepted})
    return category


def update_category(ctx, category_id, translations):
    category = _get_or_fail(ctx, Category, category_id, 'category')
    accepted, blank = build_translations(ctx, translations)
    default_code = get_default_language_code(using=ctx.using)

    with storage_errors():
        for translation in accepted:
            if translation.language_code == default_code and _category_name_taken(
                    ctx, category.menu_type_id, translation.name, default_code, exclude_id=category.pk):
                raise MenuIntegrityError('A category with this name already exists in this menu type.')
        with transaction.atomic(using=ctx.using):
            _apply_translations(ctx, category, accepted, remove_codes=blank)
            category.save(using=ctx.using, update_fields=['updated_at'])

    audit_log(ctx, 'category_updated', category_id=category.pk,
              names={t.language_code: t.name for t in accepted}, removed=blank)
    return category


def delete_category(ctx, category_id):
    """Delete a category with its items, translations and images"""
    category = _get_or_fail(ctx, Category, category_id, 'category')
    using = ctx.using
    report = DeletionReport(entity='category', entity_id=category.pk)

    with storage_errors():
        report.names = translation_names(category, using)
        items = MenuItem.objects.using(using).filter(category=category)
        images = [name for name in items.values_list('image', flat=True) if name]

        with transaction.atomic(using=using):
            report.counts['item_translations'] = MenuItemTranslation.objects.using(using).filter(
                menu_item__category=category).delete()[0]
            report.counts['items'] = items.delete()[0]
            report.counts['category_translations'] = category.translations.using(using).delete()[0]
            category.delete(using=using)

    _delete_images(report, images)
    audit_log(ctx, 'category_deleted', menu_type_id=category.menu_type_id, **report.as_dict())
    return report


# =============== MENU ITEMS ===============

def _validated_price(value):
    try:
        return validate_price(value)
    except ValidationError as e:
        raise MenuValidationError(messages=e.messages) from e


def _validated_display_order(value):
    try:
        value = int(value)
    except (TypeError, ValueError) as e:
        raise MenuValidationError('Display order must be a whole number.') from e
    if not 0 <= value <= MAX_DISPLAY_ORDER:
        raise MenuValidationError(f"Display order must be between 0 and {MAX_DISPLAY_ORDER}.")
    return value


def create_menu_item(ctx, category_id, price, translations, image_file=None,
                     display_order=0, is_active=True, is_featured=False):
    category = _get_or_fail(ctx, Category, category_id, 'category')
    price = _validated_price(price)
    display_order = _validated_display_order(display_order)
    accepted, _ = build_translations(ctx, translations)

    image_name = save_upload(image_file) if image_file else None
    try:
        with storage_errors(), transaction.atomic(using=ctx.using):
            item = MenuItem.objects.using(ctx.using).create(
                category=category, price=price, image=image_name, display_order=display_order,
                is_active=bool(is_active), is_featured=bool(is_featured),
            )
            _apply_translations(ctx, item, accepted)
    except Exception:
        # the row is gone, so is the file it would have pointed at
        if image_name:
            delete_image(image_name)
        raise

    audit_log(ctx, 'menu_item_created', item_id=item.pk, category_id=category.pk, price=price,
              image=image_name, display_order=display_order, is_active=item.is_active,
              is_featured=item.is_featured, names={t.language_code: t.name for t in accepted})
    return item


def update_menu_item(ctx, item_id, category_id, price, translations, image_file=None, remove_image=False,
                     display_order=None, is_active=None, is_featured=None):
    """
    Update an item's category, price, translations and image.

    The new category must belong to the item's current menu type. A newly
    uploaded image replaces the old file, which is deleted after commit.
    display_order, is_active and is_featured are left unchanged when None.
    """
    item = _get_or_fail(ctx, MenuItem, item_id, 'menu item')
    category = _get_or_fail(ctx, Category, category_id, 'category')
    with storage_errors():
        current_menu_type_id = Category.objects.using(ctx.using).values_list(
            'menu_type_id', flat=True).get(pk=item.category_id)
    if category.menu_type_id != current_menu_type_id:
        raise MenuIntegrityError('Invalid category for this menu type.')

    price = _validated_price(price)
    if display_order is not None:
        display_order = _validated_display_order(display_order)
    accepted, blank = build_translations(ctx, translations)

    old_image = item.image
    new_image = save_upload(image_file) if image_file else None
    try:
        with storage_errors(), transaction.atomic(using=ctx.using):
            item.category = category
            item.price = price
            if display_order is not None:
                item.display_order = display_order
            if is_active is not None:
                item.is_active = bool(is_active)
            if is_featured is not None:
                item.is_featured = bool(is_featured)
            if new_image:
                item.image = new_image
            elif remove_image:
                item.image = None
            item.save(using=ctx.using)
            _apply_translations(ctx, item, accepted, remove_codes=blank)
    except Exception:
        if new_image:
            delete_image(new_image)
        raise

    if old_image and old_image != item.image:
        if not delete_image(old_image):
            logger.warning(f"Old image {old_image} of item {item.pk} was not deleted")

    audit_log(ctx, 'menu_item_updated', item_id=item.pk, category_id=category.pk, price=price,
              display_order=item.display_order, is_active=item.is_active, is_featured=item.is_featured,
              image=item.image, replaced_image=old_image if old_image != item.image else None,
              names={t.language_code: t.name for t in accepted}, removed=blank)
    return item


def update_display_order(ctx, item_id, display_order):
    item = _get_or_fail(ctx, MenuItem, item_id, 'menu item')
    display_order = _validated_display_order(display_order)
    with storage_errors():
        MenuItem.objects.using(ctx.using).filter(pk=item.pk).update(
            display_order=display_order, updated_at=timezone.now())
    invalidate_menu_cache()
    audit_log(ctx, 'menu_item_reordered', item_id=item.pk, previous=item.display_order,
              display_order=display_order)
    return display_order


def delete_menu_item(ctx, item_id):
    item = _get_or_fail(ctx, MenuItem, item_id, 'menu item')
    using = ctx.using
    report = DeletionReport(entity='menu_item', entity_id=item.pk)

    with storage_errors():
        report.names = translation_names(item, using)
        with transaction.atomic(using=using):
            report.counts['item_translations'] = item.translations.using(using).delete()[0]
            item.delete(using=using)
            report.counts['items'] = 1

    _delete_images(report, [item.image] if item.image else [])
    audit_log(ctx, 'menu_item_deleted', category_id=item.category_id, **report.as_dict())
    return report


def _delete_images(report, images):
    for name in images:
        if delete_image(name):
            report.deleted_images.append(name)
        else:
            report.failed_images.append(name)
            logger.warning(f"Could not delete image {name} while deleting {report.entity} {report.entity_id}")


# =============== IMAGE MAINTENANCE ===============

def find_missing_images(using='default'):
    """Ids and filenames of items whose image file is not in the upload directory"""
    rows = (
        MenuItem.objects.using(using)
        .exclude(image__isnull=True)
        .exclude(image='')
        .values_list('id', 'image')
    )
    return [(item_id, name) for item_id, name in rows if not image_exists(name)]


def cleanup_missing_images(ctx):
    """Null out dangling image references; returns how many were cleaned"""
    with storage_errors():
        missing = find_missing_images(using=ctx.using)
        if not missing:
            return 0
        cleaned = MenuItem.objects.using(ctx.using).filter(
            pk__in=[item_id for item_id, _ in missing]).update(image=None, updated_at=timezone.now())

    invalidate_menu_cache()
    logger.info(f"Cleaned {cleaned} missing image reference(s)")
    audit_log(ctx, 'missing_images_cleaned', count=cleaned, images=[name for _, name in missing])
    return cleaned
