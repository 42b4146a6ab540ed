"""
Translation resolver.

Every listing is one query per entity type: the entity table is LEFT JOINed
twice against its translation table, once restricted to the requested
language and once to the default language, and COALESCE picks the first
name that exists. Entities with neither translation get a placeholder name
so callers can always render them.
"""
import logging

from django.db import DEFAULT_DB_ALIAS, DatabaseError
from django.db.models import CharField, F, FilteredRelation, Q, TextField, Value
from django.db.models.functions import Coalesce
from django.utils.html import escape

from .catalog import get_default_language_code
from .exceptions import StorageUnavailable
from .images import image_exists
from .models import Category, MenuItem, MenuType
from .records import ResolvedCategory, ResolvedMenuItem, ResolvedMenuType
from .validators import normalize_language_code

logger = logging.getLogger(__name__)


def placeholder_name(model):
    return f"Unnamed {model.placeholder_label}"


def with_translation(queryset, language_code, default_code, placeholder,
                     relation='translations', prefix='resolved'):
    """
    Annotate queryset with `<prefix>_name` and `<prefix>_description`
    resolved through the requested-language / default-language fallback join.
    """
    requested = f'{prefix}_requested'
    default = f'{prefix}_default'
    return queryset.annotate(**{
        requested: FilteredRelation(relation, condition=Q(**{f'{relation}__language_id': language_code})),
        default: FilteredRelation(relation, condition=Q(**{f'{relation}__language_id': default_code})),
    }).annotate(**{
        f'{prefix}_name': Coalesce(
            F(f'{requested}__name'), F(f'{default}__name'), Value(placeholder),
            output_field=CharField(),
        ),
        f'{prefix}_description': Coalesce(
            F(f'{requested}__description'), F(f'{default}__description'), Value(''),
            output_field=TextField(),
        ),
    })


def resolve(model, entity_id, requested_language, default_language=None, using=DEFAULT_DB_ALIAS):
    """
    Best-fit {name, description} for one entity, or None if it does not exist.
    """
    requested_language = normalize_language_code(requested_language)
    default_language = default_language or get_default_language_code(using=using)
    row = (
        with_translation(
            model.objects.using(using).filter(pk=entity_id),
            requested_language, default_language, placeholder_name(model),
        )
        .values('resolved_name', 'resolved_description')
        .first()
    )
    if row is None:
        return None
    return {
        'name': escape(row['resolved_name']),
        'description': escape(row['resolved_description'] or ''),
    }


class TranslationResolver:
    """Resolved listings of menu types, categories and items for one language"""

    def __init__(self, language_code, default_code=None, using=DEFAULT_DB_ALIAS):
        self.using = using
        self.language_code = normalize_language_code(language_code)
        self.default_code = default_code or get_default_language_code(using=using)

    def _annotate(self, queryset, model):
        return with_translation(
            queryset.using(self.using), self.language_code, self.default_code, placeholder_name(model)
        )

    def _run(self, queryset):
        try:
            return list(queryset)
        except DatabaseError as e:
            logger.exception(f"Translation query failed for language {self.language_code}")
            raise StorageUnavailable() from e

    def menu_types(self, ids=None):
        queryset = MenuType.objects.all()
        if ids is not None:
            queryset = queryset.filter(pk__in=ids)
        queryset = self._annotate(queryset, MenuType).order_by('resolved_name', '-id')
        return [
            ResolvedMenuType(
                id=row.id,
                name=escape(row.resolved_name),
                description=escape(row.resolved_description or ''),
                created_at=row.created_at,
            )
            for row in self._run(queryset)
        ]

    def categories(self, menu_type_id=None, ids=None):
        queryset = Category.objects.all()
        if menu_type_id is not None:
            queryset = queryset.filter(menu_type_id=menu_type_id)
        if ids is not None:
            queryset = queryset.filter(pk__in=ids)
        queryset = self._annotate(queryset, Category).order_by('resolved_name', '-id')
        return [
            ResolvedCategory(
                id=row.id,
                menu_type_id=row.menu_type_id,
                name=escape(row.resolved_name),
                description=escape(row.resolved_description or ''),
                created_at=row.created_at,
            )
            for row in self._run(queryset)
        ]

    def menu_items(self, menu_type_id=None, category_ids=None, category_name=None,
                   active_only=False, check_images=True):
        """
        Resolved items, optionally scoped to a menu type, categories or a
        category name substring.

        Category and menu type names are resolved through the same fallback
        joins as the item itself, so a listing is a single query. Items come
        back grouped by menu type name, then category name, then display
        order, newest first within equal order.
        """
        queryset = MenuItem.objects.all()
        if menu_type_id is not None:
            queryset = queryset.filter(category__menu_type_id=menu_type_id)
        if category_ids is not None:
            queryset = queryset.filter(category_id__in=category_ids)
        if active_only:
            queryset = queryset.filter(is_active=True)
        queryset = self._annotate(queryset, MenuItem)
        queryset = with_translation(
            queryset, self.language_code, self.default_code, placeholder_name(Category),
            relation='category__translations', prefix='cat',
        )
        queryset = with_translation(
            queryset, self.language_code, self.default_code, placeholder_name(MenuType),
            relation='category__menu_type__translations', prefix='mtype',
        )
        if category_name:
            queryset = queryset.filter(cat_name__icontains=category_name)
        queryset = (
            queryset.annotate(parent_menu_type_id=F('category__menu_type_id'))
            .order_by('mtype_name', 'parent_menu_type_id', 'cat_name', 'category_id', 'display_order', '-id')
        )

        items = []
        for row in self._run(queryset):
            image_missing = bool(row.image) and check_images and not image_exists(row.image)
            items.append(ResolvedMenuItem(
                id=row.id,
                category_id=row.category_id,
                menu_type_id=row.parent_menu_type_id,
                name=escape(row.resolved_name),
                description=escape(row.resolved_description or ''),
                category=escape(row.cat_name),
                menu_type=escape(row.mtype_name),
                price=row.price,
                image=row.image or None,
                image_missing=image_missing,
                created_at=row.created_at,
                updated_at=row.updated_at,
                display_order=row.display_order,
                is_active=row.is_active,
                is_featured=row.is_featured,
            ))
        return items

    def menu_items_by_ids(self, ids, active_only=False):
        """Resolved name and current price per item id, for order pricing"""
        queryset = MenuItem.objects.filter(pk__in=ids)
        if active_only:
            queryset = queryset.filter(is_active=True)
        queryset = self._annotate(queryset, MenuItem).order_by('resolved_name', '-id')
        return [
            {
                'id': row.id,
                'name': escape(row.resolved_name),
                'price': row.price,
                'category_id': row.category_id,
            }
            for row in self._run(queryset)
        ]
