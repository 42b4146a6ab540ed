# Signal to drop cached menu responses when menu data changes
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .menu import invalidate_menu_cache
from .models import (
    Category, CategoryTranslation, Language, MenuItem, MenuItemTranslation, MenuType, MenuTypeTranslation,
)


@receiver([post_save, post_delete], sender=Language)
@receiver([post_save, post_delete], sender=MenuType)
@receiver([post_save, post_delete], sender=MenuTypeTranslation)
@receiver([post_save, post_delete], sender=Category)
@receiver([post_save, post_delete], sender=CategoryTranslation)
@receiver([post_save, post_delete], sender=MenuItem)
@receiver([post_save, post_delete], sender=MenuItemTranslation)
def invalidate_menu_cache_on_change(sender, instance, using=None, **kwargs):
    """Clear the menu response cache once the surrounding transaction commits"""
    transaction.on_commit(invalidate_menu_cache, using=using)
