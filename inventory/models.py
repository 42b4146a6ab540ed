from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models, transaction

from authentication.models import TimeStampedModel

MAX_PRICE = Decimal('999999.99')

language_code_validator = RegexValidator(
    regex=r'^[a-z]{2,5}$',
    message='Language code must be 2-5 lowercase letters.',
)


# =============== LANGUAGE CATALOG ===============

class Language(models.Model):
    """Supported locale for menu content and UI labels"""
    DIRECTIONS = [
        ('ltr', 'Left to right'),
        ('rtl', 'Right to left'),
    ]

    code = models.CharField(max_length=5, unique=True, validators=[language_code_validator])
    name = models.CharField(max_length=100)
    native_name = models.CharField(max_length=100)
    direction = models.CharField(max_length=3, choices=DIRECTIONS, default='ltr')
    is_active = models.BooleanField(default=True)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'languages'
        ordering = ['-is_default', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['is_default'],
                condition=models.Q(is_default=True),
                name='single_default_language',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    @property
    def is_rtl(self):
        return self.direction == 'rtl'

    def is_referenced(self, code=None, using=None):
        """True when any translation row points at this language code"""
        code = code or self.code
        using = using or self._state.db or 'default'
        return any(
            model.objects.using(using).filter(language_id=code).exists()
            for model in (MenuTypeTranslation, CategoryTranslation, MenuItemTranslation)
        )

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().lower()
        using = kwargs.get('using') or self._state.db or 'default'

        if self.pk:
            previous = Language.objects.using(using).filter(pk=self.pk).values_list('code', flat=True).first()
            if previous and previous != self.code and self.is_referenced(code=previous, using=using):
                raise ValidationError(f"Language code '{previous}' is in use by translations and cannot change.")

        # the default language is always active
        if self.is_default:
            self.is_active = True

        with transaction.atomic(using=using):
            if self.is_default:
                Language.objects.using(using).filter(is_default=True).exclude(pk=self.pk).update(is_default=False)
            super().save(*args, **kwargs)


# =============== TRANSLATABLE ENTITIES ===============

class Translation(TimeStampedModel):
    """Language-specific name and description attached to an entity"""
    language = models.ForeignKey(
        Language,
        to_field='code',
        db_column='language_code',
        on_delete=models.PROTECT,
        related_name='+',
    )
    name = models.CharField(max_length=255)
    description = models.TextField(max_length=1000, blank=True, default='')

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.name} [{self.language_id}]"


class MenuType(TimeStampedModel):
    """Top-level grouping of categories, e.g. indoor vs. delivery"""
    placeholder_label = 'Menu Type'

    class Meta:
        db_table = 'menu_types'

    def __str__(self):
        return f"MenuType #{self.pk}"


class MenuTypeTranslation(Translation):
    menu_type = models.ForeignKey(MenuType, on_delete=models.CASCADE, related_name='translations')

    class Meta:
        db_table = 'menu_type_translations'
        unique_together = ['menu_type', 'language']


class Category(TimeStampedModel):
    """Named grouping of menu items within a menu type"""
    placeholder_label = 'Category'

    menu_type = models.ForeignKey(MenuType, on_delete=models.CASCADE, related_name='categories')

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'

    def __str__(self):
        return f"Category #{self.pk}"


class CategoryTranslation(Translation):
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='translations')

    class Meta:
        db_table = 'category_translations'
        unique_together = ['category', 'language']


class MenuItem(TimeStampedModel):
    """A sellable dish with a price and an optional uploaded image"""
    placeholder_label = 'Item'

    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='items')
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(MAX_PRICE)],
    )
    image = models.CharField(max_length=255, null=True, blank=True)  # filename inside MENU_UPLOAD_ROOT
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)  # hidden from the public menu when False
    is_featured = models.BooleanField(default=False)

    class Meta:
        db_table = 'menu_items'

    def __str__(self):
        return f"MenuItem #{self.pk}"


class MenuItemTranslation(Translation):
    menu_item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='translations')

    class Meta:
        db_table = 'menu_item_translations'
        unique_together = ['menu_item', 'language']
