from django import forms
from django.utils.safestring import mark_safe

from inventory.models import MAX_PRICE
from inventory.validators import DESCRIPTION_MAX_LENGTH, MAX_DISPLAY_ORDER, NAME_MAX_LENGTH
from orders.models import Order


class TranslationsForm(forms.Form):
    """
    One name/description pair per active language: fields `name_<code>` and
    `description_<code>`. Blank names are allowed here; the write services
    decide whether enough translations were given.
    """

    def __init__(self, *args, languages=(), translations=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.languages = list(languages)
        translations = translations or {}
        for language in self.languages:
            existing = translations.get(language.code)
            self.fields[f'name_{language.code}'] = forms.CharField(
                label=f'Name ({language.native_name})',
                max_length=NAME_MAX_LENGTH,
                required=False,
                initial=existing.name if existing else '',
                widget=forms.TextInput(attrs={"class": "form-control", "dir": language.direction}),
            )
            self.fields[f'description_{language.code}'] = forms.CharField(
                label=f'Description ({language.native_name})',
                max_length=DESCRIPTION_MAX_LENGTH,
                required=False,
                initial=existing.description if existing else '',
                widget=forms.Textarea(attrs={"class": "form-control", "rows": 2, "dir": language.direction}),
            )

    def translation_fields(self):
        for language in self.languages:
            yield language, self[f'name_{language.code}'], self[f'description_{language.code}']

    def translations(self):
        """Submitted values as {code: {'name': ..., 'description': ...}}"""
        return {
            language.code: {
                'name': self.cleaned_data.get(f'name_{language.code}', ''),
                'description': self.cleaned_data.get(f'description_{language.code}', ''),
            }
            for language in self.languages
        }


class CategoryForm(TranslationsForm):
    menu_type = forms.TypedChoiceField(
        coerce=int,
        widget=forms.Select(attrs={"class": "form-control"}),
    )

    def __init__(self, *args, menu_types=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['menu_type'].choices = [(m.id, mark_safe(m.name)) for m in menu_types]  # names arrive escaped


class MenuItemForm(TranslationsForm):
    category = forms.TypedChoiceField(
        coerce=int,
        widget=forms.Select(attrs={"class": "form-control"}),
    )
    price = forms.DecimalField(
        min_value=0,
        max_value=MAX_PRICE,
        decimal_places=2,
        widget=forms.NumberInput(attrs={"class": "form-control", "step": "0.01"}),
    )
    image = forms.ImageField(
        required=False,
        widget=forms.ClearableFileInput(attrs={"class": "form-control", "accept": "image/*"}),
    )
    remove_image = forms.BooleanField(
        required=False,
        widget=forms.CheckboxInput(attrs={"class": "form-check-input"}),
    )
    display_order = forms.IntegerField(
        min_value=0,
        max_value=MAX_DISPLAY_ORDER,
        required=False,
        initial=0,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    is_active = forms.BooleanField(
        required=False,
        initial=True,
        widget=forms.CheckboxInput(attrs={"class": "form-check-input"}),
    )
    is_featured = forms.BooleanField(
        required=False,
        widget=forms.CheckboxInput(attrs={"class": "form-check-input"}),
    )

    def __init__(self, *args, category_choices=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['category'].choices = list(category_choices)


class DisplayOrderForm(forms.Form):
    item_id = forms.IntegerField(min_value=1)
    display_order = forms.IntegerField(min_value=0, max_value=MAX_DISPLAY_ORDER)


class OrderStatusForm(forms.Form):
    order_id = forms.IntegerField(min_value=1)
    status = forms.ChoiceField(choices=Order.STATUS_CHOICES)
