from rest_framework import serializers

from .models import Language
from .validators import LANGUAGE_CODE_RE, MAX_ENTITY_ID


class LanguageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Language
        fields = ['code', 'name', 'native_name', 'direction', 'is_default']


class MenuQuerySerializer(serializers.Serializer):
    """Query parameters of the public menu endpoint"""
    lang = serializers.CharField(required=False, allow_blank=True)
    menu_type = serializers.IntegerField(required=False, min_value=1, max_value=MAX_ENTITY_ID)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate_lang(self, value):
        """Malformed codes are not an error: the default language is served instead"""
        value = value.strip().lower()
        return value if LANGUAGE_CODE_RE.match(value) else ''


class MenuItemPayloadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    category = serializers.CharField()
    category_id = serializers.IntegerField()
    menu_type = serializers.CharField()
    menu_type_id = serializers.IntegerField()
    price = serializers.CharField(help_text='Formatted price, e.g. "IQD 12.50", "Free"')
    price_value = serializers.CharField()
    image = serializers.CharField(allow_null=True)
    image_missing = serializers.BooleanField()
    display_order = serializers.IntegerField()
    is_featured = serializers.BooleanField()
    created_at = serializers.DateTimeField(allow_null=True)


class MenuPayloadSerializer(serializers.Serializer):
    """Documents the menu endpoint response"""
    success = serializers.BooleanField()
    timestamp = serializers.DateTimeField()
    language = serializers.DictField()
    ui_labels = serializers.DictField(child=serializers.CharField())
    filters = serializers.DictField()
    stats = serializers.DictField()
    categories = serializers.ListField(child=serializers.CharField())
    data = MenuItemPayloadSerializer(many=True)


class MissingImageSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    image = serializers.CharField()
