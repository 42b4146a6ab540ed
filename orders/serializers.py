from rest_framework import serializers

from inventory.validators import MAX_ENTITY_ID

from .models import Order, Rating


class CartLineSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField(min_value=1, max_value=MAX_ENTITY_ID)
    quantity = serializers.IntegerField(min_value=1, max_value=99)


class OrderSubmitSerializer(serializers.Serializer):
    """Checkout payload posted by the storefront cart"""
    customer_name = serializers.CharField(max_length=255)
    customer_phone = serializers.RegexField(r'^\+?[0-9 ]{7,20}$', max_length=20)
    customer_address = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    order_type = serializers.ChoiceField(choices=Order.ORDER_TYPE_CHOICES, default='delivery')
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    lang = serializers.CharField(max_length=10, required=False, allow_blank=True, default='')
    items = CartLineSerializer(many=True, allow_empty=False)

    def validate_customer_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate(self, attrs):
        if attrs.get('order_type') == 'delivery' and not attrs.get('customer_address', '').strip():
            raise serializers.ValidationError({'customer_address': 'Address is required for delivery orders.'})
        if len(attrs['items']) > 50:
            raise serializers.ValidationError({'items': 'Too many cart lines.'})
        return attrs


class OrderReadSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'customer_name', 'customer_phone', 'customer_address', 'order_type',
            'items', 'notes', 'total_amount', 'status', 'status_display', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class RatingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Rating
        fields = [
            'id', 'customer_name', 'customer_phone', 'service_rating', 'staff_rating',
            'cleanliness_rating', 'overall_experience', 'comment', 'created_at',
        ]
        read_only_fields = fields
