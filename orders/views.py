from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import SimpleRateThrottle

from authentication.exceptions import error_payload
from authentication.permissions import IsBackOfficeAdmin
from inventory.exceptions import MenuIntegrityError
from inventory.menu import format_price

from .filters import OrderFilter, RatingFilter
from .models import Order, Rating
from .serializers import OrderReadSerializer, OrderSubmitSerializer, RatingSerializer
from .services import order_message, submit_order


class OrderSubmitThrottle(SimpleRateThrottle):
    scope = 'orders'

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


@extend_schema(
    summary="Submit a cart as an order",
    request=OrderSubmitSerializer,
    responses={
        201: OpenApiResponse(description="Order recorded"),
        400: OpenApiResponse(description="Invalid cart"),
        429: OpenApiResponse(description="Rate limit exceeded"),
    },
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([OrderSubmitThrottle])
def submit_order_view(request):
    """Record a storefront cart; prices are taken from the menu, not the client"""
    serializer = OrderSubmitSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        order = submit_order(request.ctx, serializer.validated_data)
    except MenuIntegrityError as e:
        return Response(error_payload(str(e), 'INVALID_ITEMS'), status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'success': True,
        'order_id': order.id,
        'total': format_price(order.total_amount),
        'message': order_message(order),
        'whatsapp_number': settings.WHATSAPP_NUMBER,
    }, status=status.HTTP_201_CREATED)


class OrderListView(generics.ListAPIView):
    """List orders for the back office, filterable by status, type and period"""
    queryset = Order.objects.all()
    serializer_class = OrderReadSerializer
    permission_classes = [IsBackOfficeAdmin]
    filterset_class = OrderFilter


class RatingListView(generics.ListAPIView):
    """List ratings for the back office, filterable by experience and period"""
    queryset = Rating.objects.all()
    serializer_class = RatingSerializer
    permission_classes = [IsBackOfficeAdmin]
    filterset_class = RatingFilter
