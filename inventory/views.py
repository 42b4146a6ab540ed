import hashlib
import json

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import generics
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import SimpleRateThrottle

from authentication.permissions import IsBackOfficeAdmin

from .menu import build_menu_payload
from .models import Language
from .serializers import (
    LanguageSerializer,
    MenuPayloadSerializer,
    MenuQuerySerializer,
    MissingImageSerializer,
)
from .services import find_missing_images


class MenuApiThrottle(SimpleRateThrottle):
    """Per client IP, for anonymous and logged-in callers alike"""
    scope = 'menu_api'

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


def etag_for(payload):
    body = json.dumps(payload, sort_keys=True, cls=DjangoJSONEncoder, ensure_ascii=False)
    return '"%s"' % hashlib.md5(body.encode('utf-8')).hexdigest()


@extend_schema(
    summary="Localized menu",
    description="Menu items resolved in the requested language with default-language fallback.",
    parameters=[
        OpenApiParameter('lang', str, description='Language code; falls back to the default language'),
        OpenApiParameter('menu_type', int, description='Only items of this menu type'),
        OpenApiParameter('category', str, description='Case-insensitive match on the category name'),
    ],
    responses={
        200: MenuPayloadSerializer,
        400: OpenApiResponse(description='Invalid parameter'),
        429: OpenApiResponse(description='Rate limit exceeded'),
        503: OpenApiResponse(description='Database unavailable'),
    },
)
@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([MenuApiThrottle])
def menu_api(request):
    """Public menu read endpoint"""
    query = MenuQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    payload, cache_hit = build_menu_payload(
        requested_language=query.validated_data.get('lang') or None,
        menu_type_id=query.validated_data.get('menu_type'),
        category=query.validated_data.get('category'),
        using=request.ctx.using,
    )

    response = Response(payload)
    response['X-Cache'] = 'HIT' if cache_hit else 'MISS'
    response['Cache-Control'] = f'public, max-age={settings.MENU_CACHE_TTL}'
    response['ETag'] = etag_for(payload)
    return response


class LanguageListView(generics.ListAPIView):
    """List active languages, default first"""
    serializer_class = LanguageSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return Language.objects.filter(is_active=True).order_by('-is_default', 'name')


@extend_schema(responses=MissingImageSerializer(many=True), summary="Items whose image file is missing")
@api_view(['GET'])
@permission_classes([IsBackOfficeAdmin])
def missing_images(request):
    rows = find_missing_images(using=request.ctx.using)
    serializer = MissingImageSerializer([{'item_id': item_id, 'image': name} for item_id, name in rows], many=True)
    return Response(serializer.data)
