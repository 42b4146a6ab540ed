import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from authentication.ratelimit import rate_limited
from inventory.catalog import get_active_language, get_default_language_code, list_active_languages, resolve_language
from inventory.exceptions import MenuError, StorageUnavailable
from inventory.labels import LOCATION_LABELS, RATING_LABELS, get_labels
from inventory.menu import build_menu_payload
from inventory.models import MenuType
from inventory.resolver import TranslationResolver, resolve

from .forms import LanguageSelectForm, LocationSelectForm, RatingForm

logger = logging.getLogger(__name__)

SESSION_LANGUAGE = 'lang'
SESSION_MENU_TYPE = 'menu_type_id'


def session_language(request):
    """The visitor's chosen Language, or the default one"""
    language, _ = resolve_language(request.session.get(SESSION_LANGUAGE))
    return language


def page_language(request):
    language = session_language(request)
    code = language.code if language else get_default_language_code()
    direction = language.direction if language else 'ltr'
    return code, direction


def is_delivery_menu(menu_type_id):
    """True when the menu type's default-language name is one of DELIVERY_MENU_NAMES"""
    resolved = resolve(MenuType, menu_type_id, get_default_language_code())
    if resolved is None:
        return False
    names = {name.lower() for name in settings.DELIVERY_MENU_NAMES}
    return resolved['name'].strip().lower() in names


# =============== LANGUAGE ===============

@require_http_methods(["GET", "POST"])
def language_select(request):
    if request.method == "POST":
        form = LanguageSelectForm(request.POST)
        if form.is_valid():
            language = get_active_language(form.cleaned_data['lang'])
            if language is not None:
                request.session[SESSION_LANGUAGE] = language.code
                return redirect('location_select')
        messages.error(request, "Please choose one of the available languages")
        return redirect('language_select')

    return render(request, 'storefront/language.html', {'languages': list_active_languages()})


# =============== LOCATION ===============

@require_http_methods(["GET", "POST"])
def location_select(request):
    if SESSION_LANGUAGE not in request.session:
        return redirect('language_select')

    code, direction = page_language(request)
    try:
        menu_types = TranslationResolver(code).menu_types()
    except StorageUnavailable as e:
        messages.error(request, e.message)
        menu_types = []

    if request.method == "POST":
        form = LocationSelectForm(request.POST)
        if form.is_valid() and form.cleaned_data['menu_type'] in {m.id for m in menu_types}:
            request.session[SESSION_MENU_TYPE] = form.cleaned_data['menu_type']
            return redirect('menu_page')
        messages.error(request, "Please choose a menu")
        return redirect('location_select')

    context = {
        'menu_types': menu_types,
        'labels': get_labels(code, LOCATION_LABELS),
        'lang': code,
        'direction': direction,
    }
    return render(request, 'storefront/location.html', context)


# =============== MENU ===============

def menu_page(request):
    if request.GET.get('change_lang') == '1':
        request.session.pop(SESSION_LANGUAGE, None)
        request.session.pop(SESSION_MENU_TYPE, None)
        return redirect('language_select')
    if SESSION_LANGUAGE not in request.session:
        return redirect('language_select')
    menu_type_id = request.session.get(SESSION_MENU_TYPE)
    if menu_type_id is None:
        return redirect('location_select')

    try:
        payload, _ = build_menu_payload(
            request.session[SESSION_LANGUAGE],
            menu_type_id,
            request.GET.get('category', '')[:100],
        )
        cart_enabled = is_delivery_menu(menu_type_id)
    except MenuError as e:
        logger.warning(f"Menu page failed: {e.message}")
        messages.error(request, StorageUnavailable.default_message)
        return render(request, 'storefront/menu.html', {'payload': None, 'direction': 'ltr'}, status=503)

    current = payload['language']['current']
    categories = {}
    for item in payload['data']:
        categories.setdefault(item['category'], []).append(item)

    context = {
        'payload': payload,
        'labels': payload['ui_labels'],
        'lang': current['code'],
        'direction': current['direction'],
        'grouped_items': categories,
        'cart_enabled': cart_enabled,
        'whatsapp_number': settings.WHATSAPP_NUMBER,
    }
    return render(request, 'storefront/menu.html', context)


# =============== RATING ===============

@require_http_methods(["GET", "POST"])
@rate_limited('public_forms')
def rating(request):
    code, direction = page_language(request)
    labels = get_labels(code, RATING_LABELS)
    submitted = False

    if request.method == "POST":
        form = RatingForm(request.POST)
        if form.is_valid():
            form.save()
            logger.info(f"Rating submitted ({form.instance.overall_experience})")
            submitted = True
            form = RatingForm()
        else:
            messages.error(request, labels['error_msg'])
    else:
        form = RatingForm()

    context = {
        'form': form,
        'labels': labels,
        'lang': code,
        'direction': direction,
        'submitted': submitted,
    }
    return render(request, 'storefront/rating.html', context)
