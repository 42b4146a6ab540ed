from django.contrib import messages
from django.core.paginator import Paginator
from django.http import Http404
from django.db.models import Count
from django.shortcuts import redirect, render
from django.utils.safestring import mark_safe
from django.views.decorators.http import require_POST

from authentication.ratelimit import RateLimiter, rate_limited, request_identifier
from inventory import services
from inventory.catalog import get_active_language, get_default_language_code, list_active_languages
from inventory.exceptions import MenuError, MenuValidationError, StorageUnavailable
from inventory.menu import format_price
from inventory.models import Category, MenuItem, MenuType
from inventory.resolver import TranslationResolver
from orders import services as order_services
from orders.export import export_orders_excel
from orders.filters import OrderFilter, RatingFilter, clean_filter_params
from orders.models import Order, Rating

from .decorators import admin_required
from .forms import CategoryForm, DisplayOrderForm, MenuItemForm, OrderStatusForm, TranslationsForm


# =============== HELPERS ===============

def report_error(request, exc):
    """Flash a menu error; storage failures only ever show the generic text"""
    if isinstance(exc, StorageUnavailable):
        messages.error(request, StorageUnavailable.default_message)
    elif isinstance(exc, MenuValidationError):
        for message in exc.messages:
            messages.error(request, message)
    else:
        messages.error(request, exc.message)


def over_limit(request, scope):
    limiter = RateLimiter(scope)
    identifier = request_identifier(request)
    if limiter.hit(identifier):
        return False
    minutes = max(limiter.retry_after(identifier) // 60, 1)
    messages.error(request, f'Too many requests. Please try again in {minutes} minute(s).')
    return True


def admin_language(request):
    """Language the back office lists content in; switchable with ?lang="""
    requested = request.GET.get('lang')
    if requested and get_active_language(requested) is not None:
        request.session['admin_lang'] = requested.lower()
    code = request.session.get('admin_lang')
    if not code or get_active_language(code) is None:
        code = get_default_language_code()
    return code


def category_choices(resolver, menu_type_id=None):
    menu_types = {m.id: m.name for m in resolver.menu_types()}
    return [
        (c.id, mark_safe(f"{menu_types.get(c.menu_type_id, '')} / {c.name}"))
        for c in resolver.categories(menu_type_id=menu_type_id)
    ]


def translations_by_language(entity):
    return {t.language_id: t for t in entity.translations.all()}


# =============== DASHBOARD ===============

@admin_required
def dashboard(request):
    """Every item grouped by menu type and category, plus headline numbers"""
    if request.method == "POST" and 'update_order' in request.POST:
        if over_limit(request, 'menu_items'):
            return redirect('dashboard')
        form = DisplayOrderForm(request.POST)
        if form.is_valid():
            try:
                services.update_display_order(
                    request.ctx, form.cleaned_data['item_id'], form.cleaned_data['display_order'])
                messages.success(request, "Display order updated successfully!")
            except MenuError as e:
                report_error(request, e)
        else:
            messages.error(request, f"Something wrong - Error {form.errors.as_text()}")
        return redirect('dashboard')

    lang = admin_language(request)
    try:
        resolver = TranslationResolver(lang)
        menu_types = resolver.menu_types()
        categories = resolver.categories()
        items = resolver.menu_items()
        order_stats = order_services.order_stats()
        rating_stats = order_services.rating_stats()
    except MenuError as e:
        report_error(request, e)
        return render(request, 'dashboard/index.html', {'groups': [], 'stats': {}})

    items_by_category = {}
    for item in items:
        items_by_category.setdefault(item.category_id, []).append(item)

    groups = []
    for menu_type in menu_types:
        groups.append({
            'menu_type': menu_type,
            'categories': [
                {'category': category, 'items': items_by_category.get(category.id, [])}
                for category in categories if category.menu_type_id == menu_type.id
            ],
        })

    context = {
        'lang': lang,
        'languages': list_active_languages(),
        'groups': groups,
        'stats': {
            'menu_types': len(menu_types),
            'categories': len(categories),
            'items': len(items),
            'active_items': sum(1 for item in items if item.is_active),
            'featured_items': sum(1 for item in items if item.is_featured),
            'missing_images': sum(1 for item in items if item.image_missing),
            'pending_orders': order_stats['pending_orders'],
            'today_revenue': format_price(order_stats['today_revenue']),
            'ratings': rating_stats['total_ratings'],
        },
    }
    return render(request, 'dashboard/index.html', context)


# =============== MENU TYPES ===============

@admin_required
def manage_menu_types(request):
    languages = list_active_languages()

    if request.method == "POST":
        ctx = request.ctx
        try:
            if 'delete' in request.POST:
                if over_limit(request, 'delete'):
                    return redirect('manage_menu_types')
                report = services.delete_menu_type(ctx, request.POST.get('menu_type_id'))
                messages.success(
                    request,
                    f"Menu type deleted with {report.counts.get('categories', 0)} categories "
                    f"and {report.counts.get('items', 0)} items."
                )
            elif 'add' in request.POST or 'update' in request.POST:
                if over_limit(request, 'menu_types'):
                    return redirect('manage_menu_types')
                form = TranslationsForm(request.POST, languages=languages)
                if not form.is_valid():
                    messages.error(request, f"Something wrong - Error {form.errors.as_text()}")
                    return redirect('manage_menu_types')
                if 'add' in request.POST:
                    services.create_menu_type(ctx, form.translations())
                    messages.success(request, "Menu type added successfully")
                else:
                    services.update_menu_type(ctx, request.POST.get('menu_type_id'), form.translations())
                    messages.success(request, "Menu type updated successfully")
            else:
                messages.error(request, "Unknown action")
        except MenuError as e:
            report_error(request, e)
        return redirect('manage_menu_types')

    lang = admin_language(request)
    try:
        resolved = TranslationResolver(lang).menu_types()
    except MenuError as e:
        report_error(request, e)
        resolved = []
    entities = {
        m.id: m for m in MenuType.objects.prefetch_related('translations').annotate(categories_count=Count('categories'))
    }

    rows = [
        {
            'menu_type': menu_type,
            'form': TranslationsForm(
                languages=languages,
                translations=translations_by_language(entities[menu_type.id]),
            ),
            'categories_count': entities[menu_type.id].categories_count,
        }
        for menu_type in resolved if menu_type.id in entities
    ]
    context = {
        'rows': rows,
        'add_form': TranslationsForm(languages=languages),
        'languages': languages,
    }
    return render(request, 'dashboard/menu_types.html', context)


# =============== CATEGORIES ===============

@admin_required
def manage_categories(request):
    languages = list_active_languages()
    lang = admin_language(request)

    if request.method == "POST":
        ctx = request.ctx
        try:
            if 'delete' in request.POST:
                if over_limit(request, 'delete'):
                    return redirect('manage_categories')
                report = services.delete_category(ctx, request.POST.get('category_id'))
                messages.success(request, f"Category deleted with {report.counts.get('items', 0)} items.")
            elif 'add' in request.POST or 'update' in request.POST:
                if over_limit(request, 'categories'):
                    return redirect('manage_categories')
                if 'add' in request.POST:
                    form = CategoryForm(request.POST, languages=languages,
                                        menu_types=TranslationResolver(lang).menu_types())
                    if not form.is_valid():
                        messages.error(request, f"Something wrong - Error {form.errors.as_text()}")
                        return redirect('manage_categories')
                    services.create_category(ctx, form.cleaned_data['menu_type'], form.translations())
                    messages.success(request, "Category added successfully")
                else:
                    form = TranslationsForm(request.POST, languages=languages)
                    if not form.is_valid():
                        messages.error(request, f"Something wrong - Error {form.errors.as_text()}")
                        return redirect('manage_categories')
                    services.update_category(ctx, request.POST.get('category_id'), form.translations())
                    messages.success(request, "Category updated successfully")
            else:
                messages.error(request, "Unknown action")
        except MenuError as e:
            report_error(request, e)
        return redirect('manage_categories')

    selected_menu_type = None
    if request.GET.get('menu_type', '').isdigit():
        selected_menu_type = int(request.GET['menu_type'])

    try:
        resolver = TranslationResolver(lang)
        menu_types = resolver.menu_types()
        resolved = resolver.categories(menu_type_id=selected_menu_type)
    except MenuError as e:
        report_error(request, e)
        menu_types, resolved = [], []

    menu_type_names = {m.id: m.name for m in menu_types}
    entities = {
        c.id: c for c in Category.objects.prefetch_related('translations').annotate(items_count=Count('items'))
    }
    rows = [
        {
            'category': category,
            'menu_type': menu_type_names.get(category.menu_type_id, ''),
            'form': TranslationsForm(languages=languages,
                                     translations=translations_by_language(entities[category.id])),
            'items_count': entities[category.id].items_count,
        }
        for category in resolved if category.id in entities
    ]
    context = {
        'rows': rows,
        'menu_types': menu_types,
        'selected_menu_type': selected_menu_type,
        'add_form': CategoryForm(languages=languages, menu_types=menu_types,
                                 initial={'menu_type': selected_menu_type}),
    }
    return render(request, 'dashboard/categories.html', context)


TRANSLATED_ENTITIES = {
    'menu_type': (MenuType, 'manage_menu_types'),
    'category': (Category, 'manage_categories'),
    'item': (MenuItem, 'dashboard'),
}


@admin_required
@require_POST
@rate_limited('delete', redirect_to='dashboard')
def delete_translation(request, entity, pk, language_code):
    """Remove a single language from a menu type, category or item"""
    if entity not in TRANSLATED_ENTITIES:
        raise Http404("Unknown entity")
    model, next_page = TRANSLATED_ENTITIES[entity]
    try:
        if services.delete_translation(request.ctx, model, pk, language_code):
            messages.success(request, "Translation deleted")
        else:
            messages.info(request, "No translation in that language")
    except MenuError as e:
        report_error(request, e)
    return redirect(next_page)


# =============== MENU ITEMS ===============

@admin_required
@rate_limited('menu_items')
def add_item(request):
    languages = list_active_languages()
    lang = admin_language(request)
    try:
        choices = category_choices(TranslationResolver(lang))
    except MenuError as e:
        report_error(request, e)
        return redirect('dashboard')

    if request.method == "POST":
        form = MenuItemForm(request.POST, request.FILES, languages=languages, category_choices=choices)
        if form.is_valid():
            try:
                services.create_menu_item(
                    request.ctx,
                    form.cleaned_data['category'],
                    form.cleaned_data['price'],
                    form.translations(),
                    image_file=form.cleaned_data.get('image'),
                    display_order=form.cleaned_data.get('display_order') or 0,
                    is_active=form.cleaned_data.get('is_active', False),
                    is_featured=form.cleaned_data.get('is_featured', False),
                )
                messages.success(request, "Menu item added successfully")
                return redirect('dashboard')
            except MenuError as e:
                report_error(request, e)
        else:
            messages.error(request, f"Something wrong - Error {form.errors.as_text()}")
    else:
        form = MenuItemForm(languages=languages, category_choices=choices)

    return render(request, 'dashboard/item_form.html', {'form': form, 'item': None})


@admin_required
@rate_limited('menu_items')
def edit_item(request, pk):
    item = MenuItem.objects.select_related('category').prefetch_related('translations').filter(pk=pk).first()
    if item is None:
        messages.error(request, "Item not found")
        return redirect('dashboard')

    languages = list_active_languages()
    lang = admin_language(request)
    try:
        # only categories of the item's current menu type are valid targets
        choices = category_choices(TranslationResolver(lang), menu_type_id=item.category.menu_type_id)
    except MenuError as e:
        report_error(request, e)
        return redirect('dashboard')

    if request.method == "POST":
        form = MenuItemForm(request.POST, request.FILES, languages=languages, category_choices=choices)
        if form.is_valid():
            try:
                services.update_menu_item(
                    request.ctx,
                    item.pk,
                    form.cleaned_data['category'],
                    form.cleaned_data['price'],
                    form.translations(),
                    image_file=form.cleaned_data.get('image'),
                    remove_image=form.cleaned_data.get('remove_image', False),
                    display_order=form.cleaned_data.get('display_order'),
                    is_active=form.cleaned_data.get('is_active', False),
                    is_featured=form.cleaned_data.get('is_featured', False),
                )
                messages.success(request, "Menu item updated successfully")
                return redirect('dashboard')
            except MenuError as e:
                report_error(request, e)
        else:
            messages.error(request, f"Something wrong - Error {form.errors.as_text()}")
    else:
        form = MenuItemForm(
            languages=languages,
            category_choices=choices,
            translations=translations_by_language(item),
            initial={
                'category': item.category_id,
                'price': item.price,
                'display_order': item.display_order,
                'is_active': item.is_active,
                'is_featured': item.is_featured,
            },
        )

    return render(request, 'dashboard/item_form.html', {'form': form, 'item': item})


@admin_required
@require_POST
@rate_limited('delete', redirect_to='dashboard')
def delete_item(request, pk):
    try:
        services.delete_menu_item(request.ctx, pk)
        messages.success(request, "Menu item deleted successfully")
    except MenuError as e:
        report_error(request, e)
    return redirect('dashboard')


@admin_required
@require_POST
def cleanup_images(request):
    try:
        cleaned = services.cleanup_missing_images(request.ctx)
    except MenuError as e:
        report_error(request, e)
        return redirect('dashboard')
    if cleaned:
        messages.success(request, f"Cleaned {cleaned} missing image reference(s)")
    else:
        messages.info(request, "No missing images found")
    return redirect('dashboard')


# =============== ORDERS ===============

def filtered_orders(request):
    params = clean_filter_params(request.GET.dict())
    return OrderFilter(params, queryset=Order.objects.all()), params


@admin_required
def orders(request):
    if request.method == "POST":
        try:
            if 'update_status' in request.POST:
                form = OrderStatusForm(request.POST)
                if not form.is_valid():
                    messages.error(request, f"Something wrong - Error {form.errors.as_text()}")
                else:
                    order = order_services.update_order_status(
                        request.ctx, form.cleaned_data['order_id'], form.cleaned_data['status'])
                    messages.success(request, f"Order #{order.pk} marked as {order.get_status_display()}")
            elif 'delete' in request.POST:
                if over_limit(request, 'delete'):
                    return redirect('orders')
                order_services.delete_order(request.ctx, request.POST.get('order_id'))
                messages.success(request, "Order deleted successfully")
            else:
                messages.error(request, "Unknown action")
        except MenuError as e:
            report_error(request, e)
        return redirect(request.get_full_path())

    order_filter, params = filtered_orders(request)
    paginator = Paginator(order_filter.qs, 25)
    page = paginator.get_page(request.GET.get('page'))

    context = {
        'page': page,
        'filter': order_filter,
        'params': params,
        'stats': order_services.order_stats(),
        'status_choices': Order.STATUS_CHOICES,
        'order_type_choices': Order.ORDER_TYPE_CHOICES,
    }
    return render(request, 'dashboard/orders.html', context)


@admin_required
def orders_export(request):
    order_filter, _ = filtered_orders(request)
    return export_orders_excel(order_filter.qs, title='Orders Report')


# =============== RATINGS ===============

@admin_required
def ratings(request):
    if request.method == "POST":
        if 'delete' in request.POST:
            if over_limit(request, 'delete'):
                return redirect('ratings')
            try:
                order_services.delete_rating(request.ctx, request.POST.get('rating_id'))
                messages.success(request, "Rating deleted successfully")
            except MenuError as e:
                report_error(request, e)
        else:
            messages.error(request, "Unknown action")
        return redirect(request.get_full_path())

    params = clean_filter_params(request.GET.dict())
    rating_filter = RatingFilter(params, queryset=Rating.objects.all())
    paginator = Paginator(rating_filter.qs, 25)

    context = {
        'page': paginator.get_page(request.GET.get('page')),
        'filter': rating_filter,
        'params': params,
        'stats': order_services.rating_stats(),
        'experience_choices': Rating.EXPERIENCE_CHOICES,
    }
    return render(request, 'dashboard/ratings.html', context)
