from functools import wraps

from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.views import redirect_to_login
from django.urls import reverse
from django.views.decorators.cache import never_cache

from authentication.permissions import is_back_office_admin


def admin_required(view_func):
    """Gate every back-office page behind the single admin check"""
    @wraps(view_func)
    def wrapper_func(request, *args, **kwargs):
        if is_back_office_admin(request.user):
            return view_func(request, *args, **kwargs)

        if request.user.is_authenticated:
            logout(request)
            messages.info(request, "This account cannot access the back office")
        else:
            messages.info(request, 'Please Login to access this page')
        return redirect_to_login(request.get_full_path(), login_url=reverse('login'))

    return never_cache(wrapper_func)
