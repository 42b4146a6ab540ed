from django.contrib import messages
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.db import DatabaseError, connection
from django.shortcuts import redirect, render
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_http_methods, require_POST
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .audit import audit_log
from .context import RequestContext, get_client_ip
from .forms import LoginForm
from .permissions import is_back_office_admin
from .ratelimit import RateLimiter

User = get_user_model()

INVALID_CREDENTIALS = 'Invalid username or password'


# =============== AUTHENTICATION VIEWS ===============

def _safe_next(request):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()},
                                                     require_https=request.is_secure()):
        return next_url
    return None


@never_cache
@require_http_methods(["GET", "POST"])
def signin(request):
    if is_back_office_admin(request.user):
        return redirect('dashboard')

    form = LoginForm(request.POST or None)
    if request.method == "POST":
        ip = get_client_ip(request)
        limiter = RateLimiter('login')
        if not limiter.hit(ip):
            minutes = max(limiter.retry_after(ip) // 60, 1)
            audit_log(request.ctx, 'login_rate_limited')
            messages.error(request, f'Too many login attempts. Please try again in {minutes} minutes.')
            return redirect('login')

        if not form.is_valid():
            messages.error(request, 'Please enter username and password')
            return render(request, 'authentication/login.html', {'form': form})

        username = form.cleaned_data['username']
        password = form.cleaned_data['password']
        account = User.objects.filter(username=username).first()

        if account is not None and account.is_locked:
            audit_log(request.ctx, 'login_blocked_locked_account', username=username)
            messages.error(request, 'Account temporarily locked. Please try again later.')
            return redirect('login')

        user = authenticate(request, username=username, password=password)
        if user is not None and is_back_office_admin(user):
            login(request, user)
            user.register_successful_login()
            limiter.reset(ip)
            audit_log(RequestContext.from_request(request), 'login_success')
            return redirect(_safe_next(request) or 'dashboard')

        if account is not None:
            account.register_failed_login()
            if account.is_locked:
                audit_log(request.ctx, 'account_locked', username=username)
        audit_log(request.ctx, 'login_failed', username=username)
        messages.error(request, INVALID_CREDENTIALS)
        return redirect('login')

    return render(request, 'authentication/login.html', {'form': form, 'next': request.GET.get('next', '')})


@require_POST
def signout(request):
    ctx = request.ctx
    logout(request)
    audit_log(ctx, 'logout')
    messages.info(request, 'You have been logged out.')
    return redirect('login')


# =============== SYSTEM ===============

@extend_schema(summary="Health check")
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return Response({
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'database': 'connected',
        })
    except DatabaseError:
        return Response({
            'status': 'unhealthy',
            'timestamp': timezone.now().isoformat(),
            'database': 'disconnected',
        }, status=status.HTTP_503_SERVICE_UNAVAILABLE)
