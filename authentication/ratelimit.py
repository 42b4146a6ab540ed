import logging
import time
from functools import wraps

from django.conf import settings
from django.contrib import messages
from django.core.cache import caches
from django.shortcuts import redirect

from .context import get_client_ip

logger = logging.getLogger(__name__)


class CounterStore:
    """
    get / set / increment-with-expiry on top of a Django cache alias.

    The backend is whatever CACHES[alias] points to: local memory or files for
    a single process, Redis when several workers must share counters.
    """
    def __init__(self, alias='default'):
        self.alias = alias

    @property
    def cache(self):
        return caches[self.alias]

    def get(self, key, default=None):
        return self.cache.get(key, default)

    def set(self, key, value, timeout):
        self.cache.set(key, value, timeout)

    def delete(self, key):
        self.cache.delete(key)

    def increment(self, key, timeout):
        """Increment key, creating it with the given expiry when absent"""
        if self.cache.add(key, 1, timeout):
            return 1
        try:
            return self.cache.incr(key)
        except ValueError:
            # expired between add() and incr()
            self.cache.set(key, 1, timeout)
            return 1


class RateLimiter:
    """Fixed-window counter: count and reset time per key"""

    def __init__(self, scope, max_attempts=None, window=None, store=None):
        default_max, default_window = settings.RATE_LIMITS.get(scope, (60, 60))
        self.scope = scope
        self.max_attempts = max_attempts or default_max
        self.window = window or default_window
        self.store = store or CounterStore()

    def _keys(self, identifier):
        base = f'ratelimit:{self.scope}:{identifier}'
        return f'{base}:count', f'{base}:reset'

    def hit(self, identifier):
        """Record one attempt; False once the window's budget is spent"""
        count_key, reset_key = self._keys(identifier)
        count = self.store.increment(count_key, self.window)
        if count == 1:
            self.store.set(reset_key, time.time() + self.window, self.window)
        if count > self.max_attempts:
            logger.warning(f"Rate limit exceeded for {self.scope} by {identifier}")
            return False
        return True

    def count(self, identifier):
        count_key, _ = self._keys(identifier)
        return self.store.get(count_key, 0)

    def remaining(self, identifier):
        return max(self.max_attempts - self.count(identifier), 0)

    def retry_after(self, identifier):
        _, reset_key = self._keys(identifier)
        reset_time = self.store.get(reset_key)
        if reset_time is None:
            return 0
        return max(int(reset_time - time.time()), 0)

    def reset(self, identifier):
        for key in self._keys(identifier):
            self.store.delete(key)


def request_identifier(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return f'{get_client_ip(request)}:{user.pk}'
    return get_client_ip(request)


def rate_limited(scope, methods=('POST',), redirect_to=None):
    """
    Reject view calls past the scope's budget with a flash message.

    The rejected request is sent to redirect_to (a URL name or path), or back
    to the page it came from.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper_func(request, *args, **kwargs):
            if request.method in methods:
                limiter = RateLimiter(scope)
                identifier = request_identifier(request)
                if not limiter.hit(identifier):
                    minutes = max(limiter.retry_after(identifier) // 60, 1)
                    messages.error(request, f'Too many requests. Please try again in {minutes} minute(s).')
                    return redirect(redirect_to or request.get_full_path())
            return view_func(request, *args, **kwargs)
        return wrapper_func
    return decorator
