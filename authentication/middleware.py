# =============== MIDDLEWARE FOR REQUEST CONTEXT ===============
from .context import RequestContext


class RequestContextMiddleware:
    """Middleware to attach the explicit request context to every request"""
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # must run after AuthenticationMiddleware so request.user is resolved
        request.ctx = RequestContext.from_request(request)

        response = self.get_response(request)
        response.setdefault('X-Request-ID', request.ctx.request_id)
        return response
