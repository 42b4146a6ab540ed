import uuid
from dataclasses import dataclass, field
from typing import Optional

from django.db import DEFAULT_DB_ALIAS


def get_client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '')


@dataclass(frozen=True)
class RequestContext:
    """
    Everything a service call is allowed to know about the request that
    triggered it: who is acting, where from, and which database to use.
    """
    admin: Optional[object] = None
    ip: str = ''
    user_agent: str = ''
    path: str = ''
    method: str = ''
    using: str = DEFAULT_DB_ALIAS
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_request(cls, request, using=DEFAULT_DB_ALIAS):
        user = getattr(request, 'user', None)
        admin = user if user is not None and user.is_authenticated else None
        return cls(
            admin=admin,
            ip=get_client_ip(request),
            user_agent=request.META.get('HTTP_USER_AGENT', '')[:255],
            path=request.path,
            method=request.method,
            using=using,
        )

    @classmethod
    def system(cls, using=DEFAULT_DB_ALIAS):
        """Context for management commands and other non-HTTP callers"""
        return cls(ip='127.0.0.1', user_agent='system', path='', method='', using=using)

    @property
    def admin_label(self):
        if self.admin is None:
            return None
        return {'id': self.admin.pk, 'username': self.admin.get_username()}
