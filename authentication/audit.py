import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

audit_logger = logging.getLogger('audit')


def audit_log(ctx, action, **details):
    """Write one JSON line describing an admin action to the audit log"""
    entry = {
        'timestamp': timezone.now().isoformat(),
        'action': action,
        'admin': ctx.admin_label if ctx is not None else None,
        'ip': ctx.ip if ctx is not None else None,
        'user_agent': ctx.user_agent if ctx is not None else None,
        'path': ctx.path if ctx is not None else None,
        'request_id': ctx.request_id if ctx is not None else None,
        'details': details,
    }
    audit_logger.info(json.dumps(entry, cls=DjangoJSONEncoder, ensure_ascii=False))
    return entry
