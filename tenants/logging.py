"""
Tenants Logging - tenant-aware logging filters and formatters.

Usage in settings.py:
    LOGGING = {
        'filters': {
            'tenant_context': {'()': 'tenants.logging.TenantContextFilter'},
        },
        ...
    }
"""

import logging
from typing import Optional

from .context import get_current_scope


class TenantContextFilter(logging.Filter):
    """
    Logging filter that adds tenant context to log records.

    Adds `tenant_slug` ('public' outside a company), `tenant_id` and `user_id`.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        scope = get_current_scope()

        if scope:
            record.tenant_slug = scope.company.slug
            record.tenant_id = scope.company.pk
            record.user_id = getattr(scope.user, 'pk', None)
        else:
            record.tenant_slug = 'public'
            record.tenant_id = None
            record.user_id = None

        return True


class TenantFormatter(logging.Formatter):
    """
    Formatter that prefixes messages with the tenant slug.

    Default format:
        [{asctime}] [{levelname}] [tenant:{tenant_slug}] {name}: {message}
    """

    default_format = '[{asctime}] [{levelname}] [tenant:{tenant_slug}] {name}: {message}'

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, style: str = '{'):
        super().__init__(fmt or self.default_format, datefmt, style)

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'tenant_slug'):
            scope = get_current_scope()
            record.tenant_slug = scope.company.slug if scope else 'public'
        return super().format(record)
