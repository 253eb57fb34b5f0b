"""
Tenants Context - request-scoped tenant context.

Every data-access path for company-owned rows threads a TenantScope: the
session gate builds one per request, views hand it to the service layer, and
the ContextVar copy lets logging and the Celery email tasks see the same
company.

Usage:
    from tenants.context import tenant_context, get_current_scope

    with tenant_context(scope):
        company = get_current_scope().company
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from tenants.models import Company, CompanyUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantScope:
    """The company (and acting user) a unit of work runs for."""

    company: 'Company'
    user: Any = None
    membership: Optional['CompanyUser'] = None

    @property
    def role(self) -> Optional[str]:
        return self.membership.role if self.membership else None

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def can_manage(self) -> bool:
        return self.role in ('admin', 'manager')

    @classmethod
    def for_membership(cls, membership: 'CompanyUser') -> 'TenantScope':
        return cls(company=membership.company, user=membership.user, membership=membership)


_current_scope: ContextVar[Optional[TenantScope]] = ContextVar('tenant_scope', default=None)


def get_current_scope() -> Optional[TenantScope]:
    return _current_scope.get()


def set_current_scope(scope: Optional[TenantScope]):
    """Install a scope; returns the token needed to restore the previous one."""
    return _current_scope.set(scope)


def reset_current_scope(token) -> None:
    _current_scope.reset(token)


@contextmanager
def tenant_context(scope: TenantScope):
    """Run a block with `scope` installed, restoring the previous one after."""
    token = _current_scope.set(scope)
    try:
        yield scope
    finally:
        _current_scope.reset(token)
