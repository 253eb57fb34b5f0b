"""
Tenants Mixins - view helpers built on the request's TenantScope.
"""

from typing import Optional

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.http import Http404

from .context import TenantScope


class TenantViewMixin(LoginRequiredMixin):
    """
    Mixin for views that run inside a company.

    Provides:
    - Access to the request's TenantScope
    - A 404 when the request has no company
    """

    redirect_field_name = 'redirectTo'

    def get_scope(self) -> Optional[TenantScope]:
        return getattr(self.request, 'scope', None)

    def get_scope_or_fail(self) -> TenantScope:
        """Get the scope or raise 404."""
        scope = self.get_scope()
        if scope is None:
            raise Http404("No company context")
        return scope


class CompanyAdminRequiredMixin(TenantViewMixin):
    """Restrict a view to the company's admins."""

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            scope = self.get_scope_or_fail()
            if not scope.is_admin:
                raise PermissionDenied("Company admin role required")
        return super().dispatch(request, *args, **kwargs)
