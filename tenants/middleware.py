"""
Tenants Middleware - host routing and the session gate.

- TenantRoutingMiddleware: rewrites path_info from the host's subdomain
  (app panel, admin panel or a company's careers site)
- SessionGateMiddleware: redirects anonymous users to login, users without a
  company to onboarding, non-operators away from the admin panel; installs
  the request's TenantScope for everything downstream
"""

import logging
from urllib.parse import quote

from django.conf import settings
from django.http import HttpResponseRedirect

from .context import TenantScope, reset_current_scope, set_current_scope
from .routing import resolve_route

logger = logging.getLogger(__name__)

EXEMPT_PREFIXES = (
    '/static/',
    '/media/',
    '/favicon.ico',
    '/robots.txt',
)

ONBOARDING_URL = '/onboarding/'
DASHBOARD_URL = '/app/dashboard/'


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + '/')


class TenantRoutingMiddleware:
    """
    Rewrite the internal route path from the request host.

    Sets:
    - request.route_mode: 'marketing', 'app', 'admin' or 'careers'
    - request.company_slug: careers subdomain, else None
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        resolution = resolve_route(request.get_host(), request.path_info)

        if resolution.path != request.path_info:
            logger.debug(f"Routing {request.get_host()}{request.path_info} -> {resolution.path}")
            request.path_info = resolution.path

        request.route_mode = resolution.mode
        request.company_slug = resolution.company_slug
        return self.get_response(request)


class SessionGateMiddleware:
    """
    Gate the protected route groups.

    Must run after AuthenticationMiddleware. The scope installed here is
    cleared when the response leaves the middleware so nothing leaks into
    the next request served by the same worker.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path_info
        request.scope = None

        if path.startswith(EXEMPT_PREFIXES):
            return self.get_response(request)

        user = request.user
        membership = self._get_membership(user)

        redirect = self._check_access(request, path, user, membership)
        if redirect is not None:
            return redirect

        token = None
        if membership is not None:
            request.scope = TenantScope.for_membership(membership)
            token = set_current_scope(request.scope)

        try:
            return self.get_response(request)
        finally:
            if token is not None:
                reset_current_scope(token)

    def _get_membership(self, user):
        if not user.is_authenticated:
            return None
        from .models import CompanyUser
        return (
            CompanyUser.objects
            .select_related('company', 'user')
            .filter(user=user)
            .first()
        )

    def _check_access(self, request, path, user, membership):
        if path in ('/auth/login', '/auth/signup') and user.is_authenticated:
            return HttpResponseRedirect(DASHBOARD_URL if membership else ONBOARDING_URL)

        if _under(path, '/app') or _under(path.rstrip('/'), '/onboarding'):
            if not user.is_authenticated:
                return self._login_redirect(request)
            if _under(path, '/app') and membership is None:
                return HttpResponseRedirect(ONBOARDING_URL)

        if _under(path, '/admin'):
            if not user.is_authenticated:
                return self._login_redirect(request)
            if not self._is_system_admin(user):
                logger.warning(f"User {user.pk} denied access to admin panel path {path}")
                return HttpResponseRedirect(DASHBOARD_URL)

        return None

    def _is_system_admin(self, user):
        from .models import SystemAdmin
        return SystemAdmin.objects.filter(user=user).exists()

    def _login_redirect(self, request):
        target = request.path_info
        query = request.META.get('QUERY_STRING')
        if query:
            target = f"{target}?{query}"
        return HttpResponseRedirect(f"{settings.LOGIN_URL}?redirectTo={quote(target, safe='/')}")
