"""
Host-based route resolution.

A pure function of (host, path): it decides which application segment a
request belongs to and the internal path it should be served from.

    app.miniats.com/dashboard/     -> /app/dashboard/
    admin.miniats.com/companies/   -> /admin/companies/
    acme.miniats.com/              -> /careers/acme
    acme.miniats.com/jobs/7/       -> /careers/acme/jobs/7/
    www.miniats.com/anything       -> unchanged (marketing site)
"""

from dataclasses import dataclass
from typing import Optional

from django.conf import settings

MODE_MARKETING = 'marketing'
MODE_APP = 'app'
MODE_ADMIN = 'admin'
MODE_CAREERS = 'careers'

RESERVED_SUBDOMAINS = {
    'app': MODE_APP,
    'admin': MODE_ADMIN,
}
MARKETING_SUBDOMAINS = {'', 'www'}

# Served from every host without a segment prefix.
PASSTHROUGH_PREFIXES = ('/api/', '/auth/', '/static/', '/media/', '/ws/', '/django-admin/')


@dataclass(frozen=True)
class RouteResolution:
    mode: str
    path: str
    company_slug: Optional[str] = None


def extract_subdomain(host: str, base_domain: Optional[str] = None) -> Optional[str]:
    """
    Extract the subdomain relative to the base domain.

    Examples:
        acme.miniats.com      -> 'acme'
        x.acme.miniats.com    -> 'acme'
        miniats.com           -> ''
        localhost:8000        -> None (not under the base domain)
    """
    base_domain = (base_domain or settings.TENANT_BASE_DOMAIN).lower()
    hostname = (host or '').split(':')[0].lower().rstrip('.')

    if hostname == base_domain:
        return ''

    if hostname.endswith(f'.{base_domain}'):
        subdomain = hostname[:-len(f'.{base_domain}')]
        return subdomain.split('.')[-1]

    return None


def _prefix(prefix: str, path: str) -> str:
    if path == prefix or path.startswith(prefix + '/'):
        return path
    if path == '/':
        return prefix
    return prefix + path


def resolve_route(host: str, path: str, base_domain: Optional[str] = None) -> RouteResolution:
    """Resolve the routing mode and internal path for a request."""
    subdomain = extract_subdomain(host, base_domain)

    if subdomain is None or subdomain in MARKETING_SUBDOMAINS:
        return RouteResolution(mode=MODE_MARKETING, path=path)

    mode = RESERVED_SUBDOMAINS.get(subdomain, MODE_CAREERS)
    company_slug = subdomain if mode == MODE_CAREERS else None

    if path.startswith(PASSTHROUGH_PREFIXES):
        return RouteResolution(mode=mode, path=path, company_slug=company_slug)

    if mode == MODE_CAREERS:
        return RouteResolution(
            mode=mode,
            path=_prefix(f'/careers/{subdomain}', path),
            company_slug=company_slug,
        )

    # The bare root of the panel hosts is the marketing page.
    if path == '/':
        return RouteResolution(mode=MODE_MARKETING, path=path)

    return RouteResolution(mode=mode, path=_prefix(f'/{mode}', path))
