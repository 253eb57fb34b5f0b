"""
Mini ATS URL configuration.

Requests reach these patterns after TenantRoutingMiddleware has rewritten
subdomain hosts onto the /app, /admin and /careers/<slug> prefixes.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from billing import urls as billing_urls
from notifications import urls as notification_urls
from tenants import urls as tenant_urls

from .views import health_check, home_view

api_urlpatterns = [
    path('health', health_check, name='health'),
    *billing_urls.api_urlpatterns,
    *notification_urls.api_urlpatterns,
]

urlpatterns = [
    path('', home_view, name='home'),
    path('api/', include((api_urlpatterns, 'api'))),
    *tenant_urls.auth_urlpatterns,
    *tenant_urls.onboarding_urlpatterns,

    # Tenant panel
    path('app/settings/billing/', include('billing.urls')),
    path('app/settings/', include('tenants.urls')),
    path('app/notifications/', include('notifications.urls')),
    path('app/', include('ats.urls')),

    # Operator panel
    path('admin/', include('console.urls')),

    # Public career sites
    path('careers/', include('careers.urls')),

    path('django-admin/', admin.site.urls),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

handler400 = 'miniats.views_errors.handler400'
handler403 = 'miniats.views_errors.handler403'
handler404 = 'miniats.views_errors.handler404'
handler500 = 'miniats.views_errors.handler500'
