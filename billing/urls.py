"""
Billing URL configuration.

`urlpatterns` is mounted under /app/settings/billing/; `api_urlpatterns`
under /api/.
"""

from django.urls import path

from . import views

app_name = 'billing'

urlpatterns = [
    path('', views.BillingSettingsView.as_view(), name='settings'),
]

api_urlpatterns = [
    path('stripe/checkout', views.CheckoutSessionView.as_view(), name='stripe_checkout'),
    path('stripe/portal', views.BillingPortalView.as_view(), name='stripe_portal'),
    path('webhooks/stripe', views.StripeWebhookView.as_view(), name='stripe_webhook'),
]
