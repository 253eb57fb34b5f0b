"""
Billing Admin - the Stripe webhook ledger.
"""

from django.contrib import admin

from .models import StripeWebhookEvent


@admin.register(StripeWebhookEvent)
class StripeWebhookEventAdmin(admin.ModelAdmin):
    list_display = ['event_id', 'event_type', 'processed', 'received_at', 'processed_at']
    list_filter = ['event_type', 'processed']
    search_fields = ['event_id']
    readonly_fields = ['event_id', 'event_type', 'json_payload', 'received_at', 'processed_at', 'error_message']
