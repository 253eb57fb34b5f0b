"""
Billing Models - the Stripe webhook ledger.

Subscription state itself lives on tenants.Company; this table only records
which provider events were received so a redelivered event is applied once.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class StripeWebhookEvent(models.Model):
    """One row per Stripe event id."""

    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100, db_index=True)
    json_payload = models.JSONField(default=dict)
    received_at = models.DateTimeField(auto_now_add=True)
    processed = models.BooleanField(default=False)
    processed_at = models.DateTimeField(null=True, blank=True)
    error_message = models.TextField(blank=True)

    class Meta:
        ordering = ['-received_at']
        verbose_name = _('Stripe Webhook Event')
        verbose_name_plural = _('Stripe Webhook Events')

    def __str__(self):
        return f"{self.event_type} ({self.event_id})"
