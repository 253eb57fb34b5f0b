"""
Billing Views - checkout/portal API endpoints, the Stripe webhook receiver
and the billing settings page.
"""

import json
import logging

import stripe
from django.conf import settings
from django.db import transaction
from django.http import JsonResponse
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from django.views.generic import TemplateView
from rest_framework import status, views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from tenants.mixins import TenantViewMixin
from tenants.models import Plan

from .exceptions import BillingError
from .models import StripeWebhookEvent
from .serializers import CheckoutSessionSerializer, PlanSerializer
from .services import StripeService, SubscriptionSyncService

logger = logging.getLogger(__name__)


def _base_url(request):
    return getattr(settings, 'SITE_URL', '') or request.build_absolute_uri('/')


class BillingAPIView(views.APIView):
    """Company billing endpoints; only company admins may call them."""

    permission_classes = [IsAuthenticated]

    def get_company_or_error(self, request):
        scope = getattr(request, 'scope', None)
        if scope is None:
            return None, Response({'error': 'No company context found.'}, status=status.HTTP_400_BAD_REQUEST)
        if not scope.is_admin:
            return None, Response({'error': 'Only company admins can manage billing.'}, status=status.HTTP_403_FORBIDDEN)
        return scope.company, None

    def billing_error(self, error):
        return Response({'error': error.message}, status=error.status_code)


class CheckoutSessionView(BillingAPIView):
    """
    post: Create a Stripe checkout session for a plan; returns {url}.
    """

    def post(self, request):
        company, error = self.get_company_or_error(request)
        if error:
            return error

        serializer = CheckoutSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            url = StripeService.create_checkout_session(
                company, data['plan_id'], data['interval'], _base_url(request),
            )
        except BillingError as e:
            return self.billing_error(e)
        except stripe.error.StripeError:
            return Response(
                {'error': 'Payment provider error. Please try again later.'},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response({'url': url})


class BillingPortalView(BillingAPIView):
    """
    post: Create a Stripe billing portal session; returns {url}.
    """

    def post(self, request):
        company, error = self.get_company_or_error(request)
        if error:
            return error

        try:
            url = StripeService.create_portal_session(company, _base_url(request))
        except BillingError as e:
            return self.billing_error(e)
        except stripe.error.StripeError:
            return Response(
                {'error': 'Payment provider error. Please try again later.'},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response({'url': url})


@method_decorator(csrf_exempt, name='dispatch')
class StripeWebhookView(View):
    """
    View to handle Stripe webhook events.

    Events are recorded by id; an id seen and processed before is
    acknowledged without running its handler again.
    """

    handlers = {
        'checkout.session.completed': SubscriptionSyncService.checkout_completed,
        'customer.subscription.updated': SubscriptionSyncService.subscription_updated,
        'customer.subscription.deleted': SubscriptionSyncService.subscription_deleted,
    }

    def post(self, request):
        webhook_secret = getattr(settings, 'STRIPE_WEBHOOK_SECRET', '')
        if not webhook_secret:
            logger.error("Stripe webhook received but STRIPE_WEBHOOK_SECRET is not configured")
            return JsonResponse({'error': 'Webhook secret not configured'}, status=500)

        payload = request.body
        sig_header = request.META.get('HTTP_STRIPE_SIGNATURE', '')
        if not sig_header:
            return JsonResponse({'error': 'Missing signature'}, status=400)

        try:
            event = stripe.Webhook.construct_event(payload, sig_header, webhook_secret)
        except ValueError as e:
            logger.error(f"Invalid webhook payload: {e}")
            return JsonResponse({'error': 'Invalid payload'}, status=400)
        except stripe.error.SignatureVerificationError as e:
            logger.error(f"Invalid webhook signature: {e}")
            return JsonResponse({'error': 'Invalid signature'}, status=400)

        with transaction.atomic():
            webhook_event, created = StripeWebhookEvent.objects.select_for_update().get_or_create(
                event_id=event['id'],
                defaults={
                    'event_type': event['type'],
                    'json_payload': json.loads(payload),
                },
            )
            if not created and webhook_event.processed:
                logger.info(f"Duplicate webhook event {event['id']} ignored")
                return JsonResponse({'received': True, 'duplicate': True})

            try:
                self._process_event(event)
            except Exception as e:
                logger.error(f"Error processing webhook event {event['id']}: {e}")
                webhook_event.error_message = str(e)
                webhook_event.save(update_fields=['error_message'])
                return JsonResponse({'error': 'Webhook handler failed'}, status=500)

            webhook_event.processed = True
            webhook_event.processed_at = timezone.now()
            webhook_event.error_message = ''
            webhook_event.save(update_fields=['processed', 'processed_at', 'error_message'])

        return JsonResponse({'received': True})

    def _process_event(self, event):
        """Route event to appropriate handler."""
        handler = self.handlers.get(event['type'])
        if handler:
            handler(event['data']['object'])
        else:
            logger.info(f"Unhandled webhook event type: {event['type']}")


class BillingSettingsView(TenantViewMixin, TemplateView):
    template_name = 'app/settings/billing.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        company = self.get_scope_or_fail().company
        context.update({
            'plans': PlanSerializer(Plan.objects.filter(is_public=True), many=True).data,
            'current_plan': company.get_plan(),
            'subscription_status': company.subscription_status,
            'has_billing_customer': bool(company.stripe_customer_id),
            'success': self.request.GET.get('success') == 'true',
            'canceled': self.request.GET.get('canceled') == 'true',
        })
        return context
