"""
Notification views.

In-app notifications under /app/notifications/ and the internal email webhook
receiver at /api/webhooks/email.
"""

import hmac
import logging

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import redirect
from django.views import View
from django.views.generic import TemplateView
from rest_framework import status, views
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from tenants.mixins import TenantViewMixin

from .serializers import EmailWebhookSerializer
from .services import NotificationService
from .tasks import (
    send_application_received_email,
    send_stage_changed_email,
    send_team_invite_email,
)

logger = logging.getLogger(__name__)


def wants_json(request) -> bool:
    return 'application/json' in request.headers.get('Accept', '')


class NotificationListView(TenantViewMixin, TemplateView):
    template_name = 'app/notifications.html'
    limit = 50

    def get(self, request, *args, **kwargs):
        if wants_json(request):
            scope = self.get_scope_or_fail()
            notifications = NotificationService.recent(request.user, scope.company, limit=self.limit)
            return JsonResponse({
                'unread_count': NotificationService.unread_count(request.user, scope.company),
                'results': [n.to_payload() for n in notifications],
            })
        return super().get(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        scope = self.get_scope_or_fail()
        context['notifications'] = NotificationService.recent(self.request.user, scope.company, limit=self.limit)
        context['unread_count'] = NotificationService.unread_count(self.request.user, scope.company)
        return context


class NotificationReadView(TenantViewMixin, View):

    def post(self, request, pk):
        scope = self.get_scope_or_fail()
        success = NotificationService.mark_read(request.user, pk, company=scope.company)
        if not wants_json(request):
            return redirect('notifications:list')
        return JsonResponse({
            'success': success,
            'unread_count': NotificationService.unread_count(request.user, scope.company),
        })


class NotificationReadAllView(TenantViewMixin, View):

    def post(self, request):
        scope = self.get_scope_or_fail()
        count = NotificationService.mark_all_read(request.user, company=scope.company)
        if not wants_json(request):
            return redirect('notifications:list')
        return JsonResponse({'success': True, 'count': count, 'unread_count': 0})


class EmailWebhookView(views.APIView):
    """
    post: Queue a transactional email.

    Body: ``{"type": "team_invite" | "application_received" | "stage_changed",
    "data": {...}}``. Callers authenticate with the shared secret in the
    ``X-Webhook-Secret`` header.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        secret = settings.EMAIL_WEBHOOK_SECRET
        if not secret:
            logger.error("EMAIL_WEBHOOK_SECRET is not configured")
            return Response(
                {'error': 'Email webhook secret not configured.'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        provided = request.headers.get('X-Webhook-Secret', '')
        if not hmac.compare_digest(provided.encode(), secret.encode()):
            return Response({'error': 'Invalid webhook secret.'}, status=status.HTTP_401_UNAUTHORIZED)

        serializer = EmailWebhookSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        email_type = serializer.validated_data['type']
        data = serializer.validated_data['data']
        if email_type == EmailWebhookSerializer.TEAM_INVITE:
            send_team_invite_email.delay(data['team_member_id'])
        elif email_type == EmailWebhookSerializer.APPLICATION_RECEIVED:
            send_application_received_email.delay(data['application_id'])
        else:
            send_stage_changed_email.delay(
                data['application_id'], data['from_stage'], data['to_stage'], data.get('actor_id'),
            )

        logger.info(f"Queued '{email_type}' email from webhook")
        return Response({'queued': True, 'type': email_type}, status=status.HTTP_202_ACCEPTED)
