"""
Notification services.

Persists in-app notifications and pushes them to the owner's websocket group
once the surrounding transaction commits. Every connected session keeps its
own unread counter; after a mark-read the authoritative count from the
database is broadcast so all sessions of the user converge.
"""

import logging
from typing import List, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

from .models import Notification

logger = logging.getLogger(__name__)


def user_group_name(user_id) -> str:
    return f"notifications_{user_id}"


class NotificationService:
    """Create, push and acknowledge in-app notifications."""

    @classmethod
    def notify(
        cls,
        company,
        user,
        notification_type: str,
        title: str,
        message: str = '',
        link: str = '',
    ) -> Notification:
        notification = Notification.objects.create(
            company=company,
            user=user,
            notification_type=notification_type,
            title=title,
            message=message,
            link=link,
        )
        transaction.on_commit(lambda: cls.push(notification))
        return notification

    @classmethod
    def notify_company_admins(
        cls,
        company,
        notification_type: str,
        title: str,
        message: str = '',
        link: str = '',
    ) -> List[Notification]:
        from tenants.services import CompanyService

        return [
            cls.notify(company, admin, notification_type, title, message, link)
            for admin in CompanyService.admins(company)
        ]

    @classmethod
    def push(cls, notification: Notification) -> bool:
        """Send a stored notification to every live session of its owner."""
        return cls._group_send(notification.user_id, {
            'type': 'send_notification',
            'notification': notification.to_payload(),
        })

    @classmethod
    def broadcast_unread_count(cls, user) -> bool:
        return cls._group_send(user.pk, {
            'type': 'unread_count_update',
            'count': cls.unread_count(user),
        })

    @staticmethod
    def _group_send(user_id, event: dict) -> bool:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return False
        try:
            async_to_sync(channel_layer.group_send)(user_group_name(user_id), event)
        except Exception as e:
            # Delivery is best effort; the row is already stored.
            logger.warning(f"Websocket push to user {user_id} failed: {e}")
            return False
        return True

    @staticmethod
    def queryset(user, company=None):
        qs = Notification.objects.filter(user=user)
        if company is not None:
            qs = qs.for_company(company)
        return qs

    @classmethod
    def unread_count(cls, user, company=None) -> int:
        return cls.queryset(user, company).filter(read=False).count()

    @classmethod
    def recent(cls, user, company=None, limit: int = 10) -> List[Notification]:
        return list(cls.queryset(user, company)[:limit])

    @classmethod
    def mark_read(cls, user, notification_id, company=None, broadcast: bool = True) -> bool:
        """Mark one notification read. False if missing or already read."""
        notification: Optional[Notification] = (
            cls.queryset(user, company).filter(pk=notification_id).first()
        )
        if notification is None:
            return False
        changed = notification.mark_as_read()
        if changed and broadcast:
            transaction.on_commit(lambda: cls.broadcast_unread_count(user))
        return changed

    @classmethod
    def mark_all_read(cls, user, company=None, broadcast: bool = True) -> int:
        updated = cls.queryset(user, company).filter(read=False).update(
            read=True,
            read_at=timezone.now(),
            updated_at=timezone.now(),
        )
        if updated and broadcast:
            transaction.on_commit(lambda: cls.broadcast_unread_count(user))
        return updated
