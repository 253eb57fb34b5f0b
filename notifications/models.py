"""
Notification models.

In-app notifications belong to one user inside one company. They are
append-only apart from the read flag.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.db.models import TenantAwareModel


class Notification(TenantAwareModel):
    """A single in-app notification delivered to one user."""

    class Type(models.TextChoices):
        APPLICATION_RECEIVED = 'application_received', 'Application received'
        STAGE_CHANGED = 'stage_changed', 'Stage changed'
        TEAM_MEMBER_JOINED = 'team_member_joined', 'Team member joined'
        SUBSCRIPTION_CHANGED = 'subscription_changed', 'Subscription changed'
        SYSTEM = 'system', 'System'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    notification_type = models.CharField(
        max_length=50,
        choices=Type.choices,
        default=Type.SYSTEM,
    )
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True)
    link = models.CharField(max_length=500, blank=True)
    read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'read'], name='notif_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.title} -> {self.user_id}"

    def mark_as_read(self) -> bool:
        """Flag as read. Returns False when it already was."""
        if self.read:
            return False
        self.read = True
        self.read_at = timezone.now()
        self.save(update_fields=['read', 'read_at', 'updated_at'])
        return True

    def to_payload(self) -> dict:
        return {
            'id': self.pk,
            'type': self.notification_type,
            'title': self.title,
            'message': self.message,
            'link': self.link,
            'read': self.read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
