"""
Platform-wide statistics for the operator console.

These queries deliberately span every company; they are only reachable by
system admins.
"""

import logging
from typing import List

from django.contrib.auth import get_user_model

from tenants.models import ActivityLog, Company

logger = logging.getLogger(__name__)
User = get_user_model()

ACTIVE_STATUSES = (Company.SubscriptionStatus.ACTIVE,)


def subscription_rate(active: int, total: int) -> int:
    """Percentage of companies with an active subscription, 0 without companies."""
    if total <= 0:
        return 0
    return round(active / total * 100)


class PlatformStatsService:

    @classmethod
    def stats(cls) -> dict:
        total_companies = Company.objects.count()
        active = Company.objects.filter(subscription_status__in=ACTIVE_STATUSES).count()
        return {
            'total_companies': total_companies,
            'total_users': User.objects.count(),
            'active_subscriptions': active,
            'subscription_rate': subscription_rate(active, total_companies),
        }

    @classmethod
    def recent_companies(cls, limit: int = 5) -> List[Company]:
        try:
            return list(Company.objects.order_by('-created_at')[:limit])
        except Exception as e:
            logger.warning(f"Could not load recent companies: {e}")
            return []

    @classmethod
    def recent_activity(cls, limit: int = 10) -> List[ActivityLog]:
        try:
            return list(
                ActivityLog.objects.select_related('company', 'user')
                .order_by('-created_at')[:limit]
            )
        except Exception as e:
            logger.warning(f"Could not load recent activity: {e}")
            return []

    @classmethod
    def companies(cls, search: str = ''):
        qs = Company.objects.order_by('-created_at')
        if search:
            qs = qs.filter(name__icontains=search) | qs.filter(slug__icontains=search)
        return qs
