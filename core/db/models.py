"""
Abstract base models shared by every app.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.db.managers import TenantAwareManager


class TimestampedModel(models.Model):
    """Adds created_at / updated_at bookkeeping."""

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class TenantAwareModel(TimestampedModel):
    """
    Base for every row owned by exactly one company.

    The `company` foreign key is the tenant boundary; query through
    `objects.for_company()` rather than filtering on it by hand.
    """

    company = models.ForeignKey(
        'tenants.Company',
        on_delete=models.CASCADE,
        related_name='%(class)s_set',
        verbose_name=_('company'),
    )

    objects = TenantAwareManager()

    class Meta:
        abstract = True
