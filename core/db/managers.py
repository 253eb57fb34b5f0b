"""
Custom Database Managers

TenantAwareQuerySet is the single place where company scoping is applied.
Services receive a TenantScope and call `for_company(scope.company)`.
"""

from django.db import models


class TenantAwareQuerySet(models.QuerySet):
    """
    QuerySet restricted to a single company's rows.

    `for_company` returns an empty queryset when no company is known, so a
    missing scope never widens a query to every tenant.
    """

    def for_company(self, company):
        """
        Filter queryset for a specific company.

        Args:
            company: Company instance or primary key.
        """
        if company is None:
            return self.none()

        if hasattr(company, 'pk'):
            return self.filter(company_id=company.pk)
        return self.filter(company_id=company)


class TenantAwareManager(models.Manager.from_queryset(TenantAwareQuerySet)):
    """Default manager for company-scoped models."""
