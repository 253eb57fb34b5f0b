"""
Stripe Integration Service

- StripeService: customers, checkout sessions and billing portal sessions
- SubscriptionSyncService: applies subscription webhook events to companies
"""

import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings
from django.db import transaction

from tenants.context import TenantScope
from tenants.models import ActivityLog, Company, Plan
from tenants.services import AuditService, CompanyService

from .exceptions import BillingNotConfigured, NoBillingCustomer, PlanNotFound

logger = logging.getLogger(__name__)

BILLING_SETTINGS_PATH = '/app/settings/billing/'


class StripeService:
    """
    Subscription checkout for company plans.
    """

    @staticmethod
    def _check_configured():
        """Verify Stripe is configured and point the SDK at the key."""
        secret_key = getattr(settings, 'STRIPE_SECRET_KEY', '')
        if not secret_key:
            raise BillingNotConfigured("STRIPE_SECRET_KEY not configured in settings")
        stripe.api_key = secret_key

    @classmethod
    def get_plan(cls, plan_slug: str) -> Plan:
        plan = Plan.objects.filter(slug=plan_slug, is_public=True).first()
        if plan is None or not (plan.stripe_price_id_monthly or plan.stripe_price_id_yearly):
            raise PlanNotFound()
        return plan

    @classmethod
    def get_or_create_customer(cls, company: Company) -> str:
        """
        Return the company's Stripe customer id, creating the customer on
        first use from the company's admin user.
        """
        if company.stripe_customer_id:
            return company.stripe_customer_id

        cls._check_configured()

        admin = CompanyService.admins(company).order_by('pk').first()
        try:
            customer = stripe.Customer.create(
                email=admin.email if admin and admin.email else None,
                name=company.name,
                metadata={
                    'company_id': str(company.pk),
                    'company_slug': company.slug,
                },
            )
        except stripe.error.StripeError as e:
            logger.error(f"Stripe customer creation failed for company {company.slug}: {e}")
            raise

        Company.objects.filter(pk=company.pk).update(stripe_customer_id=customer.id)
        company.stripe_customer_id = customer.id
        logger.info(f"Created Stripe customer {customer.id} for company {company.slug}")
        return customer.id

    @classmethod
    def create_checkout_session(cls, company: Company, plan_slug: str, interval: str, base_url: str) -> str:
        """
        Start a subscription checkout and return the hosted page URL.

        Raises:
            PlanNotFound: Unknown plan or plan without a Stripe price.
            BillingNotConfigured: No Stripe secret key.
            stripe.error.StripeError: Provider failure.
        """
        plan = cls.get_plan(plan_slug)
        price_id = plan.price_id_for(interval)
        if not price_id:
            raise PlanNotFound(f"No {interval} price configured for the {plan.name} plan.")

        cls._check_configured()
        customer_id = cls.get_or_create_customer(company)
        metadata = {'company_id': str(company.pk), 'plan': plan.slug}
        base_url = base_url.rstrip('/')

        try:
            session = stripe.checkout.Session.create(
                customer=customer_id,
                mode='subscription',
                line_items=[{'price': price_id, 'quantity': 1}],
                success_url=f"{base_url}{BILLING_SETTINGS_PATH}?success=true",
                cancel_url=f"{base_url}{BILLING_SETTINGS_PATH}?canceled=true",
                client_reference_id=str(company.pk),
                metadata=metadata,
                subscription_data={'metadata': metadata},
            )
        except stripe.error.StripeError as e:
            logger.error(f"Checkout session creation failed for company {company.slug}: {e}")
            raise

        logger.info(f"Checkout session {session.id} created for company {company.slug} ({plan.slug}/{interval})")
        return session.url

    @classmethod
    def create_portal_session(cls, company: Company, base_url: str) -> str:
        """
        Open the Stripe billing portal for an existing customer.

        Raises:
            NoBillingCustomer: The company never went through checkout.
        """
        if not company.stripe_customer_id:
            raise NoBillingCustomer()

        cls._check_configured()
        try:
            session = stripe.billing_portal.Session.create(
                customer=company.stripe_customer_id,
                return_url=f"{base_url.rstrip('/')}{BILLING_SETTINGS_PATH}",
            )
        except stripe.error.StripeError as e:
            logger.error(f"Portal session creation failed for company {company.slug}: {e}")
            raise
        return session.url


class SubscriptionSyncService:
    """
    Applies Stripe subscription events to companies.

    Each handler sets absolute values, so applying the same event again
    leaves the company unchanged.
    """

    @classmethod
    def _company_from_metadata(cls, obj: Dict[str, Any]) -> Optional[Company]:
        metadata = obj.get('metadata') or {}
        company_id = metadata.get('company_id') or obj.get('client_reference_id')
        if not company_id:
            return None
        return Company.objects.filter(pk=company_id).first()

    @classmethod
    def _company_for_subscription(cls, subscription: Dict[str, Any]) -> Optional[Company]:
        company = Company.objects.filter(stripe_subscription_id=subscription.get('id')).first()
        return company or cls._company_from_metadata(subscription)

    @classmethod
    def _log(cls, company: Company, event: str, **metadata):
        AuditService.log(
            TenantScope(company=company),
            ActivityLog.Action.SUBSCRIPTION_CHANGED,
            entity_type='company',
            entity_id=company.pk,
            metadata={'event': event, **metadata},
        )

    @classmethod
    @transaction.atomic
    def checkout_completed(cls, session: Dict[str, Any]) -> Optional[Company]:
        company = cls._company_from_metadata(session)
        if company is None:
            logger.warning(f"Checkout session {session.get('id')} has no known company")
            return None

        company = Company.objects.select_for_update().get(pk=company.pk)
        plan = (session.get('metadata') or {}).get('plan') or company.plan
        company.plan = plan
        company.subscription_status = Company.SubscriptionStatus.ACTIVE
        company.stripe_subscription_id = session.get('subscription') or company.stripe_subscription_id
        company.stripe_customer_id = session.get('customer') or company.stripe_customer_id
        company.save(update_fields=[
            'plan', 'subscription_status', 'stripe_subscription_id', 'stripe_customer_id', 'updated_at',
        ])
        cls._log(company, 'checkout.session.completed', plan=plan)
        logger.info(f"Company {company.slug} subscribed to {plan}")
        return company

    @classmethod
    @transaction.atomic
    def subscription_updated(cls, subscription: Dict[str, Any]) -> Optional[Company]:
        company = cls._company_for_subscription(subscription)
        if company is None:
            logger.warning(f"Subscription {subscription.get('id')} has no known company")
            return None

        company = Company.objects.select_for_update().get(pk=company.pk)
        company.subscription_status = subscription.get('status') or company.subscription_status
        company.save(update_fields=['subscription_status', 'updated_at'])
        cls._log(company, 'customer.subscription.updated', status=company.subscription_status)
        return company

    @classmethod
    @transaction.atomic
    def subscription_deleted(cls, subscription: Dict[str, Any]) -> Optional[Company]:
        company = cls._company_for_subscription(subscription)
        if company is None:
            logger.warning(f"Subscription {subscription.get('id')} has no known company")
            return None

        company = Company.objects.select_for_update().get(pk=company.pk)
        company.plan = Company.FREE_PLAN
        company.subscription_status = Company.SubscriptionStatus.CANCELED
        company.save(update_fields=['plan', 'subscription_status', 'updated_at'])
        cls._log(company, 'customer.subscription.deleted')
        logger.info(f"Company {company.slug} subscription canceled")
        return company
